"""
Message Formatting
==================

Turns stream-json records into log output.

Full output mode prints each record verbatim. Compact mode hides anything
that could leak file contents or secrets: the init message and the result
are reduced to fixed summaries, assistant turns become one line per tool
call or text block, and every other record type is suppressed.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable
from typing import Any

from common.utils import truncate

# Truncation limits for compact output
MAX_COMMAND_LENGTH = 200
MAX_JSON_LENGTH = 200
MAX_TEXT_LENGTH = 300
MAX_PATCH_LENGTH = 100

_TOOL_NAME_WIDTH = 16

_PATCH_FILE_PATTERN = re.compile(r"\*\*\* (?:Add|Update|Delete) File: (.+)")

# Result fields that are safe to print
_RESULT_SUMMARY_FIELDS = (
    "subtype",
    "is_error",
    "duration_ms",
    "num_turns",
    "total_cost_usd",
    "permission_denials",
)

ToolSummarizer = Callable[[dict[str, Any]], str]


def sanitize_sdk_output(record: dict[str, Any], show_full_output: bool) -> str | None:
    """Format one record for the log.

    Args:
        record: A stream-json record
        show_full_output: Print the record verbatim instead of a summary

    Returns:
        The text to print, or None if nothing should be printed
    """
    if show_full_output:
        return json.dumps(record, indent=2, ensure_ascii=False, default=str)

    record_type = record.get("type")

    # System initialization - safe to show
    if record_type == "system" and record.get("subtype") == "init":
        return json.dumps(
            {
                "type": "system",
                "subtype": "init",
                "message": "Claude Code initialized",
                "model": record.get("model", "unknown"),
            },
            indent=2,
            ensure_ascii=False,
        )

    if record_type == "result":
        summary = {"type": "result"}
        summary.update({name: record.get(name) for name in _RESULT_SUMMARY_FIELDS})
        return json.dumps(summary, indent=2, ensure_ascii=False, default=str)

    if record_type == "assistant":
        return _format_assistant_turn(record)

    return None


def format_compact_tool_use(item: dict[str, Any]) -> str:
    """Format a tool_use content item as a one-line summary.

    Args:
        item: Content item with "name" and "input"

    Returns:
        Line of the form "| <name padded to 16> <parameter summary>"
    """
    name = item.get("name") or ""
    tool_input = item.get("input")
    if not isinstance(tool_input, dict):
        tool_input = {}

    summarizer = _TOOL_SUMMARIZERS.get(name, _summarize_generic)
    param_summary = summarizer(tool_input)

    return f"| {(name or 'unknown').ljust(_TOOL_NAME_WIDTH)} {param_summary}"


# ============================================================================
# Private Helper Functions
# ============================================================================


def _format_assistant_turn(record: dict[str, Any]) -> str | None:
    """Format an assistant record as one line per tool call or text block."""
    message = record.get("message")
    content = message.get("content") if isinstance(message, dict) else None
    if not isinstance(content, list):
        return None

    lines: list[str] = []
    for item in content:
        if not isinstance(item, dict):
            continue
        if item.get("type") == "tool_use":
            lines.append(format_compact_tool_use(item))
        elif item.get("type") == "text":
            text = str(item.get("text") or "").strip()
            if text:
                flattened = text.replace("\n", " ")
                lines.append(f"[Claude] {truncate(flattened, MAX_TEXT_LENGTH)}")

    return "\n".join(lines) if lines else None


def _summarize_file_path(tool_input: dict[str, Any]) -> str:
    return str(tool_input.get("file_path") or tool_input.get("filePath") or "")


def _summarize_command(tool_input: dict[str, Any]) -> str:
    return truncate(str(tool_input.get("command") or tool_input.get("cmd") or ""), MAX_COMMAND_LENGTH)


def _summarize_glob(tool_input: dict[str, Any]) -> str:
    return str(tool_input.get("pattern") or "")


def _summarize_grep(tool_input: dict[str, Any]) -> str:
    return f"pattern={tool_input.get('pattern') or ''} path={tool_input.get('path') or ''}"


def _summarize_task(tool_input: dict[str, Any]) -> str:
    return f"[{tool_input.get('subagent_type') or 'agent'}] {tool_input.get('description') or ''}"


def _summarize_todos(tool_input: dict[str, Any]) -> str:
    """Show the in-progress todo, or the number of todos."""
    todos = tool_input.get("todos")
    if not isinstance(todos, list):
        return ""

    in_progress = next(
        (todo for todo in todos if isinstance(todo, dict) and todo.get("status") == "in_progress"),
        None,
    )
    if in_progress is None:
        return f"{len(todos)} items"
    return str(in_progress.get("activeForm") or in_progress.get("content") or "")


def _summarize_web(tool_input: dict[str, Any]) -> str:
    return str(tool_input.get("url") or tool_input.get("query") or "")


def _summarize_patch(tool_input: dict[str, Any]) -> str:
    """List the files touched by a patch, or show the start of the patch."""
    patch = str(tool_input.get("patchText") or tool_input.get("patch") or "")
    files = _PATCH_FILE_PATTERN.findall(patch)
    if files:
        return ", ".join(files)
    return truncate(patch, MAX_PATCH_LENGTH)


def _summarize_generic(tool_input: dict[str, Any]) -> str:
    compact = json.dumps(tool_input, separators=(",", ":"), ensure_ascii=False, default=str)
    return truncate(compact, MAX_JSON_LENGTH)


# Parameter summary per tool name; unknown tools fall back to compact JSON
_TOOL_SUMMARIZERS: dict[str, ToolSummarizer] = {
    "Read": _summarize_file_path,
    "read_file": _summarize_file_path,
    "Write": _summarize_file_path,
    "write_file": _summarize_file_path,
    "Edit": _summarize_file_path,
    "edit_file": _summarize_file_path,
    "Bash": _summarize_command,
    "bash": _summarize_command,
    "Glob": _summarize_glob,
    "glob": _summarize_glob,
    "Grep": _summarize_grep,
    "grep": _summarize_grep,
    "Task": _summarize_task,
    "task": _summarize_task,
    "TodoWrite": _summarize_todos,
    "WebFetch": _summarize_web,
    "WebSearch": _summarize_web,
    "apply_patch": _summarize_patch,
}
