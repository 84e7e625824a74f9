"""
Claude SDK Options Configuration
================================

Functions for building the Claude Agent SDK options for a CI run and for
describing them safely in the log.
"""

from __future__ import annotations

import dataclasses
import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from claude_agent_sdk import ClaudeAgentOptions

from common import actions
from common.utils import parse_bool, parse_list

# Option fields that are never printed
_SENSITIVE_OPTION_FIELDS = frozenset({"env"})

_DEFAULT_PERMISSION_MODE = "acceptEdits"


@dataclass
class RunConfig:
    """Configuration for a single SDK run.

    Groups the SDK options with the runner's own output settings.
    """

    sdk_options: ClaudeAgentOptions
    show_full_output: bool = False
    has_json_schema: bool = False


def build_sdk_options(  # pylint: disable=too-many-arguments
    *,
    model: str | None = None,
    max_turns: int | None = None,
    allowed_tools: list[str] | None = None,
    disallowed_tools: list[str] | None = None,
    append_system_prompt: str | None = None,
    json_schema: dict[str, Any] | None = None,
    permission_mode: str | None = None,
    cwd: Path | None = None,
    env: dict[str, str] | None = None,
) -> ClaudeAgentOptions:
    """
    Create Claude Agent SDK options for a CI run.

    Args:
        model: Claude model to use (None for the CLI default)
        max_turns: Maximum number of agent turns (None for unlimited)
        allowed_tools: Tools the agent may use without asking
        disallowed_tools: Tools the agent may never use
        append_system_prompt: Text appended to the Claude Code system prompt
        json_schema: JSON schema the final result must conform to
        permission_mode: SDK permission mode (default: acceptEdits)
        cwd: Working directory for the agent
        env: Extra environment variables for the Claude Code process

    Returns:
        Configured ClaudeAgentOptions
    """
    system_prompt: dict[str, str] = {"type": "preset", "preset": "claude_code"}
    if append_system_prompt:
        system_prompt["append"] = append_system_prompt

    options: dict[str, Any] = {
        "model": model,
        "max_turns": max_turns,
        "allowed_tools": list(allowed_tools or []),
        "disallowed_tools": list(disallowed_tools or []),
        "system_prompt": system_prompt,
        "permission_mode": permission_mode or _DEFAULT_PERMISSION_MODE,
        # Load CLAUDE.md and .claude/ settings from the checked-out repository
        "setting_sources": ["project"],
        "env": dict(env or {}),
    }
    if cwd is not None:
        options["cwd"] = str(cwd.resolve())
    if json_schema is not None:
        options["output_format"] = {"type": "json_schema", "schema": json_schema}

    return ClaudeAgentOptions(**options)


def options_for_logging(options: ClaudeAgentOptions) -> dict[str, Any]:
    """Describe SDK options without the environment map.

    Empty fields are dropped and callables (hooks, stderr handlers) are
    rendered by name so the result is JSON serializable.

    Args:
        options: The SDK options passed to query()

    Returns:
        Dict safe to print in CI logs
    """
    described: dict[str, Any] = {}
    for field in dataclasses.fields(options):
        if field.name in _SENSITIVE_OPTION_FIELDS:
            continue
        value = getattr(options, field.name)
        if value is None or value == [] or value == {}:
            continue
        described[field.name] = _describe_value(value)
    return described


def load_run_config(  # pylint: disable=too-many-arguments
    *,
    model: str | None = None,
    max_turns: int | None = None,
    allowed_tools: str | None = None,
    disallowed_tools: str | None = None,
    append_system_prompt: str | None = None,
    json_schema: str | None = None,
    show_full_output: bool | None = None,
    cwd: Path | None = None,
) -> RunConfig:
    """Build a RunConfig from explicit values, falling back to environment variables.

    Environment variables:
        CLAUDE_MODEL, CLAUDE_MAX_TURNS, CLAUDE_ALLOWED_TOOLS, CLAUDE_DISALLOWED_TOOLS,
        CLAUDE_APPEND_SYSTEM_PROMPT, CLAUDE_JSON_SCHEMA, CLAUDE_PERMISSION_MODE,
        SHOW_FULL_OUTPUT (RUNNER_DEBUG=1 also enables full output)

    Raises:
        ValueError: If max turns or the JSON schema are invalid
    """
    if max_turns is None:
        max_turns = _parse_max_turns(os.getenv("CLAUDE_MAX_TURNS"))
    else:
        max_turns = _validate_max_turns(max_turns, "max_turns")

    schema = parse_json_schema(json_schema if json_schema is not None else os.getenv("CLAUDE_JSON_SCHEMA"))

    if show_full_output is None:
        show_full_output = parse_bool(os.getenv("SHOW_FULL_OUTPUT")) or actions.is_debug()

    sdk_options = build_sdk_options(
        model=model or os.getenv("CLAUDE_MODEL") or None,
        max_turns=max_turns,
        allowed_tools=parse_list(allowed_tools if allowed_tools is not None else os.getenv("CLAUDE_ALLOWED_TOOLS")),
        disallowed_tools=parse_list(
            disallowed_tools if disallowed_tools is not None else os.getenv("CLAUDE_DISALLOWED_TOOLS")
        ),
        append_system_prompt=append_system_prompt or os.getenv("CLAUDE_APPEND_SYSTEM_PROMPT") or None,
        json_schema=schema,
        permission_mode=os.getenv("CLAUDE_PERMISSION_MODE") or None,
        cwd=cwd,
    )

    return RunConfig(
        sdk_options=sdk_options,
        show_full_output=show_full_output,
        has_json_schema=schema is not None,
    )


def parse_json_schema(value: str | None) -> dict[str, Any] | None:
    """Parse a JSON schema given inline or as a path to a .json file.

    Args:
        value: Inline JSON text, a file path, or None/blank

    Returns:
        The schema dict, or None when no schema was given

    Raises:
        ValueError: If the schema is not valid JSON or not a JSON object
    """
    if value is None or not value.strip():
        return None

    text = value.strip()
    if not text.startswith("{"):
        schema_path = Path(text)
        try:
            text = schema_path.read_text(encoding="utf-8")
        except OSError as e:
            raise ValueError(f"Failed to read JSON schema file {schema_path}: {e}") from e

    try:
        schema = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON schema: {e}") from e

    if not isinstance(schema, dict):
        raise ValueError(f"JSON schema must be an object, got: {type(schema).__name__}")
    return schema


# ============================================================================
# Private Helper Functions
# ============================================================================


def _parse_max_turns(value: str | None) -> int | None:
    """Parse CLAUDE_MAX_TURNS; blank means unlimited."""
    if value is None or not value.strip():
        return None
    try:
        max_turns = int(value)
    except ValueError as e:
        raise ValueError(f"CLAUDE_MAX_TURNS must be an integer, got: {value}") from e
    return _validate_max_turns(max_turns, "CLAUDE_MAX_TURNS")


def _validate_max_turns(max_turns: int, source: str) -> int:
    """Reject zero or negative turn limits."""
    if max_turns <= 0:
        raise ValueError(f"{source} must be a positive integer, got: {max_turns}")
    return max_turns


def _describe_value(value: Any) -> Any:
    """Make an option value JSON serializable."""
    if callable(value):
        return f"<{getattr(value, '__qualname__', type(value).__name__)}>"
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, dict):
        return {str(k): _describe_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_describe_value(v) for v in value]
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return _describe_value(dataclasses.asdict(value))
    return value
