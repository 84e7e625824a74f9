"""
SDK Message Records
===================

Normalizes Claude Agent SDK message objects into plain stream-json dicts.

Everything downstream (formatting, session extraction, the execution log)
works on these dicts, so the execution file has the same shape as the
Claude Code CLI's ``--output-format stream-json`` output.
"""

from __future__ import annotations

import dataclasses
import re
from typing import Any

from claude_agent_sdk import (
    AssistantMessage,
    ResultMessage,
    SystemMessage,
    TextBlock,
    ThinkingBlock,
    ToolResultBlock,
    ToolUseBlock,
    UserMessage,
)

Record = dict[str, Any]

# Optional ResultMessage attributes, present depending on SDK version
_OPTIONAL_RESULT_FIELDS = ("usage", "result", "structured_output", "errors", "permission_denials")


def message_to_record(message: Any) -> Record:
    """Convert one SDK message into a stream-json record.

    Args:
        message: An SDK message object, or an already-decoded dict

    Returns:
        A JSON-compatible dict with a "type" key
    """
    if isinstance(message, dict):
        return message

    if isinstance(message, SystemMessage):
        # data is the raw CLI payload; subtype wins over whatever it carries
        return {**message.data, "type": "system", "subtype": message.subtype}

    if isinstance(message, AssistantMessage):
        return {
            "type": "assistant",
            "message": {
                "role": "assistant",
                "model": message.model,
                "content": [block_to_dict(block) for block in message.content],
            },
            "parent_tool_use_id": getattr(message, "parent_tool_use_id", None),
        }

    if isinstance(message, UserMessage):
        # UserMessage.content can be str or list[ContentBlock]
        content = message.content
        if isinstance(content, list):
            content = [block_to_dict(block) for block in content]
        return {
            "type": "user",
            "message": {"role": "user", "content": content},
            "parent_tool_use_id": getattr(message, "parent_tool_use_id", None),
        }

    if isinstance(message, ResultMessage):
        record: Record = {
            "type": "result",
            "subtype": message.subtype,
            "is_error": message.is_error,
            "duration_ms": message.duration_ms,
            "duration_api_ms": message.duration_api_ms,
            "num_turns": message.num_turns,
            "session_id": message.session_id,
            "total_cost_usd": message.total_cost_usd,
        }
        for name in _OPTIONAL_RESULT_FIELDS:
            value = getattr(message, name, None)
            if value is not None:
                record[name] = value
        return record

    if dataclasses.is_dataclass(message) and not isinstance(message, type):
        return {"type": _snake_case(type(message).__name__), **dataclasses.asdict(message)}

    return {"type": "unknown", "repr": repr(message)}


def block_to_dict(block: Any) -> Record:
    """Convert one SDK content block into a stream-json content item."""
    if isinstance(block, dict):
        return block
    if isinstance(block, TextBlock):
        return {"type": "text", "text": block.text}
    if isinstance(block, ThinkingBlock):
        return {"type": "thinking", "thinking": block.thinking, "signature": block.signature}
    if isinstance(block, ToolUseBlock):
        return {"type": "tool_use", "id": block.id, "name": block.name, "input": block.input}
    if isinstance(block, ToolResultBlock):
        return {
            "type": "tool_result",
            "tool_use_id": block.tool_use_id,
            "content": block.content,
            "is_error": block.is_error,
        }
    if dataclasses.is_dataclass(block) and not isinstance(block, type):
        return {"type": _snake_case(type(block).__name__), **dataclasses.asdict(block)}
    return {"type": "unknown", "repr": repr(block)}


# ============================================================================
# Private Helper Functions
# ============================================================================


def _snake_case(name: str) -> str:
    """Convert a class name like StreamEvent to stream_event."""
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()
