"""
Prompt Loading
==============

Functions for turning a prompt file into the prompt argument of the SDK query.

When a user request file sits next to the prompt file, the prompt is sent as
a single multi-block user message: the instructions first, the user's request
last. The CLI only detects slash commands in the final block, so the order
matters.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path
from typing import Any

from common import USER_REQUEST_FILENAME

__all__ = [
    "PromptInput",
    "build_multi_block_message",
    "create_prompt_config",
    "get_user_request_path",
]

PromptInput = str | AsyncIterator[dict[str, Any]]


def get_user_request_path(prompt_path: Path) -> Path:
    """Get the path of the user request file that belongs to a prompt file."""
    return prompt_path.parent / USER_REQUEST_FILENAME


def build_multi_block_message(prompt: str, user_request: str) -> dict[str, Any]:
    """Build a user message with the instructions and the user request as separate text blocks.

    Args:
        prompt: Instructions and repository context
        user_request: The user's actual request (may be a slash command)

    Returns:
        A stream-json user message dict accepted by the SDK
    """
    return {
        "type": "user",
        "session_id": "",
        "message": {
            "role": "user",
            "content": [
                {"type": "text", "text": prompt},
                {"type": "text", "text": user_request},
            ],
        },
        "parent_tool_use_id": None,
    }


def create_prompt_config(prompt_path: Path, show_full_output: bool) -> PromptInput:
    """Create the prompt argument for the SDK.

    Args:
        prompt_path: Path to the prompt file
        show_full_output: Whether the user request may be printed

    Returns:
        The prompt file content as a string, or an async iterator yielding one
        multi-block user message when a user request file exists

    Raises:
        FileNotFoundError: If the prompt or user request file does not exist
        OSError: If a file cannot be read
    """
    prompt_content = _read_text(prompt_path)

    user_request_path = get_user_request_path(prompt_path)
    if not user_request_path.is_file():
        return prompt_content

    user_request = _read_text(user_request_path)
    if show_full_output:
        print(f"Using multi-block message with user request: {user_request}", flush=True)
    else:
        print("Using multi-block message with user request (content hidden)", flush=True)

    message = build_multi_block_message(prompt_content, user_request)

    async def _single_message() -> AsyncIterator[dict[str, Any]]:
        yield message

    return _single_message()


# ============================================================================
# Private Helper Functions
# ============================================================================


def _read_text(path: Path) -> str:
    """Read a UTF-8 text file with descriptive errors."""
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise FileNotFoundError(f"Prompt file not found: {path}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise OSError(f"Failed to read prompt file {path}: {e}") from e
