"""
CI Workflow Commands
====================

Minimal helpers for talking to the GitHub Actions runner: log annotations,
step outputs and debug detection. Outside of Actions the annotations are
still plain stdout lines, so local runs stay readable.

Public API:
    info: Print an informational line
    warning: Emit a warning annotation
    error: Emit an error annotation
    set_output: Append a step output to $GITHUB_OUTPUT
    is_debug: Whether the runner is in debug mode
"""

from __future__ import annotations

import os
import sys
import uuid
from pathlib import Path


def info(message: str) -> None:
    """Print an informational message."""
    print(message, flush=True)


def warning(message: str) -> None:
    """Emit a warning annotation."""
    print(f"::warning::{_escape_data(message)}", flush=True)


def error(message: str) -> None:
    """Emit an error annotation."""
    print(f"::error::{_escape_data(message)}", file=sys.stderr, flush=True)


def is_debug() -> bool:
    """Return True when the workflow runs with step debug logging enabled."""
    return os.environ.get("RUNNER_DEBUG") == "1"


def set_output(name: str, value: str) -> bool:
    """Append a step output using the multiline delimiter syntax.

    Args:
        name: Output name
        value: Output value (may contain newlines)

    Returns:
        True if the output was written, False if GITHUB_OUTPUT is not set

    Raises:
        OSError: If the output file cannot be written
    """
    output_path = os.environ.get("GITHUB_OUTPUT")
    if not output_path:
        return False

    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    with open(Path(output_path), "a", encoding="utf-8") as f:
        f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
    return True


# ============================================================================
# Private Helper Functions
# ============================================================================


def _escape_data(message: str) -> str:
    """Escape characters the runner treats as command syntax."""
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
