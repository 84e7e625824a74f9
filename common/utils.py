"""
Shared Utility Functions
========================

Common utility functions used across the agent package and the CLI.

Public API:
    truncate: Cut a string to a maximum length with an ellipsis marker
    parse_bool: Interpret a CI-style boolean string
    parse_list: Split a comma/newline separated list
    validate_required_env_vars: Validate required environment variables
"""

import os
import re

# Type alias for validation result: (success: bool, error_message: str)
# On success: (True, ""), on failure: (False, "error description")
ValidationResult = tuple[bool, str]

ELLIPSIS = "..."

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


def truncate(text: str, max_len: int) -> str:
    """Truncate a string to max_len characters, appending "..." if truncated.

    Args:
        text: The string to truncate
        max_len: Maximum number of characters kept from text

    Returns:
        text unchanged if it fits, otherwise its first max_len characters plus "..."
    """
    if len(text) <= max_len:
        return text
    return text[:max_len] + ELLIPSIS


def parse_bool(value: str | None, default: bool = False) -> bool:
    """Interpret an environment/input string as a boolean."""
    if value is None or not value.strip():
        return default
    return value.strip().lower() in _TRUE_VALUES


def parse_list(value: str | None) -> list[str]:
    """Split a comma or newline separated list, dropping blanks.

    Args:
        value: Raw input such as "Read,Write" or "Bash(git:*)\\nEdit"

    Returns:
        List of stripped, non-empty entries
    """
    if not value:
        return []
    return [item.strip() for item in re.split(r"[,\n]", value) if item.strip()]


def validate_required_env_vars() -> ValidationResult:
    """
    Validate that Claude credentials are available in the environment.

    Bedrock and Vertex deployments authenticate through their cloud provider,
    so either flag satisfies the check.

    Returns:
        tuple[bool, str]: (success, error_message)
    """
    if parse_bool(os.environ.get("CLAUDE_CODE_USE_BEDROCK")) or parse_bool(os.environ.get("CLAUDE_CODE_USE_VERTEX")):
        return (True, "")

    if not os.environ.get("CLAUDE_CODE_OAUTH_TOKEN") and not os.environ.get("ANTHROPIC_API_KEY"):
        return (
            False,
            "Error: Neither CLAUDE_CODE_OAUTH_TOKEN nor ANTHROPIC_API_KEY environment variable is set\n\n"
            "Option 1: Run 'claude setup-token' after installing the Claude Code CLI.\n"
            "  export CLAUDE_CODE_OAUTH_TOKEN='your-token-here'\n\n"
            "Option 2: Use Anthropic API key directly:\n"
            "  export ANTHROPIC_API_KEY='sk-ant-xxxxxxxxxxxxx'\n\n"
            "Option 3: Set CLAUDE_CODE_USE_BEDROCK=1 or CLAUDE_CODE_USE_VERTEX=1 with cloud credentials.",
        )

    return (True, "")
