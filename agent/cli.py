#!/usr/bin/env python3
"""
Claude SDK Runner CLI
=====================

Runs Claude once via the Agent SDK with a prompt file and reports the result
as CI step outputs.

Example Usage:
    python -m agent.cli --prompt-file /tmp/claude-prompts/claude-prompt.txt
    python -m agent.cli --prompt-file prompt.txt --model claude-sonnet-4-5 --max-turns 20
    python -m agent.cli --prompt-file prompt.txt --json-schema schema.json

If claude-user-request.txt exists next to the prompt file, it is sent as a
separate final block so slash commands in it are recognized.
"""

import argparse
import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv

from common import RunResult, actions, validate_required_env_vars

from .core import ClaudeRunError, load_run_config, run_claude_with_sdk


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    args = _parse_args(argv)

    # Load .env before reading configuration from the environment
    load_dotenv(Path(__file__).parent.parent / ".env")

    success, error = validate_required_env_vars()
    if not success:
        print(error, file=sys.stderr)
        sys.exit(1)

    prompt_file = Path(args.prompt_file).resolve()
    if not prompt_file.is_file():
        print(f"Error: Prompt file not found: {prompt_file}", file=sys.stderr)
        sys.exit(1)

    try:
        config = load_run_config(
            model=args.model,
            max_turns=args.max_turns,
            allowed_tools=args.allowed_tools,
            disallowed_tools=args.disallowed_tools,
            append_system_prompt=args.append_system_prompt,
            json_schema=args.json_schema,
            show_full_output=True if args.show_full_output else None,
            cwd=Path(args.cwd) if args.cwd else None,
        )
    except ValueError as e:
        print(f"Error: Invalid configuration: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        result = asyncio.run(run_claude_with_sdk(prompt_file, config))
    except ClaudeRunError as e:
        _write_outputs(e.result)
        print(f"\nFatal error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\n\nInterrupted by user", file=sys.stderr)
        sys.exit(130)

    _write_outputs(result)
    print(f"\nConclusion: {result.conclusion.value}")


# ============================================================================
# Private Helper Functions
# ============================================================================


def _write_outputs(result: RunResult) -> None:
    """Write the run result to $GITHUB_OUTPUT. Failure is only a warning."""
    try:
        for name, value in result.to_outputs().items():
            actions.set_output(name, value)
    except OSError as e:
        actions.warning(f"Failed to write step outputs: {e}")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Run Claude via the Agent SDK for a CI step",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run with a prompt file:
  python -m agent.cli --prompt-file /tmp/claude-prompts/claude-prompt.txt

  # Require structured output:
  python -m agent.cli --prompt-file prompt.txt --json-schema '{"type": "object"}'

Environment Variables (Required, one of):
  ANTHROPIC_API_KEY                Anthropic API key
  CLAUDE_CODE_OAUTH_TOKEN          Claude Code OAuth token
  CLAUDE_CODE_USE_BEDROCK / CLAUDE_CODE_USE_VERTEX

Environment Variables (Optional):
  CLAUDE_MODEL, CLAUDE_MAX_TURNS, CLAUDE_ALLOWED_TOOLS, CLAUDE_DISALLOWED_TOOLS,
  CLAUDE_APPEND_SYSTEM_PROMPT, CLAUDE_JSON_SCHEMA, CLAUDE_PERMISSION_MODE,
  SHOW_FULL_OUTPUT, RUNNER_TEMP, RUNNER_DEBUG, GITHUB_OUTPUT
""",
    )

    parser.add_argument(
        "--prompt-file",
        type=str,
        required=True,
        help="Path to the prompt file (required)",
    )

    parser.add_argument(
        "--model",
        type=str,
        default=None,
        help="Claude model to use (default: CLAUDE_MODEL or the CLI default)",
    )

    parser.add_argument(
        "--max-turns",
        type=int,
        default=None,
        help="Maximum number of agent turns (default: CLAUDE_MAX_TURNS or unlimited)",
    )

    parser.add_argument(
        "--allowed-tools",
        type=str,
        default=None,
        help="Comma or newline separated list of allowed tools",
    )

    parser.add_argument(
        "--disallowed-tools",
        type=str,
        default=None,
        help="Comma or newline separated list of disallowed tools",
    )

    parser.add_argument(
        "--append-system-prompt",
        type=str,
        default=None,
        help="Text appended to the Claude Code system prompt",
    )

    parser.add_argument(
        "--json-schema",
        type=str,
        default=None,
        help="JSON schema (inline or path to a .json file) the result must match",
    )

    parser.add_argument(
        "--show-full-output",
        action="store_true",
        help="Print every SDK message verbatim (may expose secrets)",
    )

    parser.add_argument(
        "--cwd",
        type=str,
        default=None,
        help="Working directory for Claude (default: current working directory)",
    )

    return parser.parse_args(argv)


if __name__ == "__main__":
    main()
