"""
Agent Run Logic
===============

Runs Claude once through the Agent SDK for a CI step: streams the messages
to the log, saves them to the execution file and derives the run result.
"""

from __future__ import annotations

import json
import os
import sys
import tempfile
from collections.abc import AsyncIterable, AsyncIterator, Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from claude_agent_sdk import query

from agent.prompts import PromptInput, create_prompt_config
from common import EXECUTION_FILENAME, Conclusion, RunPhase, RunResult, actions

from .client import RunConfig, options_for_logging
from .formatter import sanitize_sdk_output
from .records import Record, message_to_record

# Signature of claude_agent_sdk.query, swappable for tests
QueryFunction = Callable[..., AsyncIterator[Any] | AsyncIterable[Any]]


class ClaudeRunError(Exception):
    """A run that could not produce a successful result.

    Attributes:
        result: The partial result (conclusion is always failure)
        phase: The run phase the error was raised in
    """

    def __init__(self, message: str, result: RunResult | None = None, phase: RunPhase = RunPhase.FAILED) -> None:
        super().__init__(message)
        self.result = result or RunResult(conclusion=Conclusion.FAILURE)
        self.phase = phase


class SdkExecutionError(ClaudeRunError):
    """The SDK raised while streaming messages."""


class MissingResultError(ClaudeRunError):
    """The stream ended without a result message."""


class StructuredOutputError(ClaudeRunError):
    """A JSON schema was requested but no structured output was returned."""


class RunFailedError(ClaudeRunError):
    """The result message reported a failure."""


@dataclass
class _RunState:
    """Mutable state owned by one run."""

    phase: RunPhase = RunPhase.STARTING
    records: list[Record] = field(default_factory=list)
    result_record: Record | None = None


def get_execution_file() -> Path:
    """Get the path of the execution log, under RUNNER_TEMP when set."""
    return Path(os.environ.get("RUNNER_TEMP") or tempfile.gettempdir()) / EXECUTION_FILENAME


async def run_claude_with_sdk(
    prompt_path: Path,
    config: RunConfig,
    *,
    query_fn: QueryFunction | None = None,
    execution_file: Path | None = None,
) -> RunResult:
    """
    Run Claude using the Agent SDK.

    Args:
        prompt_path: Path to the prompt file
        config: SDK options and output settings
        query_fn: Replacement for claude_agent_sdk.query (tests)
        execution_file: Where to save all messages (default: get_execution_file())

    Returns:
        RunResult with conclusion "success"

    Raises:
        FileNotFoundError: If the prompt file does not exist
        OSError: If the prompt file cannot be read
        SdkExecutionError: If the SDK fails while streaming
        MissingResultError: If no result message was received
        StructuredOutputError: If a JSON schema was given but no structured output was returned
        RunFailedError: If Claude reported a failed run
    """
    state = _RunState()
    prompt_path = Path(prompt_path)
    execution_file = execution_file or get_execution_file()

    prompt = create_prompt_config(prompt_path, config.show_full_output)
    _print_run_header(prompt_path, config)

    try:
        state.phase = RunPhase.STREAMING
        await _stream_messages(state, prompt, config, query_fn or query)

        state.phase = RunPhase.FINALIZING
        result = _finalize(state, config, execution_file)
    except ClaudeRunError:
        state.phase = RunPhase.FAILED
        raise

    state.phase = RunPhase.DONE
    return result


# ============================================================================
# Private Helper Functions
# ============================================================================


def _print_run_header(prompt_path: Path, config: RunConfig) -> None:
    """Print the run header and the non-sensitive SDK options."""
    if not config.show_full_output:
        print("Running Claude Code via SDK (full output hidden for security)...")
        print("Rerun in debug mode or set SHOW_FULL_OUTPUT=true for full output.")

    print(f"Running Claude with prompt from file: {prompt_path}")
    print(f"SDK options: {json.dumps(options_for_logging(config.sdk_options), indent=2, default=str)}", flush=True)


async def _stream_messages(
    state: _RunState,
    prompt: PromptInput,
    config: RunConfig,
    query_fn: QueryFunction,
) -> None:
    """Consume the SDK message stream, logging and collecting every message.

    Raises:
        SdkExecutionError: If the SDK raises for any reason
    """
    try:
        async for message in query_fn(prompt=prompt, options=config.sdk_options):
            record = message_to_record(message)
            state.records.append(record)

            sanitized = sanitize_sdk_output(record, config.show_full_output)
            if sanitized:
                print(sanitized, flush=True)

            if record.get("type") == "result":
                state.result_record = record
    except Exception as e:  # pylint: disable=broad-exception-caught
        # Broad catch is intentional: SDK, CLI process and transport errors all end the run
        print(f"SDK execution error: {e}", file=sys.stderr, flush=True)
        raise SdkExecutionError(f"SDK execution error: {e}", phase=RunPhase.STREAMING) from e


def _finalize(state: _RunState, config: RunConfig, execution_file: Path) -> RunResult:
    """Save the log and derive the result from the collected records.

    Raises:
        MissingResultError: If no result record was received
        StructuredOutputError: If structured output was required but missing
        RunFailedError: If the result subtype is not "success"
    """
    result = RunResult(conclusion=Conclusion.FAILURE)
    if _write_execution_file(state.records, execution_file):
        result.execution_file = execution_file

    result.session_id = _find_session_id(state.records)
    if result.session_id:
        actions.info(f"Set session_id: {result.session_id}")

    if state.result_record is None:
        actions.error("No result message received from Claude")
        raise MissingResultError("No result message received from Claude", result, RunPhase.FINALIZING)

    _apply_result_record(state.result_record, config, result)
    return result


def _write_execution_file(records: list[Record], execution_file: Path) -> bool:
    """Save all records as a JSON array. Failure is only a warning.

    Returns:
        True if the file was written
    """
    try:
        execution_file.parent.mkdir(parents=True, exist_ok=True)
        execution_file.write_text(json.dumps(records, indent=2, ensure_ascii=False, default=str), encoding="utf-8")
    except (OSError, TypeError, ValueError) as e:
        actions.warning(f"Failed to write execution file: {e}")
        return False

    print(f"Log saved to {execution_file}", flush=True)
    return True


def _find_session_id(records: list[Record]) -> str | None:
    """Get the session id from the first system init record, if any."""
    for record in records:
        if record.get("type") == "system" and record.get("subtype") == "init":
            session_id = record.get("session_id")
            return str(session_id) if session_id else None
    return None


def _apply_result_record(result_record: Record, config: RunConfig, result: RunResult) -> None:
    """Derive the conclusion and structured output from the result record.

    Raises:
        StructuredOutputError: If structured output was required but missing
        RunFailedError: If the result subtype is not "success"
    """
    subtype = result_record.get("subtype")
    is_success = subtype == "success"
    result.conclusion = Conclusion.SUCCESS if is_success else Conclusion.FAILURE

    errors = result_record.get("errors") or []
    if isinstance(errors, str):
        errors = [errors]
    error_detail = ", ".join(str(e) for e in errors)

    if config.has_json_schema and is_success:
        structured_output = result_record.get("structured_output")
        if structured_output is None:
            message = f"JSON schema was provided but Claude did not return structured_output. Result subtype: {subtype}"
            result.conclusion = Conclusion.FAILURE
            actions.error(message)
            raise StructuredOutputError(message, result, RunPhase.FINALIZING)

        result.structured_output = json.dumps(structured_output, ensure_ascii=False)
        field_count = len(structured_output) if isinstance(structured_output, dict) else 1
        actions.info(f"Set structured_output with {field_count} field(s)")

    if not is_success:
        if error_detail:
            actions.error(f"Execution failed: {error_detail}")
        raise RunFailedError(
            f"Claude execution failed: {error_detail or 'unknown error'}",
            result,
            RunPhase.FINALIZING,
        )
