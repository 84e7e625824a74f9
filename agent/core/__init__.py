"""Core agent logic - SDK options, message formatting and the run driver.

Exports:
    Client:
        RunConfig: SDK options plus output settings for one run
        build_sdk_options: Create ClaudeAgentOptions for a CI run
        load_run_config: Build a RunConfig from arguments and environment
        options_for_logging: SDK options without the environment map

    Formatting:
        sanitize_sdk_output: Format one record for the log
        format_compact_tool_use: One-line summary of a tool call
        message_to_record: Normalize an SDK message into a stream-json dict

    Orchestrator:
        run_claude_with_sdk: Run Claude once and derive the result
        ClaudeRunError: Base error for failed runs (and its subclasses)
"""

from .client import RunConfig, build_sdk_options, load_run_config, options_for_logging
from .formatter import format_compact_tool_use, sanitize_sdk_output
from .orchestrator import (
    ClaudeRunError,
    MissingResultError,
    RunFailedError,
    SdkExecutionError,
    StructuredOutputError,
    get_execution_file,
    run_claude_with_sdk,
)
from .records import message_to_record

__all__ = [
    "RunConfig",
    "build_sdk_options",
    "load_run_config",
    "options_for_logging",
    "format_compact_tool_use",
    "sanitize_sdk_output",
    "message_to_record",
    "run_claude_with_sdk",
    "get_execution_file",
    "ClaudeRunError",
    "SdkExecutionError",
    "MissingResultError",
    "StructuredOutputError",
    "RunFailedError",
]
