"""
Shared Types and Data Classes
==============================

Common type definitions used by the runner, the CLI and the tests.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

# Filename of the full message log, written under RUNNER_TEMP
EXECUTION_FILENAME: str = "claude-execution-output.json"

# Filename of the optional user request, looked up next to the prompt file
USER_REQUEST_FILENAME: str = "claude-user-request.txt"


# ============================================================================
# Run State Types
# ============================================================================


class Conclusion(str, Enum):
    """Final outcome of a Claude run."""

    SUCCESS = "success"
    FAILURE = "failure"


class RunPhase(str, Enum):
    """Lifecycle phases of a single SDK run."""

    STARTING = "starting"  # Building prompt, logging options
    STREAMING = "streaming"  # Consuming messages from the SDK
    FINALIZING = "finalizing"  # Writing the log, deriving the result
    DONE = "done"
    FAILED = "failed"


@dataclass
class RunResult:
    """Summary of a finished run, returned to the caller."""

    conclusion: Conclusion = Conclusion.FAILURE
    execution_file: Path | None = None
    session_id: str | None = None
    structured_output: str | None = None  # JSON-encoded payload

    def to_outputs(self) -> dict[str, str]:
        """Convert to step outputs.

        Returns:
            Mapping of output name to string value. Unset fields are omitted.
        """
        outputs = {"conclusion": self.conclusion.value}
        if self.execution_file is not None:
            outputs["execution_file"] = str(self.execution_file)
        if self.session_id:
            outputs["session_id"] = self.session_id
        if self.structured_output is not None:
            outputs["structured_output"] = self.structured_output
        return outputs
