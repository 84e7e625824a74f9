"""Agent package - Runs Claude through the Agent SDK for a CI step.

Structure:
    agent/
    ├── cli.py              # CLI entry point (python -m agent.cli)
    ├── core/               # Core agent logic
    │   ├── orchestrator.py # Run driver
    │   ├── client.py       # SDK options
    │   ├── formatter.py    # Compact log formatting
    │   └── records.py      # SDK message normalization
    └── prompts/            # Prompt file loading

Public API:
- run_claude_with_sdk: Run Claude once and derive the result
- load_run_config: Build the run configuration
- sanitize_sdk_output: Format one message record for the log
"""

from .core import load_run_config, run_claude_with_sdk, sanitize_sdk_output

__all__ = [
    "run_claude_with_sdk",
    "load_run_config",
    "sanitize_sdk_output",
]
