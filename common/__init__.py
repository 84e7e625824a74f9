"""Common package - Shared types and utilities for the agent runner and CLI."""

# Explicit re-exports for proper package API
# pylint: disable=useless-import-alias
from .types import EXECUTION_FILENAME as EXECUTION_FILENAME
from .types import USER_REQUEST_FILENAME as USER_REQUEST_FILENAME
from .types import Conclusion as Conclusion
from .types import RunPhase as RunPhase
from .types import RunResult as RunResult
from .utils import parse_bool as parse_bool
from .utils import parse_list as parse_list
from .utils import truncate as truncate
from .utils import validate_required_env_vars as validate_required_env_vars

# pylint: enable=useless-import-alias

__all__ = [
    "Conclusion",
    "EXECUTION_FILENAME",
    "RunPhase",
    "RunResult",
    "USER_REQUEST_FILENAME",
    "parse_bool",
    "parse_list",
    "truncate",
    "validate_required_env_vars",
]
