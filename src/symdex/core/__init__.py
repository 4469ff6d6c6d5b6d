"""Core module exports."""

from symdex.core.errors import (
    ConfigError,
    ErrorCode,
    IndexingError,
    InternalError,
    SymdexError,
)
from symdex.core.logging import (
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)
from symdex.core.progress import pluralize, progress, status

__all__ = [
    # Errors
    "SymdexError",
    "ConfigError",
    "ErrorCode",
    "IndexingError",
    "InternalError",
    # Logging
    "configure_logging",
    "get_logger",
    "get_run_id",
    "set_run_id",
    # Progress
    "pluralize",
    "progress",
    "status",
]
