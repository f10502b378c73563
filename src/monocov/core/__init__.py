"""Core module exports."""

from monocov.core.console import pluralize, report_error, status
from monocov.core.errors import (
    CommentError,
    ConfigError,
    ErrorCode,
    MonoCovError,
    NoCoverageDataError,
    NotFoundError,
    ParseError,
    ReadError,
)
from monocov.core.logging import (
    clear_run_id,
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)

__all__ = [
    # Errors
    "CommentError",
    "ConfigError",
    "ErrorCode",
    "MonoCovError",
    "NoCoverageDataError",
    "NotFoundError",
    "ParseError",
    "ReadError",
    # Logging
    "clear_run_id",
    "configure_logging",
    "get_logger",
    "get_run_id",
    "set_run_id",
    # Console
    "pluralize",
    "report_error",
    "status",
]
