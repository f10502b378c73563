"""MonoCov error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Coverage
- 4xxx: Comment
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_MISSING_REQUIRED = 2003

    # Coverage (3xxx)
    COVERAGE_ROOT_NOT_FOUND = 3001
    COVERAGE_PARSE_ERROR = 3002
    COVERAGE_READ_ERROR = 3003
    COVERAGE_NO_DATA = 3004

    # Comment (4xxx)
    COMMENT_API_ERROR = 4001


@dataclass(frozen=True, slots=True)
class MonoCovError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'COVERAGE_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(MonoCovError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def missing_required(cls, field: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_MISSING_REQUIRED,
            message=f"Missing required config field: {field}",
            details={"field": field},
        )


class NotFoundError(MonoCovError):
    """Coverage root directory does not exist.

    Fatal to an aggregation call: this is a configuration problem, not a
    per-artifact failure.
    """

    @classmethod
    def coverage_root(cls, path: str) -> "NotFoundError":
        return cls(
            code=ErrorCode.COVERAGE_ROOT_NOT_FOUND,
            message=f"Coverage folder not found: {path}",
            details={"path": path},
        )


class ParseError(MonoCovError):
    """A single coverage artifact could not be parsed."""

    @classmethod
    def malformed(cls, path: str, reason: str) -> "ParseError":
        return cls(
            code=ErrorCode.COVERAGE_PARSE_ERROR,
            message=f"Failed to parse coverage artifact {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class ReadError(MonoCovError):
    """A single coverage artifact could not be read from disk."""

    @classmethod
    def from_os_error(cls, path: str, exc: Exception) -> "ReadError":
        return cls(
            code=ErrorCode.COVERAGE_READ_ERROR,
            message=f"Failed to read coverage artifact {path}: {exc}",
            retryable=True,
            details={"path": path, "reason": str(exc)},
        )


class NoCoverageDataError(MonoCovError):
    """A coverage walk finished without finding any usable artifact."""

    @classmethod
    def empty(cls, path: str) -> "NoCoverageDataError":
        return cls(
            code=ErrorCode.COVERAGE_NO_DATA,
            message=f"No coverage data found in {path}",
            details={"path": path},
        )


class CommentError(MonoCovError):
    """Pull-request comment API failures."""

    @classmethod
    def api_failure(cls, action: str, status_code: int | None, reason: str) -> "CommentError":
        return cls(
            code=ErrorCode.COMMENT_API_ERROR,
            message=f"Failed to {action} comment: {reason}",
            retryable=status_code is None or status_code >= 500,
            details={"action": action, "status_code": status_code, "reason": reason},
        )
