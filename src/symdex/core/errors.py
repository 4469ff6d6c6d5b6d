"""symdex error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Indexing
- 9xxx: Internal
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    # Indexing (3xxx)
    MALFORMED_RANGE = 3001
    UNKNOWN_DESCRIPTOR_KIND = 3002
    INVALID_DUMP = 3003

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class SymdexError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'MALFORMED_RANGE')."""
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


class ConfigError(SymdexError):
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
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class IndexingError(SymdexError):
    """Errors that abort indexing of a single file."""

    @classmethod
    def malformed_range(cls, range_: list[int] | tuple[int, ...], reason: str) -> "IndexingError":
        return cls(
            code=ErrorCode.MALFORMED_RANGE,
            message=f"Malformed occurrence range {list(range_)}: {reason}",
            details={"range": list(range_), "reason": reason},
        )

    @classmethod
    def unknown_descriptor_kind(cls, kind: Any) -> "IndexingError":
        return cls(
            code=ErrorCode.UNKNOWN_DESCRIPTOR_KIND,
            message=f"Unknown descriptor kind: {kind!r}",
            details={"kind": str(kind)},
        )

    @classmethod
    def invalid_dump(cls, path: str, reason: str) -> "IndexingError":
        return cls(
            code=ErrorCode.INVALID_DUMP,
            message=f"Invalid semantic dump at {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class InternalError(SymdexError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
