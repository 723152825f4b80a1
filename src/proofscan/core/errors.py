"""ProofScan error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Parse

Structural irregularities in the analysed source are never raised; the
walkers degrade to empty results. Only grammar initialization failure
surfaces as an exception (``ParserUnavailableError``).
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Parse (3xxx)
    PARSER_UNAVAILABLE = 3001


@dataclass(frozen=True, slots=True)
class ProofScanError(Exception):
    """Base error with structured context for callers and logs."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'PARSER_UNAVAILABLE')."""
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


class ConfigError(ProofScanError):
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


class ParserUnavailableError(ProofScanError):
    """The Rust grammar could not be loaded.

    Retryable: a failed load is not memoized, so the next call attempts
    initialization again.
    """

    @classmethod
    def load_failed(cls, reason: str) -> "ParserUnavailableError":
        return cls(
            code=ErrorCode.PARSER_UNAVAILABLE,
            message=f"Rust grammar unavailable: {reason}",
            retryable=True,
            details={"reason": reason},
        )
