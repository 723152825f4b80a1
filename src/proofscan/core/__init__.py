"""Core module exports."""

from proofscan.core.errors import (
    ConfigError,
    ErrorCode,
    ParserUnavailableError,
    ProofScanError,
)
from proofscan.core.logging import (
    bind_source,
    clear_source,
    configure_logging,
    get_logger,
    get_source,
)

__all__ = [
    # Errors
    "ProofScanError",
    "ConfigError",
    "ErrorCode",
    "ParserUnavailableError",
    # Logging
    "bind_source",
    "clear_source",
    "configure_logging",
    "get_logger",
    "get_source",
]
