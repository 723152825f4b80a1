"""Config module exports."""

from proofscan.config.loader import ProofScanSettings, load_config
from proofscan.config.models import (
    LoggingConfig,
    LogOutputConfig,
    ProofScanConfig,
    ScanConfig,
)

__all__ = [
    "load_config",
    "LoggingConfig",
    "LogOutputConfig",
    "ProofScanConfig",
    "ProofScanSettings",
    "ScanConfig",
]
