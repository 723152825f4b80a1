"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (PROOFSCAN__SECTION__KEY)
3. Repo YAML (.proofscan/config.yaml)
4. Global YAML (~/.config/proofscan/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    PROOFSCAN__<SECTION>__<KEY>=<VALUE>

Examples:
    PROOFSCAN__LOGGING__LEVEL=DEBUG
    PROOFSCAN__SCAN__MAX_FILE_SIZE_KB=256

Configuration only drives the command-line front end (file discovery and
logging). The analysis functions take source text and are not configurable.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        PROOFSCAN__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. DEBUG reports every malformed file encountered.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ScanConfig(BaseModel):
    """Source discovery for ``proofscan scan``.

    Env vars:
        PROOFSCAN__SCAN__MAX_FILE_SIZE_KB: Skip files larger than this
        PROOFSCAN__SCAN__EXTENSIONS: JSON list of file suffixes to analyse
        PROOFSCAN__SCAN__EXCLUDE_DIRS: JSON list of directory names to prune
    """

    max_file_size_kb: int = Field(
        default=1024,
        description="Skip files larger than this (KB). Bounds the cost of a single analysis.",
    )
    extensions: list[str] = Field(
        default_factory=lambda: [".rs"],
        description="File suffixes considered Rust sources.",
    )
    exclude_dirs: list[str] = Field(
        default_factory=lambda: ["target", ".git"],
        description="Directory names pruned during the walk.",
    )

    @field_validator("max_file_size_kb")
    @classmethod
    def validate_max_file_size(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"max_file_size_kb must be positive, got {v}")
        return v

    @field_validator("extensions")
    @classmethod
    def normalize_extensions(cls, v: list[str]) -> list[str]:
        return [ext if ext.startswith(".") else f".{ext}" for ext in v]


class ProofScanConfig(BaseModel):
    """Root configuration for ProofScan."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    scan: ScanConfig = Field(default_factory=ScanConfig)
