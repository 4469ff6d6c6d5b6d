"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (SYMDEX__SECTION__KEY)
3. Repo YAML (.symdex/config.yaml)
4. Global YAML (~/.config/symdex/config.yaml)
5. Built-in defaults (this file)

Examples:
    SYMDEX__LOGGING__LEVEL=DEBUG
    SYMDEX__INDEX__SCHEME=scip-typescript
    SYMDEX__INDEXER__MAX_WORKERS=4
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

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
        SYMDEX__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every local-symbol fallback.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class IndexConfig(BaseModel):
    """Symbol naming and document output configuration.

    Env vars:
        SYMDEX__INDEX__SCHEME: SCIP scheme written at the start of global symbols
        SYMDEX__INDEX__MANAGER: Package manager name written after the scheme
        SYMDEX__INDEX__SIGNATURE_LANGUAGE: Fence tag for hover signatures
    """

    scheme: str = Field(
        default="scip-typescript",
        description="Scheme prefix of every global symbol string.",
    )
    manager: str = Field(
        default="npm",
        description="Package manager segment of every global symbol string.",
    )
    language: str = Field(
        default="typescript",
        description="Language recorded on each emitted document.",
    )
    signature_language: str = Field(
        default="ts",
        description="Language tag of the fenced type-signature block in symbol documentation.",
    )
    emit_symbol_information: bool = Field(
        default=True,
        description="Emit SymbolInformation entries for definitions. "
        "Disabling drops hover documentation but keeps occurrences.",
    )

    @field_validator("scheme", "manager")
    @classmethod
    def validate_no_spaces(cls, v: str) -> str:
        if not v or " " in v:
            raise ValueError(f"Must be a non-empty token without spaces, got {v!r}")
        return v


class IndexerConfig(BaseModel):
    """Run-level indexer configuration.

    Env vars:
        SYMDEX__INDEXER__MAX_WORKERS: Files indexed concurrently
    """

    max_workers: int = Field(
        default=1,
        description="Files indexed concurrently. 1 indexes strictly sequentially. "
        "Values above 1 share the run symbol table behind a lock.",
    )

    @field_validator("max_workers")
    @classmethod
    def validate_max_workers(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"max_workers must be >= 1, got {v}")
        return v


class SymdexConfig(BaseModel):
    """Root configuration for symdex."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    index: IndexConfig = Field(default_factory=IndexConfig)
    indexer: IndexerConfig = Field(default_factory=IndexerConfig)
