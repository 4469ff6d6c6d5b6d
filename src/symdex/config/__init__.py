"""Config module exports."""

from symdex.config.loader import SymdexSettings, load_config
from symdex.config.models import (
    IndexConfig,
    IndexerConfig,
    LoggingConfig,
    LogOutputConfig,
    SymdexConfig,
)

__all__ = [
    "load_config",
    "SymdexConfig",
    "SymdexSettings",
    "IndexConfig",
    "IndexerConfig",
    "LoggingConfig",
    "LogOutputConfig",
]
