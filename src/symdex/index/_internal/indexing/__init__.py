"""Indexing engine: symbol naming (namer) and occurrence emission (emitter)."""

from symdex.index._internal.indexing.counter import Counter
from symdex.index._internal.indexing.emitter import DEFINITION_KINDS, FileIndexer, node_range
from symdex.index._internal.indexing.namer import (
    DESCRIPTOR_RULES,
    TRANSPARENT_KINDS,
    SymbolNamer,
    descriptor_for,
)
from symdex.index._internal.indexing.symbol_table import SymbolTable

__all__ = [
    # Naming
    "Counter",
    "SymbolNamer",
    "SymbolTable",
    "DESCRIPTOR_RULES",
    "TRANSPARENT_KINDS",
    "descriptor_for",
    # Emission
    "FileIndexer",
    "DEFINITION_KINDS",
    "node_range",
]
