"""Index module - SCIP symbol naming and occurrence emission.

This module provides:
- Descriptor codec: canonical rendering of symbol path segments
- Symbol namer: memoized canonical identity per declaration
- Occurrence emitter: per-file definition/reference stream plus hover metadata
- Semantic dump loading and project-wide indexing runs

Public API is in `symdex.index.ops`:
- ProjectIndexer: High-level orchestration
- IndexResult, FileFailure: Result types

Internal implementations are in `symdex.index._internal/`.
"""

from symdex.index._internal.indexing import FileIndexer, SymbolNamer, SymbolTable
from symdex.index.descriptor import Descriptor, DescriptorKind, descriptor_string
from symdex.index.models import (
    Document,
    IdentityKind,
    Occurrence,
    Relationship,
    ScipRange,
    SymbolIdentity,
    SymbolInformation,
    SymbolRole,
)
from symdex.index.ops import FileFailure, IndexResult, ProjectIndexer, index_dump
from symdex.index.tree import (
    NodeArena,
    NodeKind,
    PackageRef,
    PackageResolver,
    SemanticResolver,
    SemanticSymbol,
    Span,
    SyntaxNode,
)

__all__ = [
    # Public API (ops.py)
    "ProjectIndexer",
    "IndexResult",
    "FileFailure",
    "index_dump",
    # Engine
    "FileIndexer",
    "SymbolNamer",
    "SymbolTable",
    # Descriptors
    "Descriptor",
    "DescriptorKind",
    "descriptor_string",
    # Output models
    "Document",
    "IdentityKind",
    "Occurrence",
    "Relationship",
    "ScipRange",
    "SymbolIdentity",
    "SymbolInformation",
    "SymbolRole",
    # Tree and collaborators
    "NodeArena",
    "NodeKind",
    "PackageRef",
    "PackageResolver",
    "SemanticResolver",
    "SemanticSymbol",
    "Span",
    "SyntaxNode",
]
