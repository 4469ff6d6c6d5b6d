"""Shared fixtures for index tests.

``Project`` builds syntax trees in memory and answers semantic queries from
hand-written bindings, standing in for the external semantic resolver.
"""

from __future__ import annotations

import itertools
from collections.abc import Sequence

import pytest

from symdex.config.models import IndexConfig
from symdex.index._internal.indexing import FileIndexer, SymbolNamer, SymbolTable
from symdex.index.packages import StaticPackageResolver
from symdex.index.tree import NodeArena, NodeKind, SemanticSymbol, Span, SyntaxNode

HEADER = "scip-typescript npm pkg 1.0.0 "


class FakeResolver:
    """SemanticResolver answering from explicit bindings."""

    def __init__(self) -> None:
        self._ids = itertools.count()
        self.identifiers: dict[int, SemanticSymbol] = {}
        self.signatures: dict[int, str] = {}
        self.documentation: dict[int, list[str]] = {}
        self.aliases: dict[int, list[SyntaxNode]] = {}
        self.shorthand_values: dict[int, SemanticSymbol] = {}
        self.implementations: dict[int, list[SyntaxNode]] = {}

    def symbol(self, *declarations: SyntaxNode, docs: Sequence[str] = ()) -> SemanticSymbol:
        symbol = SemanticSymbol(next(self._ids), tuple(declarations))
        self.documentation[symbol.symbol_id] = list(docs)
        return symbol

    def bind(self, identifier: SyntaxNode, symbol: SemanticSymbol, signature: str = "") -> None:
        self.identifiers[identifier.node_id] = symbol
        if signature:
            self.signatures[identifier.node_id] = signature

    # SemanticResolver

    def resolve_identifier(self, node: SyntaxNode) -> SemanticSymbol | None:
        return self.identifiers.get(node.node_id)

    def declarations_of(self, symbol: SemanticSymbol) -> Sequence[SyntaxNode]:
        return symbol.declarations

    def type_signature_of(self, node: SyntaxNode) -> str:
        return self.signatures.get(node.node_id, "")

    def documentation_of(self, symbol: SemanticSymbol) -> Sequence[str]:
        return self.documentation.get(symbol.symbol_id, [])

    def alias_declarations(self, specifier: SyntaxNode) -> Sequence[SyntaxNode]:
        return self.aliases.get(specifier.node_id, [])

    def shorthand_value_symbol(self, declaration: SyntaxNode) -> SemanticSymbol | None:
        return self.shorthand_values.get(declaration.node_id)

    def implementations_of(self, declaration: SyntaxNode) -> Sequence[SyntaxNode]:
        return self.implementations.get(declaration.node_id, [])


class Project:
    """In-memory project: arena, resolver, packages and one run-wide table."""

    header = HEADER

    def __init__(self) -> None:
        self.arena = NodeArena()
        self.resolver = FakeResolver()
        self.packages = StaticPackageResolver()
        self.table = SymbolTable()

    def file(self, path: str, *, package: bool = True) -> SyntaxNode:
        """Create a file root, registered with the package resolver unless package=False."""
        root = self.arena.new(NodeKind.SOURCE_FILE, Span(0, 0, 0, 0), path=path)
        if package:
            self.packages.add(path, HEADER)
        return root

    def node(self, kind: NodeKind, parent: SyntaxNode, *, line: int = 0) -> SyntaxNode:
        """Create an unnamed node."""
        return self.arena.new(kind, Span(line, 0, line, 0), parent=parent)

    def declare(
        self,
        kind: NodeKind,
        parent: SyntaxNode,
        name: str,
        *,
        line: int = 0,
        col: int = 0,
    ) -> SyntaxNode:
        """Create a declaration whose name child spans ``name`` at (line, col)."""
        span = Span(line, col, line, col + len(name))
        decl = self.arena.new(kind, span, parent=parent)
        ident = self.arena.new(NodeKind.IDENTIFIER, span, parent=decl, text=name)
        self.arena.set_name(decl, ident)
        return decl

    def ident(self, parent: SyntaxNode, text: str, *, line: int = 0, col: int = 0) -> SyntaxNode:
        """Create a reference identifier."""
        span = Span(line, col, line, col + len(text))
        return self.arena.new(NodeKind.IDENTIFIER, span, parent=parent, text=text)

    def variable(self, parent: SyntaxNode, name: str, *, line: int = 0, col: int = 6) -> SyntaxNode:
        """``const <name> = ...`` under parent; returns the variable_declaration."""
        statement = self.node(NodeKind.VARIABLE_STATEMENT, parent, line=line)
        decl_list = self.node(NodeKind.VARIABLE_DECLARATION_LIST, statement, line=line)
        return self.declare(NodeKind.VARIABLE_DECLARATION, decl_list, name, line=line, col=col)

    def define(
        self, decl: SyntaxNode, *, docs: Sequence[str] = (), signature: str = ""
    ) -> SemanticSymbol:
        """Bind a declaration's own name to a fresh symbol."""
        assert decl.name is not None
        symbol = self.resolver.symbol(decl, docs=docs)
        self.resolver.bind(decl.name, symbol, signature)
        return symbol

    def namer(self) -> SymbolNamer:
        return SymbolNamer(self.resolver, self.packages, self.table)

    def indexer(self, root: SyntaxNode, config: IndexConfig | None = None) -> FileIndexer:
        return FileIndexer(root, self.resolver, self.packages, self.table, config=config)


@pytest.fixture
def project() -> Project:
    """Fresh in-memory project."""
    return Project()
