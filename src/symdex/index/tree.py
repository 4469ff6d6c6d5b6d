"""Syntax tree handles and the collaborator interfaces symdex consumes.

The tree is produced outside symdex (see ``symdex.index.dump``); symdex only
reads it. Every node is allocated from a ``NodeArena`` that hands out integer
ids unique across the whole run, so declaration caches can be keyed by
``node_id`` instead of object identity.
"""

from __future__ import annotations

import itertools
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from symdex.index.descriptor import Descriptor


class NodeKind(str, Enum):
    """Syntactic kind of a tree node (TypeScript compiler naming)."""

    # Roots and containers
    SOURCE_FILE = "source_file"
    BLOCK = "block"
    MODULE_BLOCK = "module_block"
    OBJECT_LITERAL_EXPRESSION = "object_literal_expression"

    # Imports
    IMPORT_DECLARATION = "import_declaration"
    IMPORT_CLAUSE = "import_clause"
    NAMED_IMPORTS = "named_imports"
    NAMESPACE_IMPORT = "namespace_import"
    IMPORT_SPECIFIER = "import_specifier"
    EXPORT_DECLARATION = "export_declaration"
    EXPORT_SPECIFIER = "export_specifier"

    # Variables
    VARIABLE_STATEMENT = "variable_statement"
    VARIABLE_DECLARATION_LIST = "variable_declaration_list"
    VARIABLE_DECLARATION = "variable_declaration"

    # Types
    INTERFACE_DECLARATION = "interface_declaration"
    TYPE_ALIAS_DECLARATION = "type_alias_declaration"
    ENUM_DECLARATION = "enum_declaration"
    ENUM_MEMBER = "enum_member"
    CLASS_DECLARATION = "class_declaration"
    CLASS_EXPRESSION = "class_expression"
    TYPE_PARAMETER = "type_parameter"

    # Functions and members
    FUNCTION_DECLARATION = "function_declaration"
    FUNCTION_EXPRESSION = "function_expression"
    ARROW_FUNCTION = "arrow_function"
    METHOD_SIGNATURE = "method_signature"
    METHOD_DECLARATION = "method_declaration"
    CONSTRUCTOR = "constructor"
    GET_ACCESSOR = "get_accessor"
    SET_ACCESSOR = "set_accessor"
    PROPERTY_DECLARATION = "property_declaration"
    PROPERTY_SIGNATURE = "property_signature"
    PARAMETER = "parameter"

    # Namespaces
    MODULE_DECLARATION = "module_declaration"

    # Object literal members
    PROPERTY_ASSIGNMENT = "property_assignment"
    SHORTHAND_PROPERTY_ASSIGNMENT = "shorthand_property_assignment"

    # Leaves and everything else
    IDENTIFIER = "identifier"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class Span:
    """Zero-based node extent, end column exclusive."""

    start_line: int
    start_col: int
    end_line: int
    end_col: int


@dataclass(eq=False, slots=True)
class SyntaxNode:
    """Handle of one tree node.

    Equality and hashing are by identity: two syntactically identical
    declarations at different positions are different nodes.
    """

    node_id: int
    kind: NodeKind
    span: Span
    text: str | None = None
    path: str | None = None  # set on SOURCE_FILE only
    parent: SyntaxNode | None = None
    name: SyntaxNode | None = None
    children: list[SyntaxNode] = field(default_factory=list)

    def __repr__(self) -> str:
        label = f" {self.name_text!r}" if self.name is not None else ""
        return f"<SyntaxNode #{self.node_id} {self.kind.value}{label}>"

    @property
    def name_text(self) -> str | None:
        """Source text of the node's name child, if any."""
        if self.name is None:
            return None
        return self.name.text

    def source_file(self) -> SyntaxNode:
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    def walk(self) -> Iterator[SyntaxNode]:
        """Depth-first pre-order traversal in source order."""
        stack: list[SyntaxNode] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


class NodeArena:
    """Allocates nodes with ids unique across one indexing run."""

    def __init__(self) -> None:
        self._ids = itertools.count()
        self._nodes: dict[int, SyntaxNode] = {}

    def __len__(self) -> int:
        return len(self._nodes)

    def get(self, node_id: int) -> SyntaxNode:
        return self._nodes[node_id]

    def new(
        self,
        kind: NodeKind,
        span: Span,
        *,
        parent: SyntaxNode | None = None,
        text: str | None = None,
        path: str | None = None,
    ) -> SyntaxNode:
        """Create a node and append it to its parent's children."""
        node = SyntaxNode(
            node_id=next(self._ids),
            kind=kind,
            span=span,
            text=text,
            path=path,
            parent=parent,
        )
        self._nodes[node.node_id] = node
        if parent is not None:
            parent.children.append(node)
        return node

    def set_name(self, node: SyntaxNode, name: SyntaxNode) -> None:
        if name.parent is not node:
            raise ValueError(f"name {name!r} is not a child of {node!r}")
        node.name = name


# ============================================================================
# COLLABORATOR INTERFACES
# ============================================================================


@dataclass(frozen=True, slots=True)
class SemanticSymbol:
    """Resolver answer for an identifier: the declarations it may denote.

    More than one declaration means merged or overloaded declarations.
    """

    symbol_id: int
    declarations: tuple[SyntaxNode, ...] = ()


@dataclass(frozen=True, slots=True)
class PackageRef:
    """Package identity of one file.

    ``header`` prefixes every global symbol of the file; ``descriptor`` is the
    file's own Package descriptor, first in every owner chain.
    """

    header: str
    descriptor: Descriptor


class SemanticResolver(Protocol):
    """External semantic resolver, answering synchronously."""

    def resolve_identifier(self, node: SyntaxNode) -> SemanticSymbol | None: ...

    def declarations_of(self, symbol: SemanticSymbol) -> Sequence[SyntaxNode]: ...

    def type_signature_of(self, node: SyntaxNode) -> str: ...

    def documentation_of(self, symbol: SemanticSymbol) -> Sequence[str]: ...

    def alias_declarations(self, specifier: SyntaxNode) -> Sequence[SyntaxNode]:
        """Declarations behind the type of an import specifier."""
        ...

    def shorthand_value_symbol(self, declaration: SyntaxNode) -> SemanticSymbol | None:
        """Value binding captured by a shorthand property assignment."""
        ...

    def implementations_of(self, declaration: SyntaxNode) -> Sequence[SyntaxNode]:
        """Declarations this declaration implements (interfaces, overridden members)."""
        ...


class PackageResolver(Protocol):
    """Maps a file path to its enclosing package identity."""

    def package_of(self, file_path: str) -> PackageRef | None: ...
