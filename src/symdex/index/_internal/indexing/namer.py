"""Symbol naming: the canonical SymbolIdentity of a declaration.

Resolution is a recursive, memoized attribute over the syntax tree. For a
declaration node the rules are tried in order, first match wins:

1. Cached identity (run-wide table, then this file's local table).
2. Blocks are not indexable: EMPTY.
3. The file root asks the package resolver for the file's package.
4. Object-literal properties get a Meta descriptor ``<name><n>`` where ``n``
   counts same-named properties in the file.
5. Everything else hangs off its parent's identity:
   - below an EMPTY or LOCAL owner the node is LOCAL too;
   - transparent containers contribute nothing and reuse the owner's identity;
   - import specifiers are aliases and reuse their target's identity;
   - otherwise the kind's descriptor rule extends the owner chain, and kinds
     without a descriptor fall back to LOCAL.
"""

from __future__ import annotations

from collections.abc import Callable

from symdex.config.constants import CONSTRUCTOR_NAME
from symdex.core.logging import get_logger
from symdex.index._internal.indexing.counter import Counter
from symdex.index._internal.indexing.symbol_table import SymbolTable
from symdex.index.descriptor import (
    Descriptor,
    meta_descriptor,
    method_descriptor,
    package_descriptor,
    parameter_descriptor,
    term_descriptor,
    type_descriptor,
    type_parameter_descriptor,
)
from symdex.index.models import SymbolIdentity
from symdex.index.tree import NodeKind, PackageResolver, SemanticResolver, SyntaxNode

log = get_logger("index.namer")

DescriptorRule = Callable[[SyntaxNode], Descriptor | None]


def _from_name(factory: Callable[[str], Descriptor]) -> DescriptorRule:
    """Rule building a descriptor from the declared name; None when anonymous."""

    def rule(node: SyntaxNode) -> Descriptor | None:
        name = node.name_text
        if not name:
            return None
        return factory(name)

    return rule


def _constructor(node: SyntaxNode) -> Descriptor:  # noqa: ARG001
    return method_descriptor(CONSTRUCTOR_NAME)


# Every NodeKind has an entry; None means the kind never mints a descriptor.
DESCRIPTOR_RULES: dict[NodeKind, DescriptorRule | None] = {
    # Types
    NodeKind.INTERFACE_DECLARATION: _from_name(type_descriptor),
    NodeKind.ENUM_DECLARATION: _from_name(type_descriptor),
    NodeKind.CLASS_DECLARATION: _from_name(type_descriptor),
    NodeKind.CLASS_EXPRESSION: _from_name(type_descriptor),
    NodeKind.TYPE_PARAMETER: _from_name(type_parameter_descriptor),
    NodeKind.TYPE_ALIAS_DECLARATION: None,
    # Methods
    NodeKind.FUNCTION_DECLARATION: _from_name(method_descriptor),
    NodeKind.METHOD_SIGNATURE: _from_name(method_descriptor),
    NodeKind.METHOD_DECLARATION: _from_name(method_descriptor),
    NodeKind.CONSTRUCTOR: _constructor,
    NodeKind.FUNCTION_EXPRESSION: None,
    NodeKind.ARROW_FUNCTION: None,
    NodeKind.GET_ACCESSOR: None,
    NodeKind.SET_ACCESSOR: None,
    # Terms
    NodeKind.PROPERTY_DECLARATION: _from_name(term_descriptor),
    NodeKind.PROPERTY_SIGNATURE: _from_name(term_descriptor),
    NodeKind.ENUM_MEMBER: _from_name(term_descriptor),
    NodeKind.VARIABLE_DECLARATION: _from_name(term_descriptor),
    NodeKind.PARAMETER: _from_name(parameter_descriptor),
    # Namespaces
    NodeKind.MODULE_DECLARATION: _from_name(package_descriptor),
    # Handled before dispatch
    NodeKind.SOURCE_FILE: None,
    NodeKind.BLOCK: None,
    NodeKind.MODULE_BLOCK: None,
    NodeKind.IMPORT_DECLARATION: None,
    NodeKind.IMPORT_CLAUSE: None,
    NodeKind.NAMED_IMPORTS: None,
    NodeKind.IMPORT_SPECIFIER: None,
    NodeKind.VARIABLE_STATEMENT: None,
    NodeKind.VARIABLE_DECLARATION_LIST: None,
    NodeKind.PROPERTY_ASSIGNMENT: None,
    NodeKind.SHORTHAND_PROPERTY_ASSIGNMENT: None,
    # Never named globally
    NodeKind.NAMESPACE_IMPORT: None,
    NodeKind.EXPORT_DECLARATION: None,
    NodeKind.EXPORT_SPECIFIER: None,
    NodeKind.OBJECT_LITERAL_EXPRESSION: None,
    NodeKind.IDENTIFIER: None,
    NodeKind.OTHER: None,
}

# Containers that hold declarations but add no descriptor of their own.
TRANSPARENT_KINDS: frozenset[NodeKind] = frozenset(
    {
        NodeKind.MODULE_BLOCK,
        NodeKind.IMPORT_DECLARATION,
        NodeKind.IMPORT_CLAUSE,
        NodeKind.NAMED_IMPORTS,
        NodeKind.VARIABLE_STATEMENT,
        NodeKind.VARIABLE_DECLARATION_LIST,
    }
)

OBJECT_PROPERTY_KINDS: frozenset[NodeKind] = frozenset(
    {NodeKind.PROPERTY_ASSIGNMENT, NodeKind.SHORTHAND_PROPERTY_ASSIGNMENT}
)


def descriptor_for(node: SyntaxNode) -> Descriptor | None:
    rule = DESCRIPTOR_RULES[node.kind]
    if rule is None:
        return None
    return rule(node)


class SymbolNamer:
    """Resolves declaration nodes of one file to their SymbolIdentity.

    The run-wide ``table`` is injected and shared with every other file of the
    run. The local table and the local counter belong to this file only.

    Usage::

        namer = SymbolNamer(resolver, packages, table)
        identity = namer.resolve(declaration)
        identity.value  # "scip-typescript npm pkg 1.0.0 `src/a.ts`/Foo#bar()."
    """

    def __init__(
        self,
        resolver: SemanticResolver,
        packages: PackageResolver,
        table: SymbolTable,
    ) -> None:
        self.resolver = resolver
        self.packages = packages
        self.table = table
        self._local_counter = Counter()
        self._local_table: dict[int, SymbolIdentity] = {}
        self._in_progress: set[int] = set()

    def resolve(self, node: SyntaxNode) -> SymbolIdentity:
        """Return the canonical identity of a declaration node. Never fails."""
        cached = self.table.get(node.node_id)
        if cached is not None:
            return cached
        cached = self._local_table.get(node.node_id)
        if cached is not None:
            return cached

        if node.node_id in self._in_progress:
            # Alias chain loops back onto itself
            return self._new_local(node)
        self._in_progress.add(node.node_id)
        try:
            return self._resolve_uncached(node)
        finally:
            self._in_progress.discard(node.node_id)

    def _resolve_uncached(self, node: SyntaxNode) -> SymbolIdentity:
        if node.kind is NodeKind.BLOCK:
            return self._cached(node, SymbolIdentity.empty())

        if node.kind is NodeKind.SOURCE_FILE:
            package = self.packages.package_of(node.path or "")
            if package is None:
                return self._cached(node, SymbolIdentity.empty())
            return self._cached(node, SymbolIdentity.global_(package.header, (package.descriptor,)))

        if node.kind in OBJECT_PROPERTY_KINDS:
            return self._object_property(node)

        if node.parent is None:
            return self._new_local(node)
        owner = self.resolve(node.parent)
        if owner.is_empty() or owner.is_local():
            return self._new_local(node)

        if node.kind in TRANSPARENT_KINDS:
            return self._cached(node, owner)

        if node.kind is NodeKind.IMPORT_SPECIFIER:
            for declaration in self.resolver.alias_declarations(node):
                return self.resolve(declaration)

        desc = descriptor_for(node)
        if desc is not None:
            return self._cached(node, owner.child(desc))

        # Function expressions, accessors and friends have no cross-file name
        log.debug("local_symbol_fallback", kind=node.kind.value, node_id=node.node_id)
        return self._new_local(node)

    def _object_property(self, node: SyntaxNode) -> SymbolIdentity:
        source_file = node.source_file()
        root = self.resolve(source_file)
        name = node.name_text or ""
        if not root.is_global():
            return self._new_local(node)
        # Numbered within the declaring file, whichever file reaches it first
        return self.table.setdefault_counted(
            node.node_id,
            (source_file.node_id, name),
            lambda index: root.child(meta_descriptor(f"{name}{index}")),
        )

    def _new_local(self, node: SyntaxNode) -> SymbolIdentity:
        identity = SymbolIdentity.local(self._local_counter.next())
        self._local_table[node.node_id] = identity
        return identity

    def _cached(self, node: SyntaxNode, identity: SymbolIdentity) -> SymbolIdentity:
        return self.table.setdefault(node.node_id, identity)
