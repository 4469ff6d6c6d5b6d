"""Occurrence emission for one file.

Walks a file's tree depth-first in source order. The order is part of the
output contract: it fixes which local index and which property counter value
each entity receives.

For every identifier the semantic resolver knows about, one occurrence is
emitted per declaration the identifier may denote. Definitions also emit a
SymbolInformation with the hover signature and documentation.

Shorthand object-literal properties (``{ a }``) are a special case: the token
both defines a new property and references the captured value, so the
definition occurrence is followed by a pure reference to the value's
declarations at the same range.
"""

from __future__ import annotations

from symdex.config.models import IndexConfig
from symdex.core.logging import get_logger
from symdex.index._internal.indexing.namer import DESCRIPTOR_RULES, SymbolNamer
from symdex.index._internal.indexing.symbol_table import SymbolTable
from symdex.index.models import (
    Document,
    Occurrence,
    Relationship,
    ScipRange,
    SymbolIdentity,
    SymbolInformation,
    SymbolRole,
)
from symdex.index.tree import (
    NodeKind,
    PackageResolver,
    SemanticResolver,
    SemanticSymbol,
    SyntaxNode,
)

log = get_logger("index.emitter")

# Kinds whose ``name`` child is a definition site.
DEFINITION_KINDS: frozenset[NodeKind] = frozenset(
    {kind for kind, rule in DESCRIPTOR_RULES.items() if rule is not None}
    | {NodeKind.PROPERTY_ASSIGNMENT, NodeKind.SHORTHAND_PROPERTY_ASSIGNMENT}
)


def node_range(node: SyntaxNode) -> ScipRange:
    """Occurrence range of a node.

    Raises:
        IndexingError: If the node's span is inverted or negative.
    """
    span = node.span
    return ScipRange(span.start_line, span.start_col, span.end_line, span.end_col)


class FileIndexer:
    """Produces the Document of one source file.

    Usage::

        indexer = FileIndexer(source_file, resolver, packages, table)
        document = indexer.index()
    """

    def __init__(
        self,
        source_file: SyntaxNode,
        resolver: SemanticResolver,
        packages: PackageResolver,
        table: SymbolTable,
        config: IndexConfig | None = None,
    ) -> None:
        if source_file.kind is not NodeKind.SOURCE_FILE:
            raise ValueError(f"expected a source_file root, got {source_file!r}")
        self.source_file = source_file
        self.resolver = resolver
        self.config = config or IndexConfig()
        self.namer = SymbolNamer(resolver, packages, table)
        self.document = Document(
            relative_path=source_file.path or "",
            language=self.config.language,
        )

    def index(self) -> Document:
        """Emit every occurrence of the file and finalize its Document.

        Raises:
            IndexingError: On a malformed identifier range. The partial
                Document must be discarded.
        """
        for node in self.source_file.walk():
            if node.kind is not NodeKind.IDENTIFIER:
                continue
            symbol = self.resolver.resolve_identifier(node)
            if symbol is not None:
                self._visit_identifier(node, symbol)

        self.document.finalize()
        duplicates = self.document.duplicate_symbols()
        if duplicates:
            log.debug(
                "duplicate_symbol_information",
                path=self.document.relative_path,
                symbols=duplicates,
            )
        log.debug(
            "file_indexed",
            path=self.document.relative_path,
            occurrences=len(self.document.occurrences),
            symbols=len(self.document.symbols),
        )
        return self.document

    def _visit_identifier(self, identifier: SyntaxNode, symbol: SemanticSymbol) -> None:
        range_ = node_range(identifier)
        declarations = tuple(self.resolver.declarations_of(symbol))
        is_definition = self._is_definition(identifier, declarations)
        role = SymbolRole.DEFINITION if is_definition else SymbolRole.NONE

        for declaration in declarations:
            identity = self.namer.resolve(declaration)
            if identity.is_empty():
                continue
            self.document.add_occurrence(Occurrence(range_, identity.value, role))
            if is_definition:
                if self.config.emit_symbol_information:
                    self._add_symbol_information(identifier, symbol, declaration, identity)
                self._handle_shorthand_property_definition(declaration, range_)

    @staticmethod
    def _is_definition(identifier: SyntaxNode, declarations: tuple[SyntaxNode, ...]) -> bool:
        parent = identifier.parent
        if parent is None or parent.kind not in DEFINITION_KINDS:
            return False
        return parent.name is identifier and parent in declarations

    def _add_symbol_information(
        self,
        identifier: SyntaxNode,
        symbol: SemanticSymbol,
        declaration: SyntaxNode,
        identity: SymbolIdentity,
    ) -> None:
        signature = self.resolver.type_signature_of(identifier)
        documentation = [
            f"```{self.config.signature_language}\n{signature}\n```",
            "".join(self.resolver.documentation_of(symbol)),
        ]
        self.document.add_symbol(
            SymbolInformation(
                symbol=identity.value,
                documentation=documentation,
                relationships=self._relationships(declaration),
            )
        )

    def _relationships(self, declaration: SyntaxNode) -> list[Relationship]:
        relationships: list[Relationship] = []
        seen: set[str] = set()
        for target in self.resolver.implementations_of(declaration):
            identity = self.namer.resolve(target)
            if identity.is_empty() or identity.value in seen:
                continue
            seen.add(identity.value)
            relationships.append(Relationship(identity.value, is_implementation=True))
        return relationships

    def _handle_shorthand_property_definition(
        self, declaration: SyntaxNode, range_: ScipRange
    ) -> None:
        """Reference the value captured by ``{ a }`` at the property's range.

        ::

            const a = 42
            const b = { a }
            //          ^ defines property b.a and references the const a
            const c = b.a
            //          ^ references the property only
        """
        if declaration.kind is not NodeKind.SHORTHAND_PROPERTY_ASSIGNMENT:
            return
        value_symbol = self.resolver.shorthand_value_symbol(declaration)
        if value_symbol is None:
            return
        for value_declaration in self.resolver.declarations_of(value_symbol):
            identity = self.namer.resolve(value_declaration)
            if identity.is_empty():
                continue
            self.document.add_occurrence(Occurrence(range_, identity.value))
