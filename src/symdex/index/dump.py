"""Semantic dump: the interchange format between a semantic resolver and symdex.

An external resolver (a TypeScript compiler plugin, say) parses and type-checks
the project, then writes one JSON document holding every file's syntax tree
plus its resolution tables. symdex loads the trees into a ``NodeArena`` and
answers ``SemanticResolver`` queries from the tables. It never binds names
itself.

Format (node ids are unique across the whole dump)::

    {
      "files": [
        {
          "path": "src/a.ts",
          "package": {"name": "pkg", "version": "1.0.0"},
          "text": "const a = 1\\n",
          "nodes": [
            {"id": 0, "kind": "source_file", "range": [0, 0, 1, 0]},
            {"id": 1, "kind": "variable_statement", "parent": 0, "range": [0, 0, 0, 11]},
            ...
          ]
        }
      ],
      "symbols": [{"id": 0, "declarations": [3], "documentation": ["..."]}],
      "identifiers": {"4": 0},
      "signatures": {"4": "1"},
      "aliases": {},
      "shorthand_values": {},
      "implementations": {}
    }

Nodes are listed parent first, children in source order. ``name`` points to
the node's name child.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator

from symdex.config.models import IndexConfig
from symdex.core.errors import IndexingError
from symdex.index.packages import StaticPackageResolver, package_header
from symdex.index.tree import NodeArena, NodeKind, SemanticSymbol, Span, SyntaxNode

# ============================================================================
# WIRE MODELS
# ============================================================================


class DumpNode(BaseModel):
    """One syntax node."""

    id: int
    kind: NodeKind
    range: list[int] = Field(description="[start_line, start_col, end_line, end_col]")
    parent: int | None = None
    name: int | None = None
    text: str | None = None

    @field_validator("range")
    @classmethod
    def validate_range(cls, v: list[int]) -> list[int]:
        if len(v) != 4:
            raise ValueError(f"node range must have 4 components, got {len(v)}")
        return v


class DumpPackage(BaseModel):
    """Package a file belongs to."""

    name: str
    version: str = "HEAD"
    path: str | None = Field(
        default=None,
        description="File path inside the package. Defaults to the file's dump path.",
    )


class DumpFile(BaseModel):
    path: str
    package: DumpPackage | None = None
    text: str | None = None
    nodes: list[DumpNode]


class DumpSymbol(BaseModel):
    id: int
    declarations: list[int] = Field(default_factory=list)
    documentation: list[str] = Field(default_factory=list)


class SemanticDump(BaseModel):
    """Root of a semantic dump document."""

    version: int = 1
    files: list[DumpFile]
    symbols: list[DumpSymbol] = Field(default_factory=list)
    identifiers: dict[int, int] = Field(default_factory=dict)
    signatures: dict[int, str] = Field(default_factory=dict)
    aliases: dict[int, list[int]] = Field(default_factory=dict)
    shorthand_values: dict[int, int] = Field(default_factory=dict)
    implementations: dict[int, list[int]] = Field(default_factory=dict)


# ============================================================================
# RESOLVER
# ============================================================================


class DumpResolver:
    """SemanticResolver backed by the resolution tables of a dump."""

    def __init__(
        self,
        identifiers: dict[int, SemanticSymbol],
        documentation: dict[int, list[str]],
        signatures: dict[int, str],
        aliases: dict[int, tuple[SyntaxNode, ...]],
        shorthand_values: dict[int, SemanticSymbol],
        implementations: dict[int, tuple[SyntaxNode, ...]],
    ) -> None:
        self._identifiers = identifiers
        self._documentation = documentation
        self._signatures = signatures
        self._aliases = aliases
        self._shorthand_values = shorthand_values
        self._implementations = implementations

    def resolve_identifier(self, node: SyntaxNode) -> SemanticSymbol | None:
        return self._identifiers.get(node.node_id)

    def declarations_of(self, symbol: SemanticSymbol) -> Sequence[SyntaxNode]:
        return symbol.declarations

    def type_signature_of(self, node: SyntaxNode) -> str:
        return self._signatures.get(node.node_id, "")

    def documentation_of(self, symbol: SemanticSymbol) -> Sequence[str]:
        return self._documentation.get(symbol.symbol_id, [])

    def alias_declarations(self, specifier: SyntaxNode) -> Sequence[SyntaxNode]:
        return self._aliases.get(specifier.node_id, ())

    def shorthand_value_symbol(self, declaration: SyntaxNode) -> SemanticSymbol | None:
        return self._shorthand_values.get(declaration.node_id)

    def implementations_of(self, declaration: SyntaxNode) -> Sequence[SyntaxNode]:
        return self._implementations.get(declaration.node_id, ())


# ============================================================================
# LOADING
# ============================================================================


@dataclass
class LoadedFile:
    path: str
    root: SyntaxNode
    text: str | None = None

    @property
    def lines(self) -> list[str]:
        return (self.text or "").split("\n")


@dataclass
class LoadedDump:
    """Trees and resolvers materialized from one dump."""

    arena: NodeArena
    files: list[LoadedFile]
    resolver: DumpResolver
    packages: StaticPackageResolver
    by_path: dict[str, LoadedFile] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.by_path = {f.path: f for f in self.files}


def read_dump(path: Path) -> SemanticDump:
    """Parse and validate a dump file.

    Raises:
        IndexingError: If the file is unreadable or does not match the format.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise IndexingError.invalid_dump(str(path), str(e)) from e
    try:
        return SemanticDump.model_validate_json(raw)
    except ValidationError as e:
        err = e.errors()[0]
        where = ".".join(str(loc) for loc in err["loc"])
        raise IndexingError.invalid_dump(str(path), f"{where}: {err['msg']}") from e


def load_dump(path: Path, config: IndexConfig | None = None) -> LoadedDump:
    """Read a dump file and materialize it."""
    return build_dump(read_dump(path), config=config, source=str(path))


def build_dump(
    dump: SemanticDump,
    *,
    config: IndexConfig | None = None,
    arena: NodeArena | None = None,
    source: str = "<dump>",
) -> LoadedDump:
    """Materialize a validated dump into arena nodes, a resolver and packages.

    Raises:
        IndexingError: If the dump references unknown or misplaced nodes.
    """
    config = config or IndexConfig()
    arena = arena or NodeArena()
    nodes: dict[int, SyntaxNode] = {}
    files: list[LoadedFile] = []
    packages = StaticPackageResolver()

    def lookup(dump_id: int, what: str) -> SyntaxNode:
        node = nodes.get(dump_id)
        if node is None:
            raise IndexingError.invalid_dump(source, f"{what} references unknown node {dump_id}")
        return node

    for dump_file in dump.files:
        root = _build_file(dump_file, arena, nodes, source)
        files.append(LoadedFile(dump_file.path, root, dump_file.text))
        if dump_file.package is not None:
            pkg = dump_file.package
            packages.add(
                dump_file.path,
                package_header(config.scheme, config.manager, pkg.name, pkg.version),
                pkg.path,
            )

    symbols: dict[int, SemanticSymbol] = {}
    documentation: dict[int, list[str]] = {}
    for dump_symbol in dump.symbols:
        declarations = tuple(
            lookup(d, f"symbol {dump_symbol.id}") for d in dump_symbol.declarations
        )
        symbols[dump_symbol.id] = SemanticSymbol(dump_symbol.id, declarations)
        documentation[dump_symbol.id] = list(dump_symbol.documentation)

    def symbol_ref(symbol_id: int, what: str) -> SemanticSymbol:
        symbol = symbols.get(symbol_id)
        if symbol is None:
            raise IndexingError.invalid_dump(source, f"{what} references unknown symbol {symbol_id}")
        return symbol

    resolver = DumpResolver(
        identifiers={
            lookup(n, "identifiers").node_id: symbol_ref(s, f"identifier {n}")
            for n, s in dump.identifiers.items()
        },
        documentation=documentation,
        signatures={lookup(n, "signatures").node_id: sig for n, sig in dump.signatures.items()},
        aliases={
            lookup(n, "aliases").node_id: tuple(lookup(t, f"alias {n}") for t in targets)
            for n, targets in dump.aliases.items()
        },
        shorthand_values={
            lookup(n, "shorthand_values").node_id: symbol_ref(s, f"shorthand {n}")
            for n, s in dump.shorthand_values.items()
        },
        implementations={
            lookup(n, "implementations").node_id: tuple(
                lookup(t, f"implementation {n}") for t in targets
            )
            for n, targets in dump.implementations.items()
        },
    )
    return LoadedDump(arena=arena, files=files, resolver=resolver, packages=packages)


def _build_file(
    dump_file: DumpFile,
    arena: NodeArena,
    nodes: dict[int, SyntaxNode],
    source: str,
) -> SyntaxNode:
    if not dump_file.nodes or dump_file.nodes[0].kind is not NodeKind.SOURCE_FILE:
        raise IndexingError.invalid_dump(
            source, f"file {dump_file.path} must start with a source_file node"
        )

    root: SyntaxNode | None = None
    pending_names: list[tuple[SyntaxNode, int, int]] = []
    for dump_node in dump_file.nodes:
        if dump_node.id in nodes:
            raise IndexingError.invalid_dump(source, f"duplicate node id {dump_node.id}")

        parent: SyntaxNode | None = None
        if root is None:
            if dump_node.parent is not None:
                raise IndexingError.invalid_dump(
                    source, f"source_file node {dump_node.id} cannot have a parent"
                )
        else:
            parent = nodes.get(dump_node.parent) if dump_node.parent is not None else None
            if parent is None or parent.source_file() is not root:
                raise IndexingError.invalid_dump(
                    source,
                    f"node {dump_node.id} in {dump_file.path} must follow its parent "
                    f"in the same file (parent={dump_node.parent})",
                )

        node = arena.new(
            dump_node.kind,
            Span(*dump_node.range),
            parent=parent,
            text=dump_node.text,
            path=dump_file.path if root is None else None,
        )
        nodes[dump_node.id] = node
        if root is None:
            root = node
        if dump_node.name is not None:
            pending_names.append((node, dump_node.id, dump_node.name))

    for node, dump_id, name_id in pending_names:
        name = nodes.get(name_id)
        if name is None or name.parent is not node:
            raise IndexingError.invalid_dump(
                source, f"name {name_id} of node {dump_id} must be one of its children"
            )
        arena.set_name(node, name)

    assert root is not None
    return root
