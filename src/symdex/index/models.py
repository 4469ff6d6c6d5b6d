"""Output data model: symbol identities, occurrences and documents.

Single source of truth for everything the occurrence emitter produces and the
external serializer consumes. Ranges and roles follow the SCIP encoding:

- Ranges are zero-based with an exclusive end column, written as
  ``[line, start_col, end_col]`` on one line and
  ``[start_line, start_col, end_line, end_col]`` otherwise.
- ``symbol_roles`` is a bitmask; bit 0 marks a definition.
"""

from __future__ import annotations

from collections import Counter as _Tally
from dataclasses import dataclass, field, replace
from enum import Enum, IntFlag
from typing import Any

from symdex.config.constants import LOCAL_SYMBOL_PREFIX, SYMBOL_ROLE_DEFINITION
from symdex.core.errors import IndexingError, InternalError
from symdex.index.descriptor import Descriptor, descriptors_string

# ============================================================================
# ENUMS
# ============================================================================


class IdentityKind(str, Enum):
    """Tag of a SymbolIdentity."""

    EMPTY = "empty"  # not indexable
    LOCAL = "local"  # valid within one file
    GLOBAL = "global"  # valid project-wide


class SymbolRole(IntFlag):
    """Occurrence role bits."""

    NONE = 0
    DEFINITION = SYMBOL_ROLE_DEFINITION


# ============================================================================
# SYMBOL IDENTITY
# ============================================================================


@dataclass(frozen=True, slots=True)
class SymbolIdentity:
    """Canonical identity of one declaration.

    A GLOBAL identity's ``descriptors`` is its owner chain: the file's package
    descriptor first, then one descriptor per enclosing named declaration.
    ``header`` is the package prefix handed out by the package resolver
    (``"<scheme> <manager> <name> <version> "``) and is shared by every
    identity rooted in the same package.
    """

    kind: IdentityKind
    local_index: int | None = None
    header: str = ""
    descriptors: tuple[Descriptor, ...] = ()

    @classmethod
    def empty(cls) -> SymbolIdentity:
        return _EMPTY

    @classmethod
    def local(cls, index: int) -> SymbolIdentity:
        return cls(IdentityKind.LOCAL, local_index=index)

    @classmethod
    def global_(cls, header: str, descriptors: tuple[Descriptor, ...]) -> SymbolIdentity:
        return cls(IdentityKind.GLOBAL, header=header, descriptors=descriptors)

    def child(self, descriptor: Descriptor) -> SymbolIdentity:
        """Extend a GLOBAL owner chain by one descriptor."""
        if self.kind is not IdentityKind.GLOBAL:
            raise InternalError.unexpected(
                "only global identities own descriptors", kind=self.kind.value
            )
        return replace(self, descriptors=(*self.descriptors, descriptor))

    def is_empty(self) -> bool:
        return self.kind is IdentityKind.EMPTY

    def is_local(self) -> bool:
        return self.kind is IdentityKind.LOCAL

    def is_global(self) -> bool:
        return self.kind is IdentityKind.GLOBAL

    @property
    def value(self) -> str:
        """The rendered symbol string ("" for EMPTY)."""
        if self.kind is IdentityKind.LOCAL:
            return f"{LOCAL_SYMBOL_PREFIX}{self.local_index}"
        if self.kind is IdentityKind.GLOBAL:
            return self.header + descriptors_string(self.descriptors)
        return ""


_EMPTY = SymbolIdentity(IdentityKind.EMPTY)


# ============================================================================
# RANGES
# ============================================================================


@dataclass(frozen=True, slots=True)
class ScipRange:
    """Validated zero-based source range with exclusive end column."""

    start_line: int
    start_col: int
    end_line: int
    end_col: int

    def __post_init__(self) -> None:
        raw = (self.start_line, self.start_col, self.end_line, self.end_col)
        if any(v < 0 for v in raw):
            raise IndexingError.malformed_range(raw, "negative position")
        if (self.end_line, self.end_col) < (self.start_line, self.start_col):
            raise IndexingError.malformed_range(raw, "end position before start position")

    @classmethod
    def from_scip(cls, values: list[int] | tuple[int, ...]) -> ScipRange:
        """Decode a 3- or 4-component SCIP range."""
        if len(values) == 3:
            line, start_col, end_col = values
            return cls(line, start_col, line, end_col)
        if len(values) == 4:
            return cls(*values)
        raise IndexingError.malformed_range(
            values, f"expected 3 or 4 components, got {len(values)}"
        )

    def is_single_line(self) -> bool:
        return self.start_line == self.end_line

    def to_scip(self) -> list[int]:
        if self.is_single_line():
            return [self.start_line, self.start_col, self.end_col]
        return [self.start_line, self.start_col, self.end_line, self.end_col]

    def sort_key(self) -> tuple[int, int, int, int]:
        return (self.start_line, self.start_col, self.end_line, self.end_col)


# ============================================================================
# DOCUMENT CONTENTS
# ============================================================================


@dataclass(frozen=True, slots=True)
class Occurrence:
    """One mention of a symbol in source text."""

    range: ScipRange
    symbol: str
    symbol_roles: SymbolRole = SymbolRole.NONE

    @property
    def is_definition(self) -> bool:
        return bool(self.symbol_roles & SymbolRole.DEFINITION)

    def to_dict(self) -> dict[str, Any]:
        return {
            "range": self.range.to_scip(),
            "symbol": self.symbol,
            "symbol_roles": int(self.symbol_roles),
        }


@dataclass(frozen=True, slots=True)
class Relationship:
    """Edge from a defined symbol to a related symbol."""

    symbol: str
    is_implementation: bool = False
    is_reference: bool = False
    is_type_definition: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "symbol": self.symbol,
            "is_implementation": self.is_implementation,
            "is_reference": self.is_reference,
            "is_type_definition": self.is_type_definition,
        }


@dataclass(slots=True)
class SymbolInformation:
    """Hover metadata attached to a symbol's definition."""

    symbol: str
    documentation: list[str] = field(default_factory=list)
    relationships: list[Relationship] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "symbol": self.symbol,
            "documentation": list(self.documentation),
            "relationships": [r.to_dict() for r in self.relationships],
        }


@dataclass
class Document:
    """Per-file container of occurrences and symbol information.

    Populated only by the occurrence emitter and frozen once the file's
    traversal finishes.
    """

    relative_path: str
    language: str = "typescript"
    occurrences: list[Occurrence] = field(default_factory=list)
    symbols: list[SymbolInformation] = field(default_factory=list)
    _finalized: bool = field(default=False, repr=False, compare=False)

    @property
    def finalized(self) -> bool:
        return self._finalized

    def add_occurrence(self, occurrence: Occurrence) -> None:
        self._check_open()
        self.occurrences.append(occurrence)

    def add_symbol(self, info: SymbolInformation) -> None:
        self._check_open()
        self.symbols.append(info)

    def finalize(self) -> None:
        """Freeze the document; later mutation is an internal error."""
        self._finalized = True

    def _check_open(self) -> None:
        if self._finalized:
            raise InternalError.unexpected(
                "document already finalized", path=self.relative_path
            )

    def duplicate_symbols(self) -> list[str]:
        """Symbols that received more than one SymbolInformation.

        Merged declarations (an interface merged with a namespace, say) emit one
        entry per declaration. They are kept as-is; this only reports them.
        """
        tally = _Tally(info.symbol for info in self.symbols)
        return sorted(symbol for symbol, count in tally.items() if count > 1)

    def definitions(self) -> list[Occurrence]:
        return [occ for occ in self.occurrences if occ.is_definition]

    def occurrences_at(self, range_: ScipRange) -> list[Occurrence]:
        return [occ for occ in self.occurrences if occ.range == range_]

    def to_dict(self) -> dict[str, Any]:
        return {
            "relative_path": self.relative_path,
            "language": self.language,
            "occurrences": [occ.to_dict() for occ in self.occurrences],
            "symbols": [info.to_dict() for info in self.symbols],
        }
