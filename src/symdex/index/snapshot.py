"""Human-readable snapshots of a Document over its source text.

Each source line is followed by one comment line per occurrence starting on
it: a caret underline, the role and the symbol (scheme prefix stripped)::

    const a = 1
    //    ^ definition pkg 1.0.0 `src/a.ts`/a.

Options are read from a ``// format-options: showDocs, showRanges`` line in the
source. ``showDocs`` adds the documentation of each symbol's first mention and
``showRanges`` appends the SCIP range of every occurrence.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from symdex.index.models import Document, Occurrence, Relationship, ScipRange, SymbolInformation

COMMENT_SYNTAX = "//"
FORMAT_OPTIONS_PREFIX = "// format-options:"
DEFAULT_STRIP_PREFIX = "scip-typescript npm "
_DOC_LINE_WIDTH = 40


@dataclass
class FormatOptions:
    show_docs: bool = False
    show_ranges: bool = False


_OPTION_FIELDS = {"showDocs": "show_docs", "showRanges": "show_ranges"}


def parse_options(lines: Sequence[str]) -> FormatOptions:
    """Read the first ``// format-options:`` line.

    Raises:
        ValueError: On an unknown option name.
    """
    options = FormatOptions()
    for line in lines:
        if not line.startswith(FORMAT_OPTIONS_PREFIX):
            continue
        for option in line[len(FORMAT_OPTIONS_PREFIX) :].strip().split(","):
            name = option.strip()
            if name not in _OPTION_FIELDS:
                raise ValueError(f"Invalid format option: {name}")
            setattr(options, _OPTION_FIELDS[name], True)
        break
    return options


def caret_indent(range_: ScipRange) -> str:
    """Padding that puts a caret line under ``range_`` after the ``//`` marker.

    Raises:
        ValueError: For column 1, which sits under the marker itself.
    """
    if range_.start_col == 1:
        raise ValueError(
            f"{range_.start_line}:{range_.start_col}: occurrence starts inside the comment marker"
        )
    return " " * (range_.start_col - 2)


class _SnapshotWriter:
    def __init__(
        self,
        document: Document,
        options: FormatOptions,
        external_symbols: Iterable[SymbolInformation],
        strip_prefix: str,
    ) -> None:
        self.out: list[str] = []
        self.options = options
        self.strip_prefix = strip_prefix
        self.symbol_table = {info.symbol: info for info in document.symbols}
        self.external_table = {info.symbol: info for info in external_symbols}
        self.with_definitions = {occ.symbol for occ in document.occurrences if occ.is_definition}
        self.emitted_docs: set[str] = set()

    def symbol_name(self, symbol: str) -> str:
        if symbol.startswith(self.strip_prefix):
            return symbol[len(self.strip_prefix) :]
        return symbol

    def push_doc(self, range_: ScipRange, occurrence: Occurrence, is_start_of_line: bool) -> None:
        symbol = occurrence.symbol
        # Documentation goes on a symbol's definition, or its first mention
        # when the document never defines it
        if symbol in self.emitted_docs or (
            not occurrence.is_definition and symbol in self.with_definitions
        ):
            self.out.append("\n")
            return
        self.emitted_docs.add(symbol)

        prefix = "\n" + COMMENT_SYNTAX
        if not is_start_of_line:
            prefix += caret_indent(range_)

        external = self.external_table.get(symbol)
        info = external or self.symbol_table.get(symbol)
        if info is not None:
            self._push_documentation(prefix, info.documentation, external is not None)
            self._push_relationships(prefix, info.relationships)
        self.out.append("\n")

    def _push_documentation(self, prefix: str, docs: Sequence[str], external: bool) -> None:
        if not self.options.show_docs:
            return
        for documentation in docs:
            for idx, line in enumerate(documentation.split("\n")):
                self.out.append(prefix)
                if idx == 0:
                    if external:
                        self.out.append("external ")
                    self.out.append("documentation ")
                else:
                    self.out.append("            > ")
                self.out.append(line[:_DOC_LINE_WIDTH])
                if len(line) > _DOC_LINE_WIDTH:
                    self.out.append("...")

    def _push_relationships(self, prefix: str, relationships: Sequence[Relationship]) -> None:
        for relationship in sorted(relationships, key=lambda r: r.symbol):
            self.out.append(prefix)
            self.out.append("relationship")
            if relationship.is_implementation:
                self.out.append(" implementation")
            if relationship.is_reference:
                self.out.append(" reference")
            if relationship.is_type_definition:
                self.out.append(" type_definition")
            self.out.append(" " + self.symbol_name(relationship.symbol))


def format_snapshot(
    lines: Sequence[str],
    document: Document,
    external_symbols: Iterable[SymbolInformation] = (),
    *,
    strip_prefix: str = DEFAULT_STRIP_PREFIX,
) -> str:
    """Render a Document as source text annotated with its occurrences.

    Raises:
        ValueError: On multi-line occurrence ranges or negative caret lengths.
    """
    writer = _SnapshotWriter(document, parse_options(lines), external_symbols, strip_prefix)
    out = writer.out
    occurrences = sorted(document.occurrences, key=lambda occ: occ.range.sort_key())
    index = 0

    for line_number, line in enumerate(lines):
        # File-level (0, 0) occurrences sit above the first line
        if index == 0 and occurrences:
            first = occurrences[0]
            if first.range.start_col == 0 and first.range.end_col == 0:
                out.append(COMMENT_SYNTAX)
                out.append(" < ")
                out.append("definition" if first.is_definition else "reference")
                out.append(" ")
                out.append(writer.symbol_name(first.symbol))
                writer.push_doc(first.range, first, True)
                out.append("\n")
                index += 1

        out.append(line)
        out.append("\n")
        while index < len(occurrences) and occurrences[index].range.start_line == line_number:
            occurrence = occurrences[index]
            index += 1
            range_ = occurrence.range
            if not range_.is_single_line():
                raise ValueError("not yet implemented, multi-line ranges")

            out.append(COMMENT_SYNTAX)
            is_start_of_line = range_.start_col == 0
            if not is_start_of_line:
                out.append(caret_indent(range_))

            modifier = 1 if is_start_of_line else 0
            caret_length = range_.end_col - range_.start_col - modifier
            if caret_length < 0:
                raise ValueError(
                    f"{document.relative_path}:{range_.start_line}:{range_.start_col}: "
                    "negative length occurrence!"
                )
            out.append("^" * caret_length)
            out.append(" ")
            out.append("definition" if occurrence.is_definition else "reference")
            out.append(" ")
            out.append(writer.symbol_name(occurrence.symbol).replace("\n", "|", 1))
            if writer.options.show_ranges:
                out.append(f" {range_.to_scip()}")
            writer.push_doc(range_, occurrence, is_start_of_line)
    return "".join(out)
