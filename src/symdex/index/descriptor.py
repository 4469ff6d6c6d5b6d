"""SCIP descriptor values and their canonical string rendering.

A descriptor is one segment of a global symbol string: a name tagged with a
suffix kind. Rendering is a wire-format contract read by every SCIP consumer::

    Package         name/
    Type            name#
    Term            name.
    Meta            name:
    Method          name(disambiguator).
    Parameter       (name)
    TypeParameter   [name]

Names made only of word characters, ``$``, ``+`` and ``-`` are written as-is.
Anything else is wrapped in backticks with inner backticks doubled.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from symdex.core.errors import IndexingError


class DescriptorKind(str, Enum):
    """Suffix kind of a descriptor."""

    PACKAGE = "package"
    TYPE = "type"
    TERM = "term"
    META = "meta"
    METHOD = "method"
    PARAMETER = "parameter"
    TYPE_PARAMETER = "type_parameter"


@dataclass(frozen=True, slots=True)
class Descriptor:
    """One kind-tagged segment of a global symbol's owner chain."""

    name: str
    kind: DescriptorKind
    disambiguator: str | None = None

    def __str__(self) -> str:
        return descriptor_string(self)


_SIMPLE_IDENTIFIER = re.compile(r"[\w$+-]+", re.ASCII)


def package_descriptor(name: str) -> Descriptor:
    return Descriptor(name, DescriptorKind.PACKAGE)


def type_descriptor(name: str) -> Descriptor:
    return Descriptor(name, DescriptorKind.TYPE)


def term_descriptor(name: str) -> Descriptor:
    return Descriptor(name, DescriptorKind.TERM)


def meta_descriptor(name: str) -> Descriptor:
    return Descriptor(name, DescriptorKind.META)


def method_descriptor(name: str, disambiguator: str | None = None) -> Descriptor:
    return Descriptor(name, DescriptorKind.METHOD, disambiguator)


def parameter_descriptor(name: str) -> Descriptor:
    return Descriptor(name, DescriptorKind.PARAMETER)


def type_parameter_descriptor(name: str) -> Descriptor:
    return Descriptor(name, DescriptorKind.TYPE_PARAMETER)


def is_simple_identifier(name: str) -> bool:
    """Return True if the name does not need backtick escaping."""
    return _SIMPLE_IDENTIFIER.fullmatch(name) is not None


def escape_name(name: str) -> str:
    if not name:
        return ""
    if is_simple_identifier(name):
        return name
    return "`" + name.replace("`", "``") + "`"


def descriptor_string(desc: Descriptor) -> str:
    """Render a descriptor to its canonical suffix form.

    Raises:
        IndexingError: If the descriptor kind has no rendering rule.
    """
    name = escape_name(desc.name)
    match desc.kind:
        case DescriptorKind.PACKAGE:
            return name + "/"
        case DescriptorKind.TYPE:
            return name + "#"
        case DescriptorKind.TERM:
            return name + "."
        case DescriptorKind.META:
            return name + ":"
        case DescriptorKind.METHOD:
            return name + "(" + (desc.disambiguator or "") + ")."
        case DescriptorKind.PARAMETER:
            return "(" + name + ")"
        case DescriptorKind.TYPE_PARAMETER:
            return "[" + name + "]"
    raise IndexingError.unknown_descriptor_kind(desc.kind)


def descriptors_string(descriptors: tuple[Descriptor, ...] | list[Descriptor]) -> str:
    return "".join(descriptor_string(d) for d in descriptors)


# =============================================================================
# Parsing
# =============================================================================


class _DescriptorReader:
    """Cursor over a rendered descriptor suffix string."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def expect(self, char: str) -> None:
        if self.peek() != char:
            raise ValueError(
                f"Expected {char!r} at offset {self.pos} in {self.text!r}, got {self.peek()!r}"
            )
        self.pos += 1

    def read_name(self) -> str:
        if self.peek() == "`":
            return self._read_escaped()
        start = self.pos
        while self.pos < len(self.text) and is_simple_identifier(self.text[self.pos]):
            self.pos += 1
        return self.text[start : self.pos]

    def _read_escaped(self) -> str:
        self.pos += 1
        out: list[str] = []
        while self.pos < len(self.text):
            char = self.text[self.pos]
            if char == "`":
                if self.text[self.pos + 1 : self.pos + 2] == "`":
                    out.append("`")
                    self.pos += 2
                    continue
                self.pos += 1
                return "".join(out)
            out.append(char)
            self.pos += 1
        raise ValueError(f"Unterminated escaped name in {self.text!r}")

    def read_until(self, char: str) -> str:
        end = self.text.find(char, self.pos)
        if end < 0:
            raise ValueError(f"Expected {char!r} after offset {self.pos} in {self.text!r}")
        value = self.text[self.pos : end]
        self.pos = end
        return value


def parse_descriptors(text: str) -> list[Descriptor]:
    """Parse a concatenation of rendered descriptors back into Descriptors.

    Inverse of ``descriptors_string`` for every descriptor with a non-empty name.
    An unnamed method renders as ``().`` and reads back as an unnamed
    parameter followed by an unnamed term.

    Raises:
        ValueError: If the text does not follow the descriptor grammar.
    """
    reader = _DescriptorReader(text)
    result: list[Descriptor] = []
    while reader.pos < len(text):
        if reader.peek() == "(":
            reader.pos += 1
            name = reader.read_name()
            reader.expect(")")
            result.append(parameter_descriptor(name))
            continue
        if reader.peek() == "[":
            reader.pos += 1
            name = reader.read_name()
            reader.expect("]")
            result.append(type_parameter_descriptor(name))
            continue

        name = reader.read_name()
        suffix = reader.peek()
        reader.pos += 1
        if suffix == "/":
            result.append(package_descriptor(name))
        elif suffix == "#":
            result.append(type_descriptor(name))
        elif suffix == ".":
            result.append(term_descriptor(name))
        elif suffix == ":":
            result.append(meta_descriptor(name))
        elif suffix == "(":
            disambiguator = reader.read_until(")")
            reader.expect(")")
            reader.expect(".")
            result.append(method_descriptor(name, disambiguator or None))
        else:
            raise ValueError(f"Unknown descriptor suffix {suffix!r} in {text!r}")
    return result
