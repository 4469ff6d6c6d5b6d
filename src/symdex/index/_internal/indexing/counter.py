"""Scoped monotonic integer sequence."""

from __future__ import annotations

from symdex.config.constants import COUNTER_START


class Counter:
    """Hands out strictly increasing integers, starting at ``COUNTER_START``.

    One instance per disambiguation scope: per file for local symbols, per
    property name within a file for object-literal members.
    """

    __slots__ = ("_next",)

    def __init__(self, start: int = COUNTER_START) -> None:
        self._next = start

    def next(self) -> int:
        value = self._next
        self._next += 1
        return value

    @property
    def peek(self) -> int:
        """Value the next call to ``next()`` will return."""
        return self._next
