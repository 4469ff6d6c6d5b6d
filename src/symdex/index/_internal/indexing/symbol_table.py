"""Run-wide memo store of declaration identities."""

from __future__ import annotations

import threading
from collections.abc import Callable

from symdex.index._internal.indexing.counter import Counter
from symdex.index.models import SymbolIdentity


class SymbolTable:
    """Maps node ids to their canonical SymbolIdentity for a whole run.

    Shared by every file indexed in the run, including files indexed from
    worker threads. The first identity stored for a node wins; later writes
    return the stored identity unchanged, so a node never holds two identities.

    The table also owns the object-literal property counters, keyed by the
    declaring file and the property name. Any file may be the first to name a
    property of another file, so the counters cannot live with one file's namer.
    """

    def __init__(self) -> None:
        self._entries: dict[int, SymbolIdentity] = {}
        self._property_counters: dict[tuple[int, str], Counter] = {}
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, node_id: int) -> bool:
        with self._lock:
            return node_id in self._entries

    def get(self, node_id: int) -> SymbolIdentity | None:
        with self._lock:
            return self._entries.get(node_id)

    def setdefault(self, node_id: int, identity: SymbolIdentity) -> SymbolIdentity:
        """Store identity unless one is already stored; return the stored one."""
        with self._lock:
            return self._entries.setdefault(node_id, identity)

    def setdefault_counted(
        self,
        node_id: int,
        scope: tuple[int, str],
        make: Callable[[int], SymbolIdentity],
    ) -> SymbolIdentity:
        """Mint an identity from the next value of ``scope``'s counter.

        The counter only advances when the node has no identity yet, so each
        value is handed to exactly one node.
        """
        with self._lock:
            stored = self._entries.get(node_id)
            if stored is not None:
                return stored
            counter = self._property_counters.get(scope)
            if counter is None:
                counter = self._property_counters[scope] = Counter()
            identity = make(counter.next())
            self._entries[node_id] = identity
            return identity
