"""Tests for Counter and SymbolTable."""

import threading

from symdex.config.constants import COUNTER_START
from symdex.index._internal.indexing import Counter, SymbolTable
from symdex.index.models import SymbolIdentity


class TestCounter:
    def test_starts_at_counter_start(self) -> None:
        assert Counter().next() == COUNTER_START == 0

    def test_values_strictly_increase(self) -> None:
        counter = Counter()
        assert [counter.next() for _ in range(4)] == [0, 1, 2, 3]

    def test_peek_does_not_consume(self) -> None:
        counter = Counter(start=5)
        assert counter.peek == 5
        assert counter.peek == 5
        assert counter.next() == 5
        assert counter.peek == 6

    def test_counters_are_independent(self) -> None:
        a, b = Counter(), Counter()
        a.next()
        a.next()
        assert b.next() == 0


class TestSymbolTable:
    def test_first_writer_wins(self) -> None:
        # Given
        table = SymbolTable()
        first = SymbolIdentity.local(0)

        # When
        stored = table.setdefault(7, first)
        again = table.setdefault(7, SymbolIdentity.local(1))

        # Then
        assert stored is first
        assert again is first
        assert table.get(7) is first

    def test_contains_and_len(self) -> None:
        table = SymbolTable()
        assert 1 not in table
        assert table.get(1) is None
        table.setdefault(1, SymbolIdentity.empty())
        assert 1 in table
        assert len(table) == 1

    def test_concurrent_setdefault_stores_one_identity(self) -> None:
        """Racing writers all observe the same stored identity."""
        table = SymbolTable()
        results: list[SymbolIdentity] = []
        lock = threading.Lock()

        def worker(index: int) -> None:
            stored = table.setdefault(42, SymbolIdentity.local(index))
            with lock:
                results.append(stored)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(16)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(results) == 16
        assert all(result is results[0] for result in results)
        assert len(table) == 1

    def test_counted_values_are_scoped_and_never_reused(self) -> None:
        table = SymbolTable()

        first = table.setdefault_counted(1, (0, "a"), SymbolIdentity.local)
        again = table.setdefault_counted(1, (0, "a"), SymbolIdentity.local)
        second = table.setdefault_counted(2, (0, "a"), SymbolIdentity.local)
        other_name = table.setdefault_counted(3, (0, "b"), SymbolIdentity.local)
        other_file = table.setdefault_counted(4, (9, "a"), SymbolIdentity.local)

        assert [first.local_index, second.local_index] == [0, 1]
        assert again is first
        assert other_name.local_index == 0
        assert other_file.local_index == 0

    def test_concurrent_counted_minting_hands_out_distinct_values(self) -> None:
        table = SymbolTable()
        results: list[SymbolIdentity] = []
        lock = threading.Lock()

        def worker(node_id: int) -> None:
            stored = table.setdefault_counted(node_id, (0, "a"), SymbolIdentity.local)
            with lock:
                results.append(stored)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(16)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert sorted(r.local_index for r in results) == list(range(16))
