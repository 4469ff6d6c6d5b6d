"""Indexing runs: many files, one shared symbol table.

Public API:
- ProjectIndexer: indexes a sequence of source files and isolates failures
- IndexResult / FileFailure: run outcome
- index_dump: load a semantic dump and index every file in it

A run owns exactly one SymbolTable. Files may be indexed in any order, and
concurrently when ``indexer.max_workers > 1``; documents are always returned
in input order. A file whose indexing raises a SymdexError is dropped from
the result and recorded as a failure; the run continues.
"""

from __future__ import annotations

import contextvars
import time
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from symdex.config.models import SymdexConfig
from symdex.core.errors import SymdexError
from symdex.core.logging import get_logger, set_run_id
from symdex.core.progress import progress
from symdex.index._internal.indexing import FileIndexer, SymbolTable
from symdex.index.dump import LoadedDump, load_dump
from symdex.index.models import Document
from symdex.index.packages import NpmPackageResolver
from symdex.index.tree import PackageResolver, SemanticResolver, SyntaxNode

log = get_logger("index.ops")


@dataclass(frozen=True, slots=True)
class FileFailure:
    """A file whose Document was discarded."""

    path: str
    error: SymdexError


@dataclass
class IndexResult:
    """Outcome of one indexing run."""

    documents: list[Document] = field(default_factory=list)
    failures: list[FileFailure] = field(default_factory=list)
    duration_ms: int = 0
    run_id: str = ""

    @property
    def success(self) -> bool:
        return not self.failures

    @property
    def occurrence_count(self) -> int:
        return sum(len(doc.occurrences) for doc in self.documents)

    @property
    def symbol_count(self) -> int:
        return sum(len(doc.symbols) for doc in self.documents)


class ProjectIndexer:
    """Indexes source files against one run-wide SymbolTable.

    Usage::

        indexer = ProjectIndexer(resolver, packages, config=config)
        result = indexer.index_files([f.root for f in dump.files])
        for doc in result.documents:
            ...
    """

    def __init__(
        self,
        resolver: SemanticResolver,
        packages: PackageResolver,
        *,
        config: SymdexConfig | None = None,
        table: SymbolTable | None = None,
    ) -> None:
        self.resolver = resolver
        self.packages = packages
        self.config = config or SymdexConfig()
        self.table = table if table is not None else SymbolTable()

    def index_file(self, source_file: SyntaxNode) -> Document:
        """Index one file. Raises on failure; the caller decides what to drop."""
        indexer = FileIndexer(
            source_file,
            self.resolver,
            self.packages,
            self.table,
            config=self.config.index,
        )
        return indexer.index()

    def index_files(self, source_files: Sequence[SyntaxNode]) -> IndexResult:
        """Index every file, continuing past per-file failures."""
        run_id = set_run_id()
        start = time.monotonic()
        workers = min(self.config.indexer.max_workers, max(len(source_files), 1))
        log.info("index_run_start", files=len(source_files), workers=workers)

        if workers > 1:
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="symdex") as pool:
                # Carry the run id into worker threads
                futures = [
                    pool.submit(contextvars.copy_context().run, self._index_isolated, f)
                    for f in source_files
                ]
                outcomes = [future.result() for future in futures]
        else:
            outcomes = [self._index_isolated(f) for f in progress(source_files, desc="Indexing")]

        result = IndexResult(run_id=run_id)
        for outcome in outcomes:
            if isinstance(outcome, FileFailure):
                result.failures.append(outcome)
            else:
                result.documents.append(outcome)

        result.duration_ms = int((time.monotonic() - start) * 1000)
        log.info(
            "index_run_done",
            documents=len(result.documents),
            failures=len(result.failures),
            occurrences=result.occurrence_count,
            duration_ms=result.duration_ms,
        )
        return result

    def _index_isolated(self, source_file: SyntaxNode) -> Document | FileFailure:
        path = source_file.path or ""
        try:
            return self.index_file(source_file)
        except SymdexError as e:
            log.error("file_index_failed", path=path, error=e.error_name, message=e.message)
            return FileFailure(path=path, error=e)


def index_dump(
    dump_path: Path,
    *,
    config: SymdexConfig | None = None,
    project_root: Path | None = None,
) -> tuple[LoadedDump, IndexResult]:
    """Load a semantic dump and index all of its files.

    Args:
        dump_path: Semantic dump JSON file.
        config: Run configuration (defaults if omitted).
        project_root: When given, packages come from the nearest package.json
            under this root instead of the dump's package entries.

    Raises:
        IndexingError: If the dump itself cannot be loaded.
    """
    config = config or SymdexConfig()
    loaded = load_dump(dump_path, config.index)
    packages: PackageResolver = loaded.packages
    if project_root is not None:
        packages = NpmPackageResolver(
            project_root,
            scheme=config.index.scheme,
            manager=config.index.manager,
        )
    indexer = ProjectIndexer(loaded.resolver, packages, config=config)
    return loaded, indexer.index_files([f.root for f in loaded.files])
