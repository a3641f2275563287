#!/usr/bin/env python3
"""
sync.py
-------------------
Synchronize a diary directory into the entry store.

One call to SyncEngine.synchronize() is one execution version:

    1. Collect   - list the sources; none at all is an error
    2. Version   - next version is the store's latest plus one
    3. Materialize - load and normalize each source into a DiaryEntry;
                   unreadable or empty sources are reported, not fatal
    4. Overlap   - fetch stored entries within the run's date span
    5. Deduplicate - drop entries whose (date, content) is already stored
    6. Persist   - store the survivors in one atomic batch
    7. Cleanup   - back up (optionally) and remove every materialized source

Sources are removed even when their entries were skipped as duplicates:
their content is already in the store. Sources that failed to materialize
are left on disk.

Programmatic API:
    from diarist.pipeline.sync import SyncEngine
    result = SyncEngine(db, FileRepository("~/notes")).synchronize()
    start, end = result.span
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Hashable, List, Optional, Tuple

# --- Local imports ---
from diarist.core.exceptions import (
    ContentIntegrityError,
    DiaryError,
    NoSourceFoundError,
    SourceIOError,
)
from diarist.core.logging_manager import DiaristLogger, safe_logger
from diarist.database.manager import DiaryDB
from diarist.dataclasses.diary_entry import DiaryEntry, validate_content
from diarist.pipeline.file_repository import SourceRepository


@dataclass
class SyncResult:
    """
    Outcome of one synchronization run.

    Attributes:
        start_date: Earliest date among materialized entries
        end_date: Latest date among materialized entries
        exec_version: Version assigned to this run
        stored: Entries written to the store
        skipped: Entries already stored with identical content
        failures: (source, error) pairs for sources that could not be loaded
        cleanup_failures: (source, error) pairs for sources left on disk
        collected: Number of sources found
    """

    start_date: date
    end_date: date
    exec_version: int
    stored: int = 0
    skipped: int = 0
    failures: List[Tuple[Hashable, DiaryError]] = field(default_factory=list)
    cleanup_failures: List[Tuple[Hashable, DiaryError]] = field(default_factory=list)
    collected: int = 0

    @property
    def span(self) -> Tuple[date, date]:
        """(earliest, latest) entry date covered by the run."""
        return (self.start_date, self.end_date)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "exec_version": self.exec_version,
            "collected": self.collected,
            "stored": self.stored,
            "skipped": self.skipped,
            "failures": [{"source": str(s), "error": str(e)} for s, e in self.failures],
            "cleanup_failures": [
                {"source": str(s), "error": str(e)} for s, e in self.cleanup_failures
            ],
        }


class SyncEngine:
    """
    Moves diary sources into the store under a new execution version.

    Attributes:
        store: Entry store receiving the entries
        source_repo: Where the diary sources come from
        backup_sources: Back up each source before removing it
        logger: Optional logger
    """

    def __init__(
        self,
        store: DiaryDB,
        source_repo: SourceRepository,
        logger: Optional[DiaristLogger] = None,
        backup_sources: bool = False,
    ) -> None:
        self.store = store
        self.source_repo = source_repo
        self.logger = logger
        self.backup_sources = backup_sources

    def synchronize(self) -> SyncResult:
        """
        Run one synchronization.

        Returns:
            SyncResult describing the run

        Raises:
            NoSourceFoundError: If no sources were collected (no version used)
            ContentIntegrityError: If no source could be materialized
            DatabaseError: If reading or writing the store fails
        """
        log = safe_logger(self.logger)

        sources = list(self.source_repo.collect_sources())
        if not sources:
            raise NoSourceFoundError("No diary files found")

        exec_version = self.store.latest_exec_version() + 1
        log.log_operation(
            "sync_start", {"sources": len(sources), "exec_version": exec_version}
        )

        materialized, failures = self._materialize(sources, exec_version)
        if not materialized:
            raise ContentIntegrityError(
                f"None of the {len(sources)} diary files could be loaded"
            )

        entries = [entry for _, entry in materialized]
        start_date = min(e.date for e in entries)
        end_date = max(e.date for e in entries)

        existing = {
            e.dedup_key for e in self.store.entries_by_date_range(start_date, end_date)
        }
        survivors = [e for e in entries if e.dedup_key not in existing]
        skipped = len(entries) - len(survivors)

        stored = self.store.store_batch(survivors) if survivors else 0

        cleanup_failures = self._cleanup([source for source, _ in materialized])

        result = SyncResult(
            start_date=start_date,
            end_date=end_date,
            exec_version=exec_version,
            stored=stored,
            skipped=skipped,
            failures=failures,
            cleanup_failures=cleanup_failures,
            collected=len(sources),
        )
        log.log_operation("sync_complete", result.to_dict())
        return result

    def _materialize(
        self, sources: List[Hashable], exec_version: int
    ) -> Tuple[List[Tuple[Hashable, DiaryEntry]], List[Tuple[Hashable, DiaryError]]]:
        """Load every source, separating entries from per-source failures."""
        log = safe_logger(self.logger)
        materialized: List[Tuple[Hashable, DiaryEntry]] = []
        failures: List[Tuple[Hashable, DiaryError]] = []

        for source in sources:
            try:
                entry_date, raw = self.source_repo.load_source(source)
                validate_content(raw)
                entry = DiaryEntry.create(exec_version, entry_date, raw)
                # Frontmatter-only files are empty once normalized
                validate_content(entry.content)
            except (ContentIntegrityError, SourceIOError) as e:
                failures.append((source, e))
                log.log_warning(
                    "Skipping diary file",
                    {"source": str(source), "kind": e.kind.value, "error": str(e)},
                )
                continue
            materialized.append((source, entry))

        return materialized, failures

    def _cleanup(self, sources: List[Hashable]) -> List[Tuple[Hashable, DiaryError]]:
        """Remove synchronized sources; a failed backup keeps the source."""
        log = safe_logger(self.logger)
        cleanup_failures: List[Tuple[Hashable, DiaryError]] = []

        for source in sources:
            try:
                if self.backup_sources:
                    self.source_repo.backup_source(source)
                self.source_repo.remove_source(source)
            except SourceIOError as e:
                cleanup_failures.append((source, e))
                log.log_warning(
                    "Failed to remove diary file",
                    {"source": str(source), "error": str(e)},
                )

        return cleanup_failures
