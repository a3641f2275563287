"""
Tests for SyncEngine.

Sources come from an in-memory repository so each failure mode can be
injected directly; the store is a real DiaryDB on a temporary file.
"""
from datetime import date

import pytest
from unittest.mock import MagicMock, patch

from diarist.core.exceptions import (
    ContentIntegrityError,
    DatabaseError,
    NoSourceFoundError,
    SourceIOError,
)
from diarist.core.logging_manager import DiaristLogger
from diarist.database.manager import DiaryDB
from diarist.dataclasses.diary_entry import DiaryEntry
from diarist.pipeline.sync import SyncEngine, SyncResult


class FakeRepository:
    """SourceRepository backed by a dict of name -> (date, text) or exception."""

    def __init__(self, sources=None):
        self.sources = dict(sources or {})
        self.removed = []
        self.backed_up = []
        self.fail_remove = set()
        self.fail_backup = set()

    def collect_sources(self):
        return sorted(self.sources)

    def load_source(self, source):
        value = self.sources[source]
        if isinstance(value, Exception):
            raise value
        return value

    def remove_source(self, source):
        if source in self.fail_remove:
            raise SourceIOError(f"Cannot remove {source}")
        self.removed.append(source)

    def backup_source(self, source):
        if source in self.fail_backup:
            raise SourceIOError(f"Cannot back up {source}")
        self.backed_up.append(source)


D1, D2, D3 = date(2024, 1, 1), date(2024, 1, 2), date(2024, 1, 3)


class TestEmptyCollection:
    def test_no_sources_raises_and_keeps_version(self, test_db):
        """An empty run consumes no version."""
        test_db.store_batch([DiaryEntry.create(3, D1, "earlier")])

        with pytest.raises(NoSourceFoundError):
            SyncEngine(test_db, FakeRepository()).synchronize()

        assert test_db.latest_exec_version() == 3


class TestSingleRun:
    def test_stores_all_sources_under_next_version(self, test_db):
        repo = FakeRepository({"a": (D1, "Hello world"), "b": (D3, "Third day")})
        result = SyncEngine(test_db, repo).synchronize()

        assert isinstance(result, SyncResult)
        assert result.exec_version == 1
        assert result.stored == 2
        assert result.skipped == 0
        assert result.collected == 2
        assert result.span == (D1, D3)
        assert test_db.latest_exec_version() == 1
        assert sorted(repo.removed) == ["a", "b"]

    def test_span_uses_min_and_max_dates(self, test_db):
        """Span does not depend on collection order."""
        repo = FakeRepository({"a": (D3, "late"), "b": (D1, "early"), "c": (D2, "mid")})
        result = SyncEngine(test_db, repo).synchronize()
        assert result.span == (D1, D3)

    def test_content_is_normalized(self, test_db):
        repo = FakeRepository({"a": (D1, "---\nmood: ok\n---\n\nBody\r\n")})
        SyncEngine(test_db, repo).synchronize()
        assert test_db.entries_by_exec_version(1)[0].content == "Body"

    def test_impossible_frontmatter_date_does_not_block_run(self, test_db):
        raw = "---\ndate: 2024-13-45\n---\nbody"
        repo = FakeRepository({"good": (D1, "fine"), "bad": (D2, raw)})

        result = SyncEngine(test_db, repo).synchronize()

        assert result.stored == 2
        assert result.failures == []
        stored = test_db.entries_by_date_range(D2, D2)
        assert stored[0].content == raw
        assert sorted(repo.removed) == ["bad", "good"]


class TestVersioning:
    def test_versions_increase_across_runs(self, test_db):
        first = SyncEngine(test_db, FakeRepository({"a": (D1, "one")})).synchronize()
        second = SyncEngine(test_db, FakeRepository({"b": (D2, "two")})).synchronize()
        assert (first.exec_version, second.exec_version) == (1, 2)
        assert test_db.latest_exec_version() == 2

    def test_rerun_with_same_content_is_idempotent(self, test_db):
        """A second run over identical files stores nothing new."""
        sources = {"a": (D1, "same text"), "b": (D2, "other text")}
        SyncEngine(test_db, FakeRepository(sources)).synchronize()
        before = test_db.count_entries()

        result = SyncEngine(test_db, FakeRepository(sources)).synchronize()

        assert result.stored == 0
        assert result.skipped == 2
        assert test_db.count_entries() == before
        assert test_db.latest_exec_version() == 1


class TestDeduplication:
    def test_changed_content_gets_new_version(self, test_db):
        SyncEngine(test_db, FakeRepository({"a": (D1, "draft")})).synchronize()
        result = SyncEngine(
            test_db, FakeRepository({"a": (D1, "final"), "b": (D2, "new")})
        ).synchronize()

        assert result.stored == 2
        found = test_db.entries_by_date_range(D1, D1)
        assert [(e.exec_version, e.content) for e in found] == [(2, "final"), (1, "draft")]

    def test_mixed_duplicates_and_new(self, test_db):
        SyncEngine(test_db, FakeRepository({"a": (D1, "kept")})).synchronize()
        result = SyncEngine(
            test_db, FakeRepository({"a": (D1, "kept"), "b": (D2, "added")})
        ).synchronize()

        assert (result.stored, result.skipped) == (1, 1)
        assert [e.date for e in test_db.entries_by_exec_version(2)] == [D2]

    def test_duplicate_detected_after_normalization(self, test_db):
        SyncEngine(test_db, FakeRepository({"a": (D1, "line\nline")})).synchronize()
        result = SyncEngine(
            test_db, FakeRepository({"a": (D1, "line\r\nline\r\n")})
        ).synchronize()
        assert result.skipped == 1

    def test_same_date_twice_in_one_run_last_wins(self, test_db):
        repo = FakeRepository({"a": (D1, "first"), "b": (D1, "second")})
        result = SyncEngine(test_db, repo).synchronize()
        assert result.stored == 2
        assert [e.content for e in test_db.entries_by_exec_version(1)] == ["second"]


class TestFailures:
    def test_per_source_failures_are_collected(self, test_db):
        repo = FakeRepository(
            {
                "bad_io": SourceIOError("permission denied"),
                "bad_date": ContentIntegrityError("Invalid date"),
                "empty": (D2, "   \n"),
                "frontmatter_only": (D3, "---\ntags: [x]\n---\n"),
                "good": (D1, "fine"),
            }
        )
        result = SyncEngine(test_db, repo).synchronize()

        assert result.stored == 1
        assert sorted(source for source, _ in result.failures) == [
            "bad_date",
            "bad_io",
            "empty",
            "frontmatter_only",
        ]
        assert repo.removed == ["good"]

    def test_all_sources_failing_raises(self, test_db):
        """Nothing materialized: no store call, no cleanup."""
        repo = FakeRepository({"a": (D1, ""), "b": SourceIOError("gone")})
        with patch.object(DiaryDB, "store_batch") as store_batch:
            with pytest.raises(ContentIntegrityError):
                SyncEngine(test_db, repo).synchronize()
        store_batch.assert_not_called()
        assert repo.removed == []

    def test_storage_failure_keeps_sources(self, test_db):
        """When the batch fails nothing is removed from disk."""
        repo = FakeRepository({"a": (D1, "one"), "b": (D2, "two")})
        with patch.object(
            DiaryDB, "store_batch", side_effect=DatabaseError("Database operation failed")
        ):
            with pytest.raises(DatabaseError):
                SyncEngine(test_db, repo).synchronize()
        assert repo.removed == []
        assert test_db.count_entries() == 0

    def test_cleanup_failures_reported_not_raised(self, test_db):
        repo = FakeRepository({"a": (D1, "one"), "b": (D2, "two")})
        repo.fail_remove.add("a")
        result = SyncEngine(test_db, repo).synchronize()

        assert result.stored == 2
        assert [source for source, _ in result.cleanup_failures] == ["a"]
        assert repo.removed == ["b"]

    def test_failures_logged_as_warnings(self, test_db):
        logger = MagicMock(spec=DiaristLogger)
        repo = FakeRepository({"a": (D1, "one"), "b": SourceIOError("unreadable")})
        SyncEngine(test_db, repo, logger=logger).synchronize()

        warning_details = [c[0][1] for c in logger.log_warning.call_args_list]
        assert any(d["source"] == "b" and d["kind"] == "io" for d in warning_details)
        operations = [c[0][0] for c in logger.log_operation.call_args_list]
        assert operations == ["sync_start", "sync_complete"]


class TestBackup:
    def test_backup_before_removal(self, test_db):
        repo = FakeRepository({"a": (D1, "one")})
        SyncEngine(test_db, repo, backup_sources=True).synchronize()
        assert repo.backed_up == ["a"]
        assert repo.removed == ["a"]

    def test_failed_backup_keeps_source(self, test_db):
        repo = FakeRepository({"a": (D1, "one")})
        repo.fail_backup.add("a")
        result = SyncEngine(test_db, repo, backup_sources=True).synchronize()
        assert repo.removed == []
        assert len(result.cleanup_failures) == 1

    def test_no_backup_by_default(self, test_db):
        repo = FakeRepository({"a": (D1, "one")})
        SyncEngine(test_db, repo).synchronize()
        assert repo.backed_up == []
