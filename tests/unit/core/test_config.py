"""
Tests for DiaryConfig and the SyncStats CLI helper.
"""
from datetime import date, datetime, timedelta
from pathlib import Path

import pytest

from diarist.core.cli import SyncStats, setup_logger
from diarist.core.config import DiaryConfig
from diarist.core.exceptions import ConfigurationError, ErrorKind
from diarist.core.paths import DEFAULT_DATE_PATTERN, OUTPUT_PREFIX
from diarist.pipeline.sync import SyncResult


class TestDiaryConfig:
    """Tests for configuration defaults and validation."""

    def test_defaults(self):
        """Defaults come from diarist.core.paths."""
        config = DiaryConfig()
        assert config.date_pattern == DEFAULT_DATE_PATTERN
        assert config.output_prefix == OUTPUT_PREFIX
        assert config.backup_sources is False

    def test_paths_are_expanded(self):
        """String and ~ paths are normalized to expanded Paths."""
        config = DiaryConfig(directory="~/notes", db_path="~/notes/diary.db")
        assert config.directory == Path("~/notes").expanduser()
        assert isinstance(config.db_path, Path)

    def test_invalid_regex_rejected(self):
        """A pattern that does not compile raises ConfigurationError."""
        with pytest.raises(ConfigurationError) as exc_info:
            DiaryConfig(date_pattern="(unclosed")
        assert exc_info.value.kind is ErrorKind.CONFIGURATION

    def test_pattern_without_group_rejected(self):
        """The date must be captured in group 1."""
        with pytest.raises(ConfigurationError):
            DiaryConfig(date_pattern=r"\d{4}-\d{2}-\d{2}\.md")

    def test_empty_prefix_rejected(self):
        with pytest.raises(ConfigurationError):
            DiaryConfig(output_prefix="")

    def test_with_helpers_return_copies(self, tmp_dir):
        """with_* helpers leave the original untouched."""
        base = DiaryConfig()
        changed = base.with_directory(tmp_dir).with_db(tmp_dir / "x.db")
        assert changed.directory == tmp_dir
        assert changed.db_path == tmp_dir / "x.db"
        assert base.directory != tmp_dir

    def test_with_date_pattern_validates(self):
        with pytest.raises(ConfigurationError):
            DiaryConfig().with_date_pattern("[")


class TestSyncStats:
    """Tests for SyncStats."""

    def test_negative_counts_rejected(self):
        with pytest.raises(ValueError):
            SyncStats(entries_stored=-1)

    def test_from_result(self):
        """Counts are taken from a SyncResult."""
        result = SyncResult(
            start_date=date(2024, 1, 1),
            end_date=date(2024, 1, 3),
            exec_version=4,
            stored=2,
            skipped=1,
            failures=[("bad.md", ConfigurationError("x"))],
            collected=4,
        )
        stats = SyncStats.from_result(result)
        assert stats.files_collected == 4
        assert stats.entries_stored == 2
        assert stats.entries_skipped == 1
        assert stats.errors == 1
        assert stats.cleanup_errors == 0
        assert stats.to_dict()["exec_version"] == 4

    def test_summary_mentions_counts(self):
        stats = SyncStats(
            files_collected=3,
            entries_stored=2,
            cleanup_errors=1,
            start_time=datetime.now() - timedelta(seconds=1),
        )
        summary = stats.summary()
        assert "3 files collected" in summary
        assert "2 stored" in summary
        assert "1 not removed" in summary

    def test_setup_logger_uses_operations_dir(self, tmp_dir):
        logger = setup_logger(tmp_dir, "cli_test")
        assert logger.log_dir == tmp_dir / "operations"
        assert (tmp_dir / "operations").is_dir()
