"""
Tests for FileRepository.
"""
import os
from datetime import date

import pytest

from diarist.core.exceptions import ConfigurationError, ContentIntegrityError, SourceIOError
from diarist.dataclasses.diary_entry import DiaryEntry
from diarist.pipeline.file_repository import FileRepository


class TestConstruction:
    def test_missing_directory(self, tmp_dir):
        with pytest.raises(ConfigurationError, match="not found"):
            FileRepository(tmp_dir / "missing")

    def test_invalid_pattern(self, diary_dir):
        with pytest.raises(ConfigurationError):
            FileRepository(diary_dir, date_pattern="(")

    def test_pattern_needs_group(self, diary_dir):
        with pytest.raises(ConfigurationError):
            FileRepository(diary_dir, date_pattern=r"\d+")


class TestSources:
    def test_collect_sources(self, populated_diary_dir):
        repo = FileRepository(populated_diary_dir)
        names = [p.name for p in repo.collect_sources()]
        assert names == ["2024-01-01.md", "2024-01-02.md", "2024-01-03.md"]

    def test_collect_with_custom_pattern(self, diary_dir):
        (diary_dir / "journal-2024-05-01.md").write_text("x")
        (diary_dir / "2024-05-02.md").write_text("y")
        repo = FileRepository(diary_dir, date_pattern=r"^journal-(\d{4}-\d{2}-\d{2})\.md$")
        assert [p.name for p in repo.collect_sources()] == ["journal-2024-05-01.md"]

    def test_load_source(self, populated_diary_dir):
        repo = FileRepository(populated_diary_dir)
        entry_date, text = repo.load_source(populated_diary_dir / "2024-01-02.md")
        assert entry_date == date(2024, 1, 2)
        assert text == "Rain all day.\nRead a book."

    def test_load_source_bad_date(self, diary_dir):
        path = diary_dir / "2024-13-01.md"
        path.write_text("x")
        with pytest.raises(ContentIntegrityError):
            FileRepository(diary_dir).load_source(path)

    def test_load_source_missing_file(self, diary_dir):
        with pytest.raises(SourceIOError):
            FileRepository(diary_dir).load_source(diary_dir / "2024-01-01.md")

    def test_load_source_not_utf8(self, diary_dir):
        path = diary_dir / "2024-01-01.md"
        path.write_bytes(b"\xff\xfe\xfa")
        with pytest.raises(SourceIOError):
            FileRepository(diary_dir).load_source(path)

    def test_remove_source(self, populated_diary_dir):
        path = populated_diary_dir / "2024-01-01.md"
        FileRepository(populated_diary_dir).remove_source(path)
        assert not path.exists()

    def test_remove_missing_source(self, diary_dir):
        with pytest.raises(SourceIOError):
            FileRepository(diary_dir).remove_source(diary_dir / "2024-01-01.md")

    def test_backup_source(self, populated_diary_dir):
        repo = FileRepository(populated_diary_dir)
        backup = repo.backup_source(populated_diary_dir / "2024-01-01.md")
        assert backup.parent == populated_diary_dir / ".backup"
        assert backup.read_text() == "New year, new notebook."

    def test_backup_dir_not_collected(self, populated_diary_dir):
        """Backups live in a subdirectory and are never collected again."""
        repo = FileRepository(populated_diary_dir)
        repo.backup_source(populated_diary_dir / "2024-01-01.md")
        assert len(repo.collect_sources()) == 3


class TestWriteEntries:
    def test_journal_format(self, diary_dir):
        entries = [
            DiaryEntry.create(2, date(2024, 1, 2), "Second"),
            DiaryEntry.create(1, date(2024, 1, 1), "First"),
        ]
        path = FileRepository(diary_dir, output_prefix="log").write_entries(entries)

        today = date.today().isoformat()
        assert path == diary_dir / f"log_{today}_2.md"
        assert path.read_text() == (
            f"# diarist:date:{today} -- ## total-entries(2)\n\n"
            "# 2024-01-02\nSecond\n\n***\n"
            "# 2024-01-01\nFirst\n\n***\n"
        )

    def test_output_dir(self, diary_dir, tmp_dir):
        out = tmp_dir / "out"
        path = FileRepository(diary_dir).write_entries(
            [DiaryEntry.create(1, date(2024, 1, 1), "x")], output_dir=out
        )
        assert path.parent == out

    @pytest.mark.skipif(os.name == "nt" or os.geteuid() == 0, reason="needs POSIX permissions")
    def test_unwritable_directory(self, diary_dir):
        diary_dir.chmod(0o500)
        try:
            with pytest.raises(SourceIOError):
                FileRepository(diary_dir).write_entries(
                    [DiaryEntry.create(1, date(2024, 1, 1), "x")]
                )
        finally:
            diary_dir.chmod(0o700)
