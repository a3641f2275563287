#!/usr/bin/env python3
"""
file_repository.py
-------------------
Filesystem side of diary synchronization.

A FileRepository owns one diary directory. It finds the dated markdown
files in it, reads them as (date, text) pairs, removes or backs them up
once they have been stored, and writes compiled journals back into the
same directory.

    <directory>/
    ├── 2024-01-01.md                 # sources matching the date pattern
    ├── 2024-01-02.md
    ├── .backup/
    │   └── 20240103_101500_2024-01-01.md
    └── diary_2024-01-03_4.md         # compiled journal (prefix_today_version)

The synchronization engine only depends on the SourceRepository protocol,
so tests and other front ends can supply sources from anywhere.

Programmatic API:
    from diarist.pipeline.file_repository import FileRepository
    repo = FileRepository("~/notes")
    for path in repo.collect_sources():
        entry_date, text = repo.load_source(path)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import re
from datetime import date
from pathlib import Path
from typing import Hashable, List, Optional, Protocol, Sequence, Tuple, Union

# --- Local imports ---
from diarist.core.exceptions import ConfigurationError, SourceIOError
from diarist.core.logging_manager import DiaristLogger, safe_logger
from diarist.core.paths import BACKUP_DIRNAME, DEFAULT_DATE_PATTERN, OUTPUT_PREFIX
from diarist.dataclasses.diary_entry import DiaryEntry
from diarist.utils.fs import backup_file, extract_date, find_diary_files, journal_filename


class SourceRepository(Protocol):
    """
    What the synchronization engine needs from a source of diary files.

    Sources are opaque handles; the engine only passes them back to the
    repository that produced them.
    """

    def collect_sources(self) -> Sequence[Hashable]:
        ...

    def load_source(self, source: Hashable) -> Tuple[date, str]:
        ...

    def remove_source(self, source: Hashable) -> None:
        ...

    def backup_source(self, source: Hashable) -> Optional[Path]:
        ...


class FileRepository:
    """
    Diary sources stored as ``YYYY-MM-DD.md`` files in one directory.

    Attributes:
        directory: Directory holding the source files
        pattern: Compiled filename regex; group 1 is the date
        output_prefix: Prefix for compiled journal filenames
        logger: Optional logger
    """

    def __init__(
        self,
        directory: Union[str, Path],
        date_pattern: str = DEFAULT_DATE_PATTERN,
        output_prefix: str = OUTPUT_PREFIX,
        logger: Optional[DiaristLogger] = None,
    ) -> None:
        """
        Args:
            directory: Diary directory (must exist)
            date_pattern: Filename regex with the date in capture group 1
            output_prefix: Prefix for compiled journal files
            logger: Optional logger

        Raises:
            ConfigurationError: If the directory is missing or the pattern is invalid
        """
        self.directory = Path(directory).expanduser()
        if not self.directory.is_dir():
            raise ConfigurationError(f"Diary directory not found: {self.directory}")

        try:
            self.pattern = re.compile(date_pattern)
        except re.error as e:
            raise ConfigurationError(f"Invalid date pattern {date_pattern!r}: {e}") from e
        if self.pattern.groups < 1:
            raise ConfigurationError(
                f"Date pattern {date_pattern!r} must capture the date in group 1"
            )

        self.output_prefix = output_prefix
        self.logger = logger

    @property
    def backup_dir(self) -> Path:
        return self.directory / BACKUP_DIRNAME

    # --- Sources ---
    def collect_sources(self) -> List[Path]:
        """Dated markdown files directly inside the directory, sorted by name."""
        files = find_diary_files(self.directory, self.pattern)
        safe_logger(self.logger).log_debug(
            "Collected diary files",
            {"directory": str(self.directory), "count": len(files)},
        )
        return files

    def load_source(self, source: Path) -> Tuple[date, str]:
        """
        Read a source file.

        Returns:
            Tuple of (entry date, raw text)

        Raises:
            ContentIntegrityError: If the filename holds no valid date
            SourceIOError: If the file cannot be read as UTF-8 text
        """
        entry_date = extract_date(source, self.pattern)
        try:
            text = source.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise SourceIOError(f"Cannot read {source.name}: {e}") from e
        return entry_date, text

    def remove_source(self, source: Path) -> None:
        """
        Delete a source file that has been synchronized.

        Raises:
            SourceIOError: If the file cannot be removed
        """
        try:
            source.unlink()
        except OSError as e:
            raise SourceIOError(f"Cannot remove {source.name}: {e}") from e
        safe_logger(self.logger).log_debug("Removed source", {"file": source.name})

    def backup_source(self, source: Path) -> Path:
        """
        Copy a source file into ``<directory>/.backup/``.

        Returns:
            Path of the timestamped copy

        Raises:
            SourceIOError: If the copy fails
        """
        try:
            backup_path = backup_file(source, self.backup_dir)
        except OSError as e:
            raise SourceIOError(f"Cannot back up {source.name}: {e}") from e
        safe_logger(self.logger).log_debug(
            "Backed up source", {"file": source.name, "backup": backup_path.name}
        )
        return backup_path

    # --- Journal output ---
    def write_entries(
        self, entries: Sequence[DiaryEntry], output_dir: Optional[Path] = None
    ) -> Path:
        """
        Write entries into one compiled markdown journal.

        The file is named ``<prefix>_<today>_<max exec_version>.md`` and
        starts with a header line giving today's date and the entry count.
        Entries are written in the order given, each under a ``# <date>``
        heading and followed by a ``***`` separator.

        Args:
            entries: Entries to write
            output_dir: Target directory (defaults to the diary directory)

        Returns:
            Path of the written file

        Raises:
            SourceIOError: If the file cannot be written
        """
        today = date.today()
        max_version = max((e.exec_version for e in entries), default=0)
        target_dir = Path(output_dir) if output_dir else self.directory
        path = target_dir / journal_filename(self.output_prefix, today, max_version)

        parts = [
            f"# diarist:date:{today.isoformat()} -- ## total-entries({len(entries)})\n\n"
        ]
        for entry in entries:
            parts.append(f"# {entry.date.isoformat()}\n")
            parts.append(entry.content)
            parts.append("\n\n***\n")

        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            path.write_text("".join(parts), encoding="utf-8")
        except OSError as e:
            raise SourceIOError(f"Cannot write journal {path}: {e}") from e

        safe_logger(self.logger).log_operation(
            "journal_written",
            {"file": str(path), "entries": len(entries), "exec_version": max_version},
        )
        return path
