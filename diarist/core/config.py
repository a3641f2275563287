#!/usr/bin/env python3
"""
config.py
-------------------
Runtime configuration for a diarist run.

DiaryConfig gathers everything a synchronization needs: where the source
files live, which filenames count as diary entries, where the database and
logs go. Defaults come from diarist.core.paths; the CLI builds a config
from its options and hands it to the pipeline.

Usage:
    from diarist.core.config import DiaryConfig

    config = DiaryConfig().with_directory("~/notes").with_db("~/notes/diary.db")
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional, Union

# --- Local imports ---
from diarist.core.exceptions import ConfigurationError
from diarist.core.paths import (
    DB_PATH,
    DEFAULT_DATE_PATTERN,
    DIARY_DIR,
    LOG_DIR,
    OUTPUT_PREFIX,
)


@dataclass(frozen=True)
class DiaryConfig:
    """
    Configuration for one diarist run.

    Attributes:
        directory: Directory scanned for dated markdown files
        db_path: SQLite database file
        date_pattern: Regex matched against filenames; group 1 is YYYY-MM-DD
        log_dir: Base directory for log files (None disables file logging)
        output_prefix: Filename prefix for compiled journal files
        backup_sources: Copy sources to ``.backup/`` before removing them
    """

    directory: Path = field(default_factory=lambda: DIARY_DIR)
    db_path: Path = field(default_factory=lambda: DB_PATH)
    date_pattern: str = DEFAULT_DATE_PATTERN
    log_dir: Optional[Path] = field(default_factory=lambda: LOG_DIR)
    output_prefix: str = OUTPUT_PREFIX
    backup_sources: bool = False

    def __post_init__(self) -> None:
        """Normalize paths and reject unusable date patterns."""
        object.__setattr__(self, "directory", Path(self.directory).expanduser())
        object.__setattr__(self, "db_path", Path(self.db_path).expanduser())
        if self.log_dir is not None:
            object.__setattr__(self, "log_dir", Path(self.log_dir).expanduser())

        try:
            compiled = re.compile(self.date_pattern)
        except re.error as e:
            raise ConfigurationError(
                f"Invalid date pattern {self.date_pattern!r}: {e}"
            ) from e
        if compiled.groups < 1:
            raise ConfigurationError(
                f"Date pattern {self.date_pattern!r} must capture the date in group 1"
            )
        if not self.output_prefix:
            raise ConfigurationError("output_prefix must not be empty")

    def with_directory(self, directory: Union[str, Path]) -> "DiaryConfig":
        """Return a copy scanning ``directory``."""
        return replace(self, directory=Path(directory))

    def with_db(self, db_path: Union[str, Path]) -> "DiaryConfig":
        """Return a copy storing entries in ``db_path``."""
        return replace(self, db_path=Path(db_path))

    def with_date_pattern(self, pattern: str) -> "DiaryConfig":
        """Return a copy matching filenames against ``pattern``."""
        return replace(self, date_pattern=pattern)
