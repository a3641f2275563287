#!/usr/bin/env python3
"""
fs.py
-------------------
Filesystem utilities for diary source files.

Functions:
    find_diary_files: Markdown files in a directory whose names match a pattern
    extract_date: Parse the entry date out of a filename
    backup_file: Copy a file into a backup directory with a timestamp prefix
    journal_filename: Name for a compiled journal file

Usage:
    pattern = re.compile(DEFAULT_DATE_PATTERN)
    files = find_diary_files(Path("~/notes").expanduser(), pattern)
    entry_date = extract_date(files[0], pattern)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import re
import shutil
from datetime import date, datetime
from pathlib import Path
from typing import List, Pattern

# --- Local imports ---
from diarist.core.exceptions import ContentIntegrityError
from diarist.core.paths import DATE_FORMAT, MARKDOWN_SUFFIX


def find_diary_files(directory: Path, pattern: Pattern[str]) -> List[Path]:
    """
    Find diary files directly inside ``directory``.

    Subdirectories are not descended into. A file qualifies when it is a
    regular ``.md`` file and its name matches ``pattern``; whether the
    matched date is a real calendar date is checked later, when the file is
    loaded.

    Returns:
        Matching paths sorted by filename
    """
    if not directory.is_dir():
        return []
    return sorted(
        (
            path
            for path in directory.iterdir()
            if path.is_file()
            and path.suffix == MARKDOWN_SUFFIX
            and pattern.search(path.name)
        ),
        key=lambda p: p.name,
    )


def extract_date(path: Path, pattern: Pattern[str]) -> date:
    """
    Extract the entry date from a filename.

    Args:
        path: Path whose name holds the date
        pattern: Compiled regex; capture group 1 must be ``YYYY-MM-DD``

    Returns:
        The parsed date

    Raises:
        ContentIntegrityError: If the name does not match or the date is invalid
    """
    filename = path.name
    if not filename:
        raise ContentIntegrityError("Invalid filename")

    match = pattern.search(filename)
    if match is None or match.group(1) is None:
        raise ContentIntegrityError(f"Filename does not match pattern: {filename}")

    date_str = match.group(1)
    try:
        return datetime.strptime(date_str, DATE_FORMAT).date()
    except ValueError as e:
        raise ContentIntegrityError(
            f"Invalid date '{date_str}' in filename {filename}: {e}"
        ) from e


def backup_file(path: Path, backup_dir: Path) -> Path:
    """
    Copy ``path`` into ``backup_dir`` as ``<YYYYmmdd_HHMMSS>_<name>``.

    Returns:
        Path of the backup copy
    """
    backup_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    backup_path = backup_dir / f"{timestamp}_{path.name}"
    shutil.copy2(path, backup_path)
    return backup_path


def journal_filename(prefix: str, day: date, exec_version: int) -> str:
    """Filename for a compiled journal: ``<prefix>_<YYYY-MM-DD>_<version>.md``."""
    return f"{prefix}_{day.isoformat()}_{exec_version}{MARKDOWN_SUFFIX}"
