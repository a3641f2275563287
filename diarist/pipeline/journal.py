#!/usr/bin/env python3
"""
journal.py
-------------------
Compile stored entries into a single markdown journal file.

Programmatic API:
    from diarist.pipeline.journal import write_journal
    path = write_journal(db, repo, date(2024, 1, 1), date(2024, 1, 31))
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from datetime import date
from pathlib import Path
from typing import Optional

# --- Local imports ---
from diarist.core.exceptions import ContentIntegrityError
from diarist.core.logging_manager import DiaristLogger, safe_logger
from diarist.database.manager import DiaryDB
from diarist.pipeline.file_repository import FileRepository


def write_journal(
    store: DiaryDB,
    repo: FileRepository,
    start_date: date,
    end_date: date,
    output_dir: Optional[Path] = None,
    logger: Optional[DiaristLogger] = None,
) -> Path:
    """
    Write every stored entry dated within [start_date, end_date] to a journal.

    Entries keep the store's range order (newest date first, and for one
    date the newest version first).

    Returns:
        Path of the written journal

    Raises:
        ContentIntegrityError: If the range is inverted or holds no entries
        SourceIOError: If the journal cannot be written
    """
    if start_date > end_date:
        raise ContentIntegrityError(
            f"Start date {start_date} is after end date {end_date}"
        )

    entries = store.entries_by_date_range(start_date, end_date)
    if not entries:
        raise ContentIntegrityError(
            f"No entries stored between {start_date} and {end_date}"
        )

    path = repo.write_entries(entries, output_dir=output_dir)
    safe_logger(logger).log_operation(
        "journal_compiled",
        {
            "start_date": start_date,
            "end_date": end_date,
            "entries": len(entries),
            "file": str(path),
        },
    )
    return path
