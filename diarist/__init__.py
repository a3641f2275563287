"""
Diarist
=======

A markdown diary with versioned SQLite persistence.

Dated markdown files (``YYYY-MM-DD.md``) are collected from a directory,
deduplicated against what is already stored, and recorded under a
monotonically increasing execution version together with word-count
metadata. Stored entries can be read back by date range or by version.

Main Components:
    - dataclasses: DiaryEntry and EntryMetadata
    - database: Schema migrations and the DiaryDB entry store
    - pipeline: File repository, synchronization engine, journal compiler
    - core: Configuration, exceptions, logging, locking
    - utils: Filesystem and markdown helpers

Primary Interfaces:
    - diarist.cli: Command line entry point
    - diarist.database.manager.DiaryDB: Entry store
    - diarist.pipeline.sync.SyncEngine: Synchronization engine

Example Usage:
    >>> from diarist import DiaryDB, FileRepository, SyncEngine
    >>> db = DiaryDB("diary.db")
    >>> repo = FileRepository("~/notes")
    >>> result = SyncEngine(db, repo).synchronize()
    >>> result.span
    (datetime.date(2024, 1, 1), datetime.date(2024, 1, 3))
"""

__version__ = "0.2.0"

from diarist.database.manager import DiaryDB
from diarist.dataclasses.diary_entry import DiaryEntry, EntryMetadata
from diarist.pipeline.file_repository import FileRepository
from diarist.pipeline.sync import SyncEngine, SyncResult

__all__ = [
    "DiaryDB",
    "DiaryEntry",
    "EntryMetadata",
    "FileRepository",
    "SyncEngine",
    "SyncResult",
]
