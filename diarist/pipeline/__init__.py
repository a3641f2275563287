"""
pipeline package
-------------------
Moving diary text between the filesystem and the store.

- file_repository: Source collection, removal, backup, journal output
- sync: SyncEngine, one execution version per run
- journal: Compile stored entries into a markdown journal
"""
from diarist.pipeline.file_repository import FileRepository, SourceRepository
from diarist.pipeline.sync import SyncEngine, SyncResult
from diarist.pipeline.journal import write_journal

__all__ = [
    "FileRepository",
    "SourceRepository",
    "SyncEngine",
    "SyncResult",
    "write_journal",
]
