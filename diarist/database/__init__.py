#!/usr/bin/env python3
"""
Diarist Database Package
------------------------
Versioned SQLite persistence for diary entries.

- manager: DiaryDB, the entry store
- schema: SchemaManager, pragmas and transaction control
- migrations: Ordered schema steps
- models: ORM mappings
- decorators: Logging and error translation for store operations
"""

from .manager import DiaryDB
from .migrations import MIGRATIONS, Migration
from .models import Base, Entry, EntryMeta, SchemaMigration
from .schema import SchemaManager
from .decorators import handle_db_errors, log_database_operation
from diarist.core.exceptions import DatabaseError, StorageInitError

__all__ = [
    # Main manager
    "DiaryDB",
    # Schema
    "SchemaManager",
    "Migration",
    "MIGRATIONS",
    # Models
    "Base",
    "Entry",
    "EntryMeta",
    "SchemaMigration",
    # Exceptions
    "DatabaseError",
    "StorageInitError",
    # Decorators
    "handle_db_errors",
    "log_database_operation",
]
