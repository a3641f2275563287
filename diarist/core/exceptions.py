#!/usr/bin/env python3
"""
exceptions.py
--------------------
Custom exception classes for diarist.

Every failure the system can surface is a DiaryError carrying a fixed
``kind`` tag, so callers can either catch a specific class or dispatch on
``error.kind`` without an isinstance ladder.

Exception Hierarchy:
    Exception (built-in)
    └── DiaryError
        ├── SourceIOError - Reading, removing or backing up a source file
        ├── StorageInitError - Schema migration could not commit (fatal)
        ├── DatabaseError - Transactional read/write failure
        ├── ContentIntegrityError - Empty content, bad date, bad filename
        ├── NoSourceFoundError - Collection produced no source files
        └── ConfigurationError - Invalid directory or date pattern

Usage:
    from diarist.core.exceptions import DiaryError, ErrorKind

    try:
        engine.synchronize()
    except DiaryError as e:
        if e.kind is ErrorKind.NO_SOURCE:
            ...
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from enum import Enum


class ErrorKind(str, Enum):
    """Failure categories reported by diarist."""

    IO = "io"
    SCHEMA_INIT = "schema_init"
    STORAGE = "storage"
    CONTENT_INTEGRITY = "content_integrity"
    NO_SOURCE = "no_source"
    CONFIGURATION = "configuration"


class DiaryError(Exception):
    """
    Base exception for all diarist errors.

    Attributes:
        kind: ErrorKind tag identifying the failure category
    """

    kind: ErrorKind = ErrorKind.STORAGE


class SourceIOError(DiaryError):
    """
    Exception for source file read/write failures.

    Raised when a diary file cannot be read, removed or copied to the
    backup directory, or when the compiled journal cannot be written.

    Examples:
        >>> raise SourceIOError("Cannot read 2024-01-01.md: permission denied")
    """

    kind = ErrorKind.IO


class StorageInitError(DiaryError):
    """
    Exception for schema initialization failures.

    Raised when the migration transaction cannot commit (disk full,
    corruption, permission denied). This is fatal: nothing may run
    against an unmigrated or partially migrated store.
    """

    kind = ErrorKind.SCHEMA_INIT


class DatabaseError(DiaryError):
    """
    Exception for transactional read/write failures in the entry store.

    Wraps SQLAlchemy errors raised while querying or while committing a
    batch. A failed batch is always rolled back before this is raised.
    """

    kind = ErrorKind.STORAGE


class ContentIntegrityError(DiaryError):
    """
    Exception for invalid diary content.

    Raised for:
    - Empty or whitespace-only content
    - Filenames that do not match the date pattern
    - Dates that match the pattern but are not valid calendar dates

    Examples:
        >>> raise ContentIntegrityError("Empty content")
        >>> raise ContentIntegrityError("Filename does not match pattern: notes.md")
    """

    kind = ErrorKind.CONTENT_INTEGRITY


class NoSourceFoundError(DiaryError):
    """
    Exception raised when a synchronization run collects no source files.

    An empty run is treated as an error rather than a no-op because it
    usually means the wrong directory was given.
    """

    kind = ErrorKind.NO_SOURCE


class ConfigurationError(DiaryError):
    """Exception for an invalid diary directory or date pattern."""

    kind = ErrorKind.CONFIGURATION
