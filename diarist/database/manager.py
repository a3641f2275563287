#!/usr/bin/env python3
"""
manager.py
--------------------
Entry store for diarist.

Provides the DiaryDB class, the single source of truth for persisted
diary entries. Handles:
    - Engine setup and schema migration on open
    - Atomic batch upserts of entries and their metadata
    - Range, version and latest-version queries
    - Metadata (word count) reporting

Key Features:
    - One explicit engine per store, created from a path or injected
    - Reader-writer lock: queries share, batch writes are exclusive
    - Batch writes run inside ``BEGIN IMMEDIATE`` and roll back as a whole
    - SQLAlchemy errors surface as DatabaseError

Notes
==============
- Entries are never deleted here; metadata rows follow their entry through
  ``ON DELETE CASCADE`` if a maintenance tool removes one
- Rows read back are hydrated as DiaryEntry without re-normalizing content
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from contextlib import contextmanager
from datetime import date, datetime
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Union

# --- Third party ---
from sqlalchemy import Engine, and_, create_engine, func, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# --- Local imports ---
from diarist.core.exceptions import StorageInitError
from diarist.core.logging_manager import DiaristLogger, safe_logger
from diarist.core.rwlock import ReadWriteLock
from diarist.dataclasses.diary_entry import DiaryEntry, EntryMetadata, validate_content
from .decorators import handle_db_errors, log_database_operation
from .models import Entry, EntryMeta
from .schema import BEGIN_MODE_OPTION, SchemaManager

MEMORY_DB = ":memory:"


class DiaryDB:
    """
    Persistent store of versioned diary entries.

    Attributes:
        db_path (Path | None): SQLite file, None for an injected engine
        engine (Engine): SQLAlchemy engine owned by this store
        schema (SchemaManager): Migration manager for the engine
        logger (DiaristLogger | None): Optional logger

    Usage:
        with DiaryDB("diary.db") as db:
            db.store_batch(entries)
            latest = db.latest_exec_version()
    """

    # ---- Initialization ----
    def __init__(
        self,
        db_path: Optional[Union[str, Path]] = None,
        log_dir: Optional[Union[str, Path]] = None,
        engine: Optional[Engine] = None,
        logger: Optional[DiaristLogger] = None,
    ) -> None:
        """
        Open the store and bring its schema up to date.

        Args:
            db_path: Path to the SQLite file, or ``":memory:"``
            log_dir: Directory for database logs (optional)
            engine: Pre-built engine to use instead of ``db_path``; it must
                not have opened connections yet
            logger: Logger to share instead of creating one from ``log_dir``

        Raises:
            StorageInitError: If the schema cannot be migrated
        """
        if db_path is None and engine is None:
            raise StorageInitError("DiaryDB needs a db_path or an engine")

        if db_path is None or str(db_path) == MEMORY_DB:
            self.db_path: Optional[Path] = None
        else:
            self.db_path = Path(db_path).expanduser().resolve()

        if logger is not None:
            self.logger: Optional[DiaristLogger] = logger
        elif log_dir:
            self.logger = DiaristLogger(
                Path(log_dir).expanduser().resolve() / "system",
                component_name="database",
            )
        else:
            self.logger = None

        self._lock = ReadWriteLock()
        self._setup_engine(engine, in_memory=db_path is not None and self.db_path is None)

    def _setup_engine(self, engine: Optional[Engine], in_memory: bool) -> None:
        """Create (or adopt) the engine, install pragmas and migrate."""
        log = safe_logger(self.logger)
        try:
            log.log_operation("database_init_start", {"db_path": str(self.db_path)})

            if engine is not None:
                self.engine: Engine = engine
            elif in_memory:
                self.engine = create_engine(
                    "sqlite://",
                    connect_args={"check_same_thread": False},
                    poolclass=StaticPool,
                )
            else:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
                self.engine = create_engine(f"sqlite:///{self.db_path}", echo=False)

            # One pysqlite connection serves every thread; its BEGINs cannot overlap
            self._single_connection = isinstance(self.engine.pool, StaticPool)

            SchemaManager.configure_engine(self.engine)
            self.schema = SchemaManager(self.engine, logger=self.logger)
            self.schema.migrate()

            self.SessionLocal: sessionmaker = sessionmaker(
                autoflush=False,
                expire_on_commit=False,
            )
            log.log_operation("database_init_complete", {"success": True})

        except StorageInitError:
            raise
        except Exception as e:
            log.log_error(e, {"operation": "database_init"})
            raise StorageInitError(f"Database initialization failed: {e}") from e

    # ---- Session Management ----
    @contextmanager
    def session_scope(self, write: bool = False) -> Iterator[Session]:
        """
        Transactional scope guarded by the reader-writer lock.

        Reads share the lock; writes take it exclusively and open the
        SQLite transaction with ``BEGIN IMMEDIATE``. Stores backed by a
        single shared connection (``:memory:``) serialize reads as well.
        The transaction commits when the block exits normally and rolls back
        on any exception.

        Args:
            write: Acquire the exclusive side of the lock
        """
        exclusive = write or self._single_connection
        guard = self._lock.write_locked() if exclusive else self._lock.read_locked()
        session_id = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        log = safe_logger(self.logger)

        with guard, self.engine.connect() as connection:
            if write:
                connection.execution_options(**{BEGIN_MODE_OPTION: "IMMEDIATE"})
            session: Session = self.SessionLocal(bind=connection)
            log.log_debug("session_start", {"session_id": session_id, "write": write})
            try:
                yield session
                session.commit()
                log.log_debug("session_commit", {"session_id": session_id})
            except Exception as e:
                session.rollback()
                log.log_error(e, {"operation": "session_rollback", "session_id": session_id})
                raise
            finally:
                session.close()

    # ---- Writes ----
    @handle_db_errors
    @log_database_operation("store_batch")
    def store_batch(self, entries: Sequence[DiaryEntry]) -> int:
        """
        Upsert a batch of entries and their metadata atomically.

        Every entry is validated before the transaction opens. Either all
        rows become visible or none do.

        Args:
            entries: Entries to store; an existing (exec_version, date)
                row is replaced

        Returns:
            Number of entries written

        Raises:
            ContentIntegrityError: If an entry has empty content
            DatabaseError: If the transaction fails (after rollback)
        """
        batch = list(entries)
        for entry in batch:
            validate_content(entry.content)
        if not batch:
            return 0

        with self.session_scope(write=True) as session:
            for entry in batch:
                self._store_entry(session, entry)

        safe_logger(self.logger).log_operation(
            "entries_stored",
            {
                "count": len(batch),
                "exec_versions": sorted({e.exec_version for e in batch}),
            },
        )
        return len(batch)

    def _store_entry(self, session: Session, entry: DiaryEntry) -> None:
        """Upsert one entry row and its metadata row inside ``session``."""
        entry_stmt = sqlite_insert(Entry.__table__).values(
            exec_version=entry.exec_version,
            date=entry.date,
            content=entry.content,
            created_at=entry.created_at,
            updated_at=entry.updated_at,
        )
        entry_stmt = entry_stmt.on_conflict_do_update(
            index_elements=["exec_version", "date"],
            set_={
                "content": entry_stmt.excluded.content,
                "created_at": entry_stmt.excluded.created_at,
                "updated_at": entry_stmt.excluded.updated_at,
            },
        )
        session.execute(entry_stmt)

        meta = entry.metadata()
        meta_stmt = sqlite_insert(EntryMeta.__table__).values(
            exec_version=meta.exec_version,
            date=meta.date,
            word_count=meta.word_count,
        )
        meta_stmt = meta_stmt.on_conflict_do_update(
            index_elements=["exec_version", "date"],
            set_={"word_count": meta_stmt.excluded.word_count},
        )
        session.execute(meta_stmt)

    # ---- Reads ----
    @staticmethod
    def _to_entry(record: Entry) -> DiaryEntry:
        return DiaryEntry(
            exec_version=record.exec_version,
            date=record.date,
            content=record.content,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )

    @handle_db_errors
    @log_database_operation("entries_by_date_range")
    def entries_by_date_range(self, start_date: date, end_date: date) -> List[DiaryEntry]:
        """
        Entries dated within [start_date, end_date].

        Returns:
            Entries ordered by date descending, then exec_version descending
        """
        stmt = (
            select(Entry)
            .where(Entry.date.between(start_date, end_date))
            .order_by(Entry.date.desc(), Entry.exec_version.desc())
        )
        with self.session_scope() as session:
            return [self._to_entry(r) for r in session.scalars(stmt)]

    @handle_db_errors
    @log_database_operation("entries_by_exec_version")
    def entries_by_exec_version(self, exec_version: int) -> List[DiaryEntry]:
        """Entries recorded by one run, ordered by date descending."""
        stmt = (
            select(Entry)
            .where(Entry.exec_version == exec_version)
            .order_by(Entry.date.desc())
        )
        with self.session_scope() as session:
            return [self._to_entry(r) for r in session.scalars(stmt)]

    @handle_db_errors
    @log_database_operation("latest_exec_version")
    def latest_exec_version(self) -> int:
        """Highest stored exec_version, 0 when the store is empty."""
        with self.session_scope() as session:
            return session.execute(
                select(func.coalesce(func.max(Entry.exec_version), 0))
            ).scalar_one()

    @handle_db_errors
    @log_database_operation("metadata")
    def metadata(self) -> List[EntryMetadata]:
        """
        Word-count metadata for every stored entry.

        Returns:
            Rows ordered by date ascending, then exec_version descending
        """
        stmt = (
            select(Entry.date, EntryMeta.word_count, Entry.exec_version)
            .join(
                EntryMeta,
                and_(
                    Entry.exec_version == EntryMeta.exec_version,
                    Entry.date == EntryMeta.date,
                ),
            )
            .order_by(Entry.date.asc(), Entry.exec_version.desc())
        )
        with self.session_scope() as session:
            return [
                EntryMetadata(date=row.date, word_count=row.word_count, exec_version=row.exec_version)
                for row in session.execute(stmt)
            ]

    @handle_db_errors
    @log_database_operation("count_entries")
    def count_entries(self) -> int:
        """Total number of stored entry rows across all versions."""
        with self.session_scope() as session:
            return session.execute(select(func.count()).select_from(Entry)).scalar_one()

    # ----- Lifecycle -----
    def close(self) -> None:
        """Dispose of the engine's pooled connections."""
        self.engine.dispose()

    def __enter__(self) -> "DiaryDB":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        del exc_type, exc_val, exc_tb
        self.close()
