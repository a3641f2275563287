#!/usr/bin/env python3
"""
schema.py
--------------------
Schema management for the diarist store.

The SchemaManager brings a database to the latest known schema before
anything else touches it:

    - Installs per-connection pragmas (foreign keys, WAL, synchronous=NORMAL)
    - Takes SQLite's transaction control away from the pysqlite driver so
      DDL runs inside real transactions
    - Applies every migration newer than the stored high-water mark in one
      transaction, recording each ordinal in ``schema_migrations``

The migration transaction starts with ``BEGIN IMMEDIATE`` and reads the
high-water mark inside it, so a second process opening the same file waits
for the first to commit and then finds nothing left to apply.

Usage:
    engine = create_engine("sqlite:///diary.db")
    SchemaManager.configure_engine(engine)
    SchemaManager(engine).migrate()
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from typing import Any, Dict, List, Optional, Sequence

# --- Third party ---
from alembic.operations import Operations
from alembic.runtime.migration import MigrationContext
from sqlalchemy import Connection, Engine, event, func, inspect, select

# --- Local imports ---
from diarist.core.exceptions import StorageInitError
from diarist.core.logging_manager import DiaristLogger, safe_logger
from .migrations import MIGRATIONS, Migration
from .models import SchemaMigration

PRAGMAS = (
    "PRAGMA foreign_keys = ON",
    "PRAGMA journal_mode = WAL",
    "PRAGMA synchronous = NORMAL",
)

BEGIN_MODE_OPTION = "sqlite_begin_mode"
_BEGIN_MODES = {"DEFERRED", "IMMEDIATE", "EXCLUSIVE"}


def _on_connect(dbapi_connection: Any, connection_record: Any) -> None:
    # Autocommit at the driver level; transactions are begun by _on_begin
    dbapi_connection.isolation_level = None
    cursor = dbapi_connection.cursor()
    try:
        for pragma in PRAGMAS:
            cursor.execute(pragma)
    finally:
        cursor.close()


def _on_begin(conn: Connection) -> None:
    mode = conn.get_execution_options().get(BEGIN_MODE_OPTION)
    if mode is None:
        conn.exec_driver_sql("BEGIN")
        return
    mode = str(mode).upper()
    if mode not in _BEGIN_MODES:
        raise ValueError(f"Unsupported SQLite begin mode: {mode}")
    conn.exec_driver_sql(f"BEGIN {mode}")


class SchemaManager:
    """
    Applies ordered migrations to a SQLite engine.

    Attributes:
        engine: Engine the schema lives in
        migrations: Ordered migrations, versions 1..N
        logger: Optional logger
    """

    def __init__(
        self,
        engine: Engine,
        migrations: Sequence[Migration] = MIGRATIONS,
        logger: Optional[DiaristLogger] = None,
    ) -> None:
        self.engine = engine
        self.migrations = sorted(migrations, key=lambda m: m.version)
        self.logger = logger
        self._check_ordinals()

    def _check_ordinals(self) -> None:
        expected = list(range(1, len(self.migrations) + 1))
        actual = [m.version for m in self.migrations]
        if actual != expected:
            raise StorageInitError(
                f"Migrations must be numbered 1..{len(expected)} without gaps, got {actual}"
            )

    @staticmethod
    def configure_engine(engine: Engine) -> None:
        """
        Install pragma and transaction listeners on ``engine``.

        Must run before the engine opens its first connection; pooled
        connections opened earlier keep their old settings. Safe to call
        more than once.
        """
        if not event.contains(engine, "connect", _on_connect):
            event.listen(engine, "connect", _on_connect)
        if not event.contains(engine, "begin", _on_begin):
            event.listen(engine, "begin", _on_begin)

    @property
    def latest_version(self) -> int:
        """Highest migration ordinal known to this build."""
        return self.migrations[-1].version if self.migrations else 0

    def current_version(self) -> int:
        """Applied high-water mark, 0 when the table is missing or empty."""
        with self.engine.connect() as conn:
            return self._read_version(conn)

    def pending(self) -> List[Migration]:
        """Migrations not yet applied, in ascending order."""
        current = self.current_version()
        return [m for m in self.migrations if m.version > current]

    def status(self) -> Dict[str, Any]:
        """Current, latest and pending versions for display."""
        current = self.current_version()
        return {
            "current_version": current,
            "latest_version": self.latest_version,
            "pending": [
                {"version": m.version, "description": m.description}
                for m in self.migrations
                if m.version > current
            ],
        }

    @staticmethod
    def _read_version(conn: Connection) -> int:
        if not inspect(conn).has_table(SchemaMigration.__tablename__):
            return 0
        return conn.execute(
            select(func.coalesce(func.max(SchemaMigration.version), 0))
        ).scalar_one()

    def migrate(self) -> int:
        """
        Apply all pending migrations atomically.

        Returns:
            Schema version after migrating

        Raises:
            StorageInitError: If the migration transaction cannot commit
        """
        log = safe_logger(self.logger)
        try:
            with self.engine.connect() as conn:
                conn.execution_options(**{BEGIN_MODE_OPTION: "IMMEDIATE"})
                with conn.begin():
                    SchemaMigration.__table__.create(conn, checkfirst=True)
                    current = self._read_version(conn)
                    pending = [m for m in self.migrations if m.version > current]

                    if pending:
                        op = Operations(MigrationContext.configure(conn))
                        for migration in pending:
                            log.log_debug(
                                "Applying migration",
                                {"version": migration.version, "description": migration.description},
                            )
                            migration.upgrade(op)
                            conn.execute(
                                SchemaMigration.__table__.insert().values(
                                    version=migration.version
                                )
                            )

            version = pending[-1].version if pending else current
            log.log_operation(
                "schema_migrated",
                {"from_version": current, "to_version": version, "applied": len(pending)},
            )
            return version

        except StorageInitError:
            raise
        except Exception as e:
            log.log_error(e, {"operation": "schema_migrate"})
            raise StorageInitError(f"Schema migration failed: {e}") from e
