#!/usr/bin/env python3
"""
migrations.py
--------------------
Ordered schema migrations for the diarist store.

Each migration is a numbered step whose ``upgrade`` callable receives an
Alembic ``Operations`` object bound to the schema manager's open
transaction. Steps check for existing tables and indexes before creating
them, so a store whose tables predate its ``schema_migrations`` rows is
brought up to date without errors.

Adding a migration:
    1. Write ``def _vN_description(op: Operations) -> None``
    2. Append ``Migration(N, "description", _vN_description)`` to MIGRATIONS
    3. Update diarist.database.models to match
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass
from typing import Callable, Tuple

# --- Third party ---
import sqlalchemy as sa
from alembic.operations import Operations


@dataclass(frozen=True)
class Migration:
    """
    A single schema step.

    Attributes:
        version: Ordinal, starting at 1 and increasing by one
        description: Human-readable summary shown by ``diarist migrations``
        upgrade: Callable applying the step through Alembic operations
    """

    version: int
    description: str
    upgrade: Callable[[Operations], None]


def _has_table(op: Operations, table: str) -> bool:
    return sa.inspect(op.get_bind()).has_table(table)


def _has_index(op: Operations, table: str, index: str) -> bool:
    indexes = sa.inspect(op.get_bind()).get_indexes(table)
    return any(ix["name"] == index for ix in indexes)


def _has_column(op: Operations, table: str, column: str) -> bool:
    columns = sa.inspect(op.get_bind()).get_columns(table)
    return any(col["name"] == column for col in columns)


def _v1_create_diary_entries(op: Operations) -> None:
    """Entries keyed by (exec_version, date), indexed on date."""
    if not _has_table(op, "diary_entries"):
        op.create_table(
            "diary_entries",
            sa.Column("exec_version", sa.Integer(), nullable=False),
            sa.Column("date", sa.Date(), nullable=False),
            sa.Column("content", sa.Text(), nullable=False),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
            sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
            sa.PrimaryKeyConstraint("exec_version", "date"),
        )
    if not _has_index(op, "diary_entries", "idx_diary_entries_date"):
        op.create_index("idx_diary_entries_date", "diary_entries", ["date"])


def _v2_create_entry_metadata(op: Operations) -> None:
    """Metadata rows owned by an entry, removed with it."""
    if not _has_table(op, "entry_metadata"):
        _create_entry_metadata_table(op, "entry_metadata")


def _create_entry_metadata_table(op: Operations, name: str) -> None:
    op.create_table(
        name,
        sa.Column("exec_version", sa.Integer(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("word_count", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("exec_version", "date"),
        sa.ForeignKeyConstraint(
            ["exec_version", "date"],
            ["diary_entries.exec_version", "diary_entries.date"],
            ondelete="CASCADE",
        ),
        sa.CheckConstraint("word_count >= 0", name="ck_entry_metadata_word_count"),
    )


def _v3_key_entry_metadata_by_entry(op: Operations) -> None:
    """
    Rebuild a surrogate-keyed entry_metadata (``entry_id`` primary key) so it
    is keyed by (exec_version, date) like its entry.

    Where several rows share a key, the most recently inserted one is kept.
    Tables already keyed by the entry are left untouched.
    """
    if not _has_column(op, "entry_metadata", "entry_id"):
        return
    _create_entry_metadata_table(op, "entry_metadata_rekeyed")
    op.execute(
        "INSERT INTO entry_metadata_rekeyed (exec_version, date, word_count) "
        "SELECT exec_version, date, word_count FROM entry_metadata "
        "WHERE entry_id IN ("
        "SELECT MAX(entry_id) FROM entry_metadata GROUP BY exec_version, date)"
    )
    op.drop_table("entry_metadata")
    op.rename_table("entry_metadata_rekeyed", "entry_metadata")


MIGRATIONS: Tuple[Migration, ...] = (
    Migration(1, "create diary_entries", _v1_create_diary_entries),
    Migration(2, "create entry_metadata", _v2_create_entry_metadata),
    Migration(3, "key entry_metadata by entry", _v3_key_entry_metadata_by_entry),
)
