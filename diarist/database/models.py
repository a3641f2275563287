"""
Database Models
---------------

SQLAlchemy ORM mappings for the diarist store.

Models:
    - SchemaMigration: One row per applied schema migration
    - Entry: A diary entry at one execution version (``diary_entries``)
    - EntryMeta: Word-count metadata owned by an entry (``entry_metadata``)

The tables themselves are created by the ordered migrations in
diarist.database.migrations, never by ``Base.metadata.create_all``; these
mappings must stay in step with the latest migration.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from datetime import date, datetime
from typing import Optional

# --- Third party ---
from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    ForeignKeyConstraint,
    Index,
    Integer,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Declarative base for all diarist models."""

    pass


class SchemaMigration(Base):
    """
    High-water mark of applied schema migrations.

    Attributes:
        version: Ordinal of an applied migration
    """

    __tablename__ = "schema_migrations"

    version: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=False, doc="Applied migration ordinal"
    )


class Entry(Base):
    """
    A diary entry recorded by one synchronization run.

    Identity is (exec_version, date): the same date may appear under many
    versions, each holding the content seen by that run.

    Attributes:
        exec_version: Synchronization run that recorded the entry
        date: Entry date
        content: Normalized entry text
        created_at: When the entry was built
        updated_at: Last modification time
        meta: Word-count metadata row
    """

    __tablename__ = "diary_entries"
    __table_args__ = (Index("idx_diary_entries_date", "date"),)

    exec_version: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    date: Mapped[date] = mapped_column(Date, primary_key=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    meta: Mapped[Optional["EntryMeta"]] = relationship(
        "EntryMeta",
        back_populates="entry",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Entry(exec_version={self.exec_version}, date={self.date})>"


class EntryMeta(Base):
    """
    Derived statistics for an entry, deleted along with it.

    Attributes:
        exec_version: Owning entry's version
        date: Owning entry's date
        word_count: Whitespace-delimited token count of the content
    """

    __tablename__ = "entry_metadata"
    __table_args__ = (
        ForeignKeyConstraint(
            ["exec_version", "date"],
            ["diary_entries.exec_version", "diary_entries.date"],
            ondelete="CASCADE",
        ),
        CheckConstraint("word_count >= 0", name="ck_entry_metadata_word_count"),
    )

    exec_version: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    date: Mapped[date] = mapped_column(Date, primary_key=True)
    word_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    entry: Mapped["Entry"] = relationship("Entry", back_populates="meta")

    def __repr__(self) -> str:
        return (
            f"<EntryMeta(exec_version={self.exec_version}, date={self.date}, "
            f"word_count={self.word_count})>"
        )
