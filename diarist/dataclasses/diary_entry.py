#!/usr/bin/env python3
"""
diary_entry.py
-------------------
Dataclasses for diary entries and their derived metadata.

A DiaryEntry is built once from a (date, raw text) pair plus the execution
version assigned by the synchronization engine. The raw text is normalized
at that moment (frontmatter stripped, line endings unified) and never again:
entries read back from the store are hydrated with their stored content
as-is.

Two entries are equal when their date and content are equal. Version and
timestamps are deliberately outside equality, since every freshly built
entry gets new timestamps; this is the comparison deduplication relies on.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Dict, Optional, Tuple

# --- Local imports ---
from diarist.core.exceptions import ContentIntegrityError
from diarist.utils.md import count_words, is_blank, strip_frontmatter


def validate_content(content: str) -> None:
    """
    Reject content that would produce an empty entry.

    Raises:
        ContentIntegrityError: If content is empty or whitespace-only
    """
    if is_blank(content):
        raise ContentIntegrityError("Empty content")


@dataclass(frozen=True)
class EntryMetadata:
    """
    Statistics derived from an entry.

    Attributes:
        date: Entry date
        word_count: Whitespace-delimited token count of the content
        exec_version: Version the entry was stored under
    """

    date: date
    word_count: int
    exec_version: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "word_count": self.word_count,
            "exec_version": self.exec_version,
        }


@dataclass(eq=False)
class DiaryEntry:
    """
    One diary entry at one execution version.

    Attributes:
        exec_version: Synchronization run that recorded the entry (>= 1)
        date: Calendar date of the entry
        content: Normalized text
        created_at: When the entry object was built
        updated_at: Last modification time (equal to created_at on creation)
    """

    exec_version: int
    date: date
    content: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: Optional[datetime] = None

    @classmethod
    def create(cls, exec_version: int, entry_date: date, raw_content: str) -> "DiaryEntry":
        """
        Build an entry from raw source text.

        Normalizes ``raw_content`` and stamps both timestamps with the
        current UTC time. Does not validate; callers reject empty content
        with validate_content() first.
        """
        now = datetime.now(timezone.utc)
        return cls(
            exec_version=exec_version,
            date=entry_date,
            content=strip_frontmatter(raw_content),
            created_at=now,
            updated_at=now,
        )

    @property
    def dedup_key(self) -> Tuple[date, str]:
        """The (date, content) pair used to detect already-stored entries."""
        return (self.date, self.content)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DiaryEntry):
            return NotImplemented
        return self.dedup_key == other.dedup_key

    def __hash__(self) -> int:
        return hash(self.dedup_key)

    def word_count(self) -> int:
        return count_words(self.content)

    def metadata(self) -> EntryMetadata:
        return EntryMetadata(
            date=self.date,
            word_count=self.word_count(),
            exec_version=self.exec_version,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serializable form for JSON output."""
        return {
            "exec_version": self.exec_version,
            "date": self.date.isoformat(),
            "content": self.content,
            "word_count": self.word_count(),
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
