"""
dataclasses package
-------------------
Dataclass definitions for diary entries.

- DiaryEntry: One entry at one execution version
- EntryMetadata: Word-count statistics derived from an entry
"""
from diarist.dataclasses.diary_entry import DiaryEntry, EntryMetadata, validate_content

__all__ = ["DiaryEntry", "EntryMetadata", "validate_content"]
