"""
conftest.py
-----------
Shared pytest fixtures for diarist tests.

Provides fixtures for:
- Temporary directories and database paths
- A migrated DiaryDB on a temporary file
- Diary directories populated with dated markdown files
- Sample entry content
"""
import pytest
from pathlib import Path
from datetime import date
from tempfile import TemporaryDirectory


# ----- Path Fixtures -----

@pytest.fixture
def tmp_dir():
    """Create a temporary directory for test file operations."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_db_path(tmp_dir):
    """Temporary database path."""
    return tmp_dir / "test.db"


# ----- Sample Markdown Content Fixtures -----

@pytest.fixture
def plain_entry_content():
    """Entry with no frontmatter."""
    return "One two three\nfour five\n"


@pytest.fixture
def frontmatter_entry_content():
    """Entry with a YAML frontmatter block."""
    return """---
tags:
  - reflections
mood: calm
---

##Actual content
Walked by the river.
"""


# ----- Database Fixtures -----

@pytest.fixture
def test_db(test_db_path):
    """
    Create a DiaryDB with a migrated schema.

    The engine is disposed after the test.
    """
    from diarist.database.manager import DiaryDB

    db = DiaryDB(db_path=test_db_path)
    yield db
    db.close()


# ----- Diary Directory Fixtures -----

def write_diary_file(directory: Path, day: date, content: str) -> Path:
    """Write ``content`` to ``<directory>/<YYYY-MM-DD>.md``."""
    path = directory / f"{day.isoformat()}.md"
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def diary_dir(tmp_dir):
    """Empty diary directory inside the temporary directory."""
    directory = tmp_dir / "diary"
    directory.mkdir()
    return directory


@pytest.fixture
def populated_diary_dir(diary_dir):
    """Diary directory holding three dated entries and one unrelated file."""
    write_diary_file(diary_dir, date(2024, 1, 1), "New year, new notebook.")
    write_diary_file(diary_dir, date(2024, 1, 2), "Rain all day.\nRead a book.")
    write_diary_file(
        diary_dir,
        date(2024, 1, 3),
        "---\nmood: tired\n---\n\nLong day at work.",
    )
    (diary_dir / "notes.md").write_text("Not a diary entry", encoding="utf-8")
    return diary_dir
