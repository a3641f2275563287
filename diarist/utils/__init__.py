"""
Utilities package for diarist.

- md: Frontmatter stripping and word counting
- fs: Diary file discovery, filename dates, backups

Import commonly-used utilities directly from this package:
    from diarist.utils import strip_frontmatter, find_diary_files
"""

from .md import count_words, is_blank, split_frontmatter, split_lines, strip_frontmatter
from .fs import backup_file, extract_date, find_diary_files, journal_filename

__all__ = [
    "backup_file",
    "count_words",
    "extract_date",
    "find_diary_files",
    "is_blank",
    "journal_filename",
    "split_frontmatter",
    "split_lines",
    "strip_frontmatter",
]
