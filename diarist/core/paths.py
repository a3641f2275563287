#!/usr/bin/env python3
"""
paths.py
-------------------
Default locations and patterns for diarist.

Diaries live wherever the user keeps them, so the defaults are relative to
the current working directory (the diary directory and the database file)
or to the user's home (logs). Every value can be overridden from the CLI
or through DiaryConfig.

    CWD/
    ├── 2024-01-01.md      # source files, removed once synchronized
    ├── 2024-01-02.md
    └── diary.db           # SQLite store

    ~/.diarist/
    └── logs/
        ├── operations/    # CLI operation logs
        └── system/        # database logs
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from pathlib import Path

# ----- Diary sources -----
DIARY_DIR = Path(".")
DEFAULT_DATE_PATTERN = r"^(\d{4}-\d{2}-\d{2})(\.md)?$"
DATE_FORMAT = "%Y-%m-%d"
MARKDOWN_SUFFIX = ".md"
BACKUP_DIRNAME = ".backup"
OUTPUT_PREFIX = "diary"

# ----- Database -----
DB_PATH = Path("diary.db")

# ----- Logs -----
STATE_DIR = Path.home() / ".diarist"
LOG_DIR = STATE_DIR / "logs"
