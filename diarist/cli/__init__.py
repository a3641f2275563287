#!/usr/bin/env python3
"""
Diarist CLI
-----------

Command-line interface for synchronizing and browsing a diary.

This module provides the main CLI group and shared context setup
for all diarist commands.

Command Structure:
    - Synchronization (sync)
    - Query & Browse (query range, query version, query latest)
    - Journal output (journal)
    - Stats & Schema (stats, migrations)

Usage:
    # Move today's files into the store
    diarist --db-path ~/notes/diary.db sync ~/notes

    # Browse what is stored
    diarist query range 2024-01-01 2024-01-31
    diarist query latest

    # Compile a month into one markdown file
    diarist journal 2024-01-01 2024-01-31 --directory ~/notes
"""
import click
import logging
from pathlib import Path

from diarist.core.cli import setup_logger
from diarist.core.paths import DB_PATH, LOG_DIR
from diarist.database import DiaryDB


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    default=str(DB_PATH),
    help="Path to database file",
)
@click.option(
    "--log-dir",
    type=click.Path(),
    default=str(LOG_DIR),
    help="Path to log directory",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Show detailed errors and tracebacks",
)
@click.pass_context
def cli(ctx, db_path, log_dir, verbose):
    """Diarist: markdown diary with versioned SQLite storage"""

    # Suppress Alembic INFO logging by default
    logging.getLogger("alembic").setLevel(logging.WARNING)

    ctx.ensure_object(dict)
    ctx.obj["db_path"] = Path(db_path)
    ctx.obj["log_dir"] = Path(log_dir)
    ctx.obj["verbose"] = verbose
    ctx.obj["logger"] = setup_logger(Path(log_dir), "cli", verbose=verbose)


def get_db(ctx) -> DiaryDB:
    """Get or create database instance from context."""
    obj = ctx.find_root().obj
    if "db" not in obj:
        db = DiaryDB(db_path=obj["db_path"], log_dir=obj["log_dir"])
        obj["db"] = db
        ctx.find_root().call_on_close(db.close)
    return obj["db"]


# Import and register command modules
# These imports must come after CLI group definition
from .sync import sync, journal  # noqa: E402
from .query import query  # noqa: E402
from .maintenance import stats, migrations  # noqa: E402

# Register top-level commands
cli.add_command(sync)
cli.add_command(journal)
cli.add_command(stats)
cli.add_command(migrations)

# Register command groups
cli.add_command(query)


def main() -> None:
    """Console script entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
