"""
Synchronization Commands
------------------------

Commands that move diary text between the filesystem and the store.

Commands:
    - sync: Store a directory's dated files under a new execution version
    - journal: Compile stored entries into one markdown file

Usage:
    # Synchronize, keeping copies of the removed files in .backup/
    diarist sync ~/notes --backup

    # Custom filename pattern (date must be capture group 1)
    diarist sync ~/notes --date-pattern '^journal-(\\d{4}-\\d{2}-\\d{2})\\.md$'

    # Write January into ~/notes/diary_<today>_<version>.md
    diarist journal 2024-01-01 2024-01-31 --directory ~/notes
"""
from datetime import datetime
from pathlib import Path

import click

from diarist.core.cli import SyncStats
from diarist.core.config import DiaryConfig
from diarist.core.exceptions import DiaryError
from diarist.core.logging_manager import handle_cli_error
from diarist.core.paths import DEFAULT_DATE_PATTERN, OUTPUT_PREFIX
from diarist.pipeline.file_repository import FileRepository
from diarist.pipeline.journal import write_journal
from diarist.pipeline.sync import SyncEngine
from . import get_db

DATE_TYPE = click.DateTime(formats=["%Y-%m-%d"])


@click.command()
@click.argument("directory", type=click.Path())
@click.option(
    "--date-pattern",
    default=DEFAULT_DATE_PATTERN,
    show_default=True,
    help="Filename regex; capture group 1 must be YYYY-MM-DD",
)
@click.option(
    "--backup", is_flag=True, help="Copy files to .backup/ before removing them"
)
@click.pass_context
def sync(ctx, directory, date_pattern, backup):
    """Store DIRECTORY's dated markdown files and remove them."""
    start_time = datetime.now()
    logger = ctx.obj.get("logger")
    try:
        config = DiaryConfig(
            directory=Path(directory),
            db_path=ctx.obj["db_path"],
            date_pattern=date_pattern,
            log_dir=ctx.obj["log_dir"],
            backup_sources=backup,
        )
        repo = FileRepository(config.directory, config.date_pattern, logger=logger)
        db = get_db(ctx)

        click.echo(f"📂 Synchronizing {config.directory}")
        result = SyncEngine(
            db, repo, logger=logger, backup_sources=config.backup_sources
        ).synchronize()

        for source, error in result.failures:
            click.echo(f"⚠️  Skipped {Path(source).name}: {error}", err=True)
        for source, error in result.cleanup_failures:
            click.echo(f"⚠️  Not removed {Path(source).name}: {error}", err=True)

        stats = SyncStats.from_result(result, start_time=start_time)
        start, end = result.span
        click.echo(
            f"✅ Execution version {result.exec_version}: "
            f"{start.isoformat()} to {end.isoformat()}"
        )
        click.echo(f"📊 {stats.summary()}")

    except DiaryError as e:
        handle_cli_error(ctx, e, "sync", additional_context={"directory": directory})


@click.command()
@click.argument("start_date", type=DATE_TYPE)
@click.argument("end_date", type=DATE_TYPE)
@click.option(
    "--directory",
    type=click.Path(),
    default=".",
    help="Directory the journal is written to",
)
@click.option(
    "--prefix",
    default=OUTPUT_PREFIX,
    show_default=True,
    help="Journal filename prefix",
)
@click.pass_context
def journal(ctx, start_date, end_date, directory, prefix):
    """Write entries from START_DATE to END_DATE into one markdown file."""
    logger = ctx.obj.get("logger")
    try:
        db = get_db(ctx)
        repo = FileRepository(directory, output_prefix=prefix, logger=logger)
        path = write_journal(
            db, repo, start_date.date(), end_date.date(), logger=logger
        )
        click.echo(f"✅ Journal written: {path}")

    except DiaryError as e:
        handle_cli_error(
            ctx,
            e,
            "journal",
            additional_context={
                "start_date": start_date.date().isoformat(),
                "end_date": end_date.date().isoformat(),
            },
        )
