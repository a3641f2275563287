"""
Stats & Schema Commands
------------------------

Commands:
    - stats: Word counts per stored entry, with totals
    - migrations: Applied and pending schema versions
"""
import json

import click

from diarist.core.exceptions import DiaryError
from diarist.core.logging_manager import handle_cli_error
from . import get_db


@click.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def stats(ctx, as_json):
    """Show word-count metadata for every stored entry."""
    try:
        db = get_db(ctx)
        rows = db.metadata()
        summary = {
            "entries": db.count_entries(),
            "latest_exec_version": db.latest_exec_version(),
            "total_words": sum(r.word_count for r in rows),
            "dates": len({r.date for r in rows}),
        }

        if as_json:
            click.echo(
                json.dumps(
                    {"summary": summary, "metadata": [r.to_dict() for r in rows]},
                    indent=2,
                )
            )
            return

        click.echo("\n📊 Diary Statistics")
        click.echo("=" * 50)
        for row in rows:
            click.echo(
                f"  {row.date.isoformat()}  v{row.exec_version:<4d} {row.word_count:6d} words"
            )
        click.echo(f"\nEntries: {summary['entries']}")
        click.echo(f"Distinct dates: {summary['dates']}")
        click.echo(f"Total words: {summary['total_words']}")
        click.echo(f"Latest execution version: {summary['latest_exec_version']}")

    except DiaryError as e:
        handle_cli_error(ctx, e, "stats")


@click.command()
@click.pass_context
def migrations(ctx):
    """Show applied and pending schema migrations."""
    try:
        db = get_db(ctx)
        status = db.schema.status()

        click.echo(f"Current schema version: {status['current_version']}")
        click.echo(f"Latest schema version: {status['latest_version']}")
        if status["pending"]:
            click.echo("\nPending:")
            for step in status["pending"]:
                click.echo(f"  {step['version']}: {step['description']}")
        else:
            click.echo("✅ Schema is up to date")

    except DiaryError as e:
        handle_cli_error(ctx, e, "migrations")
