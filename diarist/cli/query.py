"""
Query & Browse Commands
------------------------

Read stored entries back out of the database.

Commands:
    - range: Entries dated within an inclusive range
    - version: Entries recorded by one execution version
    - latest: Latest execution version
"""
import json

import click

from diarist.core.exceptions import DiaryError
from diarist.core.logging_manager import handle_cli_error
from . import get_db
from .sync import DATE_TYPE


def _echo_entries(entries, as_json):
    if as_json:
        click.echo(json.dumps([e.to_dict() for e in entries], indent=2))
        return

    if not entries:
        click.echo("No entries found")
        return

    for entry in entries:
        click.echo(
            f"\n📅 {entry.date.isoformat()} (v{entry.exec_version}, "
            f"{entry.word_count()} words)"
        )
        click.echo(entry.content)
    click.echo(f"\nTotal: {len(entries)} entries")


@click.group()
@click.pass_context
def query(ctx: click.Context) -> None:
    """Browse stored entries."""
    pass


@query.command("range")
@click.argument("start_date", type=DATE_TYPE)
@click.argument("end_date", type=DATE_TYPE)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def range_(ctx, start_date, end_date, as_json):
    """Show entries from START_DATE to END_DATE, newest first."""
    try:
        db = get_db(ctx)
        entries = db.entries_by_date_range(start_date.date(), end_date.date())
        _echo_entries(entries, as_json)

    except DiaryError as e:
        handle_cli_error(
            ctx,
            e,
            "query_range",
            additional_context={
                "start_date": start_date.date().isoformat(),
                "end_date": end_date.date().isoformat(),
            },
        )


@query.command("version")
@click.argument("exec_version", type=click.IntRange(min=1))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def version(ctx, exec_version, as_json):
    """Show entries recorded by EXEC_VERSION."""
    try:
        db = get_db(ctx)
        _echo_entries(db.entries_by_exec_version(exec_version), as_json)

    except DiaryError as e:
        handle_cli_error(
            ctx, e, "query_version", additional_context={"exec_version": exec_version}
        )


@query.command("latest")
@click.pass_context
def latest(ctx):
    """Print the latest execution version (0 when empty)."""
    try:
        db = get_db(ctx)
        click.echo(db.latest_exec_version())

    except DiaryError as e:
        handle_cli_error(ctx, e, "query_latest")
