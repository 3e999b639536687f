"""CLI entry point for pnch.

Invoked as::

    pnch [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m pnch.cli.main

Commands
--------
in          Open a new pnch
out         Close the open pnch
edit        Overwrite the times, tag or description of a pnch
ls          List pnchs, filtered by date and tag
config      Set a preference
version     Show version information

Every command loads the tags, pnchs and config, applies its change in
memory and saves only once it fully succeeded.
"""
from __future__ import annotations

import logging
import sys
from typing import Any, NoReturn

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from pnch.clock import Date, Period, SystemClock, Time
from pnch.errors import PnchError
from pnch.ledger import Ledger
from pnch.punches import Description
from pnch.storage import DirectoryStorage

err_console = Console(stderr=True)


# ---------------------------------------------------------------------------
# Parameter types
# ---------------------------------------------------------------------------


class _GrammarType(click.ParamType):
    """Click parameter type backed by a ``parse`` classmethod."""

    target: Any = None

    def convert(self, value: Any, param: click.Parameter | None, ctx: click.Context | None) -> Any:
        if isinstance(value, self.target):
            return value
        try:
            return self.target.parse(value)
        except PnchError as exc:
            self.fail(str(exc), param, ctx)


class DateType(_GrammarType):
    name = "yyyy-mm-dd"
    target = Date


class TimeType(_GrammarType):
    name = "hh:mm"
    target = Time


class PeriodType(_GrammarType):
    name = "period"
    target = Period


class DescriptionType(_GrammarType):
    name = "tag/description"
    target = Description


DATE = DateType()
TIME = TimeType()
PERIOD = PeriodType()
DESCRIPTION = DescriptionType()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _fail(exc: PnchError) -> NoReturn:
    """Print an error and its hint, then exit without saving."""
    err_console.print(f"[red bold]Error:[/red bold] {escape(exc.message)}", highlight=False)
    if exc.hint:
        err_console.print(f"[yellow]Hint:[/yellow] {escape(exc.hint)}", highlight=False)
    sys.exit(1)


def _load(ctx: click.Context) -> Ledger:
    try:
        return Ledger.load(ctx.obj["storage"], ctx.obj["clock"])
    except PnchError as exc:
        _fail(exc)


def _save(ledger: Ledger) -> None:
    try:
        ledger.save()
    except PnchError as exc:
        _fail(exc)


def _console(ledger: Ledger) -> Console:
    return Console(no_color=not ledger.config.print_color, highlight=False)


def _configure_logging(verbose: bool) -> None:
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="pnch")
@click.option(
    "--data-dir",
    envvar="PNCH_DATA_DIR",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory holding the pnch databases (default: the user app directory).",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log debug output to stderr")
@click.pass_context
def cli(ctx: click.Context, data_dir: str | None, verbose: bool) -> None:
    """Track your time from the command line.

    Categorize what you did with a tag and a description, then list or
    export your timesheet.
    """
    _configure_logging(verbose)
    storage = DirectoryStorage(data_dir) if data_dir else DirectoryStorage.default()
    ctx.ensure_object(dict)
    ctx.obj["storage"] = storage
    ctx.obj.setdefault("clock", SystemClock())


# ---------------------------------------------------------------------------
# in / out
# ---------------------------------------------------------------------------


@cli.command(name="in")
@click.argument("description", type=DESCRIPTION, required=False)
@click.option("--time", "at", type=TIME, default=None, help="Start time (default: now)")
@click.pass_context
def in_command(ctx: click.Context, description: Description | None, at: Time | None) -> None:
    """Punch in.

    DESCRIPTION is optional and written as "tag/description": everything
    before the first forward slash is the tag, everything after it is the
    description. Without a slash the whole text is the description.

    \b
        pnch in "ISSUE-123/fix the parser"
        pnch in --time 09:00
    """
    ledger = _load(ctx)
    try:
        ledger.punch_in(description, at)
    except PnchError as exc:
        _fail(exc)
    _save(ledger)
    _console(ledger).print("You are now pnched in.")


@cli.command(name="out")
@click.argument("description", type=DESCRIPTION, required=False)
@click.option("--time", "at", type=TIME, default=None, help="End time (default: now)")
@click.pass_context
def out_command(ctx: click.Context, description: Description | None, at: Time | None) -> None:
    """Punch out.

    Closes the pnch opened with `pnch in`. A "tag/description" can be
    given here if none was given while pnching in; every closed pnch needs
    a description.
    """
    ledger = _load(ctx)
    try:
        ledger.punch_out(description, at)
    except PnchError as exc:
        _fail(exc)
    _save(ledger)
    _console(ledger).print("You are now pnched out.")


# ---------------------------------------------------------------------------
# edit
# ---------------------------------------------------------------------------


@cli.command(name="edit")
@click.argument("description", type=DESCRIPTION, required=False)
@click.option("--id", "punch_id", type=click.IntRange(min=0), default=None, help="Id shown by `pnch ls`")
@click.option("--in", "time_in", type=TIME, default=None, help="New start time")
@click.option("--out", "time_out", type=TIME, default=None, help="New end time")
@click.pass_context
def edit_command(
    ctx: click.Context,
    description: Description | None,
    punch_id: int | None,
    time_in: Time | None,
    time_out: Time | None,
) -> None:
    """Edit a pnch.

    Without --id the last pnch is edited. Fields are overwritten as given;
    a new DESCRIPTION also replaces the tag.
    """
    ledger = _load(ctx)
    try:
        ledger.edit(description, punch_id=punch_id, time_in=time_in, time_out=time_out)
    except PnchError as exc:
        _fail(exc)
    _save(ledger)
    _console(ledger).print("The pnch was edited.")


# ---------------------------------------------------------------------------
# ls
# ---------------------------------------------------------------------------


@cli.command(name="ls")
@click.option("--since", "-s", type=DATE, default=None, help="Pnchs since a date")
@click.option("--last", "-l", type=PERIOD, default=None, help='Pnchs of the last period, e.g. "2 weeks"')
@click.option("--from", "-f", "from_date", type=DATE, default=None, help="Start of a date range")
@click.option("--to", "-t", "to_date", type=DATE, default=None, help="End of a date range")
@click.option("--tag", default=None, help="Only pnchs with this exact tag")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "list", "csv", "json", "yaml"], case_sensitive=False),
    default="table",
    help="Output format",
)
@click.pass_context
def ls_command(
    ctx: click.Context,
    since: Date | None,
    last: Period | None,
    from_date: Date | None,
    to_date: Date | None,
    tag: str | None,
    output_format: str,
) -> None:
    """List pnchs.

    Date filters (--since, --last, --from/--to) are combined as a union:
    a pnch matching any of them is listed. --tag then narrows that list.
    Without a date filter, the `ls-default-period` config is used.

    \b
        pnch ls --last "2 weeks"
        pnch ls --from 2024-01-01 --to 2024-01-31 --tag ISSUE-123
    """
    from pnch.export import build_table, render_list, to_csv, to_json, to_yaml
    from pnch.query import PunchQuery

    ledger = _load(ctx)
    try:
        query = PunchQuery(since=since, from_date=from_date, to_date=to_date, last=last, tag=tag)
    except PnchError as exc:
        _fail(exc)
    punches = ledger.query(query)

    output_format = output_format.lower()
    if output_format == "csv":
        click.echo(to_csv(punches), nl=False)
    elif output_format == "json":
        click.echo(to_json(punches))
    elif output_format == "yaml":
        click.echo(to_yaml(punches), nl=False)
    elif output_format == "list":
        click.echo(render_list(punches))
    else:
        _console(ledger).print(build_table(punches))


# ---------------------------------------------------------------------------
# config
# ---------------------------------------------------------------------------


@cli.command(name="config")
@click.argument("key")
@click.argument("value")
@click.pass_context
def config_command(ctx: click.Context, key: str, value: str) -> None:
    """Set a preference.

    \b
    Keys:
        print-color        true or false
        ls-default-period  e.g. "28 days"
    """
    ledger = _load(ctx)
    try:
        ledger.set_config(key, value)
    except PnchError as exc:
        _fail(exc)
    _save(ledger)
    _console(ledger).print("The config was updated.")


# ---------------------------------------------------------------------------
# version command
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from pnch import __version__

    console = Console()
    table = Table(show_header=False, box=None)
    table.add_row("[bold]pnch[/bold]", f"v{__version__}")
    table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    table.add_row("Platform", sys.platform)
    console.print(table)


if __name__ == "__main__":
    cli()
