"""Command-line preview for cron expressions.

Commands:
    cronmask next EXPR   Show upcoming firing times
    cronmask check EXPR  Validate an expression
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from cronmask.config import get_config
from cronmask.exceptions import CronParseError
from cronmask.parser import parse

app = typer.Typer(
    name="cronmask",
    help="Preview and validate six-field cron expressions.",
    no_args_is_help=True,
    add_completion=False,
)

console = Console()


@app.callback()
def main() -> None:
    """Configure logging from CRONMASK_LOG_LEVEL."""
    logging.basicConfig(level=get_config().log_level)


@app.command(name="next")
def next_cmd(
    expression: Annotated[str, typer.Argument(help="Cron expression or @descriptor")],
    count: Annotated[
        int,
        typer.Option("--count", "-n", min=1, help="Number of firing times to show"),
    ] = 5,
    tz: Annotated[
        Optional[str],
        typer.Option("--tz", help="IANA time zone (default: CRONMASK_TIMEZONE or system zone)"),
    ] = None,
    after: Annotated[
        Optional[str],
        typer.Option("--after", help="ISO-8601 start instant (default: now)"),
    ] = None,
) -> None:
    """Show the next firing times of an expression."""
    try:
        schedule = parse(expression, tz)
        start = datetime.fromisoformat(after) if after else None
    except (CronParseError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    runs = schedule.next_n(count, start)
    if not runs:
        typer.echo("No firing time found within the search horizon.")
        raise typer.Exit(1)

    table = Table(title=expression)
    table.add_column("#", justify="right")
    table.add_column("Fires at")
    for i, run in enumerate(runs, start=1):
        table.add_row(str(i), run.isoformat())
    console.print(table)


@app.command(name="check")
def check_cmd(
    expression: Annotated[str, typer.Argument(help="Cron expression or @descriptor")],
) -> None:
    """Validate an expression."""
    try:
        parse(expression, "UTC")
    except CronParseError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    typer.echo("valid")


if __name__ == "__main__":
    app()
