"""
Main CLI entry point for Doug.

This module provides the primary command-line interface using typer.
"""

from pathlib import Path
from typing import Optional

import click
import typer
from rich.console import Console
from rich.markup import escape

from ..core.aggregation import ReportWindow
from ..core.time_tracker import DATA_FILE_NAME, TimeTracker, TimeTrackingError
from ..db.models import Period
from ..db.repository import PeriodStore, StoreError
from ..utils.config import get_settings_manager
from ..utils.dates import DateParseError
from ..utils.formatting import format_datetime, format_duration, format_time
from ..utils.log import setup_logging

# Create the main typer app
app = typer.Typer(
    name="doug",
    help="Doug: a time tracking command-line utility",
    no_args_is_help=True,
)

# Initialize consoles for rich output
console = Console()
err_console = Console(stderr=True)

# Errors reported to the user instead of a traceback
USER_ERRORS = (TimeTrackingError, StoreError, DateParseError)

# Global tracker instance
tracker: Optional[TimeTracker] = None


def get_tracker() -> TimeTracker:
    """Get or initialize the global time tracker instance."""
    global tracker
    if tracker is None:
        settings = get_settings_manager()
        tracker = TimeTracker(settings.get_data_dir())
    return tracker


def _fail(error: Exception) -> typer.Exit:
    """Print an error to stderr and build the exit with code 1."""
    err_console.print(f"[red]Error: {escape(str(error))}[/red]")
    return typer.Exit(1)


def _describe(period: Period, time_tracker: TimeTracker) -> str:
    end = (
        format_datetime(period.end_time, time_tracker.tz)
        if period.end_time is not None
        else "present"
    )
    duration = format_duration(period.duration(time_tracker.now()))
    return (
        f"[blue]{escape(period.project)}[/blue]: "
        f"{format_datetime(period.start_time, time_tracker.tz)} to {end} "
        f"[magenta]({duration})[/magenta]"
    )


@app.command()
def start(
    project: Optional[str] = typer.Argument(
        None,
        help="Project to track. If missing, start behaves like restart.",
    ),
) -> None:
    """Track new or existing project."""
    if project is None:
        restart()
        return

    try:
        time_tracker = get_tracker()
        period = time_tracker.start(project)
    except USER_ERRORS as e:
        raise _fail(e)

    console.print(
        f"Started tracking project [blue]{escape(period.project)}[/blue] "
        f"at {format_time(period.start_time, time_tracker.tz)}"
    )


@app.command()
def status(
    simple: bool = typer.Option(
        False,
        "--simple",
        "-s",
        help="Print running project name or nothing if there isn't a running project.",
    ),
    time: bool = typer.Option(
        False, "--time", "-t", help="Print time for currently tracked project."
    ),
) -> None:
    """Display elapsed time, start time, and running project name."""
    try:
        message = get_tracker().status(simple_name=simple, simple_time=time)
    except USER_ERRORS as e:
        raise _fail(e)

    if message is not None:
        console.print(message, markup=False, highlight=False)


@app.command()
def stop() -> None:
    """Stop any running projects."""
    try:
        time_tracker = get_tracker()
        period = time_tracker.stop()
    except USER_ERRORS as e:
        raise _fail(e)

    duration = format_duration(period.duration(time_tracker.now()))
    console.print(
        f"Stopped project [blue]{escape(period.project)}[/blue], started {duration} ago"
    )


@app.command()
def cancel() -> None:
    """Stop running project and remove most recent time interval."""
    try:
        time_tracker = get_tracker()
        period = time_tracker.cancel()
    except USER_ERRORS as e:
        raise _fail(e)

    duration = format_duration(period.duration(time_tracker.now()))
    console.print(
        f"Canceled project [blue]{escape(period.project)}[/blue], started {duration} ago"
    )


@app.command()
def restart() -> None:
    """Track last running project."""
    try:
        period = get_tracker().restart()
    except USER_ERRORS as e:
        raise _fail(e)

    console.print(f"Tracking last running project: [blue]{escape(period.project)}[/blue]")


@app.command()
def log() -> None:
    """Display time intervals across all projects."""
    try:
        text = get_tracker().log()
    except USER_ERRORS as e:
        raise _fail(e)

    if not text:
        console.print("[dim]No periods tracked yet[/dim]")
        return
    console.print(text, markup=False, highlight=False, soft_wrap=True)


@app.command()
def report(
    year: int = typer.Option(
        0,
        "--year",
        "-y",
        count=True,
        help="Limit report to past year. Use multiple to increase interval.",
    ),
    month: int = typer.Option(
        0,
        "--month",
        "-m",
        count=True,
        help="Limit report to past month. Use multiple to increase interval.",
    ),
    week: int = typer.Option(
        0,
        "--week",
        "-w",
        count=True,
        help="Limit report to past week. Use multiple to increase interval.",
    ),
    day: int = typer.Option(
        0,
        "--day",
        "-d",
        count=True,
        help="Limit report to past day. Use multiple to increase interval.",
    ),
    from_date: Optional[str] = typer.Option(
        None, "--from", "-f", help="Date when report should start (e.g. 2018-1-1)"
    ),
    to_date: Optional[str] = typer.Option(
        None, "--to", "-t", help="Date when report should end (e.g. 2018-1-20)"
    ),
) -> None:
    """Display aggregate time from projects."""
    try:
        time_tracker = get_tracker()
        window = ReportWindow(
            years=year,
            months=month,
            weeks=week,
            days=day,
            from_date=time_tracker.parse_date(from_date) if from_date else None,
            to_date=time_tracker.parse_date(to_date) if to_date else None,
        )
        text = time_tracker.report(window)
    except USER_ERRORS as e:
        raise _fail(e)

    console.print(text, markup=False, highlight=False, soft_wrap=True)


@app.command()
def amend(
    project: str = typer.Argument(..., help="New project name"),
) -> None:
    """Change name of currently running project."""
    try:
        old_name, period = get_tracker().amend(project)
    except USER_ERRORS as e:
        raise _fail(e)

    console.print(
        f"Renamed tracking project [red]{escape(old_name)}[/red] -> "
        f"[green]{escape(period.project)}[/green]"
    )


@app.command()
def delete(
    project: str = typer.Argument(..., help="Project to delete"),
) -> None:
    """Delete all intervals for project."""
    try:
        get_tracker().delete(project)
    except USER_ERRORS as e:
        raise _fail(e)

    console.print(f"Deleted project [blue]{escape(project)}[/blue]")


@app.command()
def edit(
    start: Optional[str] = typer.Option(
        None, "--start", "-s", help="Starting date (e.g. 'today 9am')"
    ),
    end: Optional[str] = typer.Option(
        None, "--end", "-e", help="Ending date (e.g. 'yesterday 5pm')"
    ),
) -> None:
    """Edit last frame or currently running frame.

    Without options the data file is opened in $EDITOR.
    """
    try:
        time_tracker = get_tracker()
        period = time_tracker.edit(start=start, end=end)
    except USER_ERRORS as e:
        raise _fail(e)

    if period is not None:
        console.print(_describe(period, time_tracker))
        return

    console.print(f"File: [blue]{escape(str(time_tracker.data_file))}[/blue]")
    try:
        click.edit(filename=str(time_tracker.data_file))
    except click.ClickException as e:
        raise _fail(e)


@app.command()
def settings(
    path: Optional[Path] = typer.Option(
        None, "--path", "-p", help="Move the data location to this directory"
    ),
    clear: bool = typer.Option(False, "--clear", help="Reset settings to defaults"),
) -> None:
    """Show or change Doug settings."""
    settings_mgr = get_settings_manager()
    try:
        if clear:
            settings_mgr.clear()
            console.print("Cleared settings file")
            return

        if path is not None:
            time_tracker = get_tracker()
            settings_mgr.set_data_dir(path)
            PeriodStore(settings_mgr.get_data_dir() / DATA_FILE_NAME).save(
                time_tracker.periods
            )
    except (StoreError, OSError) as e:
        raise _fail(e)

    console.print(f"[bold]{escape(str(settings_mgr.settings_file))}[/bold]")
    console.print(f"data_location: {escape(str(settings_mgr.get_data_dir()))}")


@app.command()
def version() -> None:
    """Show Doug version information."""
    from .. import __version__

    console.print(f"Doug version {__version__}")


def version_callback(value: bool) -> None:
    """Version callback that prints version and exits."""
    if value:
        version()
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Write debug logging to stderr and the log file"
    ),
) -> None:
    """
    Doug: a time tracking command-line utility.

    Periods are stored as JSON in ~/.doug/periods.json unless the settings
    point elsewhere.
    """
    setup_logging(verbose)


if __name__ == "__main__":
    app()
