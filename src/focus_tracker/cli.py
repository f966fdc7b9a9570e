"""Command-line interface for the focus tracker."""

from __future__ import annotations

import logging
from datetime import date, datetime
from pathlib import Path
from typing import Optional

import typer

from .config import TrackerSettings
from .paths import get_log_dir, get_log_path
from .storage import SummaryStore

app = typer.Typer(help="Track focused windows and total them by work hours.")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


@app.callback(no_args_is_help=True)
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logs.")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
    )


@app.command()
def track(
    log_dir: Optional[Path] = typer.Option(
        None,
        "--log-dir",
        envvar="LOG_PATH",
        path_type=Path,
        help="Directory for the daily focus summaries.",
    ),
    idle_seconds: Optional[str] = typer.Option(
        None,
        "--idle-threshold",
        envvar="IDLE_TIME",
        help="Seconds without input before the screen counts as locked (default 120).",
    ),
    workdays: Optional[str] = typer.Option(
        None,
        "--work-days",
        envvar="WORK_DAYS",
        help="Comma-separated work days, e.g. Mon,Tue,Wed,Thu,Fri.",
    ),
    work_start: Optional[str] = typer.Option(
        None, "--work-start", envvar="WORK_START", help="Start of work hours (HH:MM, default 08:00)."
    ),
    work_end: Optional[str] = typer.Option(
        None, "--work-end", envvar="WORK_END", help="End of work hours (HH:MM, default 17:00)."
    ),
    sample_seconds: float = typer.Option(
        2.0,
        "--interval",
        min=0.5,
        help="Sampling interval in seconds.",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        path_type=Path,
        help="Also write diagnostics to this file (defaults to the data directory).",
    ),
) -> None:
    """Track focus until interrupted, then write today's summaries."""
    from .probes import default_probe
    from .tracker import FocusTracker

    _add_file_handler(log_file or get_log_path())
    settings = TrackerSettings.from_values(
        idle_seconds=idle_seconds,
        workdays=workdays,
        work_start=work_start,
        work_end=work_end,
        log_dir=log_dir,
        sample_seconds=sample_seconds,
    )
    try:
        probe = default_probe()
    except RuntimeError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)

    store = SummaryStore(settings.log_dir or get_log_dir())
    tracker = FocusTracker(settings, probe, store)
    typer.echo("Tracking focus... Press Ctrl+C to stop.")
    tracker.run_forever()


@app.command()
def summary(
    day: Optional[str] = typer.Option(
        None,
        "--date",
        help="Date (YYYY-MM-DD) to summarize. Defaults to today.",
    ),
    log_dir: Optional[Path] = typer.Option(
        None,
        "--log-dir",
        envvar="LOG_PATH",
        path_type=Path,
        help="Directory for the daily focus summaries.",
    ),
) -> None:
    """Print the persisted totals for a specific day."""
    from .reporting import SummaryPrinter

    try:
        target = datetime.strptime(day, "%Y-%m-%d").date() if day else date.today()
    except ValueError:
        raise typer.BadParameter("expected YYYY-MM-DD", param_hint="--date")
    printer = SummaryPrinter(SummaryStore(log_dir or get_log_dir()))
    printer.print_daily_summary(target)


def _add_file_handler(path: Path) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, encoding="utf-8")
    except OSError as exc:
        logging.getLogger(__name__).warning("Could not open diagnostics log %s: %s", path, exc)
        return
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.getLogger().addHandler(handler)
