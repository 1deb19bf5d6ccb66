"""CLI for the training load engine.

Runs the same computation path as the HTTP API over a JSON workout export,
for local inspection of load curves, readiness and weekly volume.
"""

import json
from datetime import date, datetime
from pathlib import Path
from typing import NoReturn

import typer
import uvicorn
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from training_load.config.settings import settings
from training_load.core.logger import CLI_CONSOLE_FORMAT, setup_logger
from training_load.metrics.chart_window import DEFAULT_WINDOW_DAYS, format_chart_window
from training_load.metrics.computation_service import compute_load_series, compute_weekly_volume, summarize_workouts
from training_load.metrics.errors import InvalidRangeError, UpstreamUnavailableError
from training_load.models.load import LoadSeriesResult
from training_load.providers.memory import JsonFileWorkoutProvider

console = Console()

app = typer.Typer(
    name="training-load",
    help="Training load & readiness analytics over a workout export",
    add_completion=False,
)

DEFAULT_ATHLETE_ID = "cli-athlete"
DEFAULT_LOOKBACK_DAYS = 60
DEFAULT_WEEKS = 12
DEFAULT_SUMMARY_DAYS = 30
DEFAULT_HOST = "127.0.0.1"

INPUT_OPTION = typer.Option(..., "--input", "-i", exists=True, dir_okay=False, help="JSON file of workouts")
ATHLETE_OPTION = typer.Option(DEFAULT_ATHLETE_ID, "--athlete-id", help="Athlete ID to filter rows by")
TODAY_OPTION = typer.Option(None, "--today", formats=["%Y-%m-%d"], help="Last day of the range (default: today, UTC)")
JSON_OPTION = typer.Option(False, "--json", help="Print JSON instead of a table")
DEBUG_OPTION = typer.Option(False, "--debug", help="Enable debug logging")

BAND_STYLES = {
    "PeakTaper": "bold green",
    "FreshSharp": "green",
    "ProductiveTraining": "yellow",
    "HeavyFatigue": "bold red",
}


def _setup_logging(debug: bool = False) -> None:
    setup_logger("DEBUG" if debug else settings.log_level, console_format=CLI_CONSOLE_FORMAT)


def _as_date(value: datetime | None) -> date | None:
    return value.date() if value else None


def _exit_with_error(message: str, code: int = 1) -> NoReturn:
    console.print(Panel(Text(message, style="bold red"), border_style="red"))
    raise typer.Exit(code)


def _echo_json(payload: object) -> None:
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


def _load_series_or_exit(input_file: Path, athlete_id: str, lookback_days: int, today: date | None) -> LoadSeriesResult:
    provider = JsonFileWorkoutProvider(input_file)
    try:
        return compute_load_series(
            athlete_id,
            lookback_days,
            provider,
            today=today,
            config=settings.load_model_config(),
        )
    except InvalidRangeError as e:
        _exit_with_error(str(e))
    except UpstreamUnavailableError as e:
        logger.error(f"Workout history unavailable: {e}")
        _exit_with_error("Could not calculate readiness.")


@app.command()
def server(
    host: str = typer.Option(DEFAULT_HOST, "--host", "-h", help="Host to bind to"),
    port: int = typer.Option(8000, "--port", "-p", help="Port to bind to"),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload"),
) -> None:
    """Run the FastAPI server."""
    logger.info(f"Starting FastAPI server on {host}:{port} (reload={reload})")
    uvicorn.run("training_load.main:app", host=host, port=port, reload=reload)


@app.command("load-series")
def load_series(
    input_file: Path = INPUT_OPTION,
    athlete_id: str = ATHLETE_OPTION,
    lookback_days: int = typer.Option(DEFAULT_LOOKBACK_DAYS, "--lookback-days", "-d", help="Days in the series"),
    today: datetime | None = TODAY_OPTION,
    as_json: bool = JSON_OPTION,
    debug: bool = DEBUG_OPTION,
) -> None:
    """Print daily stress with CTL, ATL and TSB for every day of the range."""
    _setup_logging(debug)
    result = _load_series_or_exit(input_file, athlete_id, lookback_days, _as_date(today))

    if as_json:
        _echo_json(result.model_dump(mode="json"))
        return

    table = Table(title=f"Training load ({athlete_id})")
    table.add_column("Date")
    table.add_column("Stress", justify="right")
    table.add_column("CTL", justify="right")
    table.add_column("ATL", justify="right")
    table.add_column("TSB", justify="right")
    for stress, point in zip(result.daily_stress, result.load_points, strict=True):
        tsb_style = "green" if point.tsb >= 0 else "yellow"
        table.add_row(
            point.date.isoformat(),
            f"{stress.stress:.0f}",
            f"{point.ctl:.1f}",
            f"{point.atl:.1f}",
            Text(f"{point.tsb:+.1f}", style=tsb_style),
        )
    console.print(table)

    if result.skipped_record_count:
        console.print(f"[yellow]Skipped {result.skipped_record_count} malformed workout(s)[/yellow]")
    if result.insufficient_data:
        console.print("[yellow]Need more history to calculate readiness.[/yellow]")
        raise typer.Exit(2)

    band = str(result.latest_band)
    console.print(Panel(Text(f"{band}: {result.latest_advisory}", style=BAND_STYLES.get(band, "bold")), title="Readiness"))


@app.command()
def chart(
    input_file: Path = INPUT_OPTION,
    athlete_id: str = ATHLETE_OPTION,
    lookback_days: int = typer.Option(DEFAULT_LOOKBACK_DAYS, "--lookback-days", "-d", help="Days in the series"),
    window_size: int = typer.Option(DEFAULT_WINDOW_DAYS, "--window-size", "-w", help="Trailing days to chart"),
    today: datetime | None = TODAY_OPTION,
    as_json: bool = JSON_OPTION,
    debug: bool = DEBUG_OPTION,
) -> None:
    """Print the normalized readiness chart window."""
    _setup_logging(debug)
    result = _load_series_or_exit(input_file, athlete_id, lookback_days, _as_date(today))
    if result.insufficient_data:
        console.print("[yellow]Need more history to calculate readiness.[/yellow]")
        raise typer.Exit(2)

    try:
        window = format_chart_window(result.load_points, window_size, settings.load_model_config())
    except InvalidRangeError as e:
        _exit_with_error(str(e))

    if as_json:
        _echo_json(window.model_dump(mode="json"))
        return

    table = Table(title=f"Readiness (basis {window.basis:.0f})")
    table.add_column("Date")
    table.add_column("TSB", justify="right")
    table.add_column("Bar")
    half_width = 20
    for point in window.points:
        length = round(abs(point.fraction) * half_width)
        if point.fraction >= 0:
            bar = Text(" " * half_width + "|" + "#" * length, style="green")
        else:
            bar = Text(" " * (half_width - length) + "#" * length + "|", style="yellow")
        table.add_row(point.date.isoformat(), f"{point.tsb:+.1f}", bar)
    console.print(table)
    if window.short_window:
        console.print(f"[yellow]Only {len(window.points)} of {window.window_size} days of history available[/yellow]")


@app.command("weekly-volume")
def weekly_volume(
    input_file: Path = INPUT_OPTION,
    athlete_id: str = ATHLETE_OPTION,
    weeks: int = typer.Option(DEFAULT_WEEKS, "--weeks", "-n", help="Trailing ISO weeks"),
    today: datetime | None = TODAY_OPTION,
    as_json: bool = JSON_OPTION,
    debug: bool = DEBUG_OPTION,
) -> None:
    """Print distance per ISO week (Monday start)."""
    _setup_logging(debug)
    provider = JsonFileWorkoutProvider(input_file)
    try:
        volumes = compute_weekly_volume(
            athlete_id, weeks, provider, today=_as_date(today), config=settings.load_model_config()
        )
    except InvalidRangeError as e:
        _exit_with_error(str(e))
    except UpstreamUnavailableError as e:
        logger.error(f"Workout history unavailable: {e}")
        _exit_with_error("Could not load workout history.")

    if as_json:
        _echo_json([v.model_dump(mode="json") for v in volumes])
        return

    table = Table(title=f"Weekly volume ({athlete_id})")
    table.add_column("Week of")
    table.add_column("Workouts", justify="right")
    table.add_column("Distance (km)", justify="right")
    for volume in volumes:
        table.add_row(volume.week_start.isoformat(), str(volume.workout_count), f"{volume.total_distance_km:.1f}")
    console.print(table)


@app.command()
def summary(
    input_file: Path = INPUT_OPTION,
    athlete_id: str = ATHLETE_OPTION,
    days: int = typer.Option(DEFAULT_SUMMARY_DAYS, "--days", "-d", help="Trailing days to summarize"),
    today: datetime | None = TODAY_OPTION,
    as_json: bool = JSON_OPTION,
    debug: bool = DEBUG_OPTION,
) -> None:
    """Print workout totals, average pace and progress trend."""
    _setup_logging(debug)
    provider = JsonFileWorkoutProvider(input_file)
    try:
        workout_summary = summarize_workouts(
            athlete_id, days, provider, today=_as_date(today), config=settings.load_model_config()
        )
    except InvalidRangeError as e:
        _exit_with_error(str(e))
    except UpstreamUnavailableError as e:
        logger.error(f"Workout history unavailable: {e}")
        _exit_with_error("Could not load workout history.")

    if as_json:
        _echo_json(workout_summary.model_dump(mode="json"))
        return

    lines = [
        f"Workouts: {workout_summary.total_workouts}",
        f"Distance: {workout_summary.total_distance_km:.1f} km",
        f"Duration: {workout_summary.total_duration_minutes:.0f} min",
        f"Average pace: {workout_summary.average_pace} /km",
        f"Trend: {workout_summary.progress_trend}",
    ]
    if workout_summary.longest_workout:
        longest = workout_summary.longest_workout
        lines.append(f"Longest: {longest.distance_km:.1f} km on {longest.date.isoformat()}")
    console.print(Panel("\n".join(lines), title=f"Summary, last {days} days"))


if __name__ == "__main__":
    app()
