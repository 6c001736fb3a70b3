"""Command-line interface for the insights pipeline."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Optional

import typer
from pydantic import ValidationError

from .config import PipelineSettings
from .errors import EmptySeries, PipelineError
from .paths import get_log_path, get_settings_path
from .payloads import parse_payload

app = typer.Typer(help="Period comparisons and time-of-day density for tracked activity.")

_SETTINGS_KEY = "settings"


@app.callback(no_args_is_help=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logs."),
    log_to_file: bool = typer.Option(
        False, "--log-to-file", help="Append logs to the per-user log file."
    ),
    settings_path: Optional[Path] = typer.Option(
        None,
        "--settings",
        path_type=Path,
        help="JSON settings file (defaults to the per-user settings file if present).",
    ),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        filename=str(get_log_path()) if log_to_file else None,
    )
    ctx.obj = {_SETTINGS_KEY: _load_settings(settings_path)}


@app.command()
def compare(
    ctx: typer.Context,
    current: Path = typer.Argument(..., exists=True, help="Category payload for the current period."),
    combined: Optional[Path] = typer.Option(
        None,
        "--combined",
        exists=True,
        help="Category payload covering twice the current period.",
    ),
    category_count: Optional[int] = typer.Option(
        None, "--categories", "-n", min=1, help="Number of categories before 'Other'."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print chart rows as JSON."),
) -> None:
    """Compare a period against the one before it."""
    from .pipeline import ComparisonParams, compare_categories
    from .reporting import comparison_rows, comparison_summary, print_comparison

    settings: PipelineSettings = ctx.obj[_SETTINGS_KEY]
    params = ComparisonParams(
        category_count=category_count or settings.category_count,
        combined=_read_payload(combined, "category") if combined else None,
    )
    pair = _guard(lambda: compare_categories(_read_payload(current, "category"), params))
    if as_json:
        _echo_json({"rows": comparison_rows(pair), "summary": comparison_summary(pair)})
    else:
        print_comparison(pair)


@app.command()
def series(
    ctx: typer.Context,
    payload_path: Path = typer.Argument(..., exists=True, help="Stochastic series payload."),
    category_count: Optional[int] = typer.Option(
        None, "--categories", "-n", min=1, help="Number of categories before 'Other'."
    ),
    start: Optional[datetime] = typer.Option(None, "--from", help="Window start (inclusive)."),
    end: Optional[datetime] = typer.Option(None, "--to", help="Window end (exclusive)."),
) -> None:
    """Bin a time series into a stable set of top categories."""
    from .pipeline import SeriesParams, compare_series
    from .reporting import series_rows

    if (start is None) != (end is None):
        raise typer.BadParameter("--from and --to must be given together")

    settings: PipelineSettings = ctx.obj[_SETTINGS_KEY]
    params = SeriesParams(
        category_count=category_count or settings.category_count, start=start, end=end
    )
    payload = _read_payload(payload_path, "stochastic")
    try:
        result = _guard(lambda: compare_series(payload, params))
    except EmptySeries:
        _echo_json({"status": "no_data"})
        return
    _echo_json(
        {
            "status": "ok",
            "current": series_rows(result.current),
            "previous": series_rows(result.previous) if result.previous else None,
        }
    )


@app.command()
def contours(
    ctx: typer.Context,
    payload_path: Path = typer.Argument(..., exists=True, help="Event payload."),
    bandwidth: Optional[float] = typer.Option(
        None, "--bandwidth", min=0.01, help="Smoothing radius in hours of time of day."
    ),
    thresholds: Optional[int] = typer.Option(
        None, "--thresholds", min=1, help="Number of density levels."
    ),
    max_activities: Optional[int] = typer.Option(
        None, "--activities", min=1, help="Number of activities to draw."
    ),
) -> None:
    """Print time-of-day density contours as JSON."""
    from .pipeline import ContourParams, event_contours
    from .reporting import contour_rows

    settings: PipelineSettings = ctx.obj[_SETTINGS_KEY].with_overrides(
        bandwidth_hours=bandwidth,
        threshold_count=thresholds,
        max_activities=max_activities,
    )
    params = ContourParams(
        bandwidth=settings.bandwidth_hours,
        threshold_count=settings.threshold_count,
        width=settings.plot_width,
        height=settings.plot_height,
        min_duration=settings.min_duration_hours,
        max_activities=settings.max_activities,
        cell_size=settings.cell_size,
    )
    payload = _read_payload(payload_path, "event")
    polygons = _guard(lambda: event_contours(payload, params))
    _echo_json({"status": "ok", "contours": contour_rows(polygons)})


@app.command()
def serve(
    ctx: typer.Context,
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind the API."),
    port: int = typer.Option(
        8765, "--port", min=1, max=65535, help="TCP port for the API."
    ),
) -> None:
    """Serve chart data over a local JSON API."""
    from .server_runner import run_dashboard

    run_dashboard(host=host, port=port, settings=ctx.obj[_SETTINGS_KEY])


def _load_settings(path: Optional[Path]) -> PipelineSettings:
    candidate = path or get_settings_path()
    if path is None and not candidate.exists():
        return PipelineSettings()
    try:
        return PipelineSettings.from_file(candidate)
    except (OSError, ValueError) as exc:
        raise typer.BadParameter(f"{candidate}: {exc}", param_hint="--settings") from exc


def _read_payload(path: Path, kind: str) -> Any:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise typer.BadParameter(f"{path}: {exc}") from exc
    if isinstance(data, dict):
        data.setdefault("kind", kind)
    try:
        payload = parse_payload(data)
    except ValidationError as exc:
        raise typer.BadParameter(f"{path}: {exc}") from exc
    if payload.kind != kind:
        raise typer.BadParameter(f"{path}: expected a {kind} payload, got {payload.kind}")
    return payload


def _guard(compute: Callable[[], Any]) -> Any:
    """Run a pipeline call, turning invalid input into a CLI error."""
    try:
        return compute()
    except EmptySeries:
        raise
    except PipelineError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _echo_json(data: Any) -> None:
    typer.echo(json.dumps(data, indent=2))
