"""Shape pipeline results for chart renderers and the console."""

from __future__ import annotations

from typing import Any, Dict, Iterable

from .models import BinnedSeries, ContourPolygon, PeriodPair
from .periods import period_change_percent


def to_hours(seconds: float) -> float:
    return round(seconds / 3600.0, 2)


def comparison_rows(pair: PeriodPair) -> list[Dict[str, Any]]:
    """Name-aligned bar rows: every current category, then previous-only ones."""
    names = list(pair.current.names)
    names.extend(name for name in pair.previous.names if name not in names)

    rows: list[Dict[str, Any]] = []
    for name in names:
        current = pair.current.get(name)
        previous = pair.previous.get(name)
        rows.append(
            {
                "name": name,
                "current": to_hours(current.duration) if current else 0.0,
                "currentPercentage": round(current.percentage, 2) if current else 0.0,
                "previous": to_hours(previous.duration) if previous else 0.0,
                "previousPercentage": round(previous.percentage, 2) if previous else 0.0,
            }
        )
    return rows


def comparison_summary(pair: PeriodPair) -> Dict[str, Any]:
    return {
        "current_total_hours": to_hours(pair.current.total_duration),
        "previous_total_hours": to_hours(pair.previous.total_duration),
        "percentage_change": round(
            period_change_percent(
                pair.current.total_duration, pair.previous.total_duration
            ),
            2,
        ),
    }


def series_rows(series: BinnedSeries) -> Dict[str, Any]:
    return {
        "bucket_id": series.bucket_id,
        "period_hours": series.period_hours,
        "categories": list(series.categories),
        "points": [
            {
                "end": point.end.isoformat(),
                "categories": {
                    name: to_hours(seconds) for name, seconds in point.categories.items()
                },
            }
            for point in series.points
        ],
    }


def contour_rows(polygons: Iterable[ContourPolygon]) -> list[Dict[str, Any]]:
    return [
        {
            "activity": polygon.activity,
            "level": polygon.level,
            "ring": [[x, y] for x, y in polygon.ring],
        }
        for polygon in polygons
    ]


def print_comparison(pair: PeriodPair) -> None:
    """Render a current-vs-previous comparison in the console."""
    rows = comparison_rows(pair)
    if not rows:
        print("No activity recorded for the selected period.")
        return

    summary = comparison_summary(pair)
    print(f"Current:  {format_duration(pair.current.total_duration)}")
    print(f"Previous: {format_duration(pair.previous.total_duration)}")
    print(f"Change:   {summary['percentage_change']:+.2f}%")
    print()
    print(f"  {'Category':<30} {'Current':>10} {'Previous':>10}")
    print("-" * 56)
    for row in rows:
        print(
            f"  {row['name'][:30]:<30} "
            f"{row['current']:>8.2f} h {row['previous']:>8.2f} h"
        )


def format_duration(seconds: float) -> str:
    total_seconds = int(round(seconds))
    hours, remainder = divmod(total_seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"
