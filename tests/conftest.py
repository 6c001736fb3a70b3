"""Shared payload builders for pipeline tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from activity_insights.models import StochasticPoint, StochasticSeries

T0 = datetime(2024, 5, 1, tzinfo=timezone.utc)


def category_payload(durations: dict[str, float], total: float | None = None) -> dict[str, Any]:
    return {
        "kind": "category",
        "categories": [
            {"name": name, "duration": seconds, "percentage": 0.0}
            for name, seconds in durations.items()
        ],
        "total_duration": total if total is not None else sum(durations.values()),
    }


def make_series(*points: dict[str, float], period_hours: float = 24.0) -> StochasticSeries:
    return StochasticSeries(
        points=tuple(
            StochasticPoint(end=T0 + timedelta(hours=period_hours * index), categories=categories)
            for index, categories in enumerate(points)
        ),
        period_hours=period_hours,
        bucket_id="aw-watcher-window_test",
    )


def stochastic_payload(*points: dict[str, float], period_hours: float = 24.0) -> dict[str, Any]:
    return {
        "kind": "stochastic",
        "period_data": [
            {
                "end": (T0 + timedelta(hours=period_hours * index)).isoformat(),
                "categories": categories,
            }
            for index, categories in enumerate(points)
        ],
        "period_hours": period_hours,
        "timeframe_days": len(points) * period_hours / 24.0,
        "total_periods": len(points),
        "bucket_id": "aw-watcher-window_test",
    }


def raw_event(app: str, clock: str, seconds: float, title: str = "") -> dict[str, Any]:
    return {
        "data": {"app": app, "title": title},
        "date": "2024-05-01",
        "duration": seconds,
        "id": 1,
        "time": clock,
        "timestamp": f"2024-05-01T{clock}+02:00",
    }


def event_payload(*events: dict[str, Any]) -> dict[str, Any]:
    return {
        "kind": "event",
        "bucket_id": "aw-watcher-window_test",
        "data_source": "aw-watcher-window",
        "end_date": "2024-05-01",
        "events": list(events),
    }


@pytest.fixture()
def morning_events() -> list[dict[str, Any]]:
    """Two activities with several distinct start times each."""
    return [
        raw_event("Code.exe", "09:00:00", 3600),
        raw_event("Code.exe", "09:30:00", 2700),
        raw_event("Code.exe", "10:15:00", 3000),
        raw_event("Code.exe", "11:00:00", 1800),
        raw_event("firefox.exe", "14:00:00", 1200),
        raw_event("firefox.exe", "15:30:00", 900),
        raw_event("firefox.exe", "16:45:00", 1500),
    ]
