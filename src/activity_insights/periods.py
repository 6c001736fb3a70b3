"""Derive the "previous period" that a current period is compared against."""

from __future__ import annotations

import logging
from datetime import datetime

from .errors import InvalidDateRange
from .models import CategorySnapshot, PeriodPair, StochasticSeries
from .snapshots import build_snapshot

logger = logging.getLogger(__name__)


def subtract_snapshots(
    combined: CategorySnapshot, current: CategorySnapshot
) -> CategorySnapshot:
    """Return ``combined - current`` for a combined window twice as long.

    Categories whose derived duration is zero or negative are dropped and the
    total is clamped at zero. Percentages are recomputed from the new total.
    """
    current_durations = current.durations()
    remaining: list[tuple[str, float]] = []
    dropped: list[str] = []
    for record in combined.categories:
        duration = record.duration - current_durations.get(record.name, 0.0)
        if duration > 0:
            remaining.append((record.name, duration))
        else:
            dropped.append(record.name)

    if dropped:
        logger.debug("Dropped %d non-positive categories: %s", len(dropped), dropped)

    total = max(0.0, combined.total_duration - current.total_duration)
    return build_snapshot(remaining, total_duration=total)


def derive_period_pair(
    combined: CategorySnapshot, current: CategorySnapshot
) -> PeriodPair:
    return PeriodPair(current=current, previous=subtract_snapshots(combined, current))


def filter_series_window(
    series: StochasticSeries, start: datetime, end: datetime
) -> StochasticSeries:
    """Keep the points whose ``end`` lies in ``[start, end)``."""
    if end <= start:
        raise InvalidDateRange(start, end)
    points = tuple(
        point
        for point in series.points
        if _aligned(start, point.end) <= point.end < _aligned(end, point.end)
    )
    return StochasticSeries(
        points=points,
        period_hours=series.period_hours,
        bucket_id=series.bucket_id,
        timeframe_days=series.timeframe_days,
    )


def windowed_period_pair(
    series: StochasticSeries, start: datetime, end: datetime
) -> tuple[StochasticSeries, StochasticSeries]:
    """Split ``series`` into the ``[start, end)`` window and the one before it.

    The previous window always has the same length as the current one.
    """
    if end <= start:
        raise InvalidDateRange(start, end)
    span = end - start
    current = filter_series_window(series, start, end)
    previous = filter_series_window(series, start - span, start)
    logger.debug(
        "Windowed %s: %d current and %d previous periods.",
        series.bucket_id or "series",
        current.total_periods,
        previous.total_periods,
    )
    return current, previous


def _aligned(moment: datetime, reference: datetime) -> datetime:
    # Naive bounds are read in the zone of the point they are compared with.
    if moment.tzinfo is None and reference.tzinfo is not None:
        return moment.replace(tzinfo=reference.tzinfo)
    if moment.tzinfo is not None and reference.tzinfo is None:
        return moment.replace(tzinfo=None)
    return moment


def period_change_percent(current_total: float, previous_total: float) -> float:
    """Relative change of the total tracked time between two periods."""
    if previous_total > 0:
        return (current_total - previous_total) / previous_total * 100.0
    return 100.0 if current_total > 0 else 0.0
