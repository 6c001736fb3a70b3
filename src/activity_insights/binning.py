"""Apply a single top-N category selection across a whole time series."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Sequence

from .errors import EmptySeries
from .models import OTHER_CATEGORY, BinnedSeries, StochasticPoint, StochasticSeries
from .payloads import StochasticPayload
from .topn import partition_durations, rank_names

logger = logging.getLogger(__name__)


def series_from_payload(payload: StochasticPayload) -> StochasticSeries:
    points = sorted(
        (StochasticPoint(end=item.end, categories=item.categories) for item in payload.period_data),
        key=lambda point: point.end,
    )
    return StochasticSeries(
        points=tuple(points),
        period_hours=payload.period_hours,
        bucket_id=payload.bucket_id,
        timeframe_days=payload.timeframe_days,
    )


def top_categories(series: StochasticSeries, n: int) -> list[str]:
    """Rank categories by their total across every point of ``series``."""
    totals: defaultdict[str, float] = defaultdict(float)
    for point in series.points:
        for name, seconds in point.categories.items():
            totals[name] += seconds
    return rank_names(totals.items(), n)


def bin_series(series: StochasticSeries, n: int) -> BinnedSeries:
    """Partition every point into the global top ``n`` names plus ``Other``.

    The selection is made once over the whole series, so a category never
    enters or leaves the chart between points.
    """
    if not series.points:
        raise EmptySeries(f"no periods to bin for {series.bucket_id or 'series'}")
    return apply_categories(series, top_categories(series, n))


def apply_categories(series: StochasticSeries, selected: Sequence[str]) -> BinnedSeries:
    """Partition every point of ``series`` into ``selected`` plus ``Other``."""
    binned = tuple(
        StochasticPoint(end=point.end, categories=partition_durations(point.categories, selected))
        for point in series.points
    )

    categories = list(selected)
    if OTHER_CATEGORY not in categories and any(
        OTHER_CATEGORY in point.categories for point in binned
    ):
        categories.append(OTHER_CATEGORY)

    logger.debug(
        "Binned %d periods into %d categories.", len(binned), len(categories)
    )
    return BinnedSeries(
        categories=tuple(categories),
        points=binned,
        period_hours=series.period_hours,
        bucket_id=series.bucket_id,
    )
