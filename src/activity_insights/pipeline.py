"""Dispatch a parsed payload to the matching chain of pipeline stages."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from .binning import apply_categories, bin_series, series_from_payload
from .density import DEFAULT_CELL_SIZE, estimate_contours
from .models import (
    OTHER_CATEGORY,
    BinnedSeries,
    CategorySnapshot,
    ContourPolygon,
    PeriodPair,
)
from .payloads import CategoryPayload, EventPayload, StochasticPayload
from .periods import derive_period_pair, windowed_period_pair
from .snapshots import snapshot_from_payload
from .timeofday import records_from_payload, to_density_samples
from .topn import select_top_n_pair

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ComparisonParams:
    """``combined`` covers twice the current window and yields the previous period."""

    category_count: int
    combined: Optional[CategoryPayload] = None


@dataclass(frozen=True, slots=True)
class SeriesParams:
    category_count: int
    start: Optional[datetime] = None
    end: Optional[datetime] = None


@dataclass(frozen=True, slots=True)
class ContourParams:
    bandwidth: float
    threshold_count: int
    width: int
    height: int
    min_duration: float
    max_activities: int
    cell_size: int = DEFAULT_CELL_SIZE


@dataclass(frozen=True, slots=True)
class SeriesComparison:
    """Current window plus the preceding window binned with the same names."""

    current: BinnedSeries
    previous: Optional[BinnedSeries] = None


Params = Union[ComparisonParams, SeriesParams, ContourParams]
Payload = Union[CategoryPayload, StochasticPayload, EventPayload]
Result = Union[PeriodPair, SeriesComparison, list[ContourPolygon]]


def run(payload: Payload, params: Params) -> Result:
    if payload.kind == "category" and isinstance(params, ComparisonParams):
        return compare_categories(payload, params)
    if payload.kind == "stochastic" and isinstance(params, SeriesParams):
        return compare_series(payload, params)
    if payload.kind == "event" and isinstance(params, ContourParams):
        return event_contours(payload, params)
    raise TypeError(
        f"{type(params).__name__} cannot be applied to a {payload.kind!r} payload"
    )


def compare_categories(current: CategoryPayload, params: ComparisonParams) -> PeriodPair:
    current_snapshot = snapshot_from_payload(current)
    if params.combined is not None:
        pair = derive_period_pair(snapshot_from_payload(params.combined), current_snapshot)
    else:
        pair = PeriodPair(
            current=current_snapshot,
            previous=CategorySnapshot(categories=(), total_duration=0.0),
        )
    return select_top_n_pair(pair, params.category_count)


def compare_series(payload: StochasticPayload, params: SeriesParams) -> SeriesComparison:
    series = series_from_payload(payload)
    if params.start is None or params.end is None:
        return SeriesComparison(current=bin_series(series, params.category_count))

    current, previous = windowed_period_pair(series, params.start, params.end)
    binned = bin_series(current, params.category_count)
    selected = [name for name in binned.categories if name != OTHER_CATEGORY]
    return SeriesComparison(current=binned, previous=apply_categories(previous, selected))


def event_contours(payload: EventPayload, params: ContourParams) -> list[ContourPolygon]:
    samples = to_density_samples(records_from_payload(payload))
    logger.debug("Estimating contours for %d events.", len(samples))
    return estimate_contours(
        samples,
        bandwidth=params.bandwidth,
        threshold_count=params.threshold_count,
        width=params.width,
        height=params.height,
        min_duration=params.min_duration,
        max_activities=params.max_activities,
        cell_size=params.cell_size,
    )
