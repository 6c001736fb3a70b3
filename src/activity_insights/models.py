"""Domain models for aggregated activity data."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, time
from types import MappingProxyType
from typing import Mapping, Optional


OTHER_CATEGORY = "Other"


@dataclass(frozen=True, slots=True)
class CategoryRecord:
    """Time spent in one category, with its share of the snapshot total."""

    name: str
    duration: float
    percentage: float


@dataclass(frozen=True, slots=True)
class CategorySnapshot:
    """Per-category durations for one period.

    ``total_duration`` is the denominator for every percentage; the categories
    may cover only part of it.
    """

    categories: tuple[CategoryRecord, ...]
    total_duration: float

    def durations(self) -> dict[str, float]:
        return {record.name: record.duration for record in self.categories}

    def get(self, name: str) -> Optional[CategoryRecord]:
        for record in self.categories:
            if record.name == name:
                return record
        return None

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(record.name for record in self.categories)


@dataclass(frozen=True, slots=True)
class PeriodPair:
    current: CategorySnapshot
    previous: CategorySnapshot


@dataclass(frozen=True, slots=True)
class StochasticPoint:
    """Category durations (seconds) for the bucket ending at ``end``."""

    end: datetime
    categories: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "categories", MappingProxyType(dict(self.categories)))


@dataclass(frozen=True, slots=True)
class StochasticSeries:
    points: tuple[StochasticPoint, ...]
    period_hours: float
    bucket_id: str
    timeframe_days: Optional[float] = None

    @property
    def total_periods(self) -> int:
        return len(self.points)


@dataclass(frozen=True, slots=True)
class BinnedSeries:
    """A series whose points only use ``categories`` as keys."""

    categories: tuple[str, ...]
    points: tuple[StochasticPoint, ...]
    period_hours: float
    bucket_id: str


@dataclass(frozen=True, slots=True)
class EventRecord:
    """A single tracked event placed on the clock face.

    ``duration`` is in hours once produced by the time-of-day extractor.
    """

    activity: str
    start_time_of_day: time
    duration: float


@dataclass(frozen=True, slots=True)
class DensitySample:
    x: float
    y: float
    activity: str


@dataclass(frozen=True, slots=True)
class ContourPolygon:
    """One closed iso-density ring for an activity."""

    activity: str
    level: float
    ring: tuple[tuple[float, float], ...]
