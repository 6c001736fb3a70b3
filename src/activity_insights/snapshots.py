"""Build validated category snapshots from raw durations."""

from __future__ import annotations

import logging
import math
from typing import Iterable, Mapping, Optional, Union

from .errors import InvalidSnapshot
from .models import CategoryRecord, CategorySnapshot
from .payloads import CategoryPayload

logger = logging.getLogger(__name__)

DurationInput = Union[Mapping[str, float], Iterable[tuple[str, float]]]


def build_snapshot(
    durations: DurationInput, total_duration: Optional[float] = None
) -> CategorySnapshot:
    """Return a snapshot whose percentages are recomputed from the total.

    ``total_duration`` defaults to the sum of ``durations``. A zero total
    yields zero percentages.
    """
    items = list(durations.items()) if isinstance(durations, Mapping) else list(durations)

    seen: set[str] = set()
    for name, duration in items:
        if not isinstance(name, str) or not name:
            raise InvalidSnapshot(f"category name must be a non-empty string, got {name!r}")
        if name in seen:
            raise InvalidSnapshot(f"duplicate category {name!r}")
        seen.add(name)
        _check_duration(name, duration)

    if total_duration is None:
        total = float(sum(duration for _, duration in items))
    else:
        _check_duration("total_duration", total_duration)
        total = float(total_duration)

    records = tuple(
        CategoryRecord(
            name=name,
            duration=float(duration),
            percentage=percentage_of(duration, total),
        )
        for name, duration in items
    )
    return CategorySnapshot(categories=records, total_duration=total)


def snapshot_from_payload(payload: CategoryPayload) -> CategorySnapshot:
    """Rebuild a snapshot from a server payload, ignoring its percentages."""
    snapshot = build_snapshot(
        [(entry.name, entry.duration) for entry in payload.categories],
        total_duration=payload.total_duration,
    )
    logger.debug(
        "Built snapshot with %d categories (total %.0fs).",
        len(snapshot.categories),
        snapshot.total_duration,
    )
    return snapshot


def percentage_of(duration: float, total: float) -> float:
    if total <= 0:
        return 0.0
    return duration / total * 100.0


def _check_duration(name: str, value: float) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidSnapshot(f"{name}: duration must be a number, got {value!r}")
    if not math.isfinite(value):
        raise InvalidSnapshot(f"{name}: duration must be finite, got {value!r}")
    if value < 0:
        raise InvalidSnapshot(f"{name}: negative duration {value!r}")
