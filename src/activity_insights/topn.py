"""Reduce a category set to its N largest entries plus an ``Other`` bucket."""

from __future__ import annotations

from typing import Iterable, Mapping

from .models import OTHER_CATEGORY, CategorySnapshot, PeriodPair
from .snapshots import build_snapshot


def rank_names(durations: Iterable[tuple[str, float]], n: int) -> list[str]:
    """Return the ``n`` largest names; ties keep their input order."""
    _check_count(n)
    ranked = sorted(durations, key=lambda item: item[1], reverse=True)
    return [name for name, _ in ranked[:n]]


def select_top_n(snapshot: CategorySnapshot, n: int) -> CategorySnapshot:
    selected = rank_names(
        ((record.name, record.duration) for record in snapshot.categories), n
    )
    return apply_selection(snapshot, selected)


def select_top_n_pair(pair: PeriodPair, n: int) -> PeriodPair:
    """Pick the top names from ``current`` and apply them to both sides."""
    selected = rank_names(
        ((record.name, record.duration) for record in pair.current.categories), n
    )
    return PeriodPair(
        current=apply_selection(pair.current, selected),
        previous=apply_selection(pair.previous, selected),
    )


def apply_selection(snapshot: CategorySnapshot, selected: list[str]) -> CategorySnapshot:
    """Keep ``selected`` names (in that order) and sum the rest into ``Other``.

    Selected names missing from ``snapshot`` are skipped.
    """
    partition = partition_durations(snapshot.durations(), selected)
    return build_snapshot(partition, total_duration=snapshot.total_duration)


def partition_durations(
    durations: Mapping[str, float], selected: Iterable[str]
) -> dict[str, float]:
    kept: dict[str, float] = {}
    for name in selected:
        if name in durations:
            kept[name] = durations[name]
    chosen = set(kept)
    overflow = sum(value for name, value in durations.items() if name not in chosen)
    if overflow > 0:
        kept[OTHER_CATEGORY] = kept.get(OTHER_CATEGORY, 0.0) + overflow
    return kept


def _check_count(n: int) -> None:
    if isinstance(n, bool) or not isinstance(n, int) or n < 1:
        raise ValueError(f"category count must be a positive integer, got {n!r}")
