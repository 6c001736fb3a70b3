from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from activity_insights.errors import InvalidDateRange
from activity_insights.periods import (
    derive_period_pair,
    filter_series_window,
    period_change_percent,
    subtract_snapshots,
    windowed_period_pair,
)
from activity_insights.snapshots import build_snapshot
from tests.conftest import T0, make_series


class TestSubtractSnapshots:
    def test_previous_is_combined_minus_current(self) -> None:
        combined = build_snapshot({"A": 7200, "B": 3600})
        current = build_snapshot({"A": 3600, "B": 1800})

        previous = subtract_snapshots(combined, current)

        assert previous.total_duration == 5400
        assert previous.durations() == {"A": 3600, "B": 1800}
        assert previous.get("A").percentage == pytest.approx(66.667, abs=1e-3)
        assert previous.get("B").percentage == pytest.approx(33.333, abs=1e-3)

    def test_totals_are_conserved(self) -> None:
        combined = build_snapshot({"A": 5000, "B": 4000, "C": 1000})
        current = build_snapshot({"A": 2000, "B": 1000, "C": 500})

        previous = subtract_snapshots(combined, current)

        assert previous.total_duration + current.total_duration == combined.total_duration

    def test_non_positive_categories_are_dropped(self) -> None:
        combined = build_snapshot({"A": 3600, "B": 1800})
        current = build_snapshot({"A": 3600, "B": 600, "C": 100})

        previous = subtract_snapshots(combined, current)

        assert previous.names == ("B",)
        assert previous.get("B").duration == 1200

    def test_total_is_clamped_at_zero(self) -> None:
        combined = build_snapshot({"A": 100})
        current = build_snapshot({"A": 50, "B": 150})

        previous = subtract_snapshots(combined, current)

        assert previous.total_duration == 0
        assert previous.get("A").percentage == 0.0

    def test_derive_period_pair_keeps_current(self) -> None:
        combined = build_snapshot({"A": 7200})
        current = build_snapshot({"A": 3600})

        pair = derive_period_pair(combined, current)

        assert pair.current is current
        assert pair.previous.durations() == {"A": 3600}


class TestWindowFilter:
    def test_window_is_half_open(self) -> None:
        series = make_series({"a": 1}, {"a": 2}, {"a": 3}, period_hours=6)

        window = filter_series_window(series, T0, T0 + timedelta(hours=12))

        assert [point.categories["a"] for point in window.points] == [1, 2]
        assert window.total_periods == 2
        assert window.bucket_id == series.bucket_id

    def test_empty_window_is_not_an_error(self) -> None:
        series = make_series({"a": 1})

        window = filter_series_window(series, T0 + timedelta(days=10), T0 + timedelta(days=11))

        assert window.points == ()
        assert window.total_periods == 0

    def test_inverted_range_raises(self) -> None:
        series = make_series({"a": 1})

        with pytest.raises(InvalidDateRange):
            filter_series_window(series, T0, T0)

    def test_naive_bounds_use_point_zone(self) -> None:
        series = make_series({"a": 1}, {"a": 2})
        naive_start = datetime(2024, 5, 1)

        window = filter_series_window(series, naive_start, naive_start + timedelta(hours=1))

        assert window.total_periods == 1

    def test_previous_window_matches_current_length(self) -> None:
        series = make_series(*({"a": float(day)} for day in range(8)))
        start = T0 + timedelta(days=4)
        end = T0 + timedelta(days=6)

        current, previous = windowed_period_pair(series, start, end)

        assert [point.categories["a"] for point in current.points] == [4.0, 5.0]
        assert [point.categories["a"] for point in previous.points] == [2.0, 3.0]

    def test_windowed_pair_rejects_inverted_range(self) -> None:
        series = make_series({"a": 1})

        with pytest.raises(InvalidDateRange):
            windowed_period_pair(series, T0 + timedelta(days=1), T0)


class TestPeriodChange:
    def test_relative_change(self) -> None:
        assert period_change_percent(150, 100) == 50.0
        assert period_change_percent(50, 100) == -50.0

    def test_no_previous_time(self) -> None:
        assert period_change_percent(10, 0) == 100.0
        assert period_change_percent(0, 0) == 0.0
