from __future__ import annotations

from datetime import timedelta

import pytest
from pydantic import ValidationError

from activity_insights.errors import EmptySeries
from activity_insights.models import OTHER_CATEGORY
from activity_insights.payloads import (
    CategoryPayload,
    EventPayload,
    StochasticPayload,
    parse_payload,
)
from activity_insights.pipeline import (
    ComparisonParams,
    ContourParams,
    SeriesComparison,
    SeriesParams,
    run,
)
from tests.conftest import (
    T0,
    category_payload,
    event_payload,
    stochastic_payload,
)

CONTOURS = ContourParams(
    bandwidth=1.0,
    threshold_count=4,
    width=640,
    height=380,
    min_duration=0.0,
    max_activities=5,
)


class TestParsePayload:
    def test_dispatches_on_kind(self) -> None:
        assert isinstance(parse_payload(category_payload({"A": 1})), CategoryPayload)
        assert isinstance(parse_payload(stochastic_payload({"A": 1})), StochasticPayload)
        assert isinstance(parse_payload(event_payload()), EventPayload)

    def test_unknown_kind_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            parse_payload({"kind": "widget"})

    def test_missing_kind_is_rejected(self) -> None:
        data = category_payload({"A": 1})
        del data["kind"]

        with pytest.raises(ValidationError):
            parse_payload(data)


class TestRun:
    def test_category_comparison(self) -> None:
        current = parse_payload(category_payload({"A": 3600, "B": 1800, "C": 600}))
        combined = parse_payload(category_payload({"A": 7200, "B": 3600, "C": 600, "D": 900}))

        pair = run(current, ComparisonParams(category_count=2, combined=combined))

        assert pair.current.durations() == {"A": 3600, "B": 1800, OTHER_CATEGORY: 600}
        assert pair.previous.durations() == {"A": 3600, "B": 1800, OTHER_CATEGORY: 900}
        assert pair.previous.total_duration == 6300

    def test_category_without_combined_has_empty_previous(self) -> None:
        current = parse_payload(category_payload({"A": 60}))

        pair = run(current, ComparisonParams(category_count=3))

        assert pair.previous.categories == ()
        assert pair.previous.total_duration == 0

    def test_series_whole_range(self) -> None:
        payload = parse_payload(stochastic_payload({"a": 5, "b": 1}, {"b": 2}))

        result = run(payload, SeriesParams(category_count=1))

        assert isinstance(result, SeriesComparison)
        assert result.previous is None
        assert result.current.categories == ("a", OTHER_CATEGORY)

    def test_series_window_shares_categories_with_previous(self) -> None:
        payload = parse_payload(
            stochastic_payload(
                {"old": 100, "a": 1},
                {"old": 100, "b": 1},
                {"a": 10, "b": 2, "c": 1},
                {"a": 10, "b": 3},
            )
        )

        result = run(
            payload,
            SeriesParams(category_count=2, start=T0 + timedelta(days=2), end=T0 + timedelta(days=4)),
        )

        assert result.current.categories == ("a", "b", OTHER_CATEGORY)
        assert [dict(point.categories) for point in result.previous.points] == [
            {"a": 1, OTHER_CATEGORY: 100},
            {"b": 1, OTHER_CATEGORY: 100},
        ]

    def test_empty_window_raises_empty_series(self) -> None:
        payload = parse_payload(stochastic_payload({"a": 1}))

        with pytest.raises(EmptySeries):
            run(
                payload,
                SeriesParams(
                    category_count=2,
                    start=T0 + timedelta(days=30),
                    end=T0 + timedelta(days=31),
                ),
            )

    def test_event_contours(self, morning_events) -> None:
        payload = parse_payload(event_payload(*morning_events))

        polygons = run(payload, CONTOURS)

        assert {polygon.activity for polygon in polygons} == {"Code", "firefox"}

    def test_params_must_match_payload(self) -> None:
        payload = parse_payload(category_payload({"A": 1}))

        with pytest.raises(TypeError):
            run(payload, CONTOURS)
