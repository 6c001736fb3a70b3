"""Place raw watcher events on a 24-hour clock."""

from __future__ import annotations

from datetime import time
from typing import Iterable

from .models import DensitySample, EventRecord
from .normalization import activity_label
from .payloads import EventPayload, RawEvent


def extract_time_of_day(events: Iterable[RawEvent]) -> list[EventRecord]:
    """Return one record per event with its wall-clock start and hours.

    The time of day is read in whatever zone the timestamp was recorded in;
    no conversion is applied.
    """
    return [
        EventRecord(
            activity=activity_label(event.data.app, event.data.title),
            start_time_of_day=event.timestamp.time(),
            duration=event.duration / 3600.0,
        )
        for event in events
    ]


def records_from_payload(payload: EventPayload) -> list[EventRecord]:
    return extract_time_of_day(payload.events)


def fractional_hours(value: time) -> float:
    return (
        value.hour
        + value.minute / 60.0
        + (value.second + value.microsecond / 1_000_000) / 3600.0
    )


def to_density_samples(records: Iterable[EventRecord]) -> list[DensitySample]:
    return [
        DensitySample(
            x=fractional_hours(record.start_time_of_day),
            y=record.duration,
            activity=record.activity,
        )
        for record in records
    ]
