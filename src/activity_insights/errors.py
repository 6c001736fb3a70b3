"""Exceptions raised by the aggregation pipeline."""

from __future__ import annotations


class PipelineError(ValueError):
    """Base class for invalid pipeline input."""


class InvalidSnapshot(PipelineError):
    """A category payload has a negative duration or a malformed entry."""


class EmptySeries(PipelineError):
    """No series points fall inside the requested window."""


class InvalidDateRange(PipelineError):
    """The requested window ends on or before its start."""

    def __init__(self, start: object, end: object) -> None:
        super().__init__(f"end ({end}) must be after start ({start})")
        self.start = start
        self.end = end


class InsufficientSamples(PipelineError):
    """Too few distinct samples to estimate a density for an activity."""

    def __init__(self, activity: str, distinct: int, required: int) -> None:
        super().__init__(
            f"activity {activity!r} has {distinct} distinct time-of-day samples; "
            f"{required} required"
        )
        self.activity = activity
        self.distinct = distinct
        self.required = required
