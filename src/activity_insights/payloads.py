"""Pydantic models for the JSON payloads served by the analyzer server.

Every payload carries a ``kind`` discriminant so that callers hand the
pipeline one of a closed set of variants instead of an arbitrary dict.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class CategoryEntry(BaseModel):
    name: str
    duration: float
    percentage: Optional[float] = None


class CategoryPayload(BaseModel):
    kind: Literal["category"] = "category"
    categories: list[CategoryEntry] = Field(default_factory=list)
    total_duration: Optional[float] = None


class PeriodPoint(BaseModel):
    end: datetime
    categories: dict[str, float] = Field(default_factory=dict)


class StochasticPayload(BaseModel):
    kind: Literal["stochastic"] = "stochastic"
    period_data: list[PeriodPoint] = Field(default_factory=list)
    period_hours: float
    timeframe_days: Optional[float] = None
    total_periods: Optional[int] = None
    bucket_id: str = ""


class EventData(BaseModel):
    app: Optional[str] = None
    title: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class RawEvent(BaseModel):
    data: EventData = Field(default_factory=EventData)
    timestamp: datetime
    duration: float
    id: Optional[int] = None
    date: Optional[str] = None
    time: Optional[str] = None


class EventPayload(BaseModel):
    kind: Literal["event"] = "event"
    bucket_id: str = ""
    data_source: Optional[str] = None
    end_date: Optional[str] = None
    events: list[RawEvent] = Field(default_factory=list)


Payload = Annotated[
    Union[CategoryPayload, StochasticPayload, EventPayload],
    Field(discriminator="kind"),
]

_PAYLOAD_ADAPTER: TypeAdapter[Any] = TypeAdapter(Payload)


def parse_payload(data: Any) -> Union[CategoryPayload, StochasticPayload, EventPayload]:
    """Validate ``data`` and return the payload variant named by its ``kind``."""
    return _PAYLOAD_ADAPTER.validate_python(data)
