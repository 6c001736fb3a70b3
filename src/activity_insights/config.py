"""Configuration models and helpers for the insights pipeline."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Annotated, Any

from pydantic import Field, TypeAdapter

PositiveInt = Annotated[int, Field(ge=1)]


@dataclass(slots=True)
class PipelineSettings:
    """Caller-side defaults for the chart parameters."""

    category_count: PositiveInt = 10
    bandwidth_hours: Annotated[float, Field(gt=0)] = 1.0
    threshold_count: PositiveInt = 15
    max_activities: PositiveInt = 10
    min_duration_seconds: Annotated[float, Field(ge=0)] = 60.0
    plot_width: PositiveInt = 640
    plot_height: PositiveInt = 380
    cell_size: PositiveInt = 4

    @property
    def min_duration_hours(self) -> float:
        return self.min_duration_seconds / 3600.0

    @classmethod
    def from_file(cls, path: Path) -> "PipelineSettings":
        """Load settings from a JSON object; missing keys keep their defaults."""
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"{path}: settings must be a JSON object")
        return cls().with_overrides(**data)

    def with_overrides(self, **overrides: Any) -> "PipelineSettings":
        """Return a validated copy; raises ``ValueError`` for bad keys or values."""
        known = {field.name for field in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ValueError(f"Unknown settings: {', '.join(unknown)}")
        values = {key: value for key, value in overrides.items() if value is not None}
        return _settings_adapter.validate_python(asdict(replace(self, **values)))

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


_settings_adapter = TypeAdapter(PipelineSettings)
