"""FastAPI application that exposes the insights pipeline as a local JSON API."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field

from .config import PipelineSettings
from .errors import EmptySeries, PipelineError
from .payloads import CategoryPayload, EventPayload, StochasticPayload
from .pipeline import (
    ComparisonParams,
    ContourParams,
    SeriesParams,
    compare_categories,
    compare_series,
    event_contours,
)
from .reporting import comparison_rows, comparison_summary, contour_rows, series_rows
from .sequencing import ViewStateStore

logger = logging.getLogger(__name__)


class ComparisonRequest(BaseModel):
    current: CategoryPayload
    combined: Optional[CategoryPayload] = None
    category_count: Optional[int] = Field(default=None, ge=1)

    model_config = ConfigDict(extra="forbid")


class SeriesRequest(BaseModel):
    payload: StochasticPayload
    category_count: Optional[int] = Field(default=None, ge=1)
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    model_config = ConfigDict(extra="forbid")


class ContourRequest(BaseModel):
    payload: EventPayload
    bandwidth_hours: Optional[float] = Field(default=None, gt=0)
    threshold_count: Optional[int] = Field(default=None, ge=1)
    max_activities: Optional[int] = Field(default=None, ge=1)
    min_duration_seconds: Optional[float] = Field(default=None, ge=0)

    model_config = ConfigDict(extra="forbid")


def create_app(*, settings: Optional[PipelineSettings] = None) -> FastAPI:
    """Instantiate the FastAPI application."""
    resolved_settings = settings or PipelineSettings()
    views = ViewStateStore()

    app = FastAPI(title="Activity Insights", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.settings = resolved_settings
    app.state.views = views

    @app.get("/api/status")
    def status(request: Request) -> Dict[str, Any]:
        return {"settings": request.app.state.settings.to_dict()}

    @app.post("/api/comparison")
    def comparison(
        body: ComparisonRequest,
        view_id: Optional[str] = Query(default=None),
        request_id: Optional[int] = Query(default=None, ge=1),
    ) -> Dict[str, Any]:
        params = ComparisonParams(
            category_count=body.category_count or resolved_settings.category_count,
            combined=body.combined,
        )

        def compute() -> Dict[str, Any]:
            pair = compare_categories(body.current, params)
            return {
                "status": "ok",
                "rows": comparison_rows(pair),
                "summary": comparison_summary(pair),
            }

        return _run_for_view(views, view_id, request_id, compute)

    @app.post("/api/series")
    def series(
        body: SeriesRequest,
        view_id: Optional[str] = Query(default=None),
        request_id: Optional[int] = Query(default=None, ge=1),
    ) -> Dict[str, Any]:
        params = SeriesParams(
            category_count=body.category_count or resolved_settings.category_count,
            start=body.start,
            end=body.end,
        )

        def compute() -> Dict[str, Any]:
            result = compare_series(body.payload, params)
            return {
                "status": "ok",
                "current": series_rows(result.current),
                "previous": series_rows(result.previous) if result.previous else None,
            }

        return _run_for_view(views, view_id, request_id, compute)

    @app.post("/api/contours")
    def contours(
        body: ContourRequest,
        view_id: Optional[str] = Query(default=None),
        request_id: Optional[int] = Query(default=None, ge=1),
    ) -> Dict[str, Any]:
        overrides = resolved_settings.with_overrides(
            bandwidth_hours=body.bandwidth_hours,
            threshold_count=body.threshold_count,
            max_activities=body.max_activities,
            min_duration_seconds=body.min_duration_seconds,
        )
        params = ContourParams(
            bandwidth=overrides.bandwidth_hours,
            threshold_count=overrides.threshold_count,
            width=overrides.plot_width,
            height=overrides.plot_height,
            min_duration=overrides.min_duration_hours,
            max_activities=overrides.max_activities,
            cell_size=overrides.cell_size,
        )

        def compute() -> Dict[str, Any]:
            return {
                "status": "ok",
                "contours": contour_rows(event_contours(body.payload, params)),
            }

        return _run_for_view(views, view_id, request_id, compute)

    @app.get("/api/views/{view_id}")
    def view_state(view_id: str, request: Request) -> Dict[str, Any]:
        sequencer = request.app.state.views.get(view_id)
        if sequencer is None:
            raise HTTPException(status_code=404, detail="View not found")
        committed_id, result = sequencer.latest
        if not committed_id:
            raise HTTPException(status_code=404, detail="View has no results yet")
        return {"view_id": view_id, "request_id": committed_id, "result": result}

    return app


def _run_for_view(
    views: ViewStateStore,
    view_id: Optional[str],
    request_id: Optional[int],
    compute: Callable[[], Dict[str, Any]],
) -> Dict[str, Any]:
    """Compute a result and, for a named view, keep it only if it is the newest."""
    sequencer = views.sequencer(view_id) if view_id else None
    if sequencer is not None:
        if request_id is None:
            request_id = sequencer.next_id()
        else:
            sequencer.observe(request_id)
        if not sequencer.is_current(request_id):
            raise HTTPException(status_code=409, detail="A newer request superseded this one")

    try:
        result = compute()
    except EmptySeries:
        result = {"status": "no_data"}
    except PipelineError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    if sequencer is not None:
        if not sequencer.commit(request_id, result):
            raise HTTPException(status_code=409, detail="A newer request superseded this one")
        result = {**result, "request_id": request_id}
    return result
