"""Helpers to launch the local insights API."""

from __future__ import annotations

import logging
from typing import Optional

import uvicorn

from .config import PipelineSettings
from .webapp import create_app


def run_dashboard(
    *,
    host: str = "127.0.0.1",
    port: int = 8765,
    settings: Optional[PipelineSettings] = None,
    log_level: str = "info",
) -> None:
    """Start the FastAPI app that serves chart data to the dashboard."""
    app = create_app(settings=settings or PipelineSettings())

    logging.getLogger(__name__).info("Serving insights API on http://%s:%d", host, port)
    logging.getLogger("uvicorn.error").setLevel(log_level.upper())
    uvicorn.run(app, host=host, port=port, log_level=log_level)
