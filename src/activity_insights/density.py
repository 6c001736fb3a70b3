"""Kernel density contours of activity over (time of day, duration).

Samples are mapped onto a plot-sized pixel grid (x spans the 24 hours of a
day, y spans zero to the longest retained duration), smoothed with an
isotropic Gaussian kernel and traced into iso-density rings with marching
squares.
"""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from typing import Iterable, Sequence

import numpy as np
from skimage import measure

from .errors import InsufficientSamples
from .models import ContourPolygon, DensitySample
from .topn import rank_names

logger = logging.getLogger(__name__)

HOURS_PER_DAY = 24.0
MIN_DISTINCT_SAMPLES = 2
DEFAULT_CELL_SIZE = 4


def estimate_contours(
    samples: Iterable[DensitySample],
    *,
    bandwidth: float,
    threshold_count: int,
    width: int,
    height: int,
    min_duration: float,
    max_activities: int,
    cell_size: int = DEFAULT_CELL_SIZE,
) -> list[ContourPolygon]:
    """Return iso-density rings for the ``max_activities`` largest activities.

    ``bandwidth`` is a time-of-day radius in hours and ``min_duration`` a
    cutoff in hours below which samples are ignored. Activities with fewer
    than two distinct start times produce no rings.
    """
    _check_positive("bandwidth", bandwidth)
    _check_positive("width", width)
    _check_positive("height", height)
    _check_positive("cell_size", cell_size)
    if threshold_count < 1:
        raise ValueError(f"threshold_count must be at least 1, got {threshold_count!r}")

    retained = [sample for sample in samples if sample.y >= min_duration]
    if not retained:
        return []

    by_activity: defaultdict[str, list[DensitySample]] = defaultdict(list)
    totals: defaultdict[str, float] = defaultdict(float)
    for sample in retained:
        by_activity[sample.activity].append(sample)
        totals[sample.activity] += sample.y
    activities = rank_names(totals.items(), max_activities)

    y_extent = max(sample.y for name in activities for sample in by_activity[name])
    if y_extent <= 0:
        y_extent = 1.0

    polygons: list[ContourPolygon] = []
    for activity in activities:
        points = by_activity[activity]
        xs = np.array([sample.x for sample in points], dtype=float)
        ys = np.array([sample.y for sample in points], dtype=float)
        if len(np.unique(xs)) < MIN_DISTINCT_SAMPLES:
            logger.debug("Skipping %s: not enough distinct start times.", activity)
            continue

        grid = kernel_density_grid(
            xs,
            ys,
            activity=activity,
            bandwidth=bandwidth,
            width=width,
            height=height,
            cell_size=cell_size,
            y_extent=y_extent,
        )
        for level in threshold_levels(float(grid.max()), threshold_count):
            for ring in trace_rings(grid, level, width, height, cell_size, y_extent):
                polygons.append(ContourPolygon(activity=activity, level=level, ring=ring))

    logger.debug(
        "Estimated %d contour rings for %d activities.", len(polygons), len(activities)
    )
    return polygons


def kernel_density_grid(
    xs: Sequence[float],
    ys: Sequence[float],
    *,
    activity: str,
    bandwidth: float,
    width: int,
    height: int,
    cell_size: int,
    y_extent: float,
) -> np.ndarray:
    """Evaluate a Gaussian KDE at the centre of each ``cell_size`` pixel cell.

    Returns an array of shape ``(rows, cols)`` with row 0 at zero duration.
    """
    xs = np.asarray(xs, dtype=float)
    ys = np.asarray(ys, dtype=float)
    distinct = len(np.unique(xs))
    if distinct < MIN_DISTINCT_SAMPLES:
        raise InsufficientSamples(activity, distinct, MIN_DISTINCT_SAMPLES)

    cols = math.ceil(width / cell_size)
    rows = math.ceil(height / cell_size)
    sigma = bandwidth / HOURS_PER_DAY * width

    px = xs / HOURS_PER_DAY * width
    py = ys / y_extent * height
    cx = (np.arange(cols) + 0.5) * cell_size
    cy = (np.arange(rows) + 0.5) * cell_size

    # Separable kernel: the 2D Gaussian is the product of the x and y terms.
    kx = np.exp(-0.5 * ((cx[:, None] - px[None, :]) / sigma) ** 2)
    ky = np.exp(-0.5 * ((cy[:, None] - py[None, :]) / sigma) ** 2)
    return (ky @ kx.T) / (2.0 * math.pi * sigma**2 * len(xs))


def threshold_levels(maximum: float, count: int) -> list[float]:
    """``count`` evenly spaced levels strictly between 0 and ``maximum``."""
    if maximum <= 0:
        return []
    return [maximum * step / (count + 1) for step in range(1, count + 1)]


def trace_rings(
    grid: np.ndarray,
    level: float,
    width: int,
    height: int,
    cell_size: int,
    y_extent: float,
) -> list[tuple[tuple[float, float], ...]]:
    """Marching-squares isolines of ``grid`` at ``level`` in data coordinates."""
    # A zero border guarantees every isoline closes on itself.
    padded = np.pad(grid, 1, mode="constant", constant_values=0.0)
    rings: list[tuple[tuple[float, float], ...]] = []
    for contour in measure.find_contours(padded, level=level):
        rows = contour[:, 0] - 1
        cols = contour[:, 1] - 1
        xs = np.clip((cols + 0.5) * cell_size / width * HOURS_PER_DAY, 0.0, HOURS_PER_DAY)
        ys = np.clip((rows + 0.5) * cell_size / height * y_extent, 0.0, y_extent)
        ring = [(float(x), float(y)) for x, y in zip(xs, ys)]
        if ring[0] != ring[-1]:
            ring.append(ring[0])
        if len(ring) < 4:
            continue
        rings.append(tuple(ring))
    return rings


def _check_positive(name: str, value: float) -> None:
    if not value > 0:
        raise ValueError(f"{name} must be positive, got {value!r}")
