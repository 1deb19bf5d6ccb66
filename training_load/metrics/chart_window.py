"""Trailing-window slicing and normalization for the readiness chart.

The normalization basis is the largest |TSB| in the window, floored at
config.chart_basis_floor so near-zero noise is not blown up into full-height
bars. Each point carries a signed fraction (tsb / basis) that drives bar
height and above/below-baseline placement.

When fewer days exist than requested the window is returned as-is with
short_window set. Padding would present missing history as "no load".
"""

from __future__ import annotations

from collections.abc import Sequence

from loguru import logger

from training_load.config.settings import DEFAULT_LOAD_MODEL, LoadModelConfig
from training_load.metrics.errors import InvalidRangeError
from training_load.models.load import ChartPoint, ChartWindow, LoadPoint

DEFAULT_WINDOW_DAYS = 14


def normalization_basis(points: Sequence[LoadPoint], floor: float) -> float:
    """max(|tsb|) over points, never below floor."""
    return max([floor, *(abs(p.tsb) for p in points)])


def format_chart_window(
    load_points: Sequence[LoadPoint],
    window_size: int = DEFAULT_WINDOW_DAYS,
    config: LoadModelConfig = DEFAULT_LOAD_MODEL,
) -> ChartWindow:
    """Slice the trailing window of a load series and normalize it for display.

    Args:
        load_points: Full LoadPoint series, oldest first
        window_size: Number of trailing days to show
        config: Model constants (basis floor)

    Returns:
        ChartWindow with points oldest first

    Raises:
        InvalidRangeError: if window_size is not positive
    """
    if window_size <= 0:
        raise InvalidRangeError(f"window_size must be positive, got {window_size}")

    window = list(load_points[-window_size:])
    short_window = len(window) < window_size
    if short_window:
        logger.info(f"[METRICS] Chart window short: {len(window)} of {window_size} days available")

    basis = normalization_basis(window, config.chart_basis_floor)

    points = [
        ChartPoint(
            date=p.date,
            ctl=round(p.ctl, 2),
            atl=round(p.atl, 2),
            tsb=round(p.tsb, 2),
            fraction=round(p.tsb / basis, 4),
        )
        for p in window
    ]

    return ChartWindow(points=points, basis=basis, short_window=short_window, window_size=window_size)
