"""Training load metrics computation (CTL, ATL, TSB).

This module provides deterministic, idempotent computation of training load
metrics from a contiguous daily stress series.

Metrics:
- CTL (Chronic Training Load): EWMA with time constant config.tau_ctl_days (42)
- ATL (Acute Training Load): EWMA with time constant config.tau_atl_days (7)
- TSB (Training Stress Balance): CTL - ATL

Recurrence, for day i:
    ctl[i] = stress[i] * (1 - e^(-1/tau_ctl)) + ctl[i-1] * e^(-1/tau_ctl)
    atl[i] = stress[i] * (1 - e^(-1/tau_atl)) + atl[i-1] * e^(-1/tau_atl)
    tsb[i] = ctl[i] - atl[i]
seeded with ctl[-1] = atl[-1] = 0 on the day before the first input day.

Properties:
- Deterministic: Same input always produces same output
- Idempotent: Safe to recompute multiple times
- Missing data handling: idle days must be present as zero stress, not omitted
- No rounding: values keep full precision, presentation rounds
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from training_load.config.settings import DEFAULT_LOAD_MODEL, LoadModelConfig
from training_load.models.load import DailyStress, LoadPoint


def decay_factor(tau_days: float) -> float:
    """Fraction of yesterday's load carried into today: e^(-1/tau)."""
    return math.exp(-1.0 / tau_days)


def calculate_ewma(values: Sequence[float], tau_days: float, seed: float = 0.0) -> list[float]:
    """Calculate exponentially weighted moving average.

    Args:
        values: Daily values, oldest first, idle days as 0.0
        tau_days: Time constant in days (e.g., 42 for CTL, 7 for ATL)
        seed: EWMA value on the day before values[0]

    Returns:
        List of EWMA values, one per input value
    """
    decay = decay_factor(tau_days)
    alpha = 1.0 - decay

    result: list[float] = []
    prev = seed
    for value in values:
        prev = value * alpha + prev * decay
        result.append(prev)
    return result


def calculate_ctl_atl_tsb(
    daily_load: Sequence[float],
    config: LoadModelConfig = DEFAULT_LOAD_MODEL,
) -> dict[str, list[float]]:
    """Calculate CTL, ATL, and TSB series from daily stress values.

    Args:
        daily_load: Daily stress, ordered chronologically. Missing days must be
                    represented as 0.0, not omitted.
        config: Model constants (time constants)

    Returns:
        Dictionary with "ctl", "atl" and "tsb" lists aligned with daily_load

    Example:
        >>> result = calculate_ctl_atl_tsb([100.0, 0.0, 50.0])
        >>> len(result["ctl"]) == 3
        True
    """
    if not daily_load:
        return {"ctl": [], "atl": [], "tsb": []}

    ctl = calculate_ewma(daily_load, tau_days=config.tau_ctl_days)
    atl = calculate_ewma(daily_load, tau_days=config.tau_atl_days)
    tsb = [c - a for c, a in zip(ctl, atl, strict=True)]

    return {"ctl": ctl, "atl": atl, "tsb": tsb}


def calculate_load_curve(
    daily_stress: Sequence[DailyStress],
    config: LoadModelConfig = DEFAULT_LOAD_MODEL,
) -> list[LoadPoint]:
    """Run the CTL/ATL recurrence over a contiguous DailyStress series.

    The first entry is seeded from zero, so callers must supply enough lookback
    (45+ days) before reading TSB as meaningful. The range is never extended.

    Args:
        daily_stress: Contiguous daily series, oldest first
        config: Model constants

    Returns:
        LoadPoint series aligned 1:1 with daily_stress
    """
    metrics = calculate_ctl_atl_tsb([d.stress for d in daily_stress], config)

    return [
        LoadPoint(date=d.date, ctl=ctl, atl=atl, tsb=tsb)
        for d, ctl, atl, tsb in zip(daily_stress, metrics["ctl"], metrics["atl"], metrics["tsb"], strict=True)
    ]


def latest_load(points: Sequence[LoadPoint]) -> LoadPoint | None:
    """Most recent LoadPoint, or None for an empty series."""
    return points[-1] if points else None
