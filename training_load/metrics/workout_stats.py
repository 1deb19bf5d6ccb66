"""Headline workout statistics: totals, pace, longest workout and trend."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from datetime import date

from training_load.config.settings import DEFAULT_LOAD_MODEL, LoadModelConfig
from training_load.metrics.records import RawWorkout, local_date, prepare_records, validate_range
from training_load.metrics.weekly_volume import aggregate_weekly_volume
from training_load.models.load import WeeklyVolume
from training_load.models.summary import LongestWorkout, ProgressTrend, WorkoutSummary

# Week-over-week change (percent) beyond which the trend is no longer "stable"
TREND_CHANGE_PCT = 10.0


def format_pace(duration_minutes: float, distance_km: float) -> str:
    """Average pace as "m:ss" per km; "0:00" when no distance was covered."""
    if distance_km <= 0:
        return "0:00"
    total_seconds = round(duration_minutes / distance_km * 60)
    minutes, seconds = divmod(total_seconds, 60)
    return f"{minutes}:{seconds:02d}"


def progress_trend(weeks: Sequence[WeeklyVolume]) -> ProgressTrend:
    """Compare the last two weekly totals."""
    if not weeks or all(w.workout_count == 0 for w in weeks):
        return ProgressTrend.NO_DATA
    if len(weeks) < 2:
        return ProgressTrend.STABLE

    previous = weeks[-2].total_distance_km
    latest = weeks[-1].total_distance_km
    if not previous:
        return ProgressTrend.STABLE

    change = (latest - previous) / previous * 100
    if change > TREND_CHANGE_PCT:
        return ProgressTrend.IMPROVING
    if change < -TREND_CHANGE_PCT:
        return ProgressTrend.DECLINING
    return ProgressTrend.STABLE


def summarize_records(
    records: Iterable[RawWorkout],
    from_date: date,
    to_date: date,
    config: LoadModelConfig = DEFAULT_LOAD_MODEL,
) -> WorkoutSummary:
    """Summarize workouts whose local start date falls in [from_date, to_date]."""
    validate_range(from_date, to_date)
    prepared = prepare_records(records)

    in_range = [
        r
        for r in prepared.records
        if from_date <= local_date(r.start_time, config.timezone) <= to_date
        and math.isfinite(r.duration_sec)
        and r.duration_sec > 0
        and (r.distance_km is None or r.distance_km >= 0)
    ]

    total_distance = sum(r.distance_km or 0.0 for r in in_range)
    total_minutes = sum(r.duration_sec for r in in_range) / 60.0

    longest: LongestWorkout | None = None
    with_distance = [r for r in in_range if r.distance_km and r.distance_km > 0]
    if with_distance:
        best = max(with_distance, key=lambda r: (r.distance_km, -r.start_time.timestamp()))
        longest = LongestWorkout(
            workout_id=best.workout_id,
            date=local_date(best.start_time, config.timezone),
            distance_km=best.distance_km,
        )

    weekly = aggregate_weekly_volume(in_range, from_date, to_date, config).weeks

    return WorkoutSummary(
        total_workouts=len(in_range),
        total_distance_km=round(total_distance, 2),
        total_duration_minutes=round(total_minutes, 1),
        average_pace=format_pace(total_minutes, total_distance),
        longest_workout=longest,
        weekly_breakdown=weekly,
        progress_trend=progress_trend(weekly),
    )
