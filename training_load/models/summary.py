from __future__ import annotations

from datetime import date
from enum import StrEnum

from pydantic import BaseModel, ConfigDict

from training_load.models.load import WeeklyVolume


class ProgressTrend(StrEnum):
    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"
    NO_DATA = "no_data"


class LongestWorkout(BaseModel):
    model_config = ConfigDict(frozen=True)

    workout_id: str
    date: date
    distance_km: float


class WorkoutSummary(BaseModel):
    """Headline statistics over a window of completed workouts."""

    model_config = ConfigDict(frozen=True)

    total_workouts: int
    total_distance_km: float
    total_duration_minutes: float
    average_pace: str
    longest_workout: LongestWorkout | None
    weekly_breakdown: list[WeeklyVolume]
    progress_trend: ProgressTrend
