from training_load.models.load import (
    ChartPoint,
    ChartWindow,
    DailyStress,
    LoadPoint,
    LoadSeriesResult,
    ReadinessAssessment,
    ReadinessBand,
    WeeklyVolume,
)
from training_load.models.summary import LongestWorkout, ProgressTrend, WorkoutSummary
from training_load.models.workout import WorkoutRecord

__all__ = [
    "ChartPoint",
    "ChartWindow",
    "DailyStress",
    "LoadPoint",
    "LoadSeriesResult",
    "LongestWorkout",
    "ProgressTrend",
    "ReadinessAssessment",
    "ReadinessBand",
    "WeeklyVolume",
    "WorkoutRecord",
    "WorkoutSummary",
]
