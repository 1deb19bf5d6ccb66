import datetime as dt

import pytest

from training_load.metrics.workout_stats import format_pace, progress_trend, summarize_records
from training_load.models.load import WeeklyVolume
from training_load.models.summary import ProgressTrend


def weeks(*distances: float) -> list[WeeklyVolume]:
    start = dt.date(2025, 1, 6)
    return [
        WeeklyVolume(week_start=start + dt.timedelta(weeks=i), total_distance_km=d, workout_count=1 if d else 0)
        for i, d in enumerate(distances)
    ]


@pytest.mark.parametrize(
    ("minutes", "km", "pace"),
    [
        (50, 10, "5:00"),
        (55.5, 10, "5:33"),
        (59.99, 10, "6:00"),
        (30, 0, "0:00"),
    ],
)
def test_format_pace(minutes, km, pace):
    assert format_pace(minutes, km) == pace


def test_progress_trend():
    assert progress_trend(weeks(20, 25)) == ProgressTrend.IMPROVING
    assert progress_trend(weeks(20, 15)) == ProgressTrend.DECLINING
    assert progress_trend(weeks(20, 21)) == ProgressTrend.STABLE
    assert progress_trend(weeks(0, 21)) == ProgressTrend.STABLE
    assert progress_trend(weeks(21)) == ProgressTrend.STABLE
    assert progress_trend(weeks(0, 0)) == ProgressTrend.NO_DATA
    assert progress_trend([]) == ProgressTrend.NO_DATA


def test_summary_totals(make_workout, reference_day):
    records = [
        make_workout(days_ago=1, duration_min=50, distance_km=10),
        make_workout(days_ago=3, duration_min=100, distance_km=18),
        make_workout(days_ago=5, duration_min=30, distance_km=None),
        make_workout(days_ago=2, duration_min=-1, distance_km=40),
    ]

    summary = summarize_records(records, reference_day - dt.timedelta(days=13), reference_day)

    assert summary.total_workouts == 3
    assert summary.total_distance_km == 28.0
    assert summary.total_duration_minutes == 180.0
    assert summary.average_pace == "6:26"
    assert summary.longest_workout.distance_km == 18
    assert summary.longest_workout.date == reference_day - dt.timedelta(days=3)
    assert [w.week_start for w in summary.weekly_breakdown] == [dt.date(2024, 12, 23), dt.date(2024, 12, 30), dt.date(2025, 1, 6)]
    assert summary.progress_trend == ProgressTrend.STABLE


def test_summary_without_workouts(reference_day):
    summary = summarize_records([], reference_day - dt.timedelta(days=6), reference_day)

    assert summary.total_workouts == 0
    assert summary.average_pace == "0:00"
    assert summary.longest_workout is None
    assert summary.progress_trend == ProgressTrend.NO_DATA
