import datetime as dt
import math

import pytest

from training_load.config.settings import LoadModelConfig
from training_load.metrics.daily_aggregation import aggregate_daily_stress, intensity_factor, workout_stress
from training_load.metrics.errors import InvalidRangeError, MalformedRecordError
from training_load.models.workout import WorkoutRecord

FROM = dt.date(2025, 1, 1)
TO = dt.date(2025, 1, 10)


def test_intensity_uses_heart_rate_ratio(make_workout):
    workout = make_workout(avg_hr=152, max_hr=190)

    assert intensity_factor(workout) == pytest.approx(0.8)


def test_intensity_defaults_max_hr_when_missing(make_workout):
    workout = make_workout(avg_hr=133, max_hr=None)

    assert intensity_factor(workout) == pytest.approx(133 / 190)


def test_intensity_falls_back_without_heart_rate(make_workout):
    workout = make_workout(avg_hr=None, max_hr=None)

    assert intensity_factor(workout) == 0.75


def test_intensity_uses_configured_defaults(make_workout):
    config = LoadModelConfig(default_max_hr=200, fallback_intensity=0.6)

    assert intensity_factor(make_workout(avg_hr=150, max_hr=None), config) == pytest.approx(0.75)
    assert intensity_factor(make_workout(avg_hr=None), config) == pytest.approx(0.6)


def test_workout_stress_is_exponential_in_intensity(make_workout):
    workout = make_workout(duration_min=45, avg_hr=None)

    assert workout_stress(workout) == pytest.approx(45 * math.exp(1.92 * 0.75))


def test_workout_stress_rejects_non_positive_duration(make_workout):
    with pytest.raises(MalformedRecordError):
        workout_stress(make_workout(duration_min=0))


def test_series_is_contiguous_with_zero_idle_days(make_workout):
    records = [make_workout(days_ago=0), make_workout(days_ago=5)]

    aggregate = aggregate_daily_stress(records, FROM, TO)

    assert [d.date for d in aggregate.daily] == [FROM + dt.timedelta(days=i) for i in range(10)]
    active = {d.date for d in aggregate.daily if d.stress > 0}
    assert active == {dt.date(2025, 1, 10), dt.date(2025, 1, 5)}
    assert sum(1 for d in aggregate.daily if d.stress == 0) == 8
    assert aggregate.workout_count == 2


def test_same_day_workouts_are_summed(make_workout):
    morning = make_workout(days_ago=0, duration_min=30, avg_hr=None)
    evening = make_workout(days_ago=0, duration_min=60, avg_hr=None)

    aggregate = aggregate_daily_stress([morning, evening], FROM, TO)
    last_day = aggregate.daily[-1]

    assert last_day.workout_count == 2
    assert last_day.stress == pytest.approx(90 * math.exp(1.92 * 0.75))


def test_skip_tolerance_for_negative_duration(make_workout):
    valid = [make_workout(days_ago=i) for i in range(10)]
    bad = make_workout(days_ago=3, duration_min=-5 / 60)

    clean = aggregate_daily_stress(valid, FROM, TO)
    with_bad = aggregate_daily_stress([*valid, bad], FROM, TO)

    assert [d.stress for d in with_bad.daily] == [d.stress for d in clean.daily]
    assert with_bad.skipped_record_count == 1
    assert clean.skipped_record_count == 0


@pytest.mark.parametrize("max_hr", [0.1, 0.5, 100])
def test_workout_stress_rejects_implausible_intensity(make_workout, max_hr):
    with pytest.raises(MalformedRecordError):
        workout_stress(make_workout(avg_hr=150, max_hr=max_hr))


def test_implausible_heart_rate_is_skipped_not_fatal(make_workout):
    valid = [make_workout(days_ago=i) for i in range(10)]
    glitch = make_workout(days_ago=4, avg_hr=150, max_hr=0.1)

    clean = aggregate_daily_stress(valid, FROM, TO)
    with_glitch = aggregate_daily_stress([*valid, glitch], FROM, TO)

    assert [d.stress for d in with_glitch.daily] == [d.stress for d in clean.daily]
    assert with_glitch.skipped_record_count == 1
    assert with_glitch.workout_count == 10


def test_intensity_ceiling_is_configurable(make_workout):
    workout = make_workout(avg_hr=150, max_hr=100)

    assert workout_stress(workout, LoadModelConfig(max_intensity=2.0)) == pytest.approx(60 * math.exp(1.92 * 1.5))


def test_unparseable_rows_are_skipped_and_counted(make_workout):
    rows = [
        make_workout(days_ago=1),
        {"workout_id": "raw-1", "start_time": "2025-01-08T07:30:00", "duration_sec": 1800},
        {"workout_id": "raw-2", "start_time": "not-a-timestamp", "duration_sec": 1800},
        {"start_time": "2025-01-08T07:30:00", "duration_sec": 1800},
    ]

    aggregate = aggregate_daily_stress(rows, FROM, TO)

    assert aggregate.workout_count == 2
    assert aggregate.skipped_record_count == 2


def test_duplicates_are_counted_once(make_workout):
    workout = make_workout(days_ago=2, workout_id="dup")

    once = aggregate_daily_stress([workout], FROM, TO)
    twice = aggregate_daily_stress([workout, workout], FROM, TO)

    assert [d.stress for d in twice.daily] == [d.stress for d in once.daily]
    assert twice.duplicate_record_count == 1
    assert twice.skipped_record_count == 0


def test_records_outside_range_are_ignored(make_workout):
    aggregate = aggregate_daily_stress([make_workout(days_ago=30)], FROM, TO)

    assert all(d.stress == 0 for d in aggregate.daily)
    assert aggregate.workout_count == 0
    assert aggregate.skipped_record_count == 0


def test_aware_timestamps_bucket_into_configured_timezone():
    late_utc = WorkoutRecord(
        workout_id="tz",
        start_time=dt.datetime(2025, 1, 9, 23, 30, tzinfo=dt.UTC),
        duration_sec=3600,
    )

    utc_days = aggregate_daily_stress([late_utc], FROM, TO)
    local_days = aggregate_daily_stress([late_utc], FROM, TO, LoadModelConfig(timezone="Asia/Kolkata"))

    assert utc_days.daily[8].workout_count == 1  # 2025-01-09
    assert local_days.daily[9].workout_count == 1  # 2025-01-10 in IST


def test_inverted_range_is_rejected(make_workout):
    with pytest.raises(InvalidRangeError):
        aggregate_daily_stress([make_workout()], TO, FROM)


def test_single_day_range():
    aggregate = aggregate_daily_stress([], TO, TO)

    assert len(aggregate.daily) == 1
    assert aggregate.daily[0].stress == 0
