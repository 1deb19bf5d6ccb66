import datetime as dt
import json
from contextlib import contextmanager

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from training_load.db.models import Activity
from training_load.metrics.computation_service import compute_load_series
from training_load.metrics.daily_aggregation import intensity_factor
from training_load.metrics.errors import UpstreamUnavailableError
from training_load.models.workout import WorkoutRecord
from training_load.providers.memory import InMemoryWorkoutProvider, JsonFileWorkoutProvider
from training_load.providers.sql import SqlWorkoutProvider


def _activity(athlete_id: str, day: dt.date, **kwargs) -> Activity:
    return Activity(
        athlete_id=athlete_id,
        start_time=dt.datetime.combine(day, dt.time(7, 30), tzinfo=dt.UTC),
        moving_time_seconds=kwargs.get("moving_time_seconds", 3600),
        average_heartrate=kwargs.get("average_heartrate", 145.0),
        max_heartrate=kwargs.get("max_heartrate"),
        distance_km=kwargs.get("distance_km", 10.0),
    )


def test_sql_provider_filters_by_athlete_and_range(db_session, session_factory, reference_day):
    db_session.add_all(
        [
            _activity("a1", reference_day),
            _activity("a1", reference_day - dt.timedelta(days=3)),
            _activity("a1", reference_day - dt.timedelta(days=60)),
            _activity("a2", reference_day),
        ]
    )
    db_session.flush()

    provider = SqlWorkoutProvider(session_factory)
    records = provider.list_workouts("a1", reference_day - dt.timedelta(days=7), reference_day)

    assert len(records) == 2
    assert all(isinstance(r, WorkoutRecord) for r in records)
    assert records[0].start_time.date() < records[1].start_time.date()
    assert records[1].duration_sec == 3600.0
    assert records[1].avg_hr == 145.0
    assert records[1].max_hr is None


def test_sql_provider_ignores_activity_peak_heart_rate(db_session, session_factory, reference_day):
    db_session.add(_activity("a1", reference_day, average_heartrate=152.0, max_heartrate=171.0))
    db_session.flush()

    (record,) = SqlWorkoutProvider(session_factory).list_workouts("a1", reference_day, reference_day)

    assert record.max_hr is None
    assert intensity_factor(record) == pytest.approx(152 / 190)


def test_sql_provider_feeds_the_engine(db_session, session_factory, reference_day):
    db_session.add_all([_activity("a1", reference_day - dt.timedelta(days=i)) for i in range(10)])
    db_session.add(_activity("a1", reference_day - dt.timedelta(days=2), moving_time_seconds=None))
    db_session.flush()

    result = compute_load_series("a1", 30, SqlWorkoutProvider(session_factory), today=reference_day)

    assert result.workout_count == 10
    assert result.skipped_record_count == 1
    assert result.insufficient_data is False


def test_sql_provider_wraps_database_errors(reference_day):
    # No tables created, so the select fails
    engine = create_engine("sqlite:///:memory:")
    session_local = sessionmaker(bind=engine)

    @contextmanager
    def broken_factory():
        session = session_local()
        try:
            yield session
        finally:
            session.close()

    provider = SqlWorkoutProvider(broken_factory)

    with pytest.raises(UpstreamUnavailableError):
        provider.list_workouts("a1", reference_day - dt.timedelta(days=7), reference_day)

    engine.dispose()


def test_in_memory_provider_filters_with_slack(make_workout, reference_day):
    inside = make_workout(days_ago=3)
    edge = make_workout(days_ago=10)
    outside = make_workout(days_ago=30)
    provider = InMemoryWorkoutProvider({"a1": [inside, edge, outside]})

    records = provider.list_workouts("a1", reference_day - dt.timedelta(days=9), reference_day)

    assert records == [inside, edge]
    assert provider.list_workouts("unknown", reference_day, reference_day) == []


def test_in_memory_provider_passes_raw_rows_through(reference_day):
    raw = {"workout_id": "x", "start_time": "not a date", "duration_sec": 60}
    provider = InMemoryWorkoutProvider({"a1": [raw]})

    assert provider.list_workouts("a1", reference_day, reference_day) == [raw]


def test_json_provider_reads_list_and_filters_athlete(tmp_path, reference_day):
    path = tmp_path / "workouts.json"
    path.write_text(
        json.dumps(
            [
                {"workout_id": "1", "athlete_id": "a1", "start_time": "2025-01-09T08:00:00", "duration_sec": 1800},
                {"workout_id": "2", "athlete_id": "a2", "start_time": "2025-01-09T08:00:00", "duration_sec": 1800},
                {"workout_id": "3", "start_time": "2025-01-08T08:00:00", "duration_sec": 2400},
            ]
        )
    )

    rows = JsonFileWorkoutProvider(path).list_workouts("a1", reference_day, reference_day)

    assert [r["workout_id"] for r in rows] == ["1", "3"]


def test_json_provider_reads_wrapped_payload(tmp_path, reference_day):
    path = tmp_path / "export.json"
    path.write_text(json.dumps({"workouts": [{"workout_id": "1", "start_time": "2025-01-09T08:00:00", "duration_sec": 60}]}))

    rows = JsonFileWorkoutProvider(path).list_workouts("a1", reference_day, reference_day)

    assert len(rows) == 1


@pytest.mark.parametrize("content", ["{not json", '{"workouts": 3}'])
def test_json_provider_bad_file_is_upstream_error(tmp_path, reference_day, content):
    path = tmp_path / "bad.json"
    path.write_text(content)

    with pytest.raises(UpstreamUnavailableError):
        JsonFileWorkoutProvider(path).list_workouts("a1", reference_day, reference_day)


def test_json_provider_missing_file_is_upstream_error(tmp_path, reference_day):
    with pytest.raises(UpstreamUnavailableError):
        JsonFileWorkoutProvider(tmp_path / "missing.json").list_workouts("a1", reference_day, reference_day)
