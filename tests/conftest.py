"""Root conftest for all tests.

This file makes shared fixtures available across all test modules.
"""

import datetime as dt
from collections.abc import Callable
from contextlib import contextmanager

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from training_load.models.workout import WorkoutRecord
from training_load.providers.memory import InMemoryWorkoutProvider

REFERENCE_DAY = dt.date(2025, 1, 10)


@pytest.fixture
def reference_day() -> dt.date:
    """Stable "today" for tests that compute trailing ranges."""
    return REFERENCE_DAY


@pytest.fixture
def make_workout() -> Callable[..., WorkoutRecord]:
    """Factory for WorkoutRecords positioned relative to a reference day.

    Workouts start at noon so local-date bucketing is unambiguous.
    """

    counter = {"n": 0}

    def _make(
        *,
        days_ago: int = 0,
        duration_min: float = 60,
        avg_hr: float | None = 150,
        max_hr: float | None = 190,
        distance_km: float | None = 10.0,
        today: dt.date = REFERENCE_DAY,
        workout_id: str | None = None,
    ) -> WorkoutRecord:
        counter["n"] += 1
        day = today - dt.timedelta(days=days_ago)
        return WorkoutRecord(
            workout_id=workout_id or f"w-{counter['n']}",
            start_time=dt.datetime.combine(day, dt.time(12, 0)),
            duration_sec=duration_min * 60,
            avg_hr=avg_hr,
            max_hr=max_hr,
            distance_km=distance_km,
        )

    return _make


@pytest.fixture
def provider() -> InMemoryWorkoutProvider:
    return InMemoryWorkoutProvider()


@pytest.fixture(scope="function")
def db_session():
    """
    Provides a transactional in-memory SQLite DB session for tests.

    Creates an isolated in-memory database per test and rolls back on teardown.
    """
    from training_load.db.models import Base

    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)

    connection = engine.connect()
    transaction = connection.begin()
    session = sessionmaker(bind=connection, autocommit=False, autoflush=False)()

    try:
        yield session
    finally:
        session.rollback()
        if transaction.is_active:
            transaction.rollback()
        session.close()
        connection.close()
        engine.dispose()


@pytest.fixture
def session_factory(db_session):
    """Context-managed session factory bound to the test session."""

    @contextmanager
    def _factory():
        yield db_session

    return _factory
