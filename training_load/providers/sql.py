from __future__ import annotations

from collections.abc import Callable
from contextlib import AbstractContextManager
from datetime import date, datetime, time, timedelta, timezone

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from training_load.db.models import Activity
from training_load.metrics.errors import UpstreamUnavailableError
from training_load.models.workout import WorkoutRecord


def _to_record(activity: Activity) -> WorkoutRecord:
    # max_heartrate is the peak seen during this activity, not the athlete's max HR;
    # leaving max_hr unset applies config.default_max_hr
    return WorkoutRecord(
        workout_id=activity.id,
        start_time=activity.start_time,
        duration_sec=float(activity.moving_time_seconds or 0),
        avg_hr=activity.average_heartrate,
        distance_km=activity.distance_km,
    )


class SqlWorkoutProvider:
    """Read-only provider over the activities table.

    Args:
        session_factory: Callable returning a context-managed Session
                         (e.g. training_load.db.session.get_session)
    """

    def __init__(self, session_factory: Callable[[], AbstractContextManager[Session]]):
        self._session_factory = session_factory

    def list_workouts(self, athlete_id: str, from_date: date, to_date: date) -> list[WorkoutRecord]:
        # One day of slack either side so local-date bucketing sees every candidate
        start = datetime.combine(from_date - timedelta(days=1), time.min).replace(tzinfo=timezone.utc)
        end = datetime.combine(to_date + timedelta(days=1), time.max).replace(tzinfo=timezone.utc)

        try:
            with self._session_factory() as session:
                activities = (
                    session.execute(
                        select(Activity)
                        .where(
                            Activity.athlete_id == athlete_id,
                            Activity.start_time >= start,
                            Activity.start_time <= end,
                        )
                        .order_by(Activity.start_time)
                    )
                    .scalars()
                    .all()
                )
                records = [_to_record(a) for a in activities]
        except SQLAlchemyError as e:
            logger.error(f"[PROVIDER] Failed to list workouts for athlete_id={athlete_id}: {e}")
            raise UpstreamUnavailableError(f"Workout history unavailable for athlete_id={athlete_id}") from e

        logger.debug(f"[PROVIDER] Loaded {len(records)} workouts for athlete_id={athlete_id}")
        return records
