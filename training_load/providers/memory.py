from __future__ import annotations

import json
from collections.abc import Iterable, Sequence
from datetime import date, timedelta
from pathlib import Path
from typing import Any

from loguru import logger

from training_load.metrics.errors import UpstreamUnavailableError
from training_load.metrics.records import RawWorkout
from training_load.models.workout import WorkoutRecord


class InMemoryWorkoutProvider:
    """Provider over workouts held in memory, keyed by athlete."""

    def __init__(self, workouts: dict[str, Iterable[RawWorkout]] | None = None):
        self._workouts: dict[str, list[RawWorkout]] = {k: list(v) for k, v in (workouts or {}).items()}

    def add(self, athlete_id: str, workout: RawWorkout) -> None:
        self._workouts.setdefault(athlete_id, []).append(workout)

    def list_workouts(self, athlete_id: str, from_date: date, to_date: date) -> Sequence[RawWorkout]:
        # One day of slack either side; local-date bucketing happens in the aggregators
        lower = from_date - timedelta(days=1)
        upper = to_date + timedelta(days=1)
        result: list[RawWorkout] = []
        for workout in self._workouts.get(athlete_id, []):
            if isinstance(workout, WorkoutRecord) and not lower <= workout.start_time.date() <= upper:
                continue
            result.append(workout)
        return result


class JsonFileWorkoutProvider:
    """Provider over a JSON export.

    Accepts either a list of workout objects or {"workouts": [...]}. When
    objects carry an "athlete_id" key only that athlete's rows are returned.
    Rows are passed through unparsed so malformed ones are skipped and counted
    by the engine, not rejected here.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _load(self) -> list[dict[str, Any]]:
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"[PROVIDER] Failed to read workouts from {self.path}: {e}")
            raise UpstreamUnavailableError(f"Could not read workout file {self.path}") from e

        rows = payload.get("workouts", []) if isinstance(payload, dict) else payload
        if not isinstance(rows, list):
            raise UpstreamUnavailableError(f"Workout file {self.path} does not contain a list of workouts")
        return rows

    def list_workouts(self, athlete_id: str, from_date: date, to_date: date) -> Sequence[RawWorkout]:
        _ = (from_date, to_date)  # The aggregators apply the range
        rows = self._load()
        return [row for row in rows if not isinstance(row, dict) or row.get("athlete_id", athlete_id) == athlete_id]
