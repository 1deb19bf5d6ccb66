from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from typing import Protocol

from training_load.metrics.records import RawWorkout


class WorkoutProvider(Protocol):
    """Read-only workout-history capability.

    Implementations may return a superset of the requested range (the
    aggregators bucket by local date and drop anything outside it). Failures
    to reach the underlying store are raised as UpstreamUnavailableError.
    """

    def list_workouts(self, athlete_id: str, from_date: date, to_date: date) -> Sequence[RawWorkout]: ...
