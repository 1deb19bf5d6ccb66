from datetime import datetime

from pydantic import BaseModel, ConfigDict


class WorkoutRecord(BaseModel):
    """A completed workout as supplied by the workout-history provider.

    Externally owned and read-only. Duration is moving time in seconds;
    heart rate and distance are optional because not every sensor reports them.
    Validation is deliberately loose (a non-positive duration is representable)
    so the aggregators can skip and count bad rows instead of failing the batch.
    """

    model_config = ConfigDict(frozen=True)

    workout_id: str
    start_time: datetime
    duration_sec: float
    avg_hr: float | None = None
    max_hr: float | None = None
    distance_km: float | None = None
