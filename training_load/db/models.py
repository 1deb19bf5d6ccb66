from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, Index, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all database models."""


class Activity(Base):
    """Completed workouts as written by the activity-sync collaborator.

    Read-only from the engine's side: the SQL workout provider only selects
    from this table.

    Schema:
    - id: UUID primary key (workout identity)
    - athlete_id: Owning athlete (indexed)
    - start_time: Activity start timestamp (indexed)
    - moving_time_seconds: Moving duration
    - average_heartrate / max_heartrate: Optional heart rate summary (max is the
      activity peak, not the athlete's maximum)
    - distance_km: Optional distance
    - source: Source system (default: "strava")
    """

    __tablename__ = "activities"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    athlete_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    moving_time_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)
    average_heartrate: Mapped[float | None] = mapped_column(Float, nullable=True)
    max_heartrate: Mapped[float | None] = mapped_column(Float, nullable=True)
    distance_km: Mapped[float | None] = mapped_column(Float, nullable=True)
    source: Mapped[str] = mapped_column(String, nullable=False, default="strava")
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        Index("idx_activities_athlete_start_time", "athlete_id", "start_time"),  # Common query: athlete activities by date range
    )
