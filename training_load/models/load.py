from __future__ import annotations

from datetime import date
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from training_load.metrics.errors import InsufficientDataError


class ReadinessBand(StrEnum):
    PEAK_TAPER = "PeakTaper"
    FRESH_SHARP = "FreshSharp"
    PRODUCTIVE_TRAINING = "ProductiveTraining"
    HEAVY_FATIGUE = "HeavyFatigue"


class DailyStress(BaseModel):
    """Total stress score for one calendar day (zero on idle days)."""

    model_config = ConfigDict(frozen=True)

    date: date
    stress: float = Field(..., ge=0)
    workout_count: int = Field(default=0, ge=0)


class LoadPoint(BaseModel):
    """Chronic/acute load and their balance at the end of one day."""

    model_config = ConfigDict(frozen=True)

    date: date
    ctl: float = Field(..., ge=0)
    atl: float = Field(..., ge=0)
    tsb: float


class ReadinessAssessment(BaseModel):
    model_config = ConfigDict(frozen=True)

    band: ReadinessBand
    advisory: str
    tsb: float


class ChartPoint(BaseModel):
    """One bar of the readiness chart.

    fraction is tsb / basis, in [-1, 1]. Positive values sit above the baseline.
    """

    model_config = ConfigDict(frozen=True)

    date: date
    ctl: float
    atl: float
    tsb: float
    fraction: float = Field(..., ge=-1.0, le=1.0)


class ChartWindow(BaseModel):
    model_config = ConfigDict(frozen=True)

    points: list[ChartPoint]
    basis: float = Field(..., gt=0)
    short_window: bool
    window_size: int


class WeeklyVolume(BaseModel):
    model_config = ConfigDict(frozen=True)

    week_start: date
    total_distance_km: float = Field(..., ge=0)
    workout_count: int = Field(default=0, ge=0)


class LoadSeriesResult(BaseModel):
    """Output of compute_load_series.

    latest_band is None when insufficient_data is set: a curve built from too
    little history reads as "low readiness", so no band is offered for it.
    """

    model_config = ConfigDict(frozen=True)

    athlete_id: str
    daily_stress: list[DailyStress]
    load_points: list[LoadPoint]
    latest_band: ReadinessBand | None
    latest_advisory: str | None
    insufficient_data: bool
    skipped_record_count: int = Field(default=0, ge=0)
    duplicate_record_count: int = Field(default=0, ge=0)
    workout_count: int = Field(default=0, ge=0)

    @property
    def latest(self) -> LoadPoint | None:
        return self.load_points[-1] if self.load_points else None

    def raise_for_insufficient(self) -> None:
        """Raise InsufficientDataError if the history was too thin to classify."""
        if self.insufficient_data:
            raise InsufficientDataError(
                f"Not enough training history for athlete_id={self.athlete_id}: "
                f"{self.workout_count} workouts over {len(self.daily_stress)} days"
            )
