"""Daily stress aggregation from workout records.

Each workout is scored with a TRIMP-style exponential weighting:

    stress = duration_minutes * e^(trimp_exponent * intensity_factor)

where intensity_factor = avg_hr / max_hr. The athlete's max HR falls back to
config.default_max_hr when the record does not carry one, and workouts with
no heart rate at all use config.fallback_intensity.

Stress is summed per local calendar day and the output covers every day of
the requested range, with explicit zero entries for idle days. Decay in the
load curve must still apply on those days, so they are never omitted.
"""

from __future__ import annotations

import math
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date

from loguru import logger

from training_load.config.settings import DEFAULT_LOAD_MODEL, LoadModelConfig
from training_load.metrics.errors import MalformedRecordError
from training_load.metrics.records import RawWorkout, iter_days, local_date, prepare_records, validate_range
from training_load.models.load import DailyStress
from training_load.models.workout import WorkoutRecord


@dataclass
class DailyStressAggregate:
    daily: list[DailyStress] = field(default_factory=list)
    skipped_record_count: int = 0
    duplicate_record_count: int = 0
    workout_count: int = 0


def _is_positive(value: float | None) -> bool:
    return value is not None and math.isfinite(value) and value > 0


def intensity_factor(record: WorkoutRecord, config: LoadModelConfig = DEFAULT_LOAD_MODEL) -> float:
    """Relative intensity of a workout (avg HR / max HR), or the fallback."""
    if not _is_positive(record.avg_hr):
        return config.fallback_intensity
    max_hr = record.max_hr if _is_positive(record.max_hr) else config.default_max_hr
    return record.avg_hr / max_hr


def workout_stress(record: WorkoutRecord, config: LoadModelConfig = DEFAULT_LOAD_MODEL) -> float:
    """Stress score for a single workout.

    Raises:
        MalformedRecordError: if the duration is not a positive number or the
            intensity exceeds config.max_intensity
    """
    if not _is_positive(record.duration_sec):
        raise MalformedRecordError(
            f"Non-positive duration {record.duration_sec}s",
            workout_id=record.workout_id,
        )
    intensity = intensity_factor(record, config)
    if not math.isfinite(intensity) or intensity > config.max_intensity:
        raise MalformedRecordError(
            f"Implausible intensity {intensity:.2f} (avg_hr={record.avg_hr}, max_hr={record.max_hr})",
            workout_id=record.workout_id,
        )
    duration_minutes = record.duration_sec / 60.0
    return duration_minutes * math.exp(config.trimp_exponent * intensity)


def aggregate_daily_stress(
    records: Iterable[RawWorkout],
    from_date: date,
    to_date: date,
    config: LoadModelConfig = DEFAULT_LOAD_MODEL,
) -> DailyStressAggregate:
    """Aggregate workouts into one DailyStress per day of [from_date, to_date].

    Args:
        records: Workout records or raw mappings, in any order
        from_date: First day of the range (inclusive)
        to_date: Last day of the range (inclusive)
        config: Model constants

    Returns:
        DailyStressAggregate with a contiguous, oldest-first daily series and
        counts of skipped (malformed) and duplicate records

    Raises:
        InvalidRangeError: if to_date < from_date
    """
    validate_range(from_date, to_date)

    prepared = prepare_records(records)
    skipped = prepared.skipped_record_count

    stress_by_day: dict[date, float] = defaultdict(float)
    count_by_day: dict[date, int] = defaultdict(int)

    for record in prepared.records:
        day = local_date(record.start_time, config.timezone)
        if day < from_date or day > to_date:
            continue
        try:
            stress = workout_stress(record, config)
        except MalformedRecordError as e:
            skipped += 1
            logger.warning(f"[METRICS] Skipping workout workout_id={e.workout_id}: {e}")
            continue
        stress_by_day[day] += stress
        count_by_day[day] += 1

    daily = [
        DailyStress(date=day, stress=stress_by_day.get(day, 0.0), workout_count=count_by_day.get(day, 0))
        for day in iter_days(from_date, to_date)
    ]
    workout_count = sum(count_by_day.values())

    logger.debug(
        f"[METRICS] Aggregated {workout_count} workouts into {len(daily)} days "
        f"({from_date.isoformat()} to {to_date.isoformat()}), skipped={skipped}, "
        f"duplicates={prepared.duplicate_record_count}"
    )

    return DailyStressAggregate(
        daily=daily,
        skipped_record_count=skipped,
        duplicate_record_count=prepared.duplicate_record_count,
        workout_count=workout_count,
    )
