"""Weekly distance aggregation.

Week boundaries are Monday-Sunday (ISO week). Every week between the week of
from_date and the week of to_date is present in the output, idle weeks as
explicit zero entries, mirroring the daily contiguity rule.
"""

from __future__ import annotations

import math
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, timedelta

from loguru import logger

from training_load.config.settings import DEFAULT_LOAD_MODEL, LoadModelConfig
from training_load.metrics.records import RawWorkout, local_date, prepare_records, validate_range
from training_load.models.load import WeeklyVolume


@dataclass
class WeeklyVolumeAggregate:
    weeks: list[WeeklyVolume] = field(default_factory=list)
    skipped_record_count: int = 0
    duplicate_record_count: int = 0


def week_start(d: date) -> date:
    """Return Monday of the calendar week containing d."""
    return d - timedelta(days=d.weekday())


def week_end(d: date) -> date:
    """Return Sunday of the calendar week containing d."""
    return week_start(d) + timedelta(days=6)


def aggregate_weekly_volume(
    records: Iterable[RawWorkout],
    from_date: date,
    to_date: date,
    config: LoadModelConfig = DEFAULT_LOAD_MODEL,
) -> WeeklyVolumeAggregate:
    """Sum workout distance per ISO week over the weeks spanning [from_date, to_date].

    Missing distance counts as 0 km. Records with a non-positive duration or a
    negative or non-finite distance are skipped and counted.

    Raises:
        InvalidRangeError: if to_date < from_date
    """
    validate_range(from_date, to_date)

    prepared = prepare_records(records)
    skipped = prepared.skipped_record_count

    distance_by_week: dict[date, float] = defaultdict(float)
    count_by_week: dict[date, int] = defaultdict(int)

    for record in prepared.records:
        day = local_date(record.start_time, config.timezone)
        if day < from_date or day > to_date:
            continue
        if not math.isfinite(record.duration_sec) or record.duration_sec <= 0:
            skipped += 1
            logger.warning(
                f"[METRICS] Skipping workout workout_id={record.workout_id}: non-positive duration {record.duration_sec}s"
            )
            continue
        distance = record.distance_km or 0.0
        if not math.isfinite(distance) or distance < 0:
            skipped += 1
            logger.warning(f"[METRICS] Skipping workout workout_id={record.workout_id}: invalid distance {distance}")
            continue
        monday = week_start(day)
        distance_by_week[monday] += distance
        count_by_week[monday] += 1

    weeks: list[WeeklyVolume] = []
    current = week_start(from_date)
    last = week_start(to_date)
    while current <= last:
        weeks.append(
            WeeklyVolume(
                week_start=current,
                total_distance_km=round(distance_by_week.get(current, 0.0), 3),
                workout_count=count_by_week.get(current, 0),
            )
        )
        current += timedelta(days=7)

    return WeeklyVolumeAggregate(
        weeks=weeks,
        skipped_record_count=skipped,
        duplicate_record_count=prepared.duplicate_record_count,
    )


def trailing_weeks_range(today: date, weeks: int) -> tuple[date, date]:
    """(Monday of the oldest week, today) for the trailing `weeks` ISO weeks."""
    return week_start(today) - timedelta(weeks=weeks - 1), today
