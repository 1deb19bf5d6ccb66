"""Record preparation shared by the daily and weekly aggregators.

Raw rows may arrive as WorkoutRecord instances or as plain mappings (JSON
exports, query rows). Each row is validated on its own so one bad row is
skipped and counted instead of failing the batch; valid rows are then
deduplicated by workout_id so reprocessing the same input is idempotent.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any
from zoneinfo import ZoneInfo

from loguru import logger
from pydantic import ValidationError

from training_load.metrics.errors import InvalidRangeError, MalformedRecordError
from training_load.models.workout import WorkoutRecord

RawWorkout = WorkoutRecord | Mapping[str, Any]


@dataclass
class PreparedRecords:
    records: list[WorkoutRecord] = field(default_factory=list)
    skipped_record_count: int = 0
    duplicate_record_count: int = 0


def coerce_record(raw: RawWorkout) -> WorkoutRecord:
    """Validate a raw row into a WorkoutRecord.

    Raises:
        MalformedRecordError: if the row cannot be parsed (bad timestamp, missing id, ...)
    """
    if isinstance(raw, WorkoutRecord):
        return raw
    workout_id = raw.get("workout_id") if isinstance(raw, Mapping) else None
    try:
        return WorkoutRecord.model_validate(raw)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise MalformedRecordError(f"Unparseable workout record ({fields})", workout_id=workout_id) from e


def prepare_records(raw_records: Iterable[RawWorkout]) -> PreparedRecords:
    """Validate and deduplicate raw rows; first occurrence of a workout_id wins."""
    prepared = PreparedRecords()
    seen: set[str] = set()

    for raw in raw_records:
        try:
            record = coerce_record(raw)
        except MalformedRecordError as e:
            prepared.skipped_record_count += 1
            logger.warning(f"[METRICS] Skipping malformed workout workout_id={e.workout_id}: {e}")
            continue

        if record.workout_id in seen:
            prepared.duplicate_record_count += 1
            logger.debug(f"[METRICS] Dropping duplicate workout workout_id={record.workout_id}")
            continue

        seen.add(record.workout_id)
        prepared.records.append(record)

    return prepared


def local_date(start_time: datetime, timezone_name: str | None = None) -> date:
    """Calendar day a workout belongs to.

    Aware timestamps are converted into timezone_name when one is given;
    otherwise the timestamp's own calendar date is used.
    """
    if timezone_name and start_time.tzinfo is not None:
        return start_time.astimezone(ZoneInfo(timezone_name)).date()
    return start_time.date()


def validate_range(from_date: date, to_date: date) -> None:
    if to_date < from_date:
        raise InvalidRangeError(f"to_date {to_date.isoformat()} is before from_date {from_date.isoformat()}")


def iter_days(from_date: date, to_date: date) -> Iterator[date]:
    """Every calendar day from from_date to to_date inclusive."""
    current = from_date
    while current <= to_date:
        yield current
        current += timedelta(days=1)
