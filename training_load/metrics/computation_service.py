"""Entry points of the analytics engine.

Each call fetches the athlete's history from a WorkoutProvider and runs one
bounded, side-effect-free pass over it:

    workouts -> daily stress -> load curve -> readiness band

Nothing is persisted and no state survives a call, so computations for
different athletes (or windows) can run in parallel without coordination.
"""

from __future__ import annotations

import threading
from collections.abc import Sequence
from datetime import date, datetime, timedelta, timezone

from loguru import logger

from training_load.config.settings import DEFAULT_LOAD_MODEL, LoadModelConfig
from training_load.metrics.daily_aggregation import aggregate_daily_stress
from training_load.metrics.errors import InvalidRangeError, MalformedRecordError
from training_load.metrics.readiness import assess_readiness
from training_load.metrics.records import RawWorkout, coerce_record
from training_load.metrics.training_load import calculate_load_curve, latest_load
from training_load.metrics.weekly_volume import aggregate_weekly_volume, trailing_weeks_range
from training_load.metrics.workout_stats import summarize_records
from training_load.models.load import LoadSeriesResult, WeeklyVolume
from training_load.models.summary import WorkoutSummary
from training_load.providers.base import WorkoutProvider

CacheKey = tuple[str, str | None, int]


class LoadSeriesCache:
    """Memo of LoadSeriesResult keyed by (athlete_id, latest workout timestamp, lookback_days).

    A new workout for an athlete can change every downstream day through the
    recurrence, so storing a result under a newer latest timestamp drops the
    athlete's older entries, and invalidate_athlete drops all of them.
    """

    def __init__(self) -> None:
        self._entries: dict[CacheKey, LoadSeriesResult] = {}
        self._lock = threading.Lock()

    def get(self, key: CacheKey) -> LoadSeriesResult | None:
        with self._lock:
            return self._entries.get(key)

    def put(self, key: CacheKey, result: LoadSeriesResult) -> None:
        """Store a result, dropping entries for the athlete keyed by an older history."""
        athlete_id, latest_ts, _ = key
        with self._lock:
            stale = [k for k in self._entries if k[0] == athlete_id and k[1] != latest_ts]
            for stale_key in stale:
                del self._entries[stale_key]
            self._entries[key] = result
        if stale:
            logger.debug(f"[METRICS] Replaced {len(stale)} superseded load series for athlete_id={athlete_id}")

    def invalidate_athlete(self, athlete_id: str) -> int:
        with self._lock:
            stale = [k for k in self._entries if k[0] == athlete_id]
            for key in stale:
                del self._entries[key]
        if stale:
            logger.debug(f"[METRICS] Invalidated {len(stale)} cached load series for athlete_id={athlete_id}")
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def _today(today: date | None) -> date:
    return today or datetime.now(timezone.utc).date()


def _latest_timestamp(workouts: Sequence[RawWorkout]) -> str | None:
    latest: datetime | None = None
    for raw in workouts:
        try:
            start = coerce_record(raw).start_time
        except MalformedRecordError:
            continue
        if latest is None or start.timestamp() > latest.timestamp():
            latest = start
    return latest.isoformat() if latest else None


def compute_load_series(
    athlete_id: str,
    lookback_days: int,
    provider: WorkoutProvider,
    *,
    today: date | None = None,
    config: LoadModelConfig = DEFAULT_LOAD_MODEL,
    cache: LoadSeriesCache | None = None,
) -> LoadSeriesResult:
    """Compute daily stress, CTL/ATL/TSB and the latest readiness band.

    The range is the `lookback_days` days ending at `today` (inclusive) and the
    recurrence is seeded at zero on its first day; supply 45+ days before
    reading TSB as meaningful.

    Args:
        athlete_id: Athlete whose history to read
        lookback_days: Number of days in the series
        provider: Workout-history source
        today: Last day of the series (default: current UTC date)
        config: Model constants
        cache: Optional memo; see LoadSeriesCache

    Returns:
        LoadSeriesResult. insufficient_data is set (and latest_band is None)
        when fewer than config.min_workouts valid workouts fall in range or the
        range is shorter than config.min_history_days.

    Raises:
        InvalidRangeError: if lookback_days is not positive (before any fetch)
        UpstreamUnavailableError: propagated from the provider
    """
    if lookback_days <= 0:
        raise InvalidRangeError(f"lookback_days must be positive, got {lookback_days}")

    to_date = _today(today)
    from_date = to_date - timedelta(days=lookback_days - 1)

    logger.info(
        f"[METRICS] Computing load series for athlete_id={athlete_id} "
        f"from {from_date.isoformat()} to {to_date.isoformat()}"
    )

    workouts = provider.list_workouts(athlete_id, from_date, to_date)

    cache_key: CacheKey | None = None
    if cache is not None:
        cache_key = (athlete_id, _latest_timestamp(workouts), lookback_days)
        cached = cache.get(cache_key)
        if cached is not None and cached.daily_stress and cached.daily_stress[-1].date == to_date:
            logger.debug(f"[METRICS] Cache hit for athlete_id={athlete_id}")
            return cached

    aggregate = aggregate_daily_stress(workouts, from_date, to_date, config)
    load_points = calculate_load_curve(aggregate.daily, config)

    insufficient = aggregate.workout_count < config.min_workouts or lookback_days < config.min_history_days

    latest_band = None
    latest_advisory = None
    latest = latest_load(load_points)
    if latest is not None and not insufficient:
        assessment = assess_readiness(latest.tsb, config)
        latest_band = assessment.band
        latest_advisory = assessment.advisory

    result = LoadSeriesResult(
        athlete_id=athlete_id,
        daily_stress=aggregate.daily,
        load_points=load_points,
        latest_band=latest_band,
        latest_advisory=latest_advisory,
        insufficient_data=insufficient,
        skipped_record_count=aggregate.skipped_record_count,
        duplicate_record_count=aggregate.duplicate_record_count,
        workout_count=aggregate.workout_count,
    )

    if insufficient:
        logger.info(
            f"[METRICS] Insufficient data for athlete_id={athlete_id}: "
            f"workouts={aggregate.workout_count} (min {config.min_workouts}), "
            f"days={lookback_days} (min {config.min_history_days})"
        )
    else:
        logger.info(
            f"[METRICS] Load series complete for athlete_id={athlete_id}: "
            f"ctl={latest.ctl:.1f}, atl={latest.atl:.1f}, tsb={latest.tsb:.1f}, band={latest_band}"
        )

    if cache is not None and cache_key is not None:
        cache.put(cache_key, result)

    return result


def compute_weekly_volume(
    athlete_id: str,
    weeks: int,
    provider: WorkoutProvider,
    *,
    today: date | None = None,
    config: LoadModelConfig = DEFAULT_LOAD_MODEL,
) -> list[WeeklyVolume]:
    """Distance totals for the trailing `weeks` ISO weeks, the current week last.

    Raises:
        InvalidRangeError: if weeks is not positive
        UpstreamUnavailableError: propagated from the provider
    """
    if weeks <= 0:
        raise InvalidRangeError(f"weeks must be positive, got {weeks}")

    from_date, to_date = trailing_weeks_range(_today(today), weeks)
    workouts = provider.list_workouts(athlete_id, from_date, to_date)
    aggregate = aggregate_weekly_volume(workouts, from_date, to_date, config)

    logger.info(
        f"[METRICS] Weekly volume for athlete_id={athlete_id}: {len(aggregate.weeks)} weeks, "
        f"skipped={aggregate.skipped_record_count}"
    )
    return aggregate.weeks


def summarize_workouts(
    athlete_id: str,
    days: int,
    provider: WorkoutProvider,
    *,
    today: date | None = None,
    config: LoadModelConfig = DEFAULT_LOAD_MODEL,
) -> WorkoutSummary:
    """Totals, pace, longest workout and weekly trend over the trailing `days` days."""
    if days <= 0:
        raise InvalidRangeError(f"days must be positive, got {days}")

    to_date = _today(today)
    from_date = to_date - timedelta(days=days - 1)
    workouts = provider.list_workouts(athlete_id, from_date, to_date)
    return summarize_records(workouts, from_date, to_date, config)
