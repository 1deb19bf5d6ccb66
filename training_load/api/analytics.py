"""Analytics endpoints: load series, readiness chart, weekly volume, summary.

Responses are pure data (no markup). Error policy:
- InvalidRangeError -> 400, nothing computed
- insufficient history -> 200 with insufficient_data=true and an explanatory message
- anything else -> 503 with a generic message; detail is logged server-side only
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from loguru import logger

from training_load.api.dependencies import get_load_model_config, get_load_series_cache, get_workout_provider
from training_load.config.settings import LoadModelConfig
from training_load.metrics.chart_window import DEFAULT_WINDOW_DAYS, format_chart_window
from training_load.metrics.computation_service import (
    LoadSeriesCache,
    compute_load_series,
    compute_weekly_volume,
    summarize_workouts,
)
from training_load.metrics.errors import InvalidRangeError
from training_load.providers.base import WorkoutProvider

router = APIRouter(prefix="/analytics", tags=["analytics"])

READINESS_ERROR_MESSAGE = "Could not calculate readiness."
INSUFFICIENT_DATA_MESSAGE = "Need more history to calculate readiness."


def _unavailable(action: str, athlete_id: str, e: Exception) -> HTTPException:
    logger.opt(exception=e).error(f"[ANALYTICS] {action} failed for athlete_id={athlete_id}")
    return HTTPException(status_code=503, detail=READINESS_ERROR_MESSAGE)


@router.get("/load-series")
def load_series(
    athlete_id: str = Query(...),
    lookback_days: int = Query(60),
    provider: WorkoutProvider = Depends(get_workout_provider),
    config: LoadModelConfig = Depends(get_load_model_config),
    cache: LoadSeriesCache = Depends(get_load_series_cache),
):
    """Get daily stress and CTL/ATL/TSB series with the latest readiness band.

    Args:
        athlete_id: Athlete to compute for
        lookback_days: Number of days in the series (default: 60)
    """
    logger.info(f"[ANALYTICS] Load series requested for athlete_id={athlete_id}, lookback_days={lookback_days}")
    try:
        result = compute_load_series(athlete_id, lookback_days, provider, config=config, cache=cache)
    except InvalidRangeError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except Exception as e:
        raise _unavailable("Load series", athlete_id, e) from e

    payload = result.model_dump(mode="json")
    if result.insufficient_data:
        payload["message"] = INSUFFICIENT_DATA_MESSAGE
    return payload


@router.get("/readiness-chart")
def readiness_chart(
    athlete_id: str = Query(...),
    lookback_days: int = Query(60),
    window_size: int = Query(DEFAULT_WINDOW_DAYS),
    provider: WorkoutProvider = Depends(get_workout_provider),
    config: LoadModelConfig = Depends(get_load_model_config),
    cache: LoadSeriesCache = Depends(get_load_series_cache),
):
    """Get the trailing readiness chart window with the current band and advisory."""
    logger.info(
        f"[ANALYTICS] Readiness chart requested for athlete_id={athlete_id}, "
        f"lookback_days={lookback_days}, window_size={window_size}"
    )
    if window_size <= 0:
        raise HTTPException(status_code=400, detail=f"window_size must be positive, got {window_size}")

    try:
        result = compute_load_series(athlete_id, lookback_days, provider, config=config, cache=cache)
        if result.insufficient_data:
            return {
                "athlete_id": athlete_id,
                "insufficient_data": True,
                "message": INSUFFICIENT_DATA_MESSAGE,
                "chart": None,
                "band": None,
                "advisory": None,
                "tsb": None,
            }
        chart = format_chart_window(result.load_points, window_size, config)
    except InvalidRangeError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except Exception as e:
        raise _unavailable("Readiness chart", athlete_id, e) from e

    latest = result.latest
    return {
        "athlete_id": athlete_id,
        "insufficient_data": False,
        "chart": chart.model_dump(mode="json"),
        "band": result.latest_band,
        "advisory": result.latest_advisory,
        "tsb": round(latest.tsb, 1) if latest else None,
    }


@router.get("/weekly-volume")
def weekly_volume(
    athlete_id: str = Query(...),
    weeks: int = Query(12),
    provider: WorkoutProvider = Depends(get_workout_provider),
    config: LoadModelConfig = Depends(get_load_model_config),
):
    """Get distance totals for the trailing ISO weeks (Monday start), oldest first."""
    logger.info(f"[ANALYTICS] Weekly volume requested for athlete_id={athlete_id}, weeks={weeks}")
    try:
        volumes = compute_weekly_volume(athlete_id, weeks, provider, config=config)
    except InvalidRangeError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except Exception as e:
        raise _unavailable("Weekly volume", athlete_id, e) from e

    return {"athlete_id": athlete_id, "weeks": [v.model_dump(mode="json") for v in volumes]}


@router.get("/summary")
def summary(
    athlete_id: str = Query(...),
    days: int = Query(30),
    provider: WorkoutProvider = Depends(get_workout_provider),
    config: LoadModelConfig = Depends(get_load_model_config),
):
    """Get workout totals, average pace, longest workout and progress trend."""
    logger.info(f"[ANALYTICS] Summary requested for athlete_id={athlete_id}, days={days}")
    try:
        workout_summary = summarize_workouts(athlete_id, days, provider, config=config)
    except InvalidRangeError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except Exception as e:
        raise _unavailable("Summary", athlete_id, e) from e

    return {"athlete_id": athlete_id, **workout_summary.model_dump(mode="json")}
