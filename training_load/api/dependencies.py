from training_load.config.settings import LoadModelConfig, settings
from training_load.db.session import get_session
from training_load.metrics.computation_service import LoadSeriesCache
from training_load.providers.base import WorkoutProvider
from training_load.providers.sql import SqlWorkoutProvider

_load_series_cache = LoadSeriesCache()


def get_workout_provider() -> WorkoutProvider:
    return SqlWorkoutProvider(get_session)


def get_load_model_config() -> LoadModelConfig:
    return settings.load_model_config()


def get_load_series_cache() -> LoadSeriesCache:
    return _load_series_cache
