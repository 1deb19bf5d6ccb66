from training_load.providers.base import WorkoutProvider
from training_load.providers.memory import InMemoryWorkoutProvider, JsonFileWorkoutProvider
from training_load.providers.sql import SqlWorkoutProvider

__all__ = [
    "InMemoryWorkoutProvider",
    "JsonFileWorkoutProvider",
    "SqlWorkoutProvider",
    "WorkoutProvider",
]
