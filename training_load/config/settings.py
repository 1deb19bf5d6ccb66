"""Configuration for the training load engine.

Two layers:
- LoadModelConfig: the named model constants (decay time constants, TRIMP
  weighting, readiness thresholds, chart floor). Passed explicitly into every
  metric function; defaults are the documented population values.
- Settings: environment-driven runtime settings (database, logging) and
  overrides for the model constants.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Canonical time constants (industry defaults)
TAU_CTL_DAYS = 42.0
TAU_ATL_DAYS = 7.0

# Population approximation used when the athlete profile lacks a measured max HR
DEFAULT_MAX_HR = 190.0

# TRIMP weighting coefficient (Banister, male)
TRIMP_EXPONENT = 1.92

# Intensity assumed when a workout has no heart rate data ("moderate")
FALLBACK_INTENSITY = 0.75

# Intensity above this is a sensor or profile error (avg HR well above max HR)
MAX_INTENSITY = 1.2


class LoadModelConfig(BaseModel):
    """Model constants for stress scoring, load curves and readiness bands.

    Readiness bands (upper bound inclusive):
        tsb > peak_taper_threshold           -> PeakTaper
        tsb > fresh_threshold                -> FreshSharp
        tsb > productive_threshold           -> ProductiveTraining
        otherwise                            -> HeavyFatigue
    """

    model_config = ConfigDict(frozen=True)

    tau_ctl_days: float = Field(default=TAU_CTL_DAYS, gt=0)
    tau_atl_days: float = Field(default=TAU_ATL_DAYS, gt=0)
    default_max_hr: float = Field(default=DEFAULT_MAX_HR, gt=0)
    trimp_exponent: float = Field(default=TRIMP_EXPONENT, gt=0)
    fallback_intensity: float = Field(default=FALLBACK_INTENSITY, gt=0)
    max_intensity: float = Field(default=MAX_INTENSITY, gt=0)

    peak_taper_threshold: float = 20.0
    fresh_threshold: float = 5.0
    productive_threshold: float = -10.0

    chart_basis_floor: float = Field(default=20.0, gt=0)
    min_workouts: int = Field(default=5, ge=0)
    min_history_days: int = Field(default=14, ge=1)

    # IANA name used to bucket aware timestamps into local calendar days
    timezone: str | None = None

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str | None) -> str | None:
        if value is None:
            return value
        from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {value}") from e
        return value

    @model_validator(mode="after")
    def validate_threshold_order(self) -> LoadModelConfig:
        if not self.peak_taper_threshold > self.fresh_threshold > self.productive_threshold:
            raise ValueError(
                "Readiness thresholds must be strictly descending: "
                f"peak_taper={self.peak_taper_threshold}, fresh={self.fresh_threshold}, "
                f"productive={self.productive_threshold}"
            )
        return self


DEFAULT_LOAD_MODEL = LoadModelConfig()


class Settings(BaseSettings):
    database_url: str = Field(default="sqlite:///./training_load.db", validation_alias="DATABASE_URL")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_file: str | None = Field(default=None, validation_alias="LOG_FILE")

    tau_ctl_days: float = Field(default=TAU_CTL_DAYS, validation_alias="LOAD_MODEL_TAU_CTL_DAYS")
    tau_atl_days: float = Field(default=TAU_ATL_DAYS, validation_alias="LOAD_MODEL_TAU_ATL_DAYS")
    default_max_hr: float = Field(default=DEFAULT_MAX_HR, validation_alias="LOAD_MODEL_DEFAULT_MAX_HR")
    trimp_exponent: float = Field(default=TRIMP_EXPONENT, validation_alias="LOAD_MODEL_TRIMP_EXPONENT")
    fallback_intensity: float = Field(default=FALLBACK_INTENSITY, validation_alias="LOAD_MODEL_FALLBACK_INTENSITY")
    max_intensity: float = Field(default=MAX_INTENSITY, validation_alias="LOAD_MODEL_MAX_INTENSITY")
    chart_basis_floor: float = Field(default=20.0, validation_alias="LOAD_MODEL_CHART_BASIS_FLOOR")
    min_workouts: int = Field(default=5, validation_alias="LOAD_MODEL_MIN_WORKOUTS")
    min_history_days: int = Field(default=14, validation_alias="LOAD_MODEL_MIN_HISTORY_DAYS")
    timezone: str | None = Field(default=None, validation_alias="LOAD_MODEL_TIMEZONE")

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid LOG_LEVEL: {value}")
        return level

    def load_model_config(self) -> LoadModelConfig:
        """Build the model constants from environment overrides."""
        return LoadModelConfig(
            tau_ctl_days=self.tau_ctl_days,
            tau_atl_days=self.tau_atl_days,
            default_max_hr=self.default_max_hr,
            trimp_exponent=self.trimp_exponent,
            fallback_intensity=self.fallback_intensity,
            max_intensity=self.max_intensity,
            chart_basis_floor=self.chart_basis_floor,
            min_workouts=self.min_workouts,
            min_history_days=self.min_history_days,
            timezone=self.timezone,
        )


settings = Settings()
