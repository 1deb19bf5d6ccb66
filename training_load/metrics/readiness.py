"""Readiness classification from Training Stress Balance.

| TSB range                   | Band               | Advisory            |
|-----------------------------|--------------------|---------------------|
| > peak_taper (20)           | PeakTaper          | Race-ready          |
| fresh (5) < TSB <= 20       | FreshSharp         | Fresh & sharp       |
| productive (-10) < TSB <= 5 | ProductiveTraining | Productive training |
| <= -10                      | HeavyFatigue       | Rest needed         |
"""

from __future__ import annotations

from training_load.config.settings import DEFAULT_LOAD_MODEL, LoadModelConfig
from training_load.models.load import ReadinessAssessment, ReadinessBand

ADVISORIES: dict[ReadinessBand, str] = {
    ReadinessBand.PEAK_TAPER: "Race-ready",
    ReadinessBand.FRESH_SHARP: "Fresh & sharp",
    ReadinessBand.PRODUCTIVE_TRAINING: "Productive training",
    ReadinessBand.HEAVY_FATIGUE: "Rest needed",
}


def classify_tsb(tsb: float, config: LoadModelConfig = DEFAULT_LOAD_MODEL) -> ReadinessBand:
    """Map a TSB value to its readiness band. Upper bounds are inclusive."""
    if tsb > config.peak_taper_threshold:
        return ReadinessBand.PEAK_TAPER
    if tsb > config.fresh_threshold:
        return ReadinessBand.FRESH_SHARP
    if tsb > config.productive_threshold:
        return ReadinessBand.PRODUCTIVE_TRAINING
    return ReadinessBand.HEAVY_FATIGUE


def advisory_for(band: ReadinessBand) -> str:
    return ADVISORIES[band]


def assess_readiness(tsb: float, config: LoadModelConfig = DEFAULT_LOAD_MODEL) -> ReadinessAssessment:
    band = classify_tsb(tsb, config)
    return ReadinessAssessment(band=band, advisory=advisory_for(band), tsb=tsb)
