"""Deterministic rideability scoring for a single forecast slot.

A score is the sum of three step-function sub-scores (rain 40, wind 35,
temperature 25). A separate, wider set of critical thresholds caps the result
at 30 when any dangerous condition is present. The two threshold tables are
intentionally distinct and must not be merged.
"""

from __future__ import annotations

from typing import Sequence, Tuple

from shouldiride.domain import ScoreResult, WeatherSample

MAX_SCORE = 100
CRITICAL_SCORE_CAP = 30

# (exclusive upper bound, points); the first bound the value is below wins.
RAIN_BANDS: Sequence[Tuple[float, int]] = (
    (0.15, 40),
    (0.30, 30),
    (0.45, 20),
    (0.60, 10),
)

WIND_BANDS_MPS: Sequence[Tuple[float, int]] = (
    (3.0, 35),
    (6.0, 30),
    (9.0, 20),
    (12.0, 10),
    (15.0, 5),
)

TEMPERATURE_BANDS_C: Sequence[Tuple[float, int]] = (
    (0.0, 0),
    (5.0, 10),
    (10.0, 15),
    (25.0, 25),
    (30.0, 20),
    (35.0, 10),
)

CRITICAL_RAIN_PROBABILITY = 0.70
CRITICAL_WIND_MPS = 15.0
CRITICAL_COLD_C = -5.0
CRITICAL_HEAT_C = 40.0


def _band_points(value: float, bands: Sequence[Tuple[float, int]], above: int = 0) -> int:
    """Return the points of the first band whose upper bound exceeds value."""
    for upper, points in bands:
        if value < upper:
            return points
    return above


def rain_score(precipitation_probability: float) -> int:
    return _band_points(precipitation_probability, RAIN_BANDS)


def wind_score(wind_speed: float) -> int:
    return _band_points(wind_speed, WIND_BANDS_MPS)


def temperature_score(temperature: float) -> int:
    return _band_points(temperature, TEMPERATURE_BANDS_C)


def has_critical_conditions(temperature: float, wind_speed: float, precipitation_probability: float) -> bool:
    """Flag very likely rain, dangerous wind, or extreme temperatures."""
    return (
        precipitation_probability > CRITICAL_RAIN_PROBABILITY
        or wind_speed > CRITICAL_WIND_MPS
        or temperature < CRITICAL_COLD_C
        or temperature > CRITICAL_HEAT_C
    )


def calculate_ride_score(temperature: float, wind_speed: float, precipitation_probability: float) -> ScoreResult:
    """
    Score riding conditions from temperature (C), wind (m/s) and rain probability (0-1).

    Any real-valued input is accepted; out-of-range values land in the
    open-ended first or last band.
    """
    raw = rain_score(precipitation_probability) + wind_score(wind_speed) + temperature_score(temperature)
    raw = max(0, min(MAX_SCORE, raw))

    critical = has_critical_conditions(temperature, wind_speed, precipitation_probability)
    score = min(raw, CRITICAL_SCORE_CAP) if critical else raw
    return ScoreResult(score=score, critical_conditions=critical)


def score_sample(sample: WeatherSample) -> ScoreResult:
    """Score a normalized weather sample."""
    return calculate_ride_score(
        sample.temperature_celsius,
        sample.wind_speed_mps,
        sample.precipitation_probability,
    )
