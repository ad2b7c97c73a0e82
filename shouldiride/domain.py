"""Domain vocabulary and strict schemas for commute ride scoring.

This module defines the contract between the data sources, the forecast
selector and the scoring engine: ride periods, normalized weather samples and
the scored records handed to the API. No scoring or filtering logic lives here.
"""

from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field, computed_field


class _FrozenBaseModel(BaseModel):
    """Base model that forbids extra fields and mutation."""

    model_config = ConfigDict(extra="forbid", frozen=True)


class RidePeriod(str, Enum):
    """Daily commute windows and the forecast hour that represents each one."""

    MORNING = "MORNING"
    MIDDAY = "MIDDAY"
    EVENING = "EVENING"

    @property
    def display_name(self) -> str:
        return _PERIOD_DETAILS[self][0]

    @property
    def display_time(self) -> str:
        return _PERIOD_DETAILS[self][1]

    @property
    def hour_of_day(self) -> int:
        return _PERIOD_DETAILS[self][2]

    @classmethod
    def default_order(cls) -> List["RidePeriod"]:
        """Order used for filtering and for the API response."""
        return [cls.MORNING, cls.MIDDAY, cls.EVENING]

    @classmethod
    def from_hour(cls, hour: int) -> "RidePeriod | None":
        """Return the period whose representative hour is `hour`, or None."""
        for period in cls.default_order():
            if period.hour_of_day == hour:
                return period
        return None

    @classmethod
    def next_period_for(cls, hour_now: int) -> "RidePeriod":
        """Return the next upcoming period for a 0-23 clock hour."""
        if 0 <= hour_now <= 6:
            return cls.MORNING
        if 7 <= hour_now <= 11:
            return cls.MIDDAY
        if 12 <= hour_now <= 17:
            return cls.EVENING
        return cls.MORNING

    @classmethod
    def parse(cls, value: "str | RidePeriod") -> "RidePeriod":
        """Parse a period name case-insensitively."""
        if isinstance(value, RidePeriod):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(f"Unknown ride period '{value}'") from None


# display name, display time, representative hour
_PERIOD_DETAILS: Dict[RidePeriod, tuple[str, str, int]] = {
    RidePeriod.MORNING: ("Morning", "07:00", 7),
    RidePeriod.MIDDAY: ("Midday", "12:00", 12),
    RidePeriod.EVENING: ("Evening", "18:00", 18),
}


class ScoreBand(str, Enum):
    """Coarse rating used by clients to color a ride score."""
    BAD = "bad"
    POOR = "poor"
    FAIR = "fair"
    GOOD = "good"

    @classmethod
    def from_score(cls, score: int, critical_conditions: bool = False) -> "ScoreBand":
        """Map a 0-100 ride score to its band; critical conditions are always bad."""
        if critical_conditions or score < 30:
            return cls.BAD
        if score < 50:
            return cls.POOR
        if score < 70:
            return cls.FAIR
        return cls.GOOD


class WeatherSample(_FrozenBaseModel):
    """One 3-hour forecast slot normalized from the upstream provider."""
    # NaN and inf readings are rejected at the boundary
    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)

    timestamp_seconds: int
    temperature_celsius: float
    wind_speed_mps: float
    precipitation_probability: float
    condition_description: str = ""

    @property
    def timestamp_utc(self) -> dt.datetime:
        return dt.datetime.fromtimestamp(self.timestamp_seconds, tz=dt.timezone.utc)


class ScoreResult(_FrozenBaseModel):
    """Rideability score for a single sample."""
    score: int = Field(ge=0, le=100)
    critical_conditions: bool


class ScoredForecast(_FrozenBaseModel):
    """Labeled, scored forecast slot returned to callers."""
    # score_band is serialized, so dumps must validate back into this model
    model_config = ConfigDict(extra="ignore", frozen=True)

    date_label: str
    temperature: int
    conditions: str
    wind_speed: float
    rain_chance: int = Field(ge=0, le=100)
    ride_score: int = Field(ge=0, le=100)
    critical_conditions: bool
    period: RidePeriod
    timestamp: int

    @computed_field  # type: ignore[prop-decorator]
    @property
    def score_band(self) -> ScoreBand:
        return ScoreBand.from_score(self.ride_score, self.critical_conditions)


class PeriodForecasts(_FrozenBaseModel):
    """Selector output plus the location name passed through from the feed."""
    city: str
    by_period: Dict[RidePeriod, List[ScoredForecast]] = Field(default_factory=dict)
