"""Helpers for fetching the 5-day/3-hour forecast from the OpenWeather API."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Mapping

import requests
from pydantic import BaseModel, ConfigDict, Field

from shouldiride.domain import WeatherSample
from utils.logging_utils import get_tagged_logger, mask_url_secrets
logger = get_tagged_logger(__name__, tag="openweather_client")

session = requests.Session()

OPENWEATHER_BASE_URL = "https://api.openweathermap.org/data/2.5"
FORECAST_PATH = "/forecast"

# Scoring thresholds are in Celsius and m/s, which OpenWeather returns for "metric".
EXPECTED_UNITS = "metric"


class _ApiModel(BaseModel):
    """Base for OpenWeather payload models; unknown keys are ignored."""

    model_config = ConfigDict(extra="ignore")


class Coordinates(_ApiModel):
    lat: float
    lon: float


class MainWeatherData(_ApiModel):
    temp: float
    feels_like: float | None = None
    temp_min: float | None = None
    temp_max: float | None = None
    pressure: int | None = None
    humidity: int | None = None


class Weather(_ApiModel):
    id: int | None = None
    main: str | None = None
    description: str = ""
    icon: str | None = None


class Wind(_ApiModel):
    speed: float
    deg: int | None = None
    gust: float | None = None


class ForecastItem(_ApiModel):
    """One 3-hour slot of the forecast list."""
    dt: int
    main: MainWeatherData
    weather: List[Weather] = Field(default_factory=list)
    wind: Wind
    visibility: int | None = None
    pop: float = 0.0
    dt_txt: str | None = None

    def to_sample(self) -> WeatherSample:
        """Normalize into the provider-independent sample used for scoring."""
        description = self.weather[0].description if self.weather else ""
        return WeatherSample(
            timestamp_seconds=self.dt,
            temperature_celsius=self.main.temp,
            wind_speed_mps=self.wind.speed,
            precipitation_probability=self.pop,
            condition_description=description,
        )


class City(_ApiModel):
    name: str = ""
    country: str | None = None
    coord: Coordinates | None = None
    timezone: int | None = None  # UTC offset in seconds
    sunrise: int | None = None
    sunset: int | None = None


class ForecastResponse(_ApiModel):
    """Top-level `/forecast` payload."""
    cod: str | None = None
    cnt: int | None = None
    list: List[ForecastItem] = Field(default_factory=list)
    city: City = Field(default_factory=City)


@dataclass
class RawForecast:
    """City name plus normalized samples, as handed to the selector."""
    city: str
    samples: List[WeatherSample] = field(default_factory=list)


def parse_forecast_payload(payload: Mapping[str, Any]) -> RawForecast:
    """Validate a decoded `/forecast` JSON document and normalize its items."""
    response = ForecastResponse.model_validate(payload)
    samples = [item.to_sample() for item in response.list]
    logger.debug(
        "Parsed OpenWeather forecast",
        extra={"city": response.city.name, "samples": len(samples)},
    )
    return RawForecast(city=response.city.name, samples=samples)


def fetch_forecast(
    latitude: float,
    longitude: float,
    *,
    api_key: str,
    base_url: str = OPENWEATHER_BASE_URL,
    units: str = EXPECTED_UNITS,
    timeout: float = 10,
) -> RawForecast:
    """Fetch the 5-day/3-hour forecast for the given coordinates."""
    if units != EXPECTED_UNITS:
        logger.warning(
            "Non-metric OpenWeather units requested; ride scores assume Celsius and m/s",
            extra={"units": units},
        )

    url = f"{base_url.rstrip('/')}{FORECAST_PATH}"
    params = {
        "lat": latitude,
        "lon": longitude,
        "units": units,
        "appid": api_key,
    }

    logger.info(
        "Fetching OpenWeather forecast",
        extra={"latitude": latitude, "longitude": longitude, "units": units},
    )
    resp = session.get(url, params=params, timeout=timeout)
    # resp.url carries the appid query parameter
    logger.debug("OpenWeather responded", extra={"url": mask_url_secrets(str(getattr(resp, "url", url)))})
    resp.raise_for_status()
    data = resp.json()

    return parse_forecast_payload(data)
