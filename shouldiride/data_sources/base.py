"""Interfaces and helpers for forecast data sources."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Protocol

from shouldiride.data_sources.openweather_client import RawForecast


class ForecastDataSource(Protocol):
    """Interface for anything that can provide a 3-hour forecast feed."""

    def fetch_forecast(self, latitude: float, longitude: float) -> RawForecast:
        """Return the city name and normalized samples for a location."""
        ...


@dataclass
class CallableForecastDataSource(ForecastDataSource):
    """Wrap a fetch callable plus fixed keyword arguments (API key, base URL, ...)."""

    forecast: Callable[..., RawForecast]
    options: dict | None = None

    def fetch_forecast(self, latitude: float, longitude: float) -> RawForecast:
        """Delegate to the configured callable."""
        return self.forecast(latitude, longitude, **(self.options or {}))
