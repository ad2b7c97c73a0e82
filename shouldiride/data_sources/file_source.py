"""Forecast data source backed by a saved OpenWeather `/forecast` JSON document."""

from __future__ import annotations

import json
from pathlib import Path

from shouldiride.data_sources.base import ForecastDataSource
from shouldiride.data_sources.openweather_client import RawForecast, parse_forecast_payload
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="data_sources/file")


class FileForecastDataSource(ForecastDataSource):
    """Serve the same recorded forecast for every location.

    Useful for local development and demos without an OpenWeather key. The file
    is read on every call so it can be swapped while the server runs.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def fetch_forecast(self, latitude: float, longitude: float) -> RawForecast:
        logger.info(
            "Loading recorded forecast",
            extra={"path": str(self.path), "latitude": latitude, "longitude": longitude},
        )
        with self.path.open("r", encoding="utf-8") as fh:
            payload = json.load(fh)
        return parse_forecast_payload(payload)
