"""Data source factories for plugging different forecast backends."""

from .base import CallableForecastDataSource, ForecastDataSource
from .factory import build_data_source
from .file_source import FileForecastDataSource
from .openweather_client import (
    ForecastResponse,
    RawForecast,
    fetch_forecast,
    parse_forecast_payload,
)

__all__ = [
    "build_data_source",
    "FileForecastDataSource",
    "ForecastDataSource",
    "CallableForecastDataSource",
    "ForecastResponse",
    "RawForecast",
    "fetch_forecast",
    "parse_forecast_payload",
]
