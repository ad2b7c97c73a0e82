"""Factory helpers for choosing a forecast data source at startup."""

from __future__ import annotations

from shouldiride import config
from shouldiride.data_sources.base import CallableForecastDataSource, ForecastDataSource
from shouldiride.data_sources.file_source import FileForecastDataSource
from shouldiride.data_sources.openweather_client import fetch_forecast
from utils.logging_utils import get_tagged_logger, mask_url_secrets

logger = get_tagged_logger(__name__, tag="data_sources/factory")


DEFAULT_SOURCE_NAME = "openweather"


def build_data_source(settings: config.Settings | None = None) -> ForecastDataSource:
    """Instantiate the configured forecast data source."""
    settings = settings or config.settings
    source = (settings.forecast_source or DEFAULT_SOURCE_NAME).lower()

    if source == "openweather":
        if not settings.openweather_api_key:
            raise ValueError("openweather_api_key must be set for the OpenWeather data source")
        logger.info(
            "Using OpenWeather data source",
            extra={"base_url": mask_url_secrets(settings.openweather_base_url)},
        )
        return CallableForecastDataSource(
            forecast=fetch_forecast,
            options={
                "api_key": settings.openweather_api_key,
                "base_url": settings.openweather_base_url,
                "units": settings.openweather_units,
                "timeout": settings.request_timeout_seconds,
            },
        )

    if source == "file":
        path = settings.forecast_file_path
        if not path:
            raise ValueError("forecast_file_path must be set for the file data source")
        logger.info("Using recorded forecast file", extra={"path": path})
        return FileForecastDataSource(path)

    raise ValueError(f"Unknown forecast source '{source}'")
