"""Application configuration pulled from environment variables via pydantic."""
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="config")


class Settings(BaseSettings):
    """Environment-driven configuration for the should-i-ride service."""
    model_config = SettingsConfigDict(env_prefix="SHOULDIRIDE_", extra="ignore")

    forecast_source: str = "openweather"  # options: openweather, file
    forecast_file_path: str | None = None
    openweather_api_key: str | None = None
    openweather_base_url: str = "https://api.openweathermap.org/data/2.5"
    openweather_units: str = "metric"
    request_timeout_seconds: float = 10.0
    # OpenWeather slots fall on 00, 03, ... 21 UTC, so with "UTC" no slot hits
    # 07:00 and MORNING stays empty; pick the riders' local zone.
    timezone: str = "UTC"
    locale: str = "en_US"
    max_forecasts_per_period: int = Field(default=5, ge=1)
    api_key: str | None = None
    log_level: str = "INFO"

    @field_validator("openweather_base_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize base URLs to avoid double slashes."""
        return str(v).rstrip("/")

    @field_validator("timezone", mode="after")
    @classmethod
    def check_timezone(cls, v: str) -> str:
        """Reject zone names zoneinfo cannot resolve."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone '{v}'") from None
        return v


settings = Settings()


if __name__ == "__main__":
    logger.setLevel("DEBUG")
    logger.debug(f"Loaded settings: {settings.model_dump_json(indent=4, exclude={'openweather_api_key', 'api_key'})}")
