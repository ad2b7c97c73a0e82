"""HTTP API serving commute ride scores."""

import hmac
from datetime import datetime, timezone
from typing import Dict, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import requests
from babel import Locale, UnknownLocaleError
from fastapi import APIRouter, Depends, Header, HTTPException, Query, status
from pydantic import BaseModel, ValidationError

from .config import settings
from .data_sources import ForecastDataSource, build_data_source
from .domain import PeriodForecasts, RidePeriod, ScoredForecast
from .forecast_service import choose_period, get_forecasts_by_period, next_ride
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="api")


def require_api_key(x_api_key: str | None = Header(default=None)):
    """Validate the X-API-Key header against the configured static key."""
    if not settings.api_key:
        logger.debug("No API key configured; allowing all requests")
        return

    if not x_api_key:
        logger.debug("No API key provided")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing API key")

    if hmac.compare_digest(str(x_api_key), str(settings.api_key)):
        return

    logger.debug("Invalid API key provided")
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API key")


_data_source: ForecastDataSource | None = None


def get_data_source() -> ForecastDataSource:
    """Build the configured data source on first use."""
    global _data_source
    if _data_source is None:
        try:
            _data_source = build_data_source(settings)
        except ValueError as exc:
            logger.error("Forecast data source is not configured", extra={"error": str(exc)})
            raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                                detail="Forecast source not configured.")
    return _data_source


def utc_now() -> datetime:
    """Reference time for week and day filtering."""
    return datetime.now(timezone.utc)


router = APIRouter(dependencies=[Depends(require_api_key)])


class ForecastsResponse(BaseModel):
    """Scored forecasts grouped by ride period."""
    city: str
    periods: Dict[RidePeriod, List[ScoredForecast]]


class MorningForecastResponse(BaseModel):
    """Morning-only forecasts for single-list clients."""
    city: str
    forecasts: List[ScoredForecast]


class NextRideResponse(BaseModel):
    """The period to show first and the slot to highlight."""
    city: str
    period: RidePeriod
    forecast: Optional[ScoredForecast] = None


def _parse_periods(raw: str | None) -> list[RidePeriod] | None:
    """Parse a comma-separated list of period names."""
    if not raw:
        return None
    try:
        return [RidePeriod.parse(p) for p in raw.split(",") if p.strip()]
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


def _resolve_timezone(tz: str | None) -> str:
    """Validate a zone name, falling back to the configured zone."""
    tz_str = tz or settings.timezone
    try:
        ZoneInfo(tz_str)
    except (ZoneInfoNotFoundError, ValueError):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid timezone: {tz_str}")
    return tz_str


def _resolve_locale(locale: str | None) -> str:
    """Validate a locale identifier, falling back to the configured locale."""
    loc = locale or settings.locale
    try:
        Locale.parse(loc)
    except (UnknownLocaleError, ValueError):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid locale: {loc}")
    return loc


def _load_forecasts(
    lat: float,
    lon: float,
    data_source: ForecastDataSource,
    *,
    periods: list[RidePeriod] | None = None,
    tz_str: str,
    locale: str,
    now: datetime,
) -> PeriodForecasts:
    """Run the forecast pipeline, mapping upstream failures to 502."""
    try:
        return get_forecasts_by_period(
            lat,
            lon,
            periods=periods,
            now=now,
            timezone=tz_str,
            locale=locale,
            data_source=data_source,
        )
    except requests.RequestException as exc:
        logger.error("Weather provider request failed", extra={"error": str(exc)})
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Weather provider unavailable.")
    except ValidationError as exc:
        logger.error("Weather provider returned an unexpected payload", extra={"error": str(exc)})
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Unexpected weather provider response.")


@router.get("/forecast", response_model=ForecastsResponse)
def get_forecast(
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    periods: str | None = Query(default=None, description="Comma-separated ride periods"),
    tz: str | None = None,
    locale: str | None = None,
    data_source: ForecastDataSource = Depends(get_data_source),
    now: datetime = Depends(utc_now),
):
    """Return this week's weekday ride scores for each requested period."""
    requested = _parse_periods(periods)
    tz_str = _resolve_timezone(tz)
    loc = _resolve_locale(locale)

    result = _load_forecasts(lat, lon, data_source, periods=requested, tz_str=tz_str, locale=loc, now=now)
    return ForecastsResponse(city=result.city, periods=result.by_period)


@router.get("/forecast/morning", response_model=MorningForecastResponse)
def get_morning_forecast(
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    tz: str | None = None,
    locale: str | None = None,
    data_source: ForecastDataSource = Depends(get_data_source),
    now: datetime = Depends(utc_now),
):
    """Return morning commute scores only."""
    tz_str = _resolve_timezone(tz)
    loc = _resolve_locale(locale)

    result = _load_forecasts(
        lat, lon, data_source, periods=[RidePeriod.MORNING], tz_str=tz_str, locale=loc, now=now
    )
    return MorningForecastResponse(city=result.city, forecasts=result.by_period[RidePeriod.MORNING])


@router.get("/next-ride", response_model=NextRideResponse)
def get_next_ride(
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    tz: str | None = None,
    locale: str | None = None,
    data_source: ForecastDataSource = Depends(get_data_source),
    now: datetime = Depends(utc_now),
):
    """Return the upcoming ride slot, the data a home-screen widget shows."""
    tz_str = _resolve_timezone(tz)
    loc = _resolve_locale(locale)
    now = now.astimezone(ZoneInfo(tz_str))

    result = _load_forecasts(lat, lon, data_source, tz_str=tz_str, locale=loc, now=now)
    period = choose_period(result.by_period, now.hour)
    forecast = next_ride(result.by_period, now)
    logger.debug(f"Next ride for {result.city}: {period.value} -> {forecast}")
    return NextRideResponse(city=result.city, period=period, forecast=forecast)
