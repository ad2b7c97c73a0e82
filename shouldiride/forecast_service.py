"""Fetch a forecast feed and turn it into scored commute slots per ride period."""
from __future__ import annotations

import datetime as dt
from typing import Dict, List, Sequence, Tuple
from zoneinfo import ZoneInfo

from shouldiride import config
from shouldiride.data_sources import ForecastDataSource, build_data_source
from shouldiride.domain import PeriodForecasts, RidePeriod, ScoredForecast
from shouldiride.forecast_selector import select_forecasts
from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="forecast_service")


def get_forecasts_by_period(
    latitude: float,
    longitude: float,
    *,
    periods: Sequence[RidePeriod | str] | None = None,
    now: dt.datetime | None = None,
    timezone: str | None = None,
    locale: str | None = None,
    data_source: ForecastDataSource | None = None,
    settings: config.Settings | None = None,
) -> PeriodForecasts:
    """
    Fetch forecasts and return them grouped by the requested ride periods.

    Only weekdays of the current week are returned and only slots at the
    representative hour of each period are considered. `now`, `timezone` and
    `locale` default to the current time and the configured zone and locale;
    pass them explicitly for reproducible results.
    """
    settings = settings or config.settings
    tz_name = timezone or settings.timezone
    tzinfo = ZoneInfo(tz_name)
    now = now or dt.datetime.now(tzinfo)
    ds = data_source or build_data_source(settings)

    logger.info(
        "Fetching ride forecasts",
        extra={"latitude": latitude, "longitude": longitude, "timezone": tz_name},
    )
    raw = ds.fetch_forecast(latitude, longitude)

    by_period = select_forecasts(
        raw.samples,
        now,
        periods=periods,
        tz=tzinfo,
        locale=locale or settings.locale,
        max_per_period=settings.max_forecasts_per_period,
    )

    logger.info(
        "Computed ride forecasts",
        extra={"city": raw.city, "forecast_count": sum(len(v) for v in by_period.values())},
    )
    return PeriodForecasts(city=raw.city, by_period=by_period)


def get_weather_forecast(
    latitude: float,
    longitude: float,
    **kwargs,
) -> Tuple[str, List[ScoredForecast]]:
    """Return (city, morning forecasts) for clients that only show one period."""
    result = get_forecasts_by_period(latitude, longitude, periods=[RidePeriod.MORNING], **kwargs)
    return result.city, result.by_period.get(RidePeriod.MORNING, [])


def choose_period(by_period: Dict[RidePeriod, List[ScoredForecast]], hour_now: int) -> RidePeriod:
    """Pick the period to show first: the upcoming one if it has data, else the first that does."""
    suggested = RidePeriod.next_period_for(hour_now)
    if by_period.get(suggested):
        return suggested
    for period in RidePeriod.default_order():
        if by_period.get(period):
            return period
    return RidePeriod.MORNING


def next_ride(
    by_period: Dict[RidePeriod, List[ScoredForecast]],
    now: dt.datetime,
) -> ScoredForecast | None:
    """
    Return the forecast to highlight for the next ride.

    Prefers the first slot of the upcoming period for `now`'s hour; otherwise
    the soonest slot across all periods. Slots that already started are skipped.
    """
    now_ts = int(now.timestamp())
    suggested = [
        f for f in by_period.get(RidePeriod.next_period_for(now.hour), []) if f.timestamp >= now_ts
    ]
    if suggested:
        return suggested[0]

    upcoming = [f for items in by_period.values() for f in items if f.timestamp >= now_ts]
    if not upcoming:
        return None
    return min(upcoming, key=lambda f: f.timestamp)
