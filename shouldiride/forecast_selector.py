"""Reduce a raw 3-hour forecast feed to scored commute slots for this work week."""

from __future__ import annotations

import datetime as dt
from typing import Dict, Iterable, List, Sequence
from zoneinfo import ZoneInfo

from babel.dates import format_date

from shouldiride.domain import RidePeriod, ScoredForecast, WeatherSample
from shouldiride.scoring import score_sample
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="forecast_selector")

TODAY_LABEL = "Today"
DEFAULT_MAX_PER_PERIOD = 5  # one work week


def _resolve_tz(tz: str | dt.tzinfo) -> dt.tzinfo:
    """Accept either a zone name or a tzinfo instance."""
    if isinstance(tz, dt.tzinfo):
        return tz
    return ZoneInfo(tz)


def _normalize_periods(periods: Sequence[RidePeriod | str] | None) -> List[RidePeriod]:
    """Parse requested periods, keeping first-seen order and dropping duplicates."""
    if periods is None:
        return RidePeriod.default_order()
    out: List[RidePeriod] = []
    for p in periods:
        period = RidePeriod.parse(p)
        if period not in out:
            out.append(period)
    return out


def _is_workday(day: dt.date) -> bool:
    return day.weekday() < 5


def day_label(local_time: dt.datetime, today: dt.date, locale: str) -> str:
    """Return "Today" for today's slots, otherwise the localized weekday name."""
    if local_time.date() == today:
        return TODAY_LABEL
    return format_date(local_time.date(), format="EEEE", locale=locale)


def to_scored_forecast(sample: WeatherSample, period: RidePeriod, label: str) -> ScoredForecast:
    """Score a sample and shape it for display."""
    result = score_sample(sample)
    rain_chance = int(sample.precipitation_probability * 100)
    return ScoredForecast(
        date_label=label,
        temperature=int(sample.temperature_celsius),
        conditions=sample.condition_description,
        wind_speed=sample.wind_speed_mps,
        rain_chance=max(0, min(100, rain_chance)),
        ride_score=result.score,
        critical_conditions=result.critical_conditions,
        period=period,
        timestamp=sample.timestamp_seconds,
    )


def select_forecasts(
    samples: Iterable[WeatherSample],
    now: dt.datetime,
    *,
    periods: Sequence[RidePeriod | str] | None = None,
    tz: str | dt.tzinfo = "UTC",
    locale: str = "en_US",
    max_per_period: int = DEFAULT_MAX_PER_PERIOD,
) -> Dict[RidePeriod, List[ScoredForecast]]:
    """
    Filter, group and score forecast samples by ride period.

    A sample is kept when, in zone `tz`, its hour is the representative hour of
    a requested period, its date is not before today, it falls on Monday to
    Friday, and it belongs to the same ISO week as `now`. Each period keeps one
    sample per local day (the earliest when the feed repeats a slot) and at
    most `max_per_period` samples in ascending time order.

    Every requested period is present in the result, with an empty list when
    nothing matched.
    """
    tzinfo = _resolve_tz(tz)
    requested = _normalize_periods(periods)
    # naive reference times are read as wall-clock time in tz
    local_now = now.replace(tzinfo=tzinfo) if now.tzinfo is None else now.astimezone(tzinfo)
    today = local_now.date()
    current_week = today.isocalendar()[:2]
    wanted_hours = {p.hour_of_day: p for p in requested}

    grouped: Dict[RidePeriod, List[WeatherSample]] = {p: [] for p in requested}
    skipped = 0
    for sample in samples:
        local_time = sample.timestamp_utc.astimezone(tzinfo)
        period = wanted_hours.get(local_time.hour)
        local_date = local_time.date()
        if (
            period is None
            or local_date < today
            or not _is_workday(local_date)
            or local_date.isocalendar()[:2] != current_week
        ):
            skipped += 1
            continue
        grouped[period].append(sample)

    out: Dict[RidePeriod, List[ScoredForecast]] = {}
    duplicates = 0
    for period, items in grouped.items():
        items.sort(key=lambda s: s.timestamp_seconds)
        # one slot per local day; the earliest sample wins
        seen_dates = set()
        per_day: List[WeatherSample] = []
        for s in items:
            local_date = s.timestamp_utc.astimezone(tzinfo).date()
            if local_date in seen_dates:
                duplicates += 1
                continue
            seen_dates.add(local_date)
            per_day.append(s)

        out[period] = [
            to_scored_forecast(
                s,
                period,
                day_label(s.timestamp_utc.astimezone(tzinfo), today, locale),
            )
            for s in per_day[:max(max_per_period, 0)]
        ]

    logger.debug(
        "Selected commute forecasts",
        extra={
            "periods": [p.value for p in requested],
            "kept": {p.value: len(v) for p, v in out.items()},
            "skipped": skipped,
            "duplicates": duplicates,
        },
    )
    return out
