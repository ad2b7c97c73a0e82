import pytest
from pydantic import ValidationError

from shouldiride.domain import RidePeriod, ScoredForecast, ScoreResult, WeatherSample


def test_period_hours_are_unique():
    hours = [p.hour_of_day for p in RidePeriod.default_order()]
    assert hours == [7, 12, 18]
    assert len(set(hours)) == len(hours)


def test_from_hour_matches_only_representative_hours():
    assert RidePeriod.from_hour(7) is RidePeriod.MORNING
    assert RidePeriod.from_hour(12) is RidePeriod.MIDDAY
    assert RidePeriod.from_hour(18) is RidePeriod.EVENING
    for hour in (0, 6, 8, 9, 15, 21, 23):
        assert RidePeriod.from_hour(hour) is None


@pytest.mark.parametrize(
    "hour, expected",
    [(0, RidePeriod.MORNING), (6, RidePeriod.MORNING), (7, RidePeriod.MIDDAY), (11, RidePeriod.MIDDAY),
     (12, RidePeriod.EVENING), (17, RidePeriod.EVENING), (18, RidePeriod.MORNING), (23, RidePeriod.MORNING)],
)
def test_next_period_for(hour, expected):
    assert RidePeriod.next_period_for(hour) is expected


def test_parse_is_case_insensitive():
    assert RidePeriod.parse(" midday ") is RidePeriod.MIDDAY
    with pytest.raises(ValueError):
        RidePeriod.parse("night")


def test_display_metadata():
    assert RidePeriod.EVENING.display_name == "Evening"
    assert RidePeriod.EVENING.display_time == "18:00"


def test_models_are_immutable():
    s = WeatherSample(timestamp_seconds=0, temperature_celsius=1.0, wind_speed_mps=2.0,
                      precipitation_probability=0.3)
    with pytest.raises(ValidationError):
        s.temperature_celsius = 5.0
    assert s.timestamp_utc.year == 1970


def test_score_result_rejects_out_of_range_scores():
    with pytest.raises(ValidationError):
        ScoreResult(score=101, critical_conditions=False)


def test_scored_forecast_dump_includes_band_and_round_trips():
    forecast = ScoredForecast(
        date_label="Today", temperature=20, conditions="clear sky", wind_speed=3.0, rain_chance=10,
        ride_score=95, critical_conditions=False, period=RidePeriod.MORNING, timestamp=0,
    )
    dumped = forecast.model_dump(mode="json")
    assert dumped["score_band"] == "good"
    assert dumped["period"] == "MORNING"
    assert ScoredForecast.model_validate(dumped) == forecast


@pytest.mark.parametrize("field", ["temperature_celsius", "wind_speed_mps", "precipitation_probability"])
@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
def test_weather_sample_rejects_non_finite_readings(field, value):
    values = {"timestamp_seconds": 0, "temperature_celsius": 1.0, "wind_speed_mps": 2.0,
              "precipitation_probability": 0.3}
    values[field] = value
    with pytest.raises(ValidationError):
        WeatherSample(**values)
