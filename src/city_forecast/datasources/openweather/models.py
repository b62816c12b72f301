"""Parsers from raw OpenWeatherMap JSON to domain schemas.

All parsers raise ``UpstreamFailure`` when the payload is missing fields
the schema needs, so callers deal with a single error type.
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from city_forecast.errors import UpstreamFailure
from city_forecast.schemas import CitySearchResult, CurrentConditions, WeatherSample

_PARSE_ERRORS = (KeyError, TypeError, ValueError, ValidationError)


def sample_from_api(item: dict[str, Any]) -> WeatherSample:
    """One entry of the forecast ``list`` (or a current-weather body)."""
    try:
        main = item["main"]
        weather = (item.get("weather") or [{}])[0]
        wind = item.get("wind") or {}
        return WeatherSample(
            timestamp=item.get("dt", 0),
            datetime_text=item.get("dt_txt", ""),
            temperature=main["temp"],
            feels_like=main["feels_like"],
            min_temperature=main["temp_min"],
            max_temperature=main["temp_max"],
            humidity=main["humidity"],
            pressure=main["pressure"],
            description=weather.get("description", ""),
            icon_code=weather.get("icon", ""),
            precipitation_probability=item.get("pop"),
            weather_id=weather.get("id"),
            wind_speed=wind.get("speed", 0.0),
            wind_direction=wind.get("deg", 0),
            visibility=item.get("visibility"),
        )
    except _PARSE_ERRORS as e:
        msg = f"Failed to parse weather sample: {e}"
        raise UpstreamFailure(msg) from e


def current_from_api(data: dict[str, Any]) -> CurrentConditions:
    """Body of the current-weather endpoint."""
    sample = sample_from_api(data)
    try:
        return CurrentConditions(
            temperature=sample.temperature,
            feels_like=sample.feels_like,
            min_temperature=sample.min_temperature,
            max_temperature=sample.max_temperature,
            humidity=sample.humidity,
            pressure=sample.pressure,
            description=sample.description,
            icon_code=sample.icon_code,
            city=data.get("name", ""),
            country=(data.get("sys") or {}).get("country", ""),
            wind_speed=sample.wind_speed,
            wind_direction=sample.wind_direction,
            visibility=sample.visibility,
            weather_id=sample.weather_id,
        )
    except _PARSE_ERRORS as e:
        msg = f"Failed to parse current weather: {e}"
        raise UpstreamFailure(msg) from e


def forecast_from_api(data: dict[str, Any]) -> tuple[str, str, list[WeatherSample]]:
    """Body of the forecast endpoint -> (city, country, samples in upstream order)."""
    city = data.get("city") or {}
    items = data.get("list")
    if not isinstance(items, list):
        msg = "Forecast response missing 'list'"
        raise UpstreamFailure(msg)
    samples = [sample_from_api(item) for item in items]
    return city.get("name", ""), city.get("country", ""), samples


def city_result_from_api(item: dict[str, Any]) -> CitySearchResult:
    """One entry of the geocoding response."""
    try:
        return CitySearchResult(
            name=item["name"],
            country=item.get("country", ""),
            state=item.get("state"),
            lat=item.get("lat"),
            lon=item.get("lon"),
        )
    except _PARSE_ERRORS as e:
        msg = f"Failed to parse city search result: {e}"
        raise UpstreamFailure(msg) from e
