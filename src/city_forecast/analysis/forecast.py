"""Fold 3-hour forecast samples into current conditions and daily summaries.

Samples are grouped by the calendar-date prefix of the upstream local
date-time text (``"2024-01-15 09:00:00"`` -> ``"2024-01-15"``), not by
re-deriving a date from the UTC timestamp. Groups keep first-seen order and
the output is cut to the first seven groups; nothing is sorted, so the
output order is exactly the input's date order.
"""

from __future__ import annotations

import math
from datetime import date
from typing import TYPE_CHECKING

from city_forecast.schemas import CurrentConditions, DailySummary, WeatherForecast

if TYPE_CHECKING:
    from collections.abc import Sequence

    from city_forecast.schemas import WeatherSample

MAX_DAILY_SUMMARIES = 7
UNKNOWN_WEEKDAY = "Unknown"


def summarize_current_conditions(
    samples: Sequence[WeatherSample],
    city_name: str,
    country_code: str,
) -> CurrentConditions:
    """Use the first sample (in the given order) as the "now" reading.

    An empty sequence gives zeroed numbers, empty description and icon,
    and the supplied city and country.
    """
    if not samples:
        return CurrentConditions(city=city_name, country=country_code)

    first = samples[0]
    return CurrentConditions(
        temperature=first.temperature,
        feels_like=first.feels_like,
        min_temperature=first.min_temperature,
        max_temperature=first.max_temperature,
        humidity=first.humidity,
        pressure=first.pressure,
        description=first.description,
        icon_code=first.icon_code,
        city=city_name,
        country=country_code,
        wind_speed=first.wind_speed,
        wind_direction=first.wind_direction,
        visibility=first.visibility,
        weather_id=first.weather_id,
    )


def summarize_daily(samples: Sequence[WeatherSample]) -> list[DailySummary]:
    """Group samples by local calendar date and summarize each day.

    Args:
        samples: Forecast samples in upstream order.

    Returns:
        At most ``MAX_DAILY_SUMMARIES`` summaries, in the order their dates
        first appear in ``samples``.
    """
    groups: dict[str, list[WeatherSample]] = {}
    for sample in samples:
        groups.setdefault(sample.datetime_text[:10], []).append(sample)

    summaries = []
    for date_key, items in list(groups.items())[:MAX_DAILY_SUMMARIES]:
        first = items[0]
        max_pop = max((s.precipitation_probability or 0.0) for s in items)
        summaries.append(
            DailySummary(
                date=date_key,
                day_of_week=weekday_name(date_key),
                max_temperature=max(s.max_temperature for s in items),
                min_temperature=min(s.min_temperature for s in items),
                description=first.description,
                icon_code=first.icon_code,
                humidity=_round_half_up(sum(s.humidity for s in items) / len(items)),
                chance_of_rain=_percent(max_pop),
            )
        )
    return summaries


def summarize_forecast(
    samples: Sequence[WeatherSample],
    city_name: str,
    country_code: str,
) -> WeatherForecast:
    """Current conditions and daily outlook for one forecast payload."""
    return WeatherForecast(
        city=city_name,
        country=country_code,
        current=summarize_current_conditions(samples, city_name, country_code),
        daily=summarize_daily(samples),
    )


def weekday_name(date_key: str) -> str:
    """Full weekday name for an ISO date in the process locale, or ``"Unknown"``."""
    try:
        return date.fromisoformat(date_key).strftime("%A")
    except (ValueError, TypeError):
        return UNKNOWN_WEEKDAY


def _percent(probability: float) -> int:
    # Upstream "pop" is 0.0-1.0; truncate like the display does, clamp stray values.
    return min(100, max(0, int(probability * 100)))


def _round_half_up(value: float) -> int:
    # Halves go up: 64.5 -> 65, 65.5 -> 66
    return math.floor(value + 0.5)
