"""Plain-text rendering for the CLI."""

from __future__ import annotations

from typing import TYPE_CHECKING

from city_forecast.renderers.weather_utils import icon_emoji, ms_to_kmh, wind_direction

if TYPE_CHECKING:
    from city_forecast.schemas import City, CitySearchResult, CurrentConditions, DailySummary


def format_current(current: CurrentConditions) -> str:
    """Multi-line block: place, temperature, description, humidity, wind."""
    place = f"{current.city}, {current.country}" if current.country else current.city
    lines = [
        f"{place}",
        f"  {icon_emoji(current.icon_code)} {current.temperature:.1f}°C "
        f"(feels like {current.feels_like:.1f}°C) {current.description}",
        f"  Low {current.min_temperature:.1f}°C / High {current.max_temperature:.1f}°C",
        f"  Humidity {current.humidity}%  Pressure {current.pressure} hPa",
        f"  Wind {ms_to_kmh(current.wind_speed):.1f} km/h {wind_direction(current.wind_direction)}",
    ]
    return "\n".join(lines)


def format_daily(daily: list[DailySummary]) -> str:
    """One line per day; ``No forecast available.`` when empty."""
    if not daily:
        return "No forecast available."
    return "\n".join(
        f"{d.day_of_week[:3]:<3} {d.date}  {icon_emoji(d.icon_code)} "
        f"{d.min_temperature:>5.1f} / {d.max_temperature:>5.1f}°C  "
        f"rain {d.chance_of_rain:>3}%  hum {d.humidity:>3}%  {d.description}"
        for d in daily
    )


def format_cities(cities: list[City]) -> str:
    """Saved cities, selected one marked with ``*``; placeholders flagged."""
    if not cities:
        return "No saved cities."
    lines = []
    for city in cities:
        marker = "*" if city.is_selected else " "
        note = "  (incomplete)" if city.is_placeholder else ""
        lines.append(f"{marker} {city.name}, {city.country}{note}")
    return "\n".join(lines)


def format_search_results(results: list[CitySearchResult]) -> str:
    """Numbered candidates, 1-based to match ``add --pick``."""
    if not results:
        return "No cities found."
    return "\n".join(f"{i}. {r.label}" for i, r in enumerate(results, start=1))
