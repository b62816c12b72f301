"""HTML fragments and the full forecast page."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from city_forecast.renderers import render_template
from city_forecast.renderers.weather_utils import c_to_f, icon_emoji, ms_to_kmh, wind_direction

if TYPE_CHECKING:
    from city_forecast.schemas import CurrentConditions, DailySummary, WeatherForecast


def build_current_html(current: CurrentConditions) -> str:
    """Current-conditions card."""
    return render_template(
        "current.html.j2",
        current=current,
        emoji=icon_emoji(current.icon_code),
        temp_f=c_to_f(current.temperature),
        wind_kmh=ms_to_kmh(current.wind_speed),
        wind_dir=wind_direction(current.wind_direction),
    )


def build_daily_html(daily: list[DailySummary]) -> str:
    """Table of daily summaries."""
    rows = [
        {
            "day": d.day_of_week,
            "date": d.date,
            "emoji": icon_emoji(d.icon_code),
            "description": d.description,
            "high_c": d.max_temperature,
            "low_c": d.min_temperature,
            "high_f": c_to_f(d.max_temperature),
            "low_f": c_to_f(d.min_temperature),
            "rain": d.chance_of_rain,
            "humidity": d.humidity,
        }
        for d in daily
    ]
    return render_template("daily.html.j2", rows=rows)


def build_page_html(forecast: WeatherForecast, generated_at: datetime | None = None) -> str:
    """Complete page for one city."""
    return render_template(
        "base.html.j2",
        city=forecast.city,
        country=forecast.country,
        current_html=build_current_html(forecast.current),
        daily_html=build_daily_html(forecast.daily),
        generated_at=(generated_at or datetime.now()).strftime("%Y-%m-%d %H:%M"),
    )
