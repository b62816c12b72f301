"""
Prefect flow that refreshes the forecast page for the selected city.

Current weather and the 3-hour forecast are fetched concurrently, the
samples are folded into daily summaries, and the page is written to
``<site_dir>/index.html``.

Run locally:
    python -m city_forecast.flows.refresh
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from prefect import flow, task

from city_forecast.analysis.forecast import summarize_forecast
from city_forecast.config import get_settings
from city_forecast.container import build_app
from city_forecast.datasources.base import ForecastBatch
from city_forecast.datasources.openweather import OpenWeatherProvider
from city_forecast.errors import UpstreamFailure
from city_forecast.renderers.page import build_page_html
from city_forecast.schemas import CurrentConditions, Location, WeatherForecast

if TYPE_CHECKING:
    from city_forecast.cities import CityStore


def _provider() -> OpenWeatherProvider:
    return OpenWeatherProvider.from_settings(get_settings())


@task(name="fetch-current")
def fetch_current(location: Location) -> CurrentConditions:
    """Fetch current conditions (single attempt)."""
    return _provider().fetch_current(location)


@task(name="fetch-forecast")
def fetch_forecast(location: Location) -> ForecastBatch:
    """Fetch 3-hour forecast samples (single attempt)."""
    return _provider().fetch_forecast(location)


@task(name="build-page")
def build_page(forecast: WeatherForecast, site_dir: Path) -> Path:
    """Render the forecast page into ``site_dir``."""
    site_dir.mkdir(parents=True, exist_ok=True)
    output = site_dir / "index.html"
    output.write_text(build_page_html(forecast), encoding="utf-8")
    return output


def resolve_location(
    city_name: str | None, cities: CityStore, default_city: str
) -> tuple[str, Location]:
    """Pick the city to refresh: explicit name, else the selection, else the default."""
    if city_name is None:
        selected = cities.selected
        city_name = selected.name if selected is not None else default_city
    for city in cities.cities:
        if city.matches(city_name):
            return city.name, Location.for_city(city)
    return city_name, Location(name=city_name)


@flow(name="refresh-forecast", log_prints=True)
def refresh_forecast(city_name: str | None = None) -> dict[str, Any]:
    """
    Fetch weather for one city and rebuild the page.

    Both fetches run concurrently. A failed current-weather fetch falls back
    to the first forecast sample; a failed forecast still fails the flow,
    since there is nothing to put in the table.
    """
    settings = get_settings()
    app = build_app(settings)
    try:
        name, location = resolve_location(city_name, app.cities, settings.default_city)
    finally:
        app.close()
    print(f"Refreshing forecast for {name}...")

    current_future = fetch_current.submit(location)
    forecast_future = fetch_forecast.submit(location)

    batch = forecast_future.result()
    forecast = summarize_forecast(batch.samples, batch.city or name, batch.country)

    try:
        forecast.current = current_future.result()
    except UpstreamFailure as e:
        print(f"Current weather unavailable ({e}); using first forecast sample.")

    output = build_page(forecast, settings.site_dir)
    print(f"Saved {len(forecast.daily)} days for {forecast.city} to {output}")

    return {
        "city": forecast.city,
        "country": forecast.country,
        "days": len(forecast.daily),
        "output": str(output),
    }


if __name__ == "__main__":
    result = refresh_forecast()
    print(f"Flow complete: {result}")
