"""Current weather from the OpenWeatherMap Current Weather API."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from city_forecast.datasources.openweather.client import (
    CURRENT_API,
    DEFAULT_LANG,
    DEFAULT_UNITS,
    get_json,
)

if TYPE_CHECKING:
    import requests

    from city_forecast.schemas import Location


def fetch_current(
    location: Location,
    api_key: str,
    *,
    units: str = DEFAULT_UNITS,
    lang: str = DEFAULT_LANG,
    session: requests.Session | None = None,
) -> dict[str, Any]:
    """
    Fetch current weather for a city name or coordinate pair.

    Args:
        location: Where to look up (name or lat/lon).
        api_key: OpenWeatherMap API key.
        units: ``metric``, ``imperial`` or ``standard``.
        lang: Language code for descriptions.
        session: HTTP session to use; defaults to the shared one.

    Returns:
        Raw API response dict (``main``, ``weather``, ``wind``, ``sys``, ...).
    """
    params: dict[str, Any] = {
        **location.query_params(),
        "appid": api_key,
        "units": units,
        "lang": lang,
    }
    result: dict[str, Any] = get_json(CURRENT_API, params, session)
    return result
