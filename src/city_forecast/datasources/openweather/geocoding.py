"""City search via the OpenWeatherMap Geocoding API."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from city_forecast.datasources.openweather.client import (
    DEFAULT_SEARCH_LIMIT,
    GEOCODING_API,
    get_json,
)

if TYPE_CHECKING:
    import requests


def search_cities(
    query: str,
    api_key: str,
    *,
    limit: int = DEFAULT_SEARCH_LIMIT,
    session: requests.Session | None = None,
) -> list[dict[str, Any]]:
    """
    Look up cities matching a free-text name.

    Args:
        query: City name, optionally ``"name,state,country"``.
        api_key: OpenWeatherMap API key.
        limit: Maximum number of candidates (the API caps this at 5 per
            name variant, but accepts larger values).
        session: HTTP session to use; defaults to the shared one.

    Returns:
        Raw list of candidates (``name``, ``country``, ``state``, ``lat``, ``lon``).
    """
    params: dict[str, Any] = {"q": query, "limit": limit, "appid": api_key}
    result = get_json(GEOCODING_API, params, session)
    return result if isinstance(result, list) else []
