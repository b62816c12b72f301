"""OpenWeatherMap API client constants and the shared GET helper.

API docs:
  - Current weather: https://openweathermap.org/current
  - 5 day / 3 hour forecast: https://openweathermap.org/forecast5
  - Geocoding: https://openweathermap.org/api/geocoding-api
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from city_forecast.errors import UpstreamFailure
from city_forecast.services.http import session

logger = logging.getLogger(__name__)

CURRENT_API = "https://api.openweathermap.org/data/2.5/weather"
FORECAST_API = "https://api.openweathermap.org/data/2.5/forecast"
GEOCODING_API = "https://api.openweathermap.org/geo/1.0/direct"

DEFAULT_UNITS = "metric"
DEFAULT_LANG = "en"
DEFAULT_SEARCH_LIMIT = 10


def get_json(
    url: str, params: dict[str, Any], http_session: requests.Session | None = None
) -> Any:
    """GET ``url`` once and return the decoded JSON body.

    Uses the shared module session unless ``http_session`` is given.

    Raises:
        UpstreamFailure: network error, non-2xx status, or a non-JSON body.
    """
    try:
        resp = (http_session or session).get(url, params=params)
    except requests.RequestException as e:
        logger.error("Network error calling %s: %s", url, e)
        msg = f"Network error: {e}"
        raise UpstreamFailure(msg) from e

    if not resp.ok:
        raise error_from_response(resp)

    try:
        return resp.json()
    except ValueError as e:
        msg = f"Invalid JSON from {url}"
        raise UpstreamFailure(msg, resp.status_code) from e


def error_from_response(resp: requests.Response) -> UpstreamFailure:
    """Build an UpstreamFailure from an OpenWeatherMap error body (``cod``/``message``)."""
    try:
        body = resp.json()
    except ValueError:
        body = None

    if isinstance(body, dict) and body.get("message"):
        message = f"OpenWeather API error {body.get('cod', resp.status_code)}: {body['message']}"
    else:
        message = f"HTTP {resp.status_code}: {resp.text[:200]}"
    logger.error("Request failed with status %s: %s", resp.status_code, message)
    return UpstreamFailure(message, resp.status_code)
