"""
Tests for the OpenWeatherMap datasource.
"""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import Mock, patch

import pytest
import requests

from city_forecast.config import Settings
from city_forecast.datasources.openweather import (
    CURRENT_API,
    FORECAST_API,
    GEOCODING_API,
    OpenWeatherProvider,
    city_result_from_api,
    current_from_api,
    fetch_current,
    forecast_from_api,
    sample_from_api,
    search_cities,
)
from city_forecast.errors import UpstreamFailure
from city_forecast.schemas import Location

SESSION_GET = "city_forecast.datasources.openweather.client.session.get"


def _item(dt_txt: str, temp: float = 20.0, pop: float | None = 0.2) -> dict[str, Any]:
    item: dict[str, Any] = {
        "dt": 1705309200,
        "dt_txt": dt_txt,
        "main": {
            "temp": temp,
            "feels_like": temp - 1,
            "temp_min": temp - 2,
            "temp_max": temp + 2,
            "humidity": 65,
            "pressure": 1012,
        },
        "weather": [{"id": 500, "description": "light rain", "icon": "10d"}],
        "wind": {"speed": 3.5, "deg": 270},
        "visibility": 10000,
    }
    if pop is not None:
        item["pop"] = pop
    return item


CURRENT_BODY: dict[str, Any] = {
    **_item(""),
    "name": "Taipei",
    "sys": {"country": "TW"},
}

FORECAST_BODY: dict[str, Any] = {
    "cod": "200",
    "city": {"name": "Taipei", "country": "TW"},
    "list": [_item("2024-01-15 09:00:00"), _item("2024-01-15 12:00:00", pop=None)],
}


def _response(status: int = 200, body: Any = None, text: str = "") -> Mock:
    resp = Mock()
    resp.ok = 200 <= status < 300
    resp.status_code = status
    resp.text = text
    if body is None:
        resp.json.side_effect = ValueError("no json")
    else:
        resp.json.return_value = body
    return resp


class TestParsers:
    """Raw JSON to schemas."""

    def test_sample_from_api(self) -> None:
        sample = sample_from_api(_item("2024-01-15 09:00:00", temp=20.0, pop=0.4))

        assert sample.datetime_text == "2024-01-15 09:00:00"
        assert sample.temperature == 20.0
        assert sample.min_temperature == 18.0
        assert sample.max_temperature == 22.0
        assert sample.humidity == 65
        assert sample.icon_code == "10d"
        assert sample.precipitation_probability == 0.4
        assert sample.weather_id == 500
        assert sample.wind_direction == 270

    def test_sample_without_pop(self) -> None:
        sample = sample_from_api(_item("2024-01-15 09:00:00", pop=None))
        assert sample.precipitation_probability is None

    def test_sample_missing_main(self) -> None:
        with pytest.raises(UpstreamFailure, match="parse"):
            sample_from_api({"dt": 1})

    def test_current_from_api(self) -> None:
        current = current_from_api(CURRENT_BODY)
        assert current.city == "Taipei"
        assert current.country == "TW"
        assert current.description == "light rain"
        assert current.temperature == 20.0

    def test_forecast_from_api(self) -> None:
        city, country, samples = forecast_from_api(FORECAST_BODY)
        assert (city, country) == ("Taipei", "TW")
        assert [s.datetime_text for s in samples] == [
            "2024-01-15 09:00:00",
            "2024-01-15 12:00:00",
        ]

    def test_forecast_missing_list(self) -> None:
        with pytest.raises(UpstreamFailure, match="list"):
            forecast_from_api({"city": {}})

    def test_city_result_from_api(self) -> None:
        result = city_result_from_api(
            {"name": "Portland", "state": "Oregon", "country": "US", "lat": 45.5, "lon": -122.7}
        )
        assert result.label == "Portland, Oregon, US"
        city = result.to_city()
        assert city.latitude == 45.5
        assert city.is_selected is False


class TestFetchCurrent:
    """Current-weather endpoint."""

    @patch(SESSION_GET)
    def test_by_name(self, mock_get: Mock) -> None:
        mock_get.return_value = _response(body=CURRENT_BODY)

        result = fetch_current(Location(name="Taipei"), "k" * 32)

        assert result["name"] == "Taipei"
        mock_get.assert_called_once()
        assert mock_get.call_args.args[0] == CURRENT_API
        params = mock_get.call_args.kwargs["params"]
        assert params["q"] == "Taipei"
        assert params["appid"] == "k" * 32
        assert params["units"] == "metric"

    @patch(SESSION_GET)
    def test_by_coordinates(self, mock_get: Mock) -> None:
        mock_get.return_value = _response(body=CURRENT_BODY)

        fetch_current(Location(lat=25.03, lon=121.56), "key", units="imperial", lang="zh_tw")

        params = mock_get.call_args.kwargs["params"]
        assert params["lat"] == 25.03
        assert params["lon"] == 121.56
        assert "q" not in params
        assert params["units"] == "imperial"
        assert params["lang"] == "zh_tw"

    @patch(SESSION_GET)
    def test_api_error_message(self, mock_get: Mock) -> None:
        mock_get.return_value = _response(401, body={"cod": 401, "message": "Invalid API key"})

        with pytest.raises(UpstreamFailure) as exc_info:
            fetch_current(Location(name="Taipei"), "bad")

        assert str(exc_info.value) == "OpenWeather API error 401: Invalid API key"
        assert exc_info.value.status_code == 401

    @patch(SESSION_GET)
    def test_http_error_without_body(self, mock_get: Mock) -> None:
        mock_get.return_value = _response(502, text="Bad Gateway")

        with pytest.raises(UpstreamFailure, match="HTTP 502: Bad Gateway"):
            fetch_current(Location(name="Taipei"), "key")

    @patch(SESSION_GET)
    def test_network_error(self, mock_get: Mock) -> None:
        mock_get.side_effect = requests.ConnectionError("connection refused")

        with pytest.raises(UpstreamFailure, match="Network error"):
            fetch_current(Location(name="Taipei"), "key")

        mock_get.assert_called_once()

    @patch(SESSION_GET)
    def test_invalid_json(self, mock_get: Mock) -> None:
        mock_get.return_value = _response(200, body=None)

        with pytest.raises(UpstreamFailure, match="Invalid JSON"):
            fetch_current(Location(name="Taipei"), "key")


class TestSearchCities:
    """Geocoding endpoint."""

    @patch(SESSION_GET)
    def test_search(self, mock_get: Mock) -> None:
        mock_get.return_value = _response(body=[{"name": "Paris", "country": "FR"}])

        result = search_cities("Paris", "key", limit=5)

        assert result == [{"name": "Paris", "country": "FR"}]
        assert mock_get.call_args.args[0] == GEOCODING_API
        assert mock_get.call_args.kwargs["params"] == {"q": "Paris", "limit": 5, "appid": "key"}

    @patch(SESSION_GET)
    def test_non_list_body(self, mock_get: Mock) -> None:
        mock_get.return_value = _response(body={"unexpected": True})
        assert search_cities("Paris", "key") == []


class TestOpenWeatherProvider:
    """Provider wiring: raw calls plus parsers."""

    @patch(SESSION_GET)
    def test_fetch_forecast(self, mock_get: Mock) -> None:
        mock_get.return_value = _response(body=FORECAST_BODY)
        provider = OpenWeatherProvider("key")

        batch = provider.fetch_forecast(Location(lat=25.0, lon=121.5))

        assert mock_get.call_args.args[0] == FORECAST_API
        assert batch.city == "Taipei"
        assert batch.country == "TW"
        assert len(batch.samples) == 2

    @patch(SESSION_GET)
    def test_fetch_current(self, mock_get: Mock) -> None:
        mock_get.return_value = _response(body=CURRENT_BODY)
        current = OpenWeatherProvider("key").fetch_current(Location(name="Taipei"))
        assert current.city == "Taipei"

    @patch(SESSION_GET)
    def test_search_respects_limit(self, mock_get: Mock) -> None:
        mock_get.return_value = _response(
            body=[{"name": f"Springfield {i}", "country": "US"} for i in range(8)]
        )
        provider = OpenWeatherProvider("key", search_limit=3)

        results = provider.search("Springfield")

        assert len(results) == 3
        assert mock_get.call_args.kwargs["params"]["limit"] == 3

    @patch("city_forecast.datasources.openweather.provider.geocoding.search_cities")
    def test_search_propagates_failure(self, mock_search: Mock) -> None:
        mock_search.side_effect = UpstreamFailure("Network error: down")
        with pytest.raises(UpstreamFailure):
            OpenWeatherProvider("key").search("Paris")

    def test_from_settings(self) -> None:
        settings = Settings(  # type: ignore[call-arg]
            _env_file=None, openweather_api_key="abc", units="imperial", lang="de", search_limit=4
        )
        provider = OpenWeatherProvider.from_settings(settings)
        assert provider.api_key == "abc"
        assert provider.units == "imperial"
        assert provider.lang == "de"
        assert provider.search_limit == 4
        assert provider.session is not None

    def test_from_settings_applies_request_timeout(self) -> None:
        """The configured timeout reaches the transport on every call."""
        settings = Settings(  # type: ignore[call-arg]
            _env_file=None, openweather_api_key="k" * 32, request_timeout=2.5
        )
        provider = OpenWeatherProvider.from_settings(settings)
        response = requests.Response()
        response.status_code = 200
        response._content = json.dumps(CURRENT_BODY).encode()

        with patch.object(
            requests.adapters.HTTPAdapter, "send", return_value=response
        ) as mock_send:
            current = provider.fetch_current(Location(name="Taipei"))

        assert current.city == "Taipei"
        _, kwargs = mock_send.call_args
        assert kwargs.get("timeout") == 2.5

    def test_explicit_session_used_instead_of_shared(self) -> None:
        own = Mock(spec=requests.Session)
        own.get.return_value = _response(body=CURRENT_BODY)

        with patch(SESSION_GET) as shared_get:
            OpenWeatherProvider("key", session=own).fetch_current(Location(name="Taipei"))

        own.get.assert_called_once()
        assert own.get.call_args.args[0] == CURRENT_API
        shared_get.assert_not_called()
