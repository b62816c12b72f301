"""Weather utility functions for renderers.

Pure conversion functions with no external dependencies.
"""

from __future__ import annotations

# OpenWeatherMap icon codes (https://openweathermap.org/weather-conditions),
# keyed by the two-digit prefix; the trailing d/n only picks day or night art.
ICON_EMOJI: dict[str, str] = {
    "01": "☀️",  # clear sky
    "02": "\U0001f324️",  # few clouds
    "03": "⛅",  # scattered clouds
    "04": "☁️",  # broken / overcast clouds
    "09": "\U0001f327️",  # shower rain
    "10": "\U0001f326️",  # rain
    "11": "⛈️",  # thunderstorm
    "13": "❄️",  # snow
    "50": "\U0001f32b️",  # mist
}

DEFAULT_EMOJI = "\U0001f321️"

# Atmosphere group (7xx) has one entry per code
_ATMOSPHERE_EMOJI: dict[int, str] = {
    701: "\U0001f32b️",  # mist
    711: "\U0001f4a8",  # smoke
    721: "\U0001f32b️",  # haze
    731: "\U0001f4a8",  # dust
    741: "\U0001f32b️",  # fog
    751: "\U0001f4a8",  # sand
    761: "\U0001f4a8",  # dust
    762: "\U0001f30b",  # ash
    771: "\U0001f4a8",  # squall
    781: "\U0001f32a️",  # tornado
}

_CLOUD_EMOJI: dict[int, str] = {
    800: "☀️",
    801: "\U0001f324️",
    802: "⛅",
    803: "\U0001f325️",
    804: "☁️",
}

COMPASS_POINTS = [
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
]  # fmt: skip


def icon_emoji(icon_code: str) -> str:
    """Emoji for an OpenWeatherMap icon code such as ``"10d"``."""
    return ICON_EMOJI.get(icon_code[:2], DEFAULT_EMOJI)


def condition_emoji(weather_id: int | None) -> str:  # noqa: PLR0911
    """Emoji for an OpenWeatherMap condition id (200-804)."""
    if weather_id is None:
        return DEFAULT_EMOJI
    if 200 <= weather_id <= 232:
        return "⛈️"
    if 300 <= weather_id <= 321:
        return "\U0001f326️"
    if 500 <= weather_id <= 504:
        return "\U0001f327️"
    if weather_id == 511:
        return "\U0001f328️"  # freezing rain
    if 520 <= weather_id <= 531:
        return "\U0001f326️"
    if 600 <= weather_id <= 622:
        return "❄️"
    if weather_id in _ATMOSPHERE_EMOJI:
        return _ATMOSPHERE_EMOJI[weather_id]
    return _CLOUD_EMOJI.get(weather_id, DEFAULT_EMOJI)


def c_to_f(celsius: float) -> float:
    """Convert Celsius to Fahrenheit."""
    return celsius * 9 / 5 + 32


def ms_to_kmh(speed_ms: float) -> float:
    """Convert metres per second to kilometres per hour."""
    return speed_ms * 3.6


def ms_to_mph(speed_ms: float) -> float:
    """Convert metres per second to miles per hour."""
    return speed_ms * 2.237


def wind_direction(degrees: int) -> str:
    """16-point compass label for a bearing in degrees; ``N/A`` outside 0-360."""
    if not 0 <= degrees <= 360:
        return "N/A"
    return COMPASS_POINTS[round(degrees / 22.5) % 16]
