"""
Domain models for city forecast.

Pydantic models for data from OpenWeatherMap and for the saved-city list.
These define the canonical schema - datasources normalize API responses to these.
"""

from __future__ import annotations

import time

from pydantic import BaseModel, Field

#: Country code given to cities synthesized by a fallback selection.
UNKNOWN_COUNTRY = "Unknown"


def now_millis() -> int:
    """Current wall-clock time as epoch milliseconds."""
    return int(time.time() * 1000)


# =============================================================================
# Weather
# =============================================================================


class WeatherSample(BaseModel):
    """One upstream reading (a 3-hour forecast slot or a current observation)."""

    timestamp: int = Field(..., description="Epoch seconds (UTC)")
    datetime_text: str = Field("", description="Upstream local date-time, e.g. 2024-01-15 09:00:00")
    temperature: float
    feels_like: float
    min_temperature: float
    max_temperature: float
    humidity: int = Field(..., description="Percent, 0-100")
    pressure: int
    description: str = ""
    icon_code: str = ""
    precipitation_probability: float | None = Field(None, description="0.0-1.0; None means 0")
    weather_id: int | None = None
    wind_speed: float = 0.0
    wind_direction: int = 0
    visibility: int | None = None


class CurrentConditions(BaseModel):
    """The "now" reading shown at the top of the weather screen."""

    temperature: float = 0.0
    feels_like: float = 0.0
    min_temperature: float = 0.0
    max_temperature: float = 0.0
    humidity: int = 0
    pressure: int = 0
    description: str = ""
    icon_code: str = ""
    city: str = ""
    country: str = ""
    wind_speed: float = 0.0
    wind_direction: int = 0
    visibility: int | None = None
    weather_id: int | None = None


class DailySummary(BaseModel):
    """All samples sharing one calendar date, folded into a single row."""

    date: str = Field(..., description="YYYY-MM-DD")
    day_of_week: str
    max_temperature: float
    min_temperature: float
    description: str
    icon_code: str
    humidity: int
    chance_of_rain: int = Field(..., ge=0, le=100, description="Percent")


class WeatherForecast(BaseModel):
    """Result of one forecast fetch: current snapshot plus daily outlook."""

    city: str
    country: str
    current: CurrentConditions
    daily: list[DailySummary] = Field(default_factory=list)


# =============================================================================
# Cities
# =============================================================================


class City(BaseModel):
    """A saved city. Uniqueness key is (name, country), case-insensitive."""

    name: str
    country: str
    latitude: float = 0.0
    longitude: float = 0.0
    is_selected: bool = False
    last_used_time: int = Field(default_factory=now_millis, description="Epoch millis")

    def matches(self, name: str, country: str | None = None) -> bool:
        """Case-insensitive match on name, and on country when given."""
        if self.name.casefold() != name.casefold():
            return False
        return country is None or self.country.casefold() == country.casefold()

    @property
    def has_coordinates(self) -> bool:
        """False when no position is known (stored as (0, 0))."""
        return not (self.latitude == 0.0 and self.longitude == 0.0)

    @property
    def is_placeholder(self) -> bool:
        """True for cities synthesized by a fallback selection (no real metadata)."""
        return (
            self.country == UNKNOWN_COUNTRY and self.latitude == 0.0 and self.longitude == 0.0
        )


class CitySearchResult(BaseModel):
    """A geocoding candidate. Never stored directly - convert with ``to_city``."""

    name: str
    country: str
    state: str | None = None
    lat: float | None = None
    lon: float | None = None

    @property
    def label(self) -> str:
        """Display label, e.g. ``Portland, Oregon, US``."""
        parts = [self.name, self.state, self.country]
        return ", ".join(p for p in parts if p)

    def to_city(self) -> City:
        """Build an unselected City stamped with the current time."""
        return City(
            name=self.name,
            country=self.country,
            latitude=self.lat if self.lat is not None else 0.0,
            longitude=self.lon if self.lon is not None else 0.0,
            is_selected=False,
            last_used_time=now_millis(),
        )


class Location(BaseModel):
    """What a weather fetch targets: a city name or a coordinate pair."""

    name: str | None = None
    country: str | None = None
    lat: float | None = Field(None, ge=-90, le=90)
    lon: float | None = Field(None, ge=-180, le=180)

    @classmethod
    def for_city(cls, city: City) -> Location:
        """Query by coordinates, or by name when the city has no position.

        Placeholder cities are queried by bare name; their country is not real.
        """
        if city.is_placeholder:
            return cls(name=city.name)
        if not city.has_coordinates:
            return cls(name=city.name, country=city.country or None)
        return cls(lat=city.latitude, lon=city.longitude)

    @property
    def has_coordinates(self) -> bool:
        return self.lat is not None and self.lon is not None

    def query_params(self) -> dict[str, str | float]:
        """OpenWeatherMap query parameters selecting this location."""
        if self.has_coordinates:
            return {"lat": self.lat, "lon": self.lon}  # type: ignore[dict-item]
        if not self.name:
            msg = "Location needs a name or coordinates"
            raise ValueError(msg)
        q = f"{self.name},{self.country}" if self.country else self.name
        return {"q": q}
