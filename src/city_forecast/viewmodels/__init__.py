"""Screen state for the presentation layer.

Each view model publishes a frozen state object through an ``Observable``
and exposes command methods. Long-running work (HTTP) runs on an executor
and returns a ``Future``; local commands return a ``Success`` / ``Failure``.

  - weather: current conditions + daily outlook for the selected city
  - cities: saved cities, selection, debounced city search
"""

from city_forecast.viewmodels.cities import CitySelectionUiState, CitySelectionViewModel
from city_forecast.viewmodels.weather import WeatherUiState, WeatherViewModel

__all__ = [
    "CitySelectionUiState",
    "CitySelectionViewModel",
    "WeatherUiState",
    "WeatherViewModel",
]
