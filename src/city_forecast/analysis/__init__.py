"""Pure aggregation over fetched weather data.

Dependency rule: analysis/ imports schemas only. It never fetches data,
touches the store, or renders anything.

Modules:
  - forecast: 3-hour samples -> current conditions + up to 7 daily summaries
"""

from city_forecast.analysis.forecast import (
    MAX_DAILY_SUMMARIES,
    summarize_current_conditions,
    summarize_daily,
    summarize_forecast,
)

__all__ = [
    "MAX_DAILY_SUMMARIES",
    "summarize_current_conditions",
    "summarize_daily",
    "summarize_forecast",
]
