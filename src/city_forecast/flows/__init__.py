"""
Prefect flows.

Flows:
- refresh: fetch current weather + forecast for the selected city and build
  a static page

Usage (local):
    python -m city_forecast.flows.refresh

Usage (Prefect):
    prefect server start  # Optional, for dashboard
    python -m city_forecast.flows.refresh
"""
