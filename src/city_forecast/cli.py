"""
Command-line interface for the application.

This module provides the main entry point for the CLI.
"""

from __future__ import annotations

import argparse
import functools
import http.server
import sys
from contextlib import closing
from typing import TYPE_CHECKING

from city_forecast import __version__
from city_forecast.config import api_key_is_valid, get_settings
from city_forecast.container import build_app
from city_forecast.errors import UpstreamFailure
from city_forecast.flows.refresh import refresh_forecast, resolve_location
from city_forecast.log import setup_logging
from city_forecast.renderers.text import (
    format_cities,
    format_current,
    format_daily,
    format_search_results,
)
from city_forecast.results import Failure

if TYPE_CHECKING:
    from city_forecast.container import App


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="city-forecast",
        description="Current weather and 7-day forecasts for your saved cities",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("info", help="Show application info")
    subparsers.add_parser("cities", help="List saved cities (most recent first)")

    search_parser = subparsers.add_parser("search", help="Search cities by name")
    search_parser.add_argument("query", help="City name, e.g. 'Portland' or 'Portland,US'")

    add_parser = subparsers.add_parser("add", help="Search and save a city")
    add_parser.add_argument("query", help="City name to search for")
    add_parser.add_argument(
        "--pick",
        type=int,
        default=1,
        help="Which search result to save, 1-based (default: 1)",
    )

    remove_parser = subparsers.add_parser("remove", help="Remove a saved city")
    remove_parser.add_argument("name", help="City name (case-insensitive)")

    select_parser = subparsers.add_parser("select", help="Select the city to show weather for")
    select_parser.add_argument("name", help="City name (case-insensitive)")

    weather_parser = subparsers.add_parser("weather", help="Show current weather and forecast")
    weather_parser.add_argument(
        "city",
        nargs="?",
        default=None,
        help="City name (default: the selected city)",
    )

    subparsers.add_parser("refresh", help="Fetch the selected city's forecast and build the page")

    serve_parser = subparsers.add_parser("serve", help="Serve the built page locally")
    serve_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to serve on (default: api_port from settings)",
    )

    return parser


def _app() -> App:
    return build_app(get_settings())


def cmd_info(_args: argparse.Namespace) -> int:
    """Handle the 'info' command."""
    settings = get_settings()
    print(f"Application: {settings.app_name}")
    print(f"Version: {__version__}")
    print(f"Environment: {settings.app_env}")
    print(f"Data directory: {settings.data_dir}")
    configured = api_key_is_valid(settings.openweather_api_key)
    print(f"API key configured: {'yes' if configured else 'no'}")
    return 0


def cmd_cities(_args: argparse.Namespace) -> int:
    """Handle the 'cities' command."""
    with closing(_app()) as app:
        print(format_cities(app.cities.cities))
    return 0


def cmd_search(args: argparse.Namespace) -> int:
    """Handle the 'search' command."""
    with closing(_app()) as app:
        try:
            results = app.searcher.search(args.query.strip())
        except UpstreamFailure as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
    print(format_search_results(results))
    return 0


def cmd_add(args: argparse.Namespace) -> int:
    """Handle the 'add' command: search, then save the picked result."""
    with closing(_app()) as app:
        try:
            results = app.searcher.search(args.query.strip())
        except UpstreamFailure as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

        if not 1 <= args.pick <= len(results):
            print(f"Error: no result #{args.pick} for {args.query!r}", file=sys.stderr)
            return 1

        result = app.city_selection.add_city(results[args.pick - 1])
    if isinstance(result, Failure):
        print(f"Error: {result.message}", file=sys.stderr)
        return 1
    print(f"Added {result.value.name}, {result.value.country}")
    return 0


def cmd_remove(args: argparse.Namespace) -> int:
    """Handle the 'remove' command."""
    with closing(_app()) as app:
        result = app.city_selection.remove_city(args.name)
    if isinstance(result, Failure):
        print(f"Error: {result.message}", file=sys.stderr)
        return 1
    print(f"Removed {args.name}")
    return 0


def cmd_select(args: argparse.Namespace) -> int:
    """Handle the 'select' command."""
    with closing(_app()) as app:
        result = app.city_selection.select_city(args.name)
    if isinstance(result, Failure):
        print(f"Error: {result.message}", file=sys.stderr)
        return 1
    city = result.value
    print(f"Selected {city.name}, {city.country}")
    if city.is_placeholder:
        print("Note: city was not saved; added with incomplete metadata.")
    return 0


def cmd_weather(args: argparse.Namespace) -> int:
    """Handle the 'weather' command: current conditions and forecast, fetched in parallel."""
    with closing(_app()) as app:
        name, _location = resolve_location(args.city, app.cities, app.settings.default_city)
        app.weather.load_for_city(name).result()
        state = app.weather.state.value

    if state.current is not None:
        print(format_current(state.current))
    else:
        print(f"{name}: current weather unavailable")
    print()
    if state.daily or state.error is None:
        print(format_daily(state.daily))
    else:
        print("Forecast unavailable")

    if state.error is not None:
        print(f"Error: {state.error}", file=sys.stderr)
        return 1
    return 0


def cmd_refresh(args: argparse.Namespace) -> int:
    """Handle the 'refresh' command: run the refresh flow for the selected city."""
    try:
        result = refresh_forecast()
    except UpstreamFailure as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(f"Done. Wrote {result['output']}")
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Handle the 'serve' command: serve the built page locally."""
    settings = get_settings()
    port = args.port if args.port is not None else settings.api_port
    site_dir = settings.site_dir

    if not site_dir.exists():
        print("No site directory found. Run 'city-forecast refresh' first.", file=sys.stderr)
        return 1

    handler = functools.partial(http.server.SimpleHTTPRequestHandler, directory=str(site_dir))

    with http.server.HTTPServer(("", port), handler) as server:
        print(f"Serving site on http://localhost:{port}/ (Ctrl+C to stop)")
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            print("\nServer stopped.")

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    setup_logging("DEBUG" if args.debug or settings.debug else settings.log_level)

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "info": cmd_info,
        "cities": cmd_cities,
        "search": cmd_search,
        "add": cmd_add,
        "remove": cmd_remove,
        "select": cmd_select,
        "weather": cmd_weather,
        "refresh": cmd_refresh,
        "serve": cmd_serve,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
