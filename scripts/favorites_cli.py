#!/usr/bin/env python3
# =============================================================================
# scripts/favorites_cli.py - Manage Favorites From The Terminal
# =============================================================================
# Runs the same service graph as the API (local cache, anonymous identity,
# remote store) for one command, then waits for remote writes to finish.
#
# Usage:
#   python scripts/favorites_cli.py list
#   python scripts/favorites_cli.py add "Austin" 30.2672 -97.7431
#   python scripts/favorites_cli.py remove <place_id>
#   python scripts/favorites_cli.py sync
#   python scripts/favorites_cli.py weather --place <place_id>
#   python scripts/favorites_cli.py weather --lat 40.7128 --lon -74.0060
# =============================================================================

import argparse
import asyncio
import logging
import os
import sys
from uuid import UUID

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
load_dotenv()

from app.config import get_settings
from app.dependencies import Services, build_services
from app.exceptions import WeatherAppException
from core.models.sync import FavoritesSnapshot
from core.models.weather import LocatedForecast


def print_snapshot(snapshot: FavoritesSnapshot) -> None:
    """Print the favorite set as a table."""
    print(f"State: {snapshot.state.value}   Owner: {snapshot.owner_id or '-'}")
    if not snapshot.places:
        print("No favorites yet.")
        return

    print(f"{'ID':<36}  {'NAME':<24}  {'LAT':>9}  {'LON':>10}")
    print("-" * 85)
    for place in snapshot.places:
        print(f"{str(place.id):<36}  {place.name:<24}  {place.latitude:>9.4f}  {place.longitude:>10.4f}")


def print_forecast(forecast: LocatedForecast) -> None:
    """Print current conditions and the daily outlook."""
    current = forecast.weather.current
    print(f"\n{forecast.title}  ({forecast.latitude:.4f}, {forecast.longitude:.4f})")
    print(f"  {forecast.condition.value}, {current.temperature:.1f}°C, "
          f"humidity {current.humidity:.0f}%, wind {current.wind_speed:.1f}")

    daily = forecast.weather.daily
    print()
    for day, high, low, rain in zip(daily.dates, daily.temp_max, daily.temp_min, daily.precipitation_sum):
        print(f"  {day.isoformat()}  {low:5.1f} / {high:5.1f} °C   {rain:4.1f} mm")


async def run(args: argparse.Namespace) -> int:
    services: Services = build_services(get_settings())
    synchronizer = services.synchronizer

    try:
        snapshot = await synchronizer.start()

        if args.command == "list":
            print_snapshot(snapshot)

        elif args.command == "add":
            place = await synchronizer.create(args.name, args.latitude, args.longitude)
            print(f"Added {place.name} ({place.id})")

        elif args.command == "remove":
            if await synchronizer.remove(args.place_id):
                print(f"Removed {args.place_id}")
            else:
                print(f"No favorite with id {args.place_id}")

        elif args.command == "sync":
            print_snapshot(await synchronizer.sync())

        elif args.command == "weather":
            if args.place_id:
                services.selection.select_by_id(args.place_id)
                forecast = await services.forecast.load()
            elif args.lat is not None and args.lon is not None:
                forecast = await services.forecast.forecast_for(args.lat, args.lon)
            else:
                print("ERROR: pass --place or both --lat and --lon")
                return 2
            print_forecast(forecast)

    except WeatherAppException as e:
        print(f"ERROR: {e.message}")
        if e.suggestion:
            print(f"  {e.suggestion}")
        return 1

    finally:
        await services.aclose()
        for failure in synchronizer.write_queue.failures:
            print(f"WARNING: remote {failure.label} for {failure.key} failed: {failure.error}")

    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Manage weather favorites")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("list", help="Show favorites (after syncing)")

    add = commands.add_parser("add", help="Add a favorite")
    add.add_argument("name")
    add.add_argument("latitude", type=float)
    add.add_argument("longitude", type=float)

    remove = commands.add_parser("remove", help="Remove a favorite by id")
    remove.add_argument("place_id", type=UUID)

    commands.add_parser("sync", help="Sync with the remote store and show the result")

    weather = commands.add_parser("weather", help="Show the forecast")
    weather.add_argument("--place", dest="place_id", type=UUID, help="Favorite id")
    weather.add_argument("--lat", type=float)
    weather.add_argument("--lon", type=float)

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
