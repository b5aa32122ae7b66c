"""Command-line jacket check: should I bring a jacket today?"""
import argparse
import asyncio
import logging
import os
import sys
from typing import Optional, Tuple

from dotenv import load_dotenv

from decision import JacketAdvisor
from layout import format_decision_lines
from openmeteo_provider import OpenMeteoProvider
from seasonal import SeasonalAdjustmentEstimator
from weather_data import Location
from weather_provider import WeatherProviderError
from weather_service import WeatherService


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser("jacket-check", description="Should I bring a jacket?")
    parser.add_argument("--location", help="Place name to search for, e.g. 'Chicago'")
    parser.add_argument("--lat", type=float)
    parser.add_argument("--lon", type=float)
    parser.add_argument("--units", choices=["imperial", "metric"], default=None)
    parser.add_argument("--cache-ttl", type=int, default=600)
    parser.add_argument("--max-retries", type=int, default=3)
    parser.add_argument("--retry-delay", type=float, default=1.0)
    parser.add_argument("--timeout", type=int, default=10, help="HTTP timeout in seconds")
    parser.add_argument("--log-file", default=None)
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def setup_logging(log_file: Optional[str], verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.WARNING
    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=handlers
    )


def load_config(args: argparse.Namespace) -> Tuple[Optional[str], Optional[float], Optional[float], str]:
    """Merge command-line options with JACKET_* settings from the environment/.env."""
    load_dotenv()
    query = args.location or os.getenv("JACKET_LOCATION")
    lat = args.lat if args.lat is not None else os.getenv("JACKET_LAT")
    lon = args.lon if args.lon is not None else os.getenv("JACKET_LON")
    units = args.units or os.getenv("JACKET_UNITS", "imperial")

    if units not in ("imperial", "metric"):
        raise SystemExit(f"Invalid JACKET_UNITS: {units}")

    if lat is not None and lon is not None:
        try:
            lat_val = float(lat)
            lon_val = float(lon)
        except ValueError as exc:
            raise SystemExit(f"Invalid coordinates: {exc}") from exc
        logging.info("Configuration loaded: lat=%s lon=%s units=%s", lat_val, lon_val, units)
        return args.location, lat_val, lon_val, units

    if not query:
        raise SystemExit("Missing location: pass --location or --lat/--lon, or set JACKET_LOCATION")

    logging.info("Configuration loaded: location=%s units=%s", query, units)
    return query, None, None, units


def build_weather_service(args: argparse.Namespace) -> WeatherService:
    provider = OpenMeteoProvider(timeout=args.timeout)
    service = WeatherService(
        provider=provider,
        cache_ttl_seconds=args.cache_ttl,
        max_retries=args.max_retries,
        retry_delay_seconds=args.retry_delay,
    )
    logging.info("Weather service ready (cache ttl=%ss)", args.cache_ttl)
    return service


def resolve_location(service: WeatherService, query: Optional[str], lat: Optional[float],
                     lon: Optional[float]) -> Location:
    if lat is not None and lon is not None:
        return Location(name=query or f"{lat:.2f}, {lon:.2f}", country="", lat=lat, lon=lon)

    results = service.search_locations(query)
    if not results:
        raise SystemExit(f"No location found for '{query}'")
    best = results[0]
    logging.info("Resolved '%s' to %s (%s, %s)", query, best.display_name, best.lat, best.lon)
    return best.to_location()


async def check_jacket(service: WeatherService, location: Location, units: str) -> int:
    snapshot = await asyncio.to_thread(service.get_snapshot, location.lat, location.lon, location)
    advisor = JacketAdvisor(SeasonalAdjustmentEstimator(service.provider))
    result = await advisor.decide(snapshot)
    for line in format_decision_lines(snapshot, result, units):
        print(line)
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_file, args.verbose)
    query, lat, lon, units = load_config(args)

    service = build_weather_service(args)
    location = resolve_location(service, query, lat, lon)

    try:
        return asyncio.run(check_jacket(service, location, units))
    except WeatherProviderError as err:
        logging.error("Weather fetch failed: %s", err)
        print(f"Could not get weather for {location.name}: {err}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
