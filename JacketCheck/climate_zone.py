"""
Regional acclimation bias for jacket thresholds.

People in warm places reach for a jacket sooner than people in cold places.
A location resolves to one of three zones, each carrying a fixed °F shift
that is added to the jacket thresholds:

    warm      -12  (Miami, Phoenix, ...; or |lat| < 30)
    moderate    0
    cold       +8  (Chicago, Minneapolis, ...; or |lat| > 45)

Named cities win over latitude, so Chicago (41.9°N) counts as cold even though
its latitude alone would make it moderate.
"""
import re
from typing import FrozenSet

from weather_data import Location

WARM_ZONE_BIAS = -12
MODERATE_ZONE_BIAS = 0
COLD_ZONE_BIAS = 8

WARM_LATITUDE_LIMIT = 30
COLD_LATITUDE_LIMIT = 45

WARM_CITIES: FrozenSet[str] = frozenset({
    "miami", "fort lauderdale", "tampa", "orlando", "jacksonville", "key west",
    "phoenix", "tucson", "scottsdale", "las vegas", "palm springs",
    "los angeles", "san diego", "honolulu",
    "houston", "dallas", "austin", "san antonio", "new orleans",
    "dubai", "singapore", "bangkok", "cairo", "riyadh", "mumbai",
})

COLD_CITIES: FrozenSet[str] = frozenset({
    "chicago", "boston", "detroit", "milwaukee", "buffalo", "cleveland",
    "minneapolis", "denver", "anchorage", "fairbanks", "duluth", "fargo",
    "toronto", "montreal", "ottawa", "winnipeg", "calgary", "edmonton",
    "oslo", "stockholm", "helsinki", "reykjavik", "moscow",
})

_TOKEN_SPLIT = re.compile(r"[,\s]+")


def climate_bias(lat: float, lon: float, city_name: str) -> int:
    """
    Resolve the climate zone bias for a location.

    Args:
        lat: Latitude, used when the name matches no known city
        lon: Longitude (unused; zones do not depend on it)
        city_name: Display name such as "Chicago, IL" or "Miami, Florida, United States"

    Returns:
        WARM_ZONE_BIAS, MODERATE_ZONE_BIAS or COLD_ZONE_BIAS
    """
    name = (city_name or "").lower().strip()
    tokens = [token for token in _TOKEN_SPLIT.split(name) if token]
    primary = tokens[0] if tokens else ""

    if _matches_any(name, primary, WARM_CITIES):
        return WARM_ZONE_BIAS
    if _matches_any(name, primary, COLD_CITIES):
        return COLD_ZONE_BIAS

    if abs(lat) < WARM_LATITUDE_LIMIT:
        return WARM_ZONE_BIAS
    if abs(lat) > COLD_LATITUDE_LIMIT:
        return COLD_ZONE_BIAS
    return MODERATE_ZONE_BIAS


def resolve_climate_zone(location: Location) -> int:
    return climate_bias(location.lat, location.lon, location.name)


def _matches_any(name: str, primary: str, cities: FrozenSet[str]) -> bool:
    for city in cities:
        if primary == city or name == city:
            return True
        # Multi-word cities ("los angeles, ca") only match as a whole word followed by a comma
        if re.search(r"(?:^|[\s,])" + re.escape(city) + ",", name):
            return True
    return False
