"""Weather domain model - pure data structures independent of any API."""
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone as dt_timezone
from typing import Any, Dict, Optional


class SnapshotError(ValueError):
    """Raised when a snapshot mapping is missing a required block or field."""
    pass


@dataclass(frozen=True)
class Location:
    name: str
    country: str
    lat: float
    lon: float


@dataclass(frozen=True)
class LocationResult:
    """A single geocoding search hit."""
    name: str
    state: str
    country: str
    lat: float
    lon: float

    @property
    def display_name(self) -> str:
        return ", ".join(part for part in (self.name, self.state, self.country) if part)

    def to_location(self) -> Location:
        return Location(name=self.display_name, country=self.country, lat=self.lat, lon=self.lon)


@dataclass(frozen=True)
class CurrentConditions:
    temp: int  # °F
    feels_like: int  # °F
    humidity: float  # percent
    wind_speed: int  # mph
    conditions: str  # e.g., "Clouds", "Rain", "Clear"
    description: str  # e.g., "overcast", "slight rain"
    icon: str


@dataclass(frozen=True)
class HourlyOutlook:
    temp: int  # °F
    conditions: str
    wind_speed: Optional[int] = None  # mph, only reported for the six-hour slot


@dataclass(frozen=True)
class Forecast:
    six_hour: HourlyOutlook
    twelve_hour: HourlyOutlook


@dataclass(frozen=True)
class Precipitation:
    chance: float  # 0-100
    is_raining: bool
    is_snowing: bool


@dataclass(frozen=True)
class HistoricalDay:
    date: str  # ISO date, e.g. "2024-01-31"
    mean_temp_f: Optional[float]


@dataclass(frozen=True)
class WeatherSnapshot:
    """Everything the jacket decision needs about one place at one moment."""
    location: Location
    current: CurrentConditions
    forecast: Forecast
    precipitation: Precipitation
    timestamp: int  # UNIX timestamp (UTC) when captured
    timezone: str  # e.g. "America/Chicago"
    timezone_offset: int = 0  # Offset from UTC in seconds

    def location_key(self) -> str:
        return location_key(self.location.lat, self.location.lon)

    def with_location(self, location: Location) -> "WeatherSnapshot":
        return replace(self, location=location)

    def local_hour(self, at: float) -> int:
        """Hour of day (0-23) at the snapshot's location for UNIX time ``at``."""
        local = datetime.fromtimestamp(at, tz=dt_timezone.utc) + timedelta(seconds=self.timezone_offset)
        return local.hour

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WeatherSnapshot":
        """
        Build a snapshot from the camelCase mapping the weather layer produces.

        Args:
            data: Mapping with location, current, forecast, precipitation,
                timestamp and timezone keys

        Returns:
            WeatherSnapshot

        Raises:
            SnapshotError: If a required block or field is missing
        """
        location = _require(data, "location")
        current = _require(data, "current")
        forecast = _require(data, "forecast")
        precipitation = _require(data, "precipitation")
        six_hour = _require(forecast, "sixHour", "forecast")
        twelve_hour = _require(forecast, "twelveHour", "forecast")

        return cls(
            location=Location(
                name=location.get("name", ""),
                country=location.get("country", ""),
                lat=float(_require(location, "lat", "location")),
                lon=float(_require(location, "lon", "location")),
            ),
            current=CurrentConditions(
                temp=int(_require(current, "temp", "current")),
                feels_like=int(current.get("feelsLike", current["temp"])),
                humidity=float(current.get("humidity", 0)),
                wind_speed=int(_require(current, "windSpeed", "current")),
                conditions=current.get("conditions", "Unknown"),
                description=current.get("description", ""),
                icon=current.get("icon", ""),
            ),
            forecast=Forecast(
                six_hour=HourlyOutlook(
                    temp=int(_require(six_hour, "temp", "forecast.sixHour")),
                    conditions=six_hour.get("conditions", "Unknown"),
                    wind_speed=six_hour.get("windSpeed"),
                ),
                twelve_hour=HourlyOutlook(
                    temp=int(_require(twelve_hour, "temp", "forecast.twelveHour")),
                    conditions=twelve_hour.get("conditions", "Unknown"),
                ),
            ),
            precipitation=Precipitation(
                chance=float(precipitation.get("chance", 0)),
                is_raining=bool(precipitation.get("isRaining", False)),
                is_snowing=bool(precipitation.get("isSnowing", False)),
            ),
            timestamp=int(data.get("timestamp", 0)),
            timezone=data.get("timezone", "UTC"),
            timezone_offset=int(data.get("timezoneOffset", 0)),
        )


def location_key(lat: float, lon: float) -> str:
    """Cache key for a location: coordinates rounded to 2 decimals (~1.1 km)."""
    return f"{lat:.2f},{lon:.2f}"


def _require(block: Dict[str, Any], key: str, parent: Optional[str] = None) -> Any:
    value = block.get(key) if isinstance(block, dict) else None
    if value is None:
        where = f"{parent}.{key}" if parent else key
        raise SnapshotError(f"Snapshot missing '{where}'")
    return value
