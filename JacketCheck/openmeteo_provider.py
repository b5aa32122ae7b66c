"""Open-Meteo provider implementation (forecast, historical archive and geocoding)."""
import logging
from datetime import date, datetime
from typing import Any, Dict, List, Tuple

import requests

from units import round_half_up
from weather_data import (
    CurrentConditions,
    Forecast,
    HistoricalDay,
    HourlyOutlook,
    Location,
    LocationResult,
    Precipitation,
    WeatherSnapshot,
)
from weather_provider import WeatherProviderBase, WeatherProviderError

RAIN_CODES = frozenset({51, 53, 55, 61, 63, 65, 80, 81, 82, 95, 96, 99})
SNOW_CODES = frozenset({71, 73, 75, 77, 85, 86})

# WMO weather interpretation codes -> (main, description, icon)
WMO_CONDITIONS: Dict[int, Tuple[str, str, str]] = {
    0: ("Clear", "clear sky", "01d"),
    1: ("Clear", "mainly clear", "01d"),
    2: ("Clouds", "partly cloudy", "02d"),
    3: ("Clouds", "overcast", "03d"),
    45: ("Fog", "fog", "50d"),
    48: ("Fog", "depositing rime fog", "50d"),
    51: ("Drizzle", "light drizzle", "09d"),
    53: ("Drizzle", "moderate drizzle", "09d"),
    55: ("Drizzle", "dense drizzle", "09d"),
    61: ("Rain", "slight rain", "10d"),
    63: ("Rain", "moderate rain", "10d"),
    65: ("Rain", "heavy rain", "10d"),
    71: ("Snow", "slight snow", "13d"),
    73: ("Snow", "moderate snow", "13d"),
    75: ("Snow", "heavy snow", "13d"),
    77: ("Snow", "snow grains", "13d"),
    80: ("Rain", "slight rain showers", "09d"),
    81: ("Rain", "moderate rain showers", "09d"),
    82: ("Rain", "violent rain showers", "09d"),
    85: ("Snow", "slight snow showers", "13d"),
    86: ("Snow", "heavy snow showers", "13d"),
    95: ("Thunderstorm", "thunderstorm", "11d"),
    96: ("Thunderstorm", "thunderstorm with slight hail", "11d"),
    99: ("Thunderstorm", "thunderstorm with heavy hail", "11d"),
}
UNKNOWN_CONDITIONS = ("Unknown", "unknown", "01d")

LAST_HOUR_INDEX = 23  # forecast_days=1 gives 24 hourly slots


def conditions_from_code(code: Any) -> Tuple[str, str, str]:
    """Map a WMO weather code to (main, description, icon)."""
    return WMO_CONDITIONS.get(code, UNKNOWN_CONDITIONS)


class OpenMeteoProvider(WeatherProviderBase):
    """
    Weather provider using the Open-Meteo APIs.

    Open-Meteo is free and needs no API key: https://open-meteo.com/
    Forecast and archive requests ask for Fahrenheit and mph directly.
    """

    FORECAST_URL = "https://api.open-meteo.com/v1/forecast"
    ARCHIVE_URL = "https://archive-api.open-meteo.com/v1/archive"
    GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"

    def __init__(self, timeout: int = 10, search_count: int = 5, lang: str = "en"):
        """
        Initialize Open-Meteo provider.

        Args:
            timeout: HTTP request timeout in seconds
            search_count: Maximum number of geocoding results
            lang: Language code for geocoding results
        """
        self.timeout = timeout
        self.search_count = search_count
        self.lang = lang

    def fetch_current_and_forecast(self, lat: float, lon: float) -> WeatherSnapshot:
        """
        Fetch current conditions and the hourly forecast for today.

        Returns:
            WeatherSnapshot: Current weather, six/twelve hour outlook and precipitation

        Raises:
            WeatherProviderError: If the API request fails or the response is malformed
        """
        params = {
            "latitude": lat,
            "longitude": lon,
            "current": "temperature_2m,relative_humidity_2m,apparent_temperature,weather_code,wind_speed_10m",
            "hourly": "temperature_2m,weather_code,wind_speed_10m,precipitation_probability",
            "temperature_unit": "fahrenheit",
            "wind_speed_unit": "mph",
            "timezone": "auto",
            "forecast_days": 1,
        }
        data = self._get_json(self.FORECAST_URL, params)

        try:
            snapshot = self._parse_forecast(data, lat, lon)
        except (KeyError, ValueError, TypeError, IndexError) as e:
            logging.error(f"Failed to parse forecast response: {e}", exc_info=True)
            raise WeatherProviderError(f"Failed to parse response: {str(e)}")

        logging.info(
            f"Successfully parsed forecast: {snapshot.current.temp}°F, {snapshot.current.conditions}, "
            f"six-hour {snapshot.forecast.six_hour.temp}°F"
        )
        return snapshot

    def fetch_historical_daily_means(
        self,
        lat: float,
        lon: float,
        start_date: date,
        end_date: date
    ) -> List[HistoricalDay]:
        """
        Fetch daily mean temperatures from the Open-Meteo archive.

        Returns:
            List of HistoricalDay, one per day; missing values are None

        Raises:
            WeatherProviderError: If the API request fails or the response is malformed
        """
        params = {
            "latitude": lat,
            "longitude": lon,
            "start_date": start_date.isoformat(),
            "end_date": end_date.isoformat(),
            "daily": "temperature_2m_mean",
            "temperature_unit": "fahrenheit",
            "timezone": "auto",
        }
        data = self._get_json(self.ARCHIVE_URL, params)

        daily = data.get("daily")
        if not daily:
            raise WeatherProviderError("Response missing 'daily' block")

        try:
            days = [
                HistoricalDay(date=day, mean_temp_f=None if mean is None else float(mean))
                for day, mean in zip(daily["time"], daily["temperature_2m_mean"])
            ]
        except (KeyError, TypeError, ValueError) as e:
            logging.error(f"Failed to parse archive response: {e}", exc_info=True)
            raise WeatherProviderError(f"Failed to parse response: {str(e)}")

        logging.debug(f"Archive returned {len(days)} days for ({lat}, {lon})")
        return days

    def search_locations(self, query: str) -> List[LocationResult]:
        """
        Search locations by name through the geocoding API.

        Raises:
            WeatherProviderError: If the API request fails
        """
        params = {
            "name": query,
            "count": self.search_count,
            "language": self.lang,
            "format": "json",
        }
        data = self._get_json(self.GEOCODING_URL, params)

        results = data.get("results") or []
        try:
            return [
                LocationResult(
                    name=item.get("name", ""),
                    state=item.get("admin1") or "",
                    country=item.get("country") or "",
                    lat=float(item["latitude"]),
                    lon=float(item["longitude"]),
                )
                for item in results
            ]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logging.error(f"Failed to parse geocoding response: {e}", exc_info=True)
            raise WeatherProviderError(f"Failed to parse response: {str(e)}")

    def _get_json(self, url: str, params: Dict[str, Any]) -> Dict[str, Any]:
        try:
            logging.info(f"Making Open-Meteo API request: {url}")
            logging.debug(f"Request parameters: {params}")

            response = requests.get(url, params=params, timeout=self.timeout)

            logging.info(f"API response status: {response.status_code}")

            if not response.ok:
                logging.error(f"API request failed with status {response.status_code}")
                self._handle_error_response(response)

            data = response.json()
            logging.debug(f"API response (truncated): {str(data)[:500]}...")
            if not isinstance(data, dict):
                raise WeatherProviderError("Unexpected response body")
            return data

        except requests.exceptions.RequestException as e:
            logging.error(f"Network error during API request: {e}")
            raise WeatherProviderError(f"Network error: {str(e)}")
        except ValueError as e:
            logging.error(f"Failed to decode API response: {e}")
            raise WeatherProviderError(f"Failed to parse response: {str(e)}")

    def _parse_forecast(self, data: Dict[str, Any], lat: float, lon: float) -> WeatherSnapshot:
        current = data.get("current")
        if not current:
            raise WeatherProviderError("Response missing 'current' block")
        hourly = data.get("hourly")
        if not hourly:
            raise WeatherProviderError("Response missing 'hourly' block")

        current_hour = datetime.fromisoformat(current["time"]).hour
        six_hour_index = min(current_hour + 6, LAST_HOUR_INDEX)
        twelve_hour_index = min(current_hour + 12, LAST_HOUR_INDEX)

        # Highest chance of precipitation over the next six hours
        precip_window = hourly["precipitation_probability"][current_hour:six_hour_index + 1]
        precip_chances = [chance for chance in precip_window if chance is not None]
        max_precip_chance = max(precip_chances) if precip_chances else 0

        code = current["weather_code"]
        main, description, icon = conditions_from_code(code)
        six_hour_main = conditions_from_code(hourly["weather_code"][six_hour_index])[0]
        twelve_hour_main = conditions_from_code(hourly["weather_code"][twelve_hour_index])[0]

        return WeatherSnapshot(
            location=Location(
                name=f"{lat:.2f}, {lon:.2f}",
                country="",
                lat=data.get("latitude", lat),
                lon=data.get("longitude", lon),
            ),
            current=CurrentConditions(
                temp=round_half_up(current["temperature_2m"]),
                feels_like=round_half_up(current["apparent_temperature"]),
                humidity=current["relative_humidity_2m"],
                wind_speed=round_half_up(current["wind_speed_10m"]),
                conditions=main,
                description=description,
                icon=icon,
            ),
            forecast=Forecast(
                six_hour=HourlyOutlook(
                    temp=round_half_up(hourly["temperature_2m"][six_hour_index]),
                    conditions=six_hour_main,
                    wind_speed=round_half_up(hourly["wind_speed_10m"][six_hour_index]),
                ),
                twelve_hour=HourlyOutlook(
                    temp=round_half_up(hourly["temperature_2m"][twelve_hour_index]),
                    conditions=twelve_hour_main,
                ),
            ),
            precipitation=Precipitation(
                chance=max_precip_chance,
                is_raining=code in RAIN_CODES,
                is_snowing=code in SNOW_CODES,
            ),
            timestamp=int(datetime.now().timestamp()),
            timezone=data.get("timezone", "UTC"),
            timezone_offset=data.get("utc_offset_seconds", 0),
        )

    def _handle_error_response(self, response: requests.Response) -> None:
        """Parse and raise error from an Open-Meteo error response."""
        try:
            error_data = response.json()
        except ValueError:
            # Not JSON, use HTTP status
            logging.error(f"Non-JSON error response: HTTP {response.status_code}, body: {response.text[:500]}")
            raise WeatherProviderError(
                f"HTTP {response.status_code}: {response.text[:200]}",
                status_code=response.status_code
            )

        logging.error(f"Open-Meteo API error response: {error_data}")
        reason = error_data.get("reason", "Unknown error") if isinstance(error_data, dict) else "Unknown error"
        raise WeatherProviderError(
            f"Open-Meteo API error {response.status_code}: {reason}",
            status_code=response.status_code
        )
