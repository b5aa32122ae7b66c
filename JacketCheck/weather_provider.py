"""Weather provider abstraction - allows swapping different weather APIs."""
import logging
from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional

from weather_data import HistoricalDay, LocationResult, WeatherSnapshot


class WeatherProviderError(Exception):
    """Exception raised when a weather provider fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code  # HTTP status when the API answered with an error


class WeatherProviderBase(ABC):
    """Abstract base class for weather data providers."""

    @abstractmethod
    def fetch_current_and_forecast(self, lat: float, lon: float) -> WeatherSnapshot:
        """
        Fetch current conditions plus the short-range forecast.

        Returns:
            WeatherSnapshot: Current, six/twelve hour forecast and precipitation, in °F

        Raises:
            WeatherProviderError: If the provider fails to fetch data
        """
        pass

    @abstractmethod
    def fetch_historical_daily_means(
        self,
        lat: float,
        lon: float,
        start_date: date,
        end_date: date
    ) -> List[HistoricalDay]:
        """
        Fetch daily mean temperatures (°F) for an inclusive date range.

        Days the upstream source has no value for come back with
        ``mean_temp_f=None``.

        Raises:
            WeatherProviderError: If the provider fails to fetch data
        """
        pass

    @abstractmethod
    def search_locations(self, query: str) -> List[LocationResult]:
        """
        Search locations by free-text name.

        Raises:
            WeatherProviderError: If the provider fails to fetch data
        """
        pass

    def try_historical_daily_means(
        self,
        lat: float,
        lon: float,
        start_date: date,
        end_date: date
    ) -> Optional[List[HistoricalDay]]:
        """Like fetch_historical_daily_means, but returns None instead of raising."""
        try:
            return self.fetch_historical_daily_means(lat, lon, start_date, end_date)
        except WeatherProviderError as e:
            logging.warning(f"Historical temperature fetch failed for ({lat}, {lon}): {e}")
            return None
