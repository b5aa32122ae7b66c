"""Weather service with per-location caching and retries."""
import logging
import time
from typing import Callable, List, Optional

from ttl_cache import TTLCache
from weather_data import Location, LocationResult, WeatherSnapshot, location_key
from weather_provider import WeatherProviderBase, WeatherProviderError

MIN_SEARCH_LENGTH = 2
NON_RETRYABLE_STATUSES = frozenset({400, 401, 403, 404})


class WeatherService:
    """
    Service that wraps a weather provider with caching and retries.

    Prevents hammering the API by caching snapshots per location and only
    fetching new data when the cached one is stale (default: 10 minutes).
    """

    def __init__(
        self,
        provider: WeatherProviderBase,
        cache_ttl_seconds: int = 600,  # 10 minutes default
        max_retries: int = 3,
        retry_delay_seconds: float = 1.0,
        clock: Callable[[], float] = time.time
    ):
        """
        Initialize weather service.

        Args:
            provider: Weather provider to use
            cache_ttl_seconds: How long to cache snapshots before fetching new data
            max_retries: Maximum number of retries on transient errors
            retry_delay_seconds: Delay between retries
            clock: Time source used for cache freshness
        """
        self.provider = provider
        self.cache_ttl_seconds = cache_ttl_seconds
        self.max_retries = max_retries
        self.retry_delay_seconds = retry_delay_seconds

        self._cache = TTLCache(cache_ttl_seconds, clock=clock)

    def get_snapshot(self, lat: float, lon: float, location: Optional[Location] = None) -> WeatherSnapshot:
        """
        Get the latest weather snapshot for a location, using cache if still fresh.

        Args:
            lat: Latitude
            lon: Longitude
            location: Display name/country to stamp on the snapshot, if known

        Returns:
            WeatherSnapshot: Latest weather data (may be cached)

        Raises:
            WeatherProviderError: If all retries fail and no cache exists
        """
        key = location_key(lat, lon)

        cached = self._cache.get(key)
        if cached is not None:
            logging.debug(f"Using cached weather snapshot for {key}")
            return cached

        logging.info(f"Fetching weather data for {key} from provider...")
        last_error = None
        for attempt in range(self.max_retries):
            try:
                logging.debug(f"Weather fetch attempt {attempt + 1}/{self.max_retries}")
                snapshot = self.provider.fetch_current_and_forecast(lat, lon)
                if location is not None:
                    snapshot = snapshot.with_location(location)
                logging.info(f"Weather fetch successful: {snapshot.current.temp}°F, {snapshot.current.conditions}")
                self._cache.set(key, snapshot)
                return snapshot
            except WeatherProviderError as e:
                last_error = e
                logging.warning(f"Weather fetch attempt {attempt + 1} failed: {e}")
                # Don't retry on 4xx errors (bad request, etc.)
                if _is_client_error(e):
                    logging.error("Non-retryable error (4xx), stopping retries")
                    break
                # Retry on network/5xx errors
                if attempt < self.max_retries - 1:
                    retry_delay = self.retry_delay_seconds * (attempt + 1)
                    logging.info(f"Retrying in {retry_delay}s...")
                    time.sleep(retry_delay)

        # All retries failed
        stale = self._cache.peek(key)
        if stale is not None:
            logging.warning(f"All retries failed, using stale snapshot (age: {self._cache.age(key):.1f}s)")
            return stale

        logging.error(f"Failed to fetch weather after {self.max_retries} attempts, no cache available")
        raise WeatherProviderError(
            f"Failed to fetch weather after {self.max_retries} attempts: {last_error}"
        )

    def search_locations(self, query: str) -> List[LocationResult]:
        """Search locations for autocomplete; never raises."""
        query = (query or "").strip()
        if len(query) < MIN_SEARCH_LENGTH:
            return []

        try:
            results = self.provider.search_locations(query)
        except WeatherProviderError as e:
            logging.error(f"Location search failed for '{query}': {e}")
            return []

        logging.info(f"Location search '{query}' returned {len(results)} results")
        return results

    def clear_cache(self) -> None:
        """Forget cached snapshots (e.g. when the user picks a new location)."""
        self._cache.clear()


def _is_client_error(error: WeatherProviderError) -> bool:
    return error.status_code in NON_RETRYABLE_STATUSES
