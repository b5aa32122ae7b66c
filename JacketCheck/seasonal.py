"""Seasonal adjustment from the last 30 days of observed temperatures."""
import asyncio
import logging
import time
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from ttl_cache import TTLCache
from weather_data import location_key
from weather_provider import WeatherProviderBase

SEASONAL_CACHE_TTL_SECONDS = 24 * 60 * 60
HISTORY_DAYS = 30

VERY_WARM_AVERAGE = 75
WARM_AVERAGE = 70
VERY_COLD_AVERAGE = 30
COLD_AVERAGE = 40


def bias_for_average(avg_temp: float) -> int:
    """
    Map a trailing average temperature (°F) to a threshold bias.

    A warm recent stretch lowers the jacket bar, a cold one raises it.
    """
    if avg_temp > VERY_WARM_AVERAGE:
        return -8
    if avg_temp > WARM_AVERAGE:
        return -5
    if avg_temp < VERY_COLD_AVERAGE:
        return 8
    if avg_temp < COLD_AVERAGE:
        return 5
    return 0


class SeasonalAdjustmentEstimator:
    """
    Estimates how acclimated people are to recent weather at a location.

    Results are cached per location (coordinates rounded to 2 decimals) for
    24 hours. Anything that goes wrong upstream yields a bias of 0 and is not
    cached, so the next call retries.
    """

    def __init__(
        self,
        provider: WeatherProviderBase,
        cache: Optional[TTLCache] = None,
        clock: Callable[[], float] = time.time
    ):
        """
        Initialize estimator.

        Args:
            provider: Source of historical daily mean temperatures
            cache: Bias cache; defaults to a 24 hour TTLCache on the same clock
            clock: Time source, also used to pick the historical date range
        """
        self.provider = provider
        self.clock = clock
        self.cache = cache if cache is not None else TTLCache(SEASONAL_CACHE_TTL_SECONDS, clock=clock)

    async def seasonal_bias(self, lat: float, lon: float) -> int:
        """Return the seasonal bias in °F for a location, fetching history on a cache miss."""
        key = location_key(lat, lon)

        cached = self.cache.get(key)
        if cached is not None:
            logging.debug(f"Using cached seasonal bias for {key}: {cached:+d}°F")
            return cached

        # Today's values are not final upstream, so the window ends yesterday
        today = datetime.fromtimestamp(self.clock(), tz=timezone.utc).date()
        end_date = today - timedelta(days=1)
        start_date = today - timedelta(days=HISTORY_DAYS)

        days = await asyncio.to_thread(
            self.provider.try_historical_daily_means, lat, lon, start_date, end_date
        )
        if days is None:
            logging.warning(f"No historical data for {key}, seasonal bias defaults to 0")
            return 0

        temps = [day.mean_temp_f for day in days if day.mean_temp_f is not None]
        if not temps:
            logging.warning(f"Historical data for {key} had no valid days, seasonal bias defaults to 0")
            return 0

        avg_temp = sum(temps) / len(temps)
        bias = bias_for_average(avg_temp)
        logging.info(f"Seasonal bias for {key}: {bias:+d}°F (30-day average {avg_temp:.1f}°F over {len(temps)} days)")

        self.cache.set(key, bias)
        return bias
