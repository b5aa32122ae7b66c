"""Integration tests - can optionally hit the real API (disabled by default)."""
import asyncio
import os
import pytest
from datetime import date, timedelta
from decision import Answer, JacketAdvisor
from openmeteo_provider import OpenMeteoProvider
from seasonal import SeasonalAdjustmentEstimator
from weather_service import WeatherService

live = pytest.mark.skipif(
    not os.environ.get("JACKET_LIVE_TESTS"),
    reason="JACKET_LIVE_TESTS not set - skipping integration test"
)


@live
def test_openmeteo_integration():
    """
    Integration test that hits the real Open-Meteo API.

    Set JACKET_LIVE_TESTS=1 to run this test.
    """
    provider = OpenMeteoProvider()

    snapshot = provider.fetch_current_and_forecast(41.88, -87.63)

    assert snapshot.current.temp is not None
    assert snapshot.current.conditions is not None
    assert snapshot.timestamp > 0

    end = date.today() - timedelta(days=7)
    days = provider.fetch_historical_daily_means(41.88, -87.63, end - timedelta(days=6), end)
    assert len(days) == 7

    results = provider.search_locations("Chicago")
    assert results
    assert results[0].name == "Chicago"


@live
def test_end_to_end_decision():
    """Integration test for the full decision path with the real API."""
    provider = OpenMeteoProvider()
    service = WeatherService(provider, cache_ttl_seconds=60)
    advisor = JacketAdvisor(SeasonalAdjustmentEstimator(provider))

    snapshot = service.get_snapshot(41.88, -87.63)
    result = asyncio.run(advisor.decide(snapshot))

    assert result.answer in (Answer.YES, Answer.NO)
    assert (result.jacket_type is not None) == (result.answer == Answer.YES)

    # Second call should use cache
    assert service.get_snapshot(41.88, -87.63) is snapshot
