"""Tests for weather service."""
import pytest
from unittest.mock import Mock, patch
from openmeteo_provider import OpenMeteoProvider
from weather_service import WeatherService
from weather_provider import WeatherProviderBase, WeatherProviderError
from weather_data import (
    CurrentConditions,
    Forecast,
    HourlyOutlook,
    Location,
    LocationResult,
    Precipitation,
    WeatherSnapshot,
)


class MockProvider(WeatherProviderBase):
    """Mock weather provider for testing."""

    def __init__(self, return_data=None, raise_error=None, search_results=None):
        self.return_data = return_data
        self.raise_error = raise_error
        self.search_results = search_results or []
        self.call_count = 0
        self.search_count = 0

    def fetch_current_and_forecast(self, lat, lon):
        self.call_count += 1
        if self.raise_error:
            raise self.raise_error
        return self.return_data

    def fetch_historical_daily_means(self, lat, lon, start_date, end_date):
        return []

    def search_locations(self, query):
        self.search_count += 1
        if self.raise_error:
            raise self.raise_error
        return self.search_results


class FakeClock:
    def __init__(self, now=1705305600.0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def sample_snapshot():
    """Sample weather snapshot."""
    return WeatherSnapshot(
        location=Location(name="33.44, -94.04", country="", lat=33.44, lon=-94.04),
        current=CurrentConditions(
            temp=68, feels_like=67, humidity=60.0, wind_speed=5,
            conditions="Clear", description="clear sky", icon="01d",
        ),
        forecast=Forecast(
            six_hour=HourlyOutlook(temp=61, conditions="Clear", wind_speed=4),
            twelve_hour=HourlyOutlook(temp=55, conditions="Clouds"),
        ),
        precipitation=Precipitation(chance=10, is_raining=False, is_snowing=False),
        timestamp=1705305600,
        timezone="America/Chicago",
    )


def test_weather_service_caching(sample_snapshot):
    """Test that service caches results per location."""
    provider = MockProvider(return_data=sample_snapshot)
    service = WeatherService(provider, cache_ttl_seconds=60)

    # First call should hit provider
    result1 = service.get_snapshot(33.44, -94.04)
    assert provider.call_count == 1
    assert result1.current.temp == 68

    # Second call within TTL should use cache, even with slightly different coordinates
    result2 = service.get_snapshot(33.4401, -94.0399)
    assert provider.call_count == 1  # Still 1, not 2
    assert result2.current.temp == 68


def test_weather_service_separate_locations(sample_snapshot):
    """Test that each location gets its own cache entry."""
    provider = MockProvider(return_data=sample_snapshot)
    service = WeatherService(provider, cache_ttl_seconds=60)

    service.get_snapshot(33.44, -94.04)
    service.get_snapshot(41.88, -87.63)

    assert provider.call_count == 2


def test_weather_service_cache_expiry(sample_snapshot):
    """Test that cache expires after TTL."""
    clock = FakeClock()
    provider = MockProvider(return_data=sample_snapshot)
    service = WeatherService(provider, cache_ttl_seconds=600, clock=clock)

    service.get_snapshot(33.44, -94.04)
    assert provider.call_count == 1

    clock.now += 601

    service.get_snapshot(33.44, -94.04)
    assert provider.call_count == 2


def test_weather_service_stamps_location(sample_snapshot):
    """Test that a known location name replaces the provider's placeholder."""
    provider = MockProvider(return_data=sample_snapshot)
    service = WeatherService(provider)
    location = Location(name="Texarkana, Arkansas, United States", country="United States", lat=33.44, lon=-94.04)

    snapshot = service.get_snapshot(33.44, -94.04, location)

    assert snapshot.location.name == "Texarkana, Arkansas, United States"
    assert snapshot.current == sample_snapshot.current


@patch("weather_service.time.sleep")
def test_weather_service_retry_on_error(mock_sleep, sample_snapshot):
    """Test that service retries on transient errors."""
    provider = MockProvider(return_data=sample_snapshot)
    service = WeatherService(provider, max_retries=3, retry_delay_seconds=0.1)

    # First call fails, then succeeds
    def side_effect(lat, lon):
        provider.call_count += 1
        if provider.call_count < 2:
            raise WeatherProviderError("Network error")
        return sample_snapshot

    provider.fetch_current_and_forecast = side_effect

    result = service.get_snapshot(33.44, -94.04)
    assert result.current.temp == 68
    assert provider.call_count == 2
    mock_sleep.assert_called_once_with(0.1)


def test_weather_service_no_retry_on_4xx():
    """Test that service doesn't retry on 4xx errors."""
    provider = MockProvider(
        raise_error=WeatherProviderError(
            "Open-Meteo API error 400: Latitude must be in range of -90 to 90°", status_code=400
        )
    )
    service = WeatherService(provider, max_retries=3)

    with pytest.raises(WeatherProviderError):
        service.get_snapshot(133.44, -94.04)

    # Should only try once (no retries for 4xx)
    assert provider.call_count == 1


@patch("weather_service.time.sleep")
def test_weather_service_fallback_to_cache(mock_sleep, sample_snapshot):
    """Test that service falls back to a stale snapshot on failure."""
    clock = FakeClock()
    provider = MockProvider(return_data=sample_snapshot)
    service = WeatherService(provider, cache_ttl_seconds=1, clock=clock)

    result1 = service.get_snapshot(33.44, -94.04)
    assert result1.current.temp == 68

    # Make provider fail and let the cache expire
    provider.raise_error = WeatherProviderError("Network error")
    provider.return_data = None
    clock.now += 5

    # Should return stale snapshot instead of raising
    result2 = service.get_snapshot(33.44, -94.04)
    assert result2.current.temp == 68


def test_weather_service_no_cache_on_first_failure():
    """Test that service raises error if no cache exists."""
    provider = MockProvider(raise_error=WeatherProviderError("Network error"))
    service = WeatherService(provider, max_retries=1)

    with pytest.raises(WeatherProviderError) as exc_info:
        service.get_snapshot(33.44, -94.04)

    assert "after 1 attempts" in str(exc_info.value)


def test_weather_service_clear_cache(sample_snapshot):
    provider = MockProvider(return_data=sample_snapshot)
    service = WeatherService(provider, cache_ttl_seconds=60)

    service.get_snapshot(33.44, -94.04)
    service.clear_cache()
    service.get_snapshot(33.44, -94.04)

    assert provider.call_count == 2


def test_search_short_query_skips_provider():
    """Queries under two characters return nothing without a request."""
    provider = MockProvider()
    service = WeatherService(provider)

    assert service.search_locations("") == []
    assert service.search_locations(" c ") == []
    assert provider.search_count == 0


def test_search_returns_provider_results():
    results = [LocationResult(name="Chicago", state="Illinois", country="United States", lat=41.85, lon=-87.65)]
    provider = MockProvider(search_results=results)
    service = WeatherService(provider)

    assert service.search_locations("Chic") == results
    assert provider.search_count == 1


def test_search_failure_returns_empty_list():
    provider = MockProvider(raise_error=WeatherProviderError("Network error"))
    service = WeatherService(provider)

    assert service.search_locations("Chicago") == []


@patch("weather_service.time.sleep")
def test_weather_service_retries_5xx_mentioning_4xx_code(mock_sleep, sample_snapshot):
    """Only the HTTP status decides whether to retry, not the message text."""
    provider = MockProvider(return_data=sample_snapshot)
    service = WeatherService(provider, max_retries=3, retry_delay_seconds=0.1)

    def side_effect(lat, lon):
        provider.call_count += 1
        if provider.call_count < 2:
            raise WeatherProviderError("HTTP 503: upstream error 4000", status_code=503)
        return sample_snapshot

    provider.fetch_current_and_forecast = side_effect

    assert service.get_snapshot(33.44, -94.04) is sample_snapshot
    assert provider.call_count == 2


def test_weather_service_non_object_body_raises_provider_error():
    response = Mock()
    response.ok = True
    response.status_code = 200
    response.json.return_value = None
    service = WeatherService(OpenMeteoProvider(), max_retries=1)

    with patch("openmeteo_provider.requests.get", return_value=response):
        with pytest.raises(WeatherProviderError) as exc_info:
            service.get_snapshot(41.88, -87.63)

    assert "Unexpected response body" in str(exc_info.value)
