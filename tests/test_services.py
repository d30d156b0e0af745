"""
Service layer tests.

Tests the API manager, the weather simulator, the weather source and the
reorder service with mocked collaborators.
"""

import random
import threading
import unittest
from concurrent.futures import ThreadPoolExecutor
from dataclasses import FrozenInstanceError, replace
from datetime import date, datetime
from unittest.mock import Mock

import pytest  # type: ignore
import requests  # type: ignore

from src.weather_reorder.core.config import Config
from src.weather_reorder.exceptions import (
    ParseError,
    ProviderError,
    RateLimitExceeded,
    WeatherProviderError,
)
from src.weather_reorder.models import (
    CatalogProduct,
    DailyForecast,
    ReorderSuggestion,
    ServiceConfig,
    WeatherSnapshot,
)
from src.weather_reorder.services import (
    ApiManager,
    ReorderService,
    SeasonalWeatherSimulator,
    WeatherSource,
    normalize_location,
    sanitize_input,
)
from src.weather_reorder.services.simulator import diurnal_adjustment, seasonal_base_temperature
from conftest import FakeClock


def mock_config(api_key="", hourly_rate_limit=3, cache_ttl_seconds=300, environment="development"):
    """Create a Config mock resolving a single service configuration."""
    config = Mock(spec=Config)
    config.environment = environment
    config.timezone = "UTC"
    config.service_config.return_value = ServiceConfig(
        api_key=api_key,
        hourly_rate_limit=hourly_rate_limit,
        cache_ttl_seconds=cache_ttl_seconds,
        retry_attempts=0,
    )
    return config


def sample_snapshot(location="Chicago"):
    """Small weather snapshot."""
    return WeatherSnapshot(
        temperature=72,
        condition="Clouds",
        humidity=55,
        forecast=[DailyForecast(date=date(2024, 7, 22), temp_high=80, temp_low=65, condition="Clear")],
        location=location,
    )


class TestApiManager(unittest.TestCase):
    """Test rate limiting, usage counters and caching."""

    def setUp(self):
        """Set up test fixtures."""
        self.clock = FakeClock()
        self.config = mock_config(api_key="abcd1234efgh5678")
        self.manager = ApiManager(config=self.config, clock=self.clock, logger=Mock())

    def test_rate_limit_allows_until_limit(self):
        """Calls are allowed until the hourly limit is recorded."""
        for _ in range(3):
            self.assertTrue(self.manager.check_rate_limit("weather"))
            self.manager.record_call("weather", True)

        self.assertFalse(self.manager.check_rate_limit("weather"))

    def test_rate_limit_recovers_as_calls_age_out(self):
        """The window slides: old calls stop counting without new calls."""
        for _ in range(3):
            self.manager.record_call("weather", True)
        self.assertFalse(self.manager.check_rate_limit("weather"))

        self.clock.advance(3599)
        self.assertFalse(self.manager.check_rate_limit("weather"))

        self.clock.advance(1)
        self.assertTrue(self.manager.check_rate_limit("weather"))

    def test_sliding_window_not_fixed_bucket(self):
        """Only calls older than an hour are pruned."""
        self.manager.record_call("weather", True)
        self.manager.record_call("weather", True)
        self.clock.advance(1800)
        self.manager.record_call("weather", True)
        self.assertFalse(self.manager.check_rate_limit("weather"))

        # first two calls age out, the third still counts
        self.clock.advance(1801)
        self.assertTrue(self.manager.check_rate_limit("weather"))
        self.manager.record_call("weather", True)
        self.manager.record_call("weather", True)
        self.assertFalse(self.manager.check_rate_limit("weather"))

    def test_services_have_separate_windows(self):
        """Calls to one service do not count against another."""
        for _ in range(3):
            self.manager.record_call("weather", True)

        self.assertTrue(self.manager.check_rate_limit("geocoding"))

    def test_usage_stats(self):
        """Usage counters track totals, outcomes and the limit flag."""
        self.assertIsNone(self.manager.get_usage_stats("weather"))

        self.manager.record_call("weather", True)
        self.manager.record_call("weather", False)
        stats = self.manager.get_usage_stats("weather")

        self.assertEqual(stats.total_calls, 2)
        self.assertEqual(stats.successful_calls, 1)
        self.assertEqual(stats.failed_calls, 1)
        self.assertFalse(stats.rate_limit_reached)
        self.assertEqual(stats.last_used, datetime.fromtimestamp(self.clock.now, tz=stats.last_used.tzinfo))

        self.manager.record_call("weather", True)
        self.assertTrue(self.manager.get_usage_stats("weather").rate_limit_reached)

    def test_cache_hit_within_ttl(self):
        """Fresh entries are returned."""
        snapshot = sample_snapshot()
        self.manager.set_cached("chicago", snapshot)

        self.clock.advance(299)
        self.assertIs(self.manager.get_cached("chicago"), snapshot)

    def test_cache_miss_after_ttl(self):
        """Expired entries are misses but stay in the cache."""
        self.manager.set_cached("chicago", sample_snapshot())

        self.clock.advance(300)
        self.assertIsNone(self.manager.get_cached("chicago"))
        self.assertEqual(self.manager.cache_size(), 1)

    def test_cache_overwrite(self):
        """Setting a key replaces the entry and restarts its age."""
        first = sample_snapshot()
        second = replace(sample_snapshot(), temperature=90)

        self.manager.set_cached("chicago", first)
        self.clock.advance(200)
        self.manager.set_cached("chicago", second)
        self.clock.advance(200)

        self.assertIs(self.manager.get_cached("chicago"), second)
        self.assertEqual(self.manager.cache_size(), 1)

    def test_cache_miss_for_unknown_key(self):
        """Unknown keys are misses."""
        self.assertIsNone(self.manager.get_cached("nowhere"))

    def test_environment_and_config(self):
        """The active environment and its config are exposed."""
        self.assertEqual(self.manager.environment, "development")
        self.assertEqual(self.manager.get_config("weather").hourly_rate_limit, 3)
        self.assertTrue(self.manager.validate_api_key("weather"))

    def test_mask_api_key(self):
        """Keys are masked except for their ends."""
        self.assertEqual(ApiManager.mask_api_key("abcd1234efgh5678"), "abcd********5678")
        self.assertEqual(ApiManager.mask_api_key("short"), "*****")
        self.assertEqual(ApiManager.mask_api_key("12345678"), "********")

    def test_status(self):
        """Status reports configuration, usage and cache size."""
        self.manager.record_call("weather", True)
        self.manager.set_cached("chicago", sample_snapshot())

        status = self.manager.get_status()

        self.assertEqual(status["system"]["environment"], "development")
        weather = status["apis"]["weather"]
        self.assertTrue(weather["configured"])
        self.assertEqual(weather["masked_key"], "abcd********5678")
        self.assertEqual(weather["rate_limit"], 3)
        self.assertEqual(weather["usage"]["total_calls"], 1)
        self.assertEqual(status["cache"]["weather_entries"], 1)

    def test_status_without_key(self):
        """Unconfigured services report no masked key."""
        manager = ApiManager(config=mock_config(api_key=""), clock=self.clock)

        status = manager.get_status()

        self.assertFalse(status["apis"]["weather"]["configured"])
        self.assertIsNone(status["apis"]["weather"]["masked_key"])
        self.assertEqual(status["apis"]["weather"]["usage"]["total_calls"], 0)

    def test_cached_snapshot_is_immutable(self):
        """Callers cannot change a snapshot other callers will receive."""
        self.manager.set_cached("chicago", sample_snapshot())
        cached = self.manager.get_cached("chicago")

        with self.assertRaises(FrozenInstanceError):
            cached.temperature = 100
        with self.assertRaises(FrozenInstanceError):
            cached.forecast[0].temp_high = 100
        self.assertIsInstance(cached.forecast, tuple)
        self.assertEqual(self.manager.get_cached("chicago").temperature, 72)

    def test_concurrent_record_and_check(self):
        """Counters and the rate window stay consistent across threads."""
        calls = 200
        manager = ApiManager(config=mock_config(hourly_rate_limit=calls), clock=self.clock, logger=Mock())

        def call(i):
            manager.check_rate_limit("weather")
            manager.record_call("weather", i % 2 == 0)

        with ThreadPoolExecutor(max_workers=8) as executor:
            list(executor.map(call, range(calls)))

        stats = manager.get_usage_stats("weather")
        self.assertEqual(stats.total_calls, calls)
        self.assertEqual(stats.successful_calls, calls // 2)
        self.assertEqual(stats.failed_calls, calls // 2)
        self.assertTrue(stats.rate_limit_reached)
        self.assertFalse(manager.check_rate_limit("weather"))
        self.assertEqual(len(manager._rate_windows["weather"]), calls)

        self.clock.advance(3600)
        self.assertTrue(manager.check_rate_limit("weather"))
        self.assertEqual(len(manager._rate_windows["weather"]), 0)

    def test_concurrent_cache_access(self):
        """Parallel writers and readers leave one entry per key."""
        def touch(i):
            key = f"city-{i % 10}"
            self.manager.set_cached(key, sample_snapshot(location=key))
            return self.manager.get_cached(key)

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(touch, range(100)))

        self.assertEqual(self.manager.cache_size(), 10)
        self.assertTrue(all(r is not None for r in results))


class TestSeasonalWeatherSimulator:
    """Test cases for simulated weather."""

    @pytest.mark.parametrize("month,expected", [
        (1, 35.0), (3, 35.0), (12, 35.0),
        (4, 65.0), (6, 65.0),
        (7, 85.0), (9, 85.0),
        (10, 60.0), (11, 60.0),
    ])
    def test_seasonal_base_temperature(self, month, expected):
        assert seasonal_base_temperature(month) == expected

    def test_diurnal_adjustment(self):
        """Coolest at midnight, neutral at 6 and 18, warmest at noon."""
        assert diurnal_adjustment(12) == pytest.approx(15.0)
        assert diurnal_adjustment(0) == pytest.approx(-15.0)
        assert diurnal_adjustment(6) == pytest.approx(0.0)
        assert diurnal_adjustment(18) == pytest.approx(0.0, abs=1e-9)

    def test_generate_shape(self):
        """A simulated snapshot has plausible values and five ordered days."""
        now = datetime(2024, 7, 15, 12, 0)
        simulator = SeasonalWeatherSimulator(rng=random.Random(3), now=lambda: now)

        weather = simulator.generate("Austin")

        assert weather.location == "Austin"
        assert weather.source == "simulated"
        assert 85 + 15 - 6 <= weather.temperature <= 85 + 15 + 6
        assert weather.condition in ("Clear", "Clouds", "Rain")
        assert 40 <= weather.humidity <= 80
        assert [d.date for d in weather.forecast] == [date(2024, 7, d) for d in range(15, 20)]
        for day in weather.forecast:
            assert day.temp_high >= day.temp_low
            assert day.condition in ("Clear", "Clouds", "Rain")

    def test_generate_reproducible(self):
        """Same seed and time give the same snapshot."""
        now = datetime(2024, 1, 10, 3, 0)

        first = SeasonalWeatherSimulator(rng=random.Random(11), now=lambda: now).generate("Oslo")
        second = SeasonalWeatherSimulator(rng=random.Random(11), now=lambda: now).generate("Oslo")

        assert first == second


class TestLocationSanitizing:
    """Test cases for location sanitizing."""

    def test_strips_unsafe_characters(self):
        assert sanitize_input('<script>alert("x")</script>') == "scriptalert(x)/script"
        assert sanitize_input("Ben & Jerry's") == "Ben  Jerrys"

    def test_normalized_keys_match(self):
        """Quoting and case do not change the cache key."""
        assert normalize_location(' "Chicago" ') == normalize_location("chicago")
        assert normalize_location("<Chicago>") == "chicago"


class TestWeatherSource:
    """Test cases for the weather source."""

    @pytest.fixture
    def api_client(self, current_payload, forecast_payload):
        """Provider client mock answering with fixture payloads."""
        client = Mock()
        client.get_current_weather.return_value = current_payload
        client.get_forecast.return_value = forecast_payload
        return client

    def make_source(self, clock, api_client=None, api_key="live-key-123456", **config_kwargs):
        manager = ApiManager(config=mock_config(api_key=api_key, **config_kwargs), clock=clock)
        simulator = Mock(wraps=SeasonalWeatherSimulator(
            rng=random.Random(5), now=lambda: datetime(2024, 4, 2, 9, 0)
        ))
        source = WeatherSource(api_manager=manager, api_client=api_client, simulator=simulator)
        return source, manager, simulator

    def test_live_weather_parsed(self, clock, api_client):
        """Provider payloads are normalized into a snapshot."""
        source, manager, simulator = self.make_source(clock, api_client)

        weather = source.get_weather("Chicago")

        assert weather.source == "openweather"
        assert weather.location == "Chicago"
        assert weather.temperature == 95
        assert weather.humidity == 80
        assert weather.condition == "Clear"
        assert len(weather.forecast) == 5
        assert [d.date for d in weather.forecast] == [date(2024, 7, d) for d in range(22, 27)]
        assert [d.temp_high for d in weather.forecast] == [89, 90, 91, 92, 93]
        assert [d.temp_low for d in weather.forecast] == [70, 71, 72, 73, 74]
        assert [d.condition for d in weather.forecast] == ["Clear", "Clouds", "Rain", "Clouds", "Clear"]
        simulator.generate.assert_not_called()
        assert manager.get_usage_stats("weather").successful_calls == 2

    def test_cache_prevents_second_fetch(self, clock, api_client):
        """Two lookups within the TTL fetch once and return the same snapshot."""
        source, _, _ = self.make_source(clock, api_client)

        first = source.get_weather("Chicago")
        clock.advance(60)
        second = source.get_weather("chicago ")

        assert second is first
        assert api_client.get_current_weather.call_count == 1
        assert api_client.get_forecast.call_count == 1

    def test_fetch_again_after_ttl(self, clock, api_client):
        """An expired entry triggers a new fetch."""
        source, _, _ = self.make_source(clock, api_client)

        source.get_weather("Chicago")
        clock.advance(301)
        source.get_weather("Chicago")

        assert api_client.get_current_weather.call_count == 2

    def test_sanitized_location_sent_to_provider(self, clock, api_client):
        """Only the sanitized location reaches the provider."""
        source, _, _ = self.make_source(clock, api_client)

        source.get_weather('"Chicago"<')

        api_client.get_current_weather.assert_called_once_with("Chicago")
        api_client.get_forecast.assert_called_once_with("Chicago")

    def test_rate_limit_exceeded(self, clock, api_client):
        """An exhausted quota raises instead of simulating."""
        source, _, simulator = self.make_source(clock, api_client, hourly_rate_limit=2)

        source.get_weather("Chicago")
        with pytest.raises(RateLimitExceeded):
            source.get_weather("Denver")

        simulator.generate.assert_not_called()
        assert api_client.get_current_weather.call_count == 1

    def test_cached_location_served_when_rate_limited(self, clock, api_client):
        """Cache hits skip the rate limit check."""
        source, _, _ = self.make_source(clock, api_client, hourly_rate_limit=2)

        first = source.get_weather("Chicago")
        assert source.get_weather("Chicago") is first

    def test_simulated_without_api_key(self, clock, api_client):
        """No API key means simulated weather, cached like live data."""
        source, manager, simulator = self.make_source(clock, api_client, api_key="")

        first = source.get_weather("Boston")
        second = source.get_weather("BOSTON")

        assert first.source == "simulated"
        assert second is first
        assert simulator.generate.call_count == 1
        api_client.get_current_weather.assert_not_called()
        assert manager.get_usage_stats("weather") is None

    def test_http_error(self, clock, api_client):
        """Non-success status codes become ProviderError with the status."""
        response = Mock(status_code=503)
        api_client.get_current_weather.side_effect = requests.exceptions.HTTPError(response=response)
        source, manager, _ = self.make_source(clock, api_client)

        with pytest.raises(ProviderError) as exc_info:
            source.get_weather("Chicago")

        assert exc_info.value.status_code == 503
        assert exc_info.value.endpoint == "current"
        stats = manager.get_usage_stats("weather")
        assert stats.failed_calls == 1
        assert stats.total_calls == 2
        assert manager.cache_size() == 0

    def test_network_error(self, clock, api_client):
        """Transport failures become ProviderError without a status."""
        api_client.get_forecast.side_effect = requests.exceptions.ConnectionError("refused")
        source, _, _ = self.make_source(clock, api_client)

        with pytest.raises(ProviderError) as exc_info:
            source.get_weather("Chicago")

        assert exc_info.value.status_code is None
        assert exc_info.value.endpoint == "forecast"

    def test_missing_fields(self, clock, api_client, current_payload):
        """Missing payload fields raise ParseError, not defaults."""
        del current_payload["main"]
        api_client.get_current_weather.return_value = current_payload
        source, _, _ = self.make_source(clock, api_client)

        with pytest.raises(ParseError) as exc_info:
            source.get_weather("Chicago")

        assert exc_info.value.field == "main.temp"
        assert isinstance(exc_info.value, WeatherProviderError)

    def test_empty_weather_array(self, clock, api_client, current_payload):
        """An empty condition list is a parse failure."""
        current_payload["weather"] = []
        source, _, _ = self.make_source(clock, api_client)

        with pytest.raises(ParseError):
            source.get_weather("Chicago")

    def test_non_numeric_temperature(self, clock, api_client, current_payload):
        """Non-numeric readings are a parse failure."""
        current_payload["main"]["temp"] = "hot"
        source, _, _ = self.make_source(clock, api_client)

        with pytest.raises(ParseError):
            source.get_weather("Chicago")

    def test_invalid_json(self, clock, api_client):
        """Undecodable bodies are a parse failure."""
        api_client.get_forecast.side_effect = ValueError("Expecting value")
        source, _, _ = self.make_source(clock, api_client)

        with pytest.raises(ParseError):
            source.get_weather("Chicago")

    def test_short_forecast_tolerated(self, clock, api_client, forecast_payload):
        """Fewer than 40 samples yield fewer forecast days."""
        forecast_payload["list"] = forecast_payload["list"][:10]
        api_client.get_forecast.return_value = forecast_payload
        source, _, _ = self.make_source(clock, api_client)

        weather = source.get_weather("Chicago")

        assert len(weather.forecast) == 2

    def test_provider_calls_run_in_parallel(self, clock, current_payload, forecast_payload):
        """Both endpoints are in flight at once; sequential calls would break the barrier."""
        barrier = threading.Barrier(2, timeout=5)

        def current(location):
            barrier.wait()
            return current_payload

        def forecast(location):
            barrier.wait()
            return forecast_payload

        api_client = Mock()
        api_client.get_current_weather.side_effect = current
        api_client.get_forecast.side_effect = forecast
        source, manager, _ = self.make_source(clock, api_client)

        weather = source.get_weather("Chicago")

        assert weather.temperature == 95
        assert len(weather.forecast) == 5
        assert not barrier.broken
        assert manager.get_usage_stats("weather").successful_calls == 2


class TestReorderService:
    """Test cases for the reorder pipeline."""

    @pytest.fixture
    def weather_source(self):
        source = Mock(spec=WeatherSource)
        source.get_weather.return_value = WeatherSnapshot(
            temperature=95, condition="Clear", humidity=80, location="Phoenix"
        )
        return source

    def test_pipeline(self, weather_source, catalog_records):
        """Weather flows through forecasts into ranked suggestions."""
        service = ReorderService(weather_source=weather_source)

        report = service.generate_reorder_suggestions("Phoenix", catalog_records)

        weather_source.get_weather.assert_called_once_with("Phoenix")
        assert [f.product_category for f in report.demand_forecasts] == ["Beer"]
        # Budweiser: 24 * 1.5 = 36 - 12; Corona: 18 * 1.5 = 27 - 5; Stella: 30 = 30
        assert [s.product_id for s in report.reorder_suggestions] == [1, 3]
        assert [s.suggested_order_quantity for s in report.reorder_suggestions] == [24, 22]
        assert report.summary.total_suggestions == 2
        assert report.summary.high_priority_count == 2
        assert report.summary.estimated_additional_revenue == 46 * 25

    def test_accepts_catalog_products(self, weather_source):
        """CatalogProduct instances are used as-is."""
        products = [CatalogProduct(id="a", name="Lager", category_id=1, last_count_quantity=10, par_level=20)]

        report = ReorderService(weather_source=weather_source).generate_reorder_suggestions("Phoenix", products)

        assert report.reorder_suggestions[0].product_id == "a"

    def test_report_truncated_summary_complete(self, weather_source):
        """The report keeps the top suggestions; the summary counts all."""
        products = [
            CatalogProduct(id=i, name=f"Lager {i}", category_id=1, last_count_quantity=i + 1, par_level=20)
            for i in range(5)
        ]
        service = ReorderService(weather_source=weather_source, max_suggestions=2, revenue_per_unit=10)

        report = service.generate_reorder_suggestions("Phoenix", products)

        assert [s.product_id for s in report.reorder_suggestions] == [0, 1]
        assert report.summary.total_suggestions == 5
        assert report.summary.estimated_additional_revenue == (29 + 28 + 27 + 26 + 25) * 10

    def test_sink_receives_full_list(self, weather_source, catalog_records):
        """The sink gets the full ranked list and the summary."""
        sink = Mock()
        service = ReorderService(weather_source=weather_source, max_suggestions=1)

        report = service.generate_reorder_suggestions("Phoenix", catalog_records, sink=sink)

        suggestions, summary = sink.call_args[0]
        assert len(suggestions) == 2
        assert all(isinstance(s, ReorderSuggestion) for s in suggestions)
        assert summary == report.summary

    def test_weather_failure_aborts(self, weather_source, catalog_records):
        """No report and no sink call when weather lookup fails."""
        weather_source.get_weather.side_effect = RateLimitExceeded("weather")
        sink = Mock()
        service = ReorderService(weather_source=weather_source)

        with pytest.raises(RateLimitExceeded):
            service.generate_reorder_suggestions("Phoenix", catalog_records, sink=sink)

        sink.assert_not_called()

    def test_summarize_empty(self, weather_source):
        summary = ReorderService(weather_source=weather_source).summarize([])

        assert summary.total_suggestions == 0
        assert summary.high_priority_count == 0
        assert summary.estimated_additional_revenue == 0
