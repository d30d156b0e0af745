"""
Weather source service.

Produces a normalized weather snapshot for a location: cache first, then the
live provider when an API key is configured, otherwise the seasonal simulator.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Optional

import requests  # type: ignore

from ..api import OpenWeatherAPI
from ..algorithms import round_half_up
from ..core import constants, DateUtils, log_api_usage
from ..exceptions import ParseError, ProviderError, RateLimitExceeded
from ..models import DailyForecast, WeatherSnapshot
from .api_manager import ApiManager
from .simulator import SeasonalWeatherSimulator


def sanitize_input(value: str) -> str:
    """
    Strip characters usable for markup or query injection.

    Args:
        value: Raw user input

    Returns:
        Input without any of < > ' " &
    """
    return "".join(ch for ch in value if ch not in constants.UNSAFE_INPUT_CHARACTERS)


def normalize_location(location: str) -> str:
    """
    Build the cache key for a location.

    Args:
        location: Raw location string

    Returns:
        Sanitized, trimmed, lower-case key
    """
    return sanitize_input(location).strip().lower()


class WeatherSource:
    """Cache-first weather lookup with a live provider and an offline fallback."""

    def __init__(
        self,
        api_manager: ApiManager,
        api_client: Optional[OpenWeatherAPI] = None,
        simulator: Optional[SeasonalWeatherSimulator] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize weather source.

        Args:
            api_manager: Cache and rate limiter shared by all lookups
            api_client: Provider client (built from configuration when needed)
            simulator: Fallback weather generator
            logger: Logger instance
        """
        self.api_manager = api_manager
        self.logger = logger or logging.getLogger(__name__)
        self.date_utils = DateUtils(logger)
        self._api_client = api_client
        self.simulator = simulator or SeasonalWeatherSimulator(
            timezone=api_manager.config.timezone, logger=logger
        )

    @property
    def api_client(self) -> OpenWeatherAPI:
        """Get the provider client, creating it on first use."""
        if self._api_client is None:
            service_config = self.api_manager.get_config(constants.WEATHER_SERVICE)
            self._api_client = OpenWeatherAPI(
                api_key=service_config.api_key,
                base_url=service_config.base_url,
                timeout=service_config.timeout,
                max_retries=service_config.retry_attempts,
                logger=self.logger
            )
        return self._api_client

    def get_weather(self, location: str = constants.DEFAULT_LOCATION) -> WeatherSnapshot:
        """
        Get current weather and a 5-day forecast for a location.

        Args:
            location: Free-text place name

        Returns:
            Normalized weather snapshot

        Raises:
            RateLimitExceeded: Provider configured but hourly quota exhausted
            ProviderError: Provider unreachable or answered with an error status
            ParseError: Provider payload missing expected fields
        """
        clean_location = sanitize_input(location).strip()
        cache_key = normalize_location(location)

        cached = self.api_manager.get_cached(cache_key)
        if cached is not None:
            self.logger.debug(f"Using cached weather for '{clean_location}'")
            return cached

        service_config = self.api_manager.get_config(constants.WEATHER_SERVICE)

        if not service_config.is_configured:
            self.logger.info("No weather API key configured, using simulated weather")
            snapshot = self.simulator.generate(clean_location)
            self.api_manager.set_cached(cache_key, snapshot)
            return snapshot

        if not self.api_manager.check_rate_limit(constants.WEATHER_SERVICE):
            self.logger.warning(f"Weather rate limit reached, refusing lookup for '{clean_location}'")
            raise RateLimitExceeded(constants.WEATHER_SERVICE)

        snapshot = self._fetch_live(clean_location)
        self.api_manager.set_cached(cache_key, snapshot)
        return snapshot

    def _fetch_live(self, location: str) -> WeatherSnapshot:
        """Fetch current conditions and forecast concurrently and compose a snapshot."""
        self.logger.info(f"Fetching live weather for '{location}'")

        with ThreadPoolExecutor(max_workers=2) as executor:
            current_future = executor.submit(
                self._fetch, "current", self.api_client.get_current_weather, location
            )
            forecast_future = executor.submit(
                self._fetch, "forecast", self.api_client.get_forecast, location
            )
            current_data = current_future.result()
            forecast_data = forecast_future.result()

        return WeatherSnapshot(
            temperature=round_half_up(self._require_number(current_data, "main", "temp")),
            condition=self._require(current_data, "weather", 0, "main"),
            humidity=self._require_number(current_data, "main", "humidity"),
            forecast=self._parse_forecast(forecast_data),
            location=location,
            source="openweather",
        )

    def _fetch(
        self,
        endpoint: str,
        call: Callable[[str], Dict[str, Any]],
        location: str
    ) -> Dict[str, Any]:
        """Run one provider call, recording its outcome with the rate limiter."""
        service = constants.WEATHER_SERVICE

        try:
            payload = call(location)
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            self.api_manager.record_call(service, False)
            log_api_usage(self.logger, service, endpoint, status)
            raise ProviderError(
                f"Weather API error: {status}", status_code=status, endpoint=endpoint
            ) from e
        except ValueError as e:
            # Response arrived but body is not JSON
            self.api_manager.record_call(service, True)
            log_api_usage(self.logger, service, endpoint, 200)
            raise ParseError(f"Weather API returned invalid JSON for {endpoint}") from e
        except requests.exceptions.RequestException as e:
            self.api_manager.record_call(service, False)
            log_api_usage(self.logger, service, endpoint, None)
            raise ProviderError(
                f"Weather API unreachable: {type(e).__name__}", endpoint=endpoint
            ) from e

        self.api_manager.record_call(service, True)
        log_api_usage(self.logger, service, endpoint, 200)
        return payload

    def _parse_forecast(self, data: Dict[str, Any]) -> List[DailyForecast]:
        """Reduce 3-hour samples to one entry per day (every 8th sample) for 5 days."""
        samples = self._require(data, "list")
        if not isinstance(samples, list):
            raise ParseError("Forecast field 'list' is not a list", field="list")

        daily = samples[::constants.FORECAST_SAMPLES_PER_DAY][:constants.FORECAST_DAYS]

        forecast = []
        for item in daily:
            timestamp = self._require(item, "dt")
            try:
                day = self.date_utils.utc_timestamp_to_date(
                    float(timestamp), self.api_manager.config.timezone
                )
            except (TypeError, ValueError, OverflowError) as e:
                raise ParseError(f"Invalid forecast timestamp: {timestamp!r}", field="dt") from e

            forecast.append(DailyForecast(
                date=day,
                temp_high=round_half_up(self._require_number(item, "main", "temp_max")),
                temp_low=round_half_up(self._require_number(item, "main", "temp_min")),
                condition=self._require(item, "weather", 0, "main"),
            ))

        return forecast

    @staticmethod
    def _require(data: Any, *path: Any) -> Any:
        """
        Walk a nested payload, raising ParseError if any step is missing.

        Args:
            data: Decoded JSON payload
            *path: Keys and list indexes to follow

        Returns:
            Value found at the path
        """
        value = data
        for step in path:
            try:
                value = value[step]
            except (KeyError, IndexError, TypeError):
                field = ".".join(str(p) for p in path)
                raise ParseError(f"Weather payload missing '{field}'", field=field)
        if value is None:
            field = ".".join(str(p) for p in path)
            raise ParseError(f"Weather payload missing '{field}'", field=field)
        return value

    @classmethod
    def _require_number(cls, data: Any, *path: Any) -> float:
        """Walk a nested payload and coerce the value to float."""
        value = cls._require(data, *path)
        if isinstance(value, bool):
            value = None
        try:
            return float(value)
        except (TypeError, ValueError):
            field = ".".join(str(p) for p in path)
            raise ParseError(f"Weather payload field '{field}' is not numeric: {value!r}", field=field)
