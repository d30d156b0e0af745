"""
External API usage manager.

Owns the weather cache and the per-service sliding-window rate limiter. All
state lives on the instance; construct one per process (or per tenant) and
pass it to the components that need it.
"""

import logging
import threading
import time
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

import pytz

from ..core import constants
from ..core.config import Config
from ..models import CacheEntry, ServiceConfig, UsageStats, WeatherSnapshot


class ApiManager:
    """Per-service rate limiting, usage counters and a TTL cache."""

    def __init__(
        self,
        config: Config,
        clock: Callable[[], float] = time.time,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize API manager.

        Args:
            config: Resolved application configuration
            clock: Wall-clock source in seconds since the epoch
            logger: Logger instance
        """
        self.config = config
        self.clock = clock
        self.logger = logger or logging.getLogger(__name__)

        self._lock = threading.Lock()
        self._cache: Dict[str, CacheEntry] = {}
        self._rate_windows: Dict[str, List[float]] = {}
        self._usage: Dict[str, UsageStats] = {}

    @property
    def environment(self) -> str:
        """Get the environment whose limits are active."""
        return self.config.environment

    def get_config(self, service: str) -> ServiceConfig:
        """
        Get the service configuration for the active environment.

        Args:
            service: Service name

        Returns:
            ServiceConfig
        """
        return self.config.service_config(service)

    def check_rate_limit(self, service: str) -> bool:
        """
        Check whether another call to a service is allowed.

        Timestamps older than the trailing hour are pruned before counting.

        Args:
            service: Service name

        Returns:
            True if the number of calls in the trailing hour is below the limit
        """
        with self._lock:
            return self._within_limit(service, self.clock())

    def _within_limit(self, service: str, now: float) -> bool:
        """Prune the window for service and compare against its limit (lock held)."""
        window_start = now - constants.RATE_LIMIT_WINDOW_SECONDS
        recent = [ts for ts in self._rate_windows.get(service, []) if ts > window_start]
        self._rate_windows[service] = recent
        return len(recent) < self.get_config(service).hourly_rate_limit

    def record_call(self, service: str, success: bool) -> None:
        """
        Record one outbound call.

        Args:
            service: Service name
            success: Whether the call succeeded
        """
        with self._lock:
            now = self.clock()
            self._rate_windows.setdefault(service, []).append(now)

            stats = self._usage.setdefault(service, UsageStats())
            stats.total_calls += 1
            if success:
                stats.successful_calls += 1
            else:
                stats.failed_calls += 1
            stats.last_used = datetime.fromtimestamp(now, tz=pytz.UTC)
            stats.rate_limit_reached = not self._within_limit(service, now)

        if stats.rate_limit_reached:
            self.logger.warning(f"Rate limit reached for service '{service}'")

    def get_usage_stats(self, service: str) -> Optional[UsageStats]:
        """Get usage counters for a service, or None if it was never called."""
        with self._lock:
            return self._usage.get(service)

    def get_cached(self, key: str) -> Optional[WeatherSnapshot]:
        """
        Get a cached snapshot if it is still fresh.

        Stale entries are left in place until overwritten.

        Args:
            key: Normalized cache key

        Returns:
            Cached snapshot, or None on miss or expiry
        """
        ttl = self.get_config(constants.WEATHER_SERVICE).cache_ttl_seconds
        with self._lock:
            entry = self._cache.get(key)
            if entry is None or not entry.is_fresh(self.clock(), ttl):
                return None
            return entry.data

    def set_cached(self, key: str, snapshot: WeatherSnapshot) -> None:
        """Store a snapshot, replacing any existing entry for key."""
        with self._lock:
            self._cache[key] = CacheEntry(data=snapshot, timestamp=self.clock())

    def cache_size(self) -> int:
        """Get the number of cache entries, fresh or stale."""
        with self._lock:
            return len(self._cache)

    def validate_api_key(self, service: str) -> bool:
        """Check whether an API key is configured for a service."""
        return self.get_config(service).is_configured

    @staticmethod
    def mask_api_key(key: str) -> str:
        """
        Mask an API key for display.

        Args:
            key: API key

        Returns:
            Key with all but the first and last four characters replaced by '*';
            keys of eight characters or fewer are fully masked
        """
        if len(key) <= 8:
            return "*" * len(key)
        return key[:4] + "*" * (len(key) - 8) + key[-4:]

    def get_status(self) -> Dict[str, Any]:
        """
        Get a status summary for monitoring.

        Returns:
            Dictionary with environment, weather service configuration and usage,
            and cache size
        """
        service = constants.WEATHER_SERVICE
        service_config = self.get_config(service)
        stats = self.get_usage_stats(service) or UsageStats()

        return {
            "system": {
                "status": "operational",
                "timestamp": datetime.now(pytz.UTC).isoformat(),
                "environment": self.environment,
            },
            "apis": {
                service: {
                    "configured": service_config.is_configured,
                    "masked_key": (
                        self.mask_api_key(service_config.api_key)
                        if service_config.is_configured else None
                    ),
                    "rate_limit": service_config.hourly_rate_limit,
                    "cache_ttl_seconds": service_config.cache_ttl_seconds,
                    "usage": stats.to_dict(),
                }
            },
            "cache": {
                "weather_entries": self.cache_size(),
            },
        }
