"""
Weather data models.

Contains DTOs for normalized weather snapshots, independent of any provider.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class DailyForecast:
    """One day of forecast data."""

    date: date
    temp_high: float  # °F
    temp_low: float  # °F
    condition: str  # e.g., "Clear", "Clouds", "Rain"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-ready dictionary."""
        return {
            "date": self.date.isoformat(),
            "temp_high": self.temp_high,
            "temp_low": self.temp_low,
            "condition": self.condition,
        }


@dataclass(frozen=True)
class WeatherSnapshot:
    """
    Current conditions plus a short daily forecast for one location.

    Snapshots are shared through the cache, so they are immutable; the
    forecast is stored as a tuple.
    """

    temperature: float  # °F
    condition: str
    humidity: float  # %
    forecast: Tuple[DailyForecast, ...] = field(default_factory=tuple)
    location: str = ""
    source: str = "simulated"  # "simulated" or "openweather"

    def __post_init__(self):
        object.__setattr__(self, "forecast", tuple(self.forecast))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-ready dictionary."""
        return {
            "location": self.location,
            "source": self.source,
            "temperature": self.temperature,
            "condition": self.condition,
            "humidity": self.humidity,
            "forecast": [day.to_dict() for day in self.forecast],
        }


@dataclass(frozen=True)
class CacheEntry:
    """Cached weather snapshot with the time it was stored."""

    data: WeatherSnapshot
    timestamp: float  # seconds since the epoch

    def is_fresh(self, now: float, ttl_seconds: float) -> bool:
        """Check whether the entry is younger than ttl_seconds."""
        return now - self.timestamp < ttl_seconds
