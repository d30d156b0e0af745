"""
External service data models.

Contains DTOs for per-environment service configuration and usage statistics.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ServiceConfig:
    """Resolved configuration for one external service in one environment."""

    api_key: str
    hourly_rate_limit: int
    cache_ttl_seconds: float
    retry_attempts: int
    base_url: str = ""
    timeout: int = 10

    @property
    def is_configured(self) -> bool:
        """Check whether an API key is present."""
        return len(self.api_key) > 0


@dataclass
class UsageStats:
    """Cumulative call counters for one service."""

    total_calls: int = 0
    successful_calls: int = 0
    failed_calls: int = 0
    last_used: Optional[datetime] = None
    rate_limit_reached: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-ready dictionary."""
        return {
            "total_calls": self.total_calls,
            "successful_calls": self.successful_calls,
            "failed_calls": self.failed_calls,
            "last_used": self.last_used.isoformat() if self.last_used else None,
            "rate_limit_reached": self.rate_limit_reached,
        }
