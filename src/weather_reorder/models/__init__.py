"""
Data models for the weather reorder system.

Contains DTOs for weather snapshots, service configuration, catalog products and reorder output.
"""

from .weather import DailyForecast, WeatherSnapshot, CacheEntry
from .service import ServiceConfig, UsageStats
from .inventory import (
    CatalogProduct,
    DemandForecast,
    ReorderSuggestion,
    ReorderSummary,
    ReorderReport,
)

__all__ = [
    "DailyForecast",
    "WeatherSnapshot",
    "CacheEntry",
    "ServiceConfig",
    "UsageStats",
    "CatalogProduct",
    "DemandForecast",
    "ReorderSuggestion",
    "ReorderSummary",
    "ReorderReport",
]
