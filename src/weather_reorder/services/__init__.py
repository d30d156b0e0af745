"""
Business logic services for the weather reorder system.

Services orchestrate API operations and provide higher-level functionality.
"""

from .api_manager import ApiManager
from .simulator import SeasonalWeatherSimulator
from .weather_source import WeatherSource, sanitize_input, normalize_location
from .reorder_service import ReorderService

__all__ = [
    "ApiManager",
    "SeasonalWeatherSimulator",
    "WeatherSource",
    "sanitize_input",
    "normalize_location",
    "ReorderService",
]
