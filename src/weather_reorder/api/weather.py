"""
Weather operations for the OpenWeatherMap API.

Handles retrieval of current conditions and the 5-day / 3-hour forecast.
"""

import logging
from typing import Dict, Any, Optional


class WeatherAPI:
    """Mixin for OpenWeatherMap weather operations."""

    # Type hints for attributes provided by APIClient base class
    logger: logging.Logger
    api_key: str
    units: str

    def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """Method provided by APIClient base class."""
        ...

    def _location_params(self, location: str) -> Dict[str, Any]:
        """Build the query parameters shared by all weather endpoints."""
        return {
            "q": location,
            "appid": self.api_key,
            "units": self.units,
        }

    def get_current_weather(self, location: str) -> Dict[str, Any]:
        """
        Get current conditions for a location.

        Args:
            location: Sanitized place name (e.g., "Chicago")

        Returns:
            Raw provider payload

        Example response (trimmed):
            {
                "weather": [{"main": "Clouds", "description": "broken clouds"}],
                "main": {"temp": 72.4, "humidity": 64},
                "dt": 1684929490,
                "name": "Chicago"
            }
        """
        self.logger.debug(f"Fetching current weather for {location}")
        return self.get("/weather", params=self._location_params(location))

    def get_forecast(self, location: str) -> Dict[str, Any]:
        """
        Get the 5-day forecast in 3-hour steps for a location.

        Args:
            location: Sanitized place name

        Returns:
            Raw provider payload; "list" holds up to 40 samples

        Example response item:
            {
                "dt": 1684936800,
                "main": {"temp_min": 61.2, "temp_max": 66.9},
                "weather": [{"main": "Rain"}]
            }
        """
        self.logger.debug(f"Fetching forecast for {location}")
        return self.get("/forecast", params=self._location_params(location))

