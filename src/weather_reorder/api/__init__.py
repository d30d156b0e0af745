"""
API layer for the OpenWeatherMap weather provider.

Provides a low-level HTTP client and the weather endpoint operations.
"""

import logging
from typing import Optional

from .client import APIClient
from .weather import WeatherAPI
from ..core import constants


class OpenWeatherAPI(APIClient, WeatherAPI):
    """
    Unified API client for OpenWeatherMap.

    Combines the retrying HTTP session with the weather endpoint operations.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = constants.DEFAULT_WEATHER_BASE_URL,
        units: str = constants.DEFAULT_WEATHER_UNITS,
        timeout: int = constants.DEFAULT_WEATHER_TIMEOUT,
        max_retries: int = 2,
        verify_ssl: bool = True,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize unified API client.

        Args:
            api_key: OpenWeatherMap API key
            base_url: Base URL for the API
            units: Unit system ("imperial" for °F)
            timeout: Request timeout in seconds
            max_retries: Maximum number of retry attempts
            verify_ssl: Whether to verify SSL certificates
            logger: Logger instance
        """
        super().__init__(
            base_url=base_url,
            timeout=timeout,
            max_retries=max_retries,
            verify_ssl=verify_ssl,
            logger=logger
        )
        self.api_key = api_key
        self.units = units


__all__ = [
    "APIClient",
    "WeatherAPI",
    "OpenWeatherAPI",
]
