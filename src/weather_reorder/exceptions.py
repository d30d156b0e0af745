"""Weather provider exceptions raised by the weather source."""

from typing import Optional


class WeatherProviderError(Exception):
    """Exception raised when weather data cannot be obtained."""
    pass


class RateLimitExceeded(WeatherProviderError):
    """Hourly call quota for a configured provider is exhausted."""

    def __init__(self, service: str):
        self.service = service
        super().__init__(f"API rate limit reached for '{service}'. Please try again later.")


class ProviderError(WeatherProviderError):
    """Provider answered with a non-success status or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None, endpoint: str = ""):
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class ParseError(WeatherProviderError):
    """Provider payload is missing expected fields."""

    def __init__(self, message: str, field: str = ""):
        self.field = field
        super().__init__(message)
