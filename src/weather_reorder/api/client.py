"""
Base API client for external HTTP services.

Handles HTTP requests, session management, and error handling.
"""

import logging
from typing import Dict, Any, Optional

import requests  # type: ignore
from requests.adapters import HTTPAdapter  # type: ignore
from urllib3.util.retry import Retry  # type: ignore


class APIClient:
    """Base client for JSON-over-HTTP APIs."""

    def __init__(
        self,
        base_url: str,
        timeout: int = 10,
        max_retries: int = 2,
        verify_ssl: bool = True,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize API client.

        Args:
            base_url: Base URL for the API
            timeout: Request timeout in seconds
            max_retries: Maximum number of retry attempts (GET only)
            verify_ssl: Whether to verify SSL certificates
            logger: Logger instance
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.logger = logger or logging.getLogger(__name__)
        self.verify_ssl = verify_ssl

        # Setup session with retry strategy; only idempotent requests are retried
        self.session = requests.Session()
        retry_strategy = Retry(
            total=max_retries,
            backoff_factor=1,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET"],
            raise_on_status=False
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

        self.session.headers.update({
            "Accept": "application/json"
        })

    def _make_request(
        self,
        method: str,
        endpoint: str,
        **kwargs
    ) -> requests.Response:
        """
        Make HTTP request to API.

        Args:
            method: HTTP method
            endpoint: API endpoint (without base URL)
            **kwargs: Additional arguments for requests

        Returns:
            Response object

        Raises:
            requests.exceptions.HTTPError: On non-success status
            requests.exceptions.RequestException: On transport failure
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        kwargs.setdefault('verify', self.verify_ssl)

        self.logger.debug(f"{method} {url}")

        try:
            response = self.session.request(
                method=method,
                url=url,
                timeout=self.timeout,
                **kwargs
            )
            response.raise_for_status()
            return response

        except requests.exceptions.RequestException as e:
            # Query strings may carry credentials, log the path only
            self.logger.error(f"API request failed: {method} {url} - {type(e).__name__}")
            raise

    def get(self, endpoint: str, params: Optional[Dict] = None) -> Any:
        """
        Make GET request.

        Args:
            endpoint: API endpoint
            params: Query parameters

        Returns:
            Decoded JSON response

        Raises:
            ValueError: If the response body is not JSON
        """
        response = self._make_request("GET", endpoint, params=params)
        return response.json()

    def close(self) -> None:
        """Close the session."""
        self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
