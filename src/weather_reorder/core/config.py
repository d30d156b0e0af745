"""
Configuration module for the weather reorder system.

Loads configuration from JSON file and environment variables.
"""

import copy
import json
import os
from typing import Dict, Any, Optional
from pathlib import Path

from . import constants
from ..models.service import ServiceConfig


DEFAULT_CONFIG: Dict[str, Any] = {
    "environment": constants.DEFAULT_ENVIRONMENT,
    "services": {
        constants.WEATHER_SERVICE: {
            "api_key": "",
            "base_url": constants.DEFAULT_WEATHER_BASE_URL,
            "timeout": constants.DEFAULT_WEATHER_TIMEOUT,
            **constants.DEFAULT_SERVICE_ENVIRONMENTS,
        }
    },
    "reorder": {
        "revenue_per_unit": constants.DEFAULT_REVENUE_PER_UNIT,
        "max_suggestions": constants.DEFAULT_MAX_SUGGESTIONS,
        "empty_match_policy": "top_n",
    },
    "processing": {
        "timezone": "UTC",
    },
}


class Config:
    """Configuration manager for the application."""

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_file: Path to configuration JSON file. If None, uses CONFIG_FILE env var
                        or 'config.json' when present, else built-in defaults
        """
        self._explicit_file = config_file or os.getenv("CONFIG_FILE")
        self.config_file = self._explicit_file or "config.json"
        self.config: Dict[str, Any] = {}
        self._load_config()
        self._override_from_env()
        self._validate_config()

    def _load_config(self) -> None:
        """Load configuration from JSON file, layered over the defaults."""
        self.config = copy.deepcopy(DEFAULT_CONFIG)

        config_path = Path(self.config_file)
        if not config_path.exists():
            if self._explicit_file:
                raise FileNotFoundError(f"Configuration file not found: {self.config_file}")
            self.config_file = None
            return

        with open(config_path, "r", encoding="utf-8") as f:
            loaded = json.load(f)

        if not isinstance(loaded, dict):
            raise ValueError(f"Configuration root must be an object: {self.config_file}")

        self._merge(self.config, loaded)

    @classmethod
    def _merge(cls, base: Dict[str, Any], override: Dict[str, Any]) -> None:
        """Recursively merge override into base."""
        for key, value in override.items():
            if isinstance(value, dict) and isinstance(base.get(key), dict):
                cls._merge(base[key], value)
            else:
                base[key] = value

    def _override_from_env(self) -> None:
        """Override configuration with environment variables."""
        weather = self.config["services"].setdefault(constants.WEATHER_SERVICE, {})

        if os.getenv("WEATHER_API_KEY"):
            weather["api_key"] = os.getenv("WEATHER_API_KEY")

        if os.getenv("WEATHER_API_BASE_URL"):
            weather["base_url"] = os.getenv("WEATHER_API_BASE_URL")

        # Environment
        if os.getenv("ENVIRONMENT"):
            self.config["environment"] = os.getenv("ENVIRONMENT")

    def _validate_config(self) -> None:
        """Validate that service sections are well-formed."""
        services = self.config.get("services")
        if not isinstance(services, dict):
            raise ValueError("Configuration section 'services' must be an object")

        required_keys = ["hourly_rate_limit", "cache_ttl_seconds", "retry_attempts"]
        missing_keys = []
        for service, section in services.items():
            if not isinstance(section, dict):
                raise ValueError(f"Configuration for service '{service}' must be an object")
            for environment in (constants.ENVIRONMENT_DEVELOPMENT, constants.ENVIRONMENT_PRODUCTION):
                env_section = section.get(environment)
                if env_section is None:
                    continue
                for key in required_keys:
                    if key not in env_section:
                        missing_keys.append(f"services.{service}.{environment}.{key}")

        if missing_keys:
            raise ValueError(
                f"Missing required configuration keys: {', '.join(missing_keys)}"
            )

        policy = self.reorder_empty_match_policy
        if policy not in ("top_n", "skip", "error"):
            raise ValueError(f"Invalid reorder.empty_match_policy: {policy}")

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by key (supports dot notation).

        Args:
            key: Configuration key (e.g., 'services.weather.base_url')
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key.split(".")
        value = self.config

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default

        return value

    @property
    def environment(self) -> str:
        """Get active environment name."""
        return self.get("environment", constants.DEFAULT_ENVIRONMENT)

    def service_config(self, service: str) -> ServiceConfig:
        """
        Resolve the configuration of a service for the active environment.

        Unknown services resolve to the weather service and unknown environments
        to development.

        Args:
            service: Service name (e.g., 'weather')

        Returns:
            ServiceConfig for the active environment
        """
        services = self.config["services"]
        section = services.get(service) or services[constants.WEATHER_SERVICE]
        env_section = section.get(self.environment) or section.get(
            constants.ENVIRONMENT_DEVELOPMENT,
            constants.DEFAULT_SERVICE_ENVIRONMENTS[constants.ENVIRONMENT_DEVELOPMENT]
        )

        return ServiceConfig(
            api_key=section.get("api_key") or "",
            hourly_rate_limit=int(env_section["hourly_rate_limit"]),
            cache_ttl_seconds=float(env_section["cache_ttl_seconds"]),
            retry_attempts=int(env_section["retry_attempts"]),
            base_url=section.get("base_url", constants.DEFAULT_WEATHER_BASE_URL),
            timeout=int(section.get("timeout", constants.DEFAULT_WEATHER_TIMEOUT)),
        )

    @property
    def reorder_revenue_per_unit(self) -> float:
        """Get revenue estimate per suggested unit."""
        return float(self.get("reorder.revenue_per_unit", constants.DEFAULT_REVENUE_PER_UNIT))

    @property
    def reorder_max_suggestions(self) -> int:
        """Get maximum number of suggestions returned in a report."""
        return int(self.get("reorder.max_suggestions", constants.DEFAULT_MAX_SUGGESTIONS))

    @property
    def reorder_empty_match_policy(self) -> str:
        """Get policy for forecasts whose category matches no product."""
        return self.get("reorder.empty_match_policy", "top_n")

    @property
    def timezone(self) -> str:
        """Get processing timezone."""
        return self.get("processing.timezone", "UTC")

    def __repr__(self) -> str:
        """String representation of config."""
        return f"Config(file={self.config_file}, env={self.environment})"
