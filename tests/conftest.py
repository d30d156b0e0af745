"""
Pytest configuration and shared fixtures for all tests.
"""

import sys
from pathlib import Path

import pytest
import json

# Add the project root to sys.path so we can import from src
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from src.weather_reorder.core.config import Config  # noqa: E402

CONFIG_ENV_VARS = ("CONFIG_FILE", "ENVIRONMENT", "WEATHER_API_KEY", "WEATHER_API_BASE_URL")


class FakeClock:
    """Controllable wall clock (seconds since the epoch)."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    """Fake clock starting at a fixed instant."""
    return FakeClock()


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Remove configuration env vars and run from an empty directory."""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("LOG_FILE", str(tmp_path / "logs" / "test.log"))
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def make_config(clean_env):
    """Factory writing a config file and loading it."""
    def _make(
        api_key: str = "",
        environment: str = "development",
        hourly_rate_limit: int = 60,
        cache_ttl_seconds: float = 300,
        retry_attempts: int = 0,
        **extra
    ) -> Config:
        data = {
            "environment": environment,
            "services": {
                "weather": {
                    "api_key": api_key,
                    environment: {
                        "hourly_rate_limit": hourly_rate_limit,
                        "cache_ttl_seconds": cache_ttl_seconds,
                        "retry_attempts": retry_attempts,
                    },
                }
            },
        }
        data.update(extra)
        config_file = clean_env / "config.json"
        config_file.write_text(json.dumps(data), encoding="utf-8")
        return Config(str(config_file))

    return _make


@pytest.fixture(scope="session")
def fixtures_dir():
    """Get the fixtures directory path."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def current_payload(fixtures_dir):
    """OpenWeatherMap current conditions response."""
    with open(fixtures_dir / "openweather_current.json") as f:
        return json.load(f)


@pytest.fixture
def forecast_payload(fixtures_dir):
    """OpenWeatherMap 5-day / 3-hour forecast response."""
    with open(fixtures_dir / "openweather_forecast.json") as f:
        return json.load(f)


@pytest.fixture
def catalog_records(fixtures_dir):
    """Product catalog records as exported by the inventory database."""
    with open(fixtures_dir / "catalog.json") as f:
        return json.load(f)["products"]


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test across components"
    )
    config.addinivalue_line(
        "markers", "unit: mark test as unit test (no external dependencies)"
    )
