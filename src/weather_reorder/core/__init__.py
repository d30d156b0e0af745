"""
Core utilities for the weather reorder system.

Provides configuration management and logging functionality.
"""

from .config import Config
from .logger import setup_logger, log_api_usage, LoggerContext
from . import constants
from .date_utils import DateUtils

__all__ = [
    "Config",
    "setup_logger",
    "log_api_usage",
    "LoggerContext",
    "constants",
    "DateUtils",
]
