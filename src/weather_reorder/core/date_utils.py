"""
Date and timezone utilities.

Centralizes all date/time operations with proper timezone handling.
"""

import logging
from datetime import date, datetime, timedelta
from typing import List, Optional

import pytz
from pytz.tzinfo import BaseTzInfo


class DateUtils:
    """Utilities for date and timezone handling."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize date utilities.

        Args:
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)

    @staticmethod
    def parse_timezone(timezone_str: str) -> BaseTzInfo:
        """
        Parse timezone string to pytz timezone object.

        Args:
            timezone_str: Timezone string (e.g., 'America/Chicago', 'UTC')

        Returns:
            pytz timezone object

        Raises:
            ValueError: If timezone is invalid
        """
        try:
            return pytz.timezone(timezone_str)
        except pytz.exceptions.UnknownTimeZoneError:
            raise ValueError(f"Invalid timezone: {timezone_str}")

    def now_in_timezone(self, timezone_str: str = "UTC") -> datetime:
        """
        Get the current time in the specified timezone.

        Args:
            timezone_str: Timezone string

        Returns:
            Timezone-aware current datetime
        """
        tz = self.parse_timezone(timezone_str)
        local_time = datetime.now(pytz.UTC).astimezone(tz)
        self.logger.debug(f"Current time in {timezone_str}: {local_time.isoformat()}")
        return local_time

    @staticmethod
    def utc_timestamp_to_date(timestamp: float, timezone_str: str = "UTC") -> date:
        """
        Convert a UNIX timestamp to a calendar date in a timezone.

        Args:
            timestamp: Seconds since the epoch (UTC)
            timezone_str: Timezone in which to read the calendar date

        Returns:
            Calendar date
        """
        utc_time = datetime.fromtimestamp(timestamp, tz=pytz.UTC)
        return utc_time.astimezone(pytz.timezone(timezone_str)).date()

    @staticmethod
    def next_days(start: date, count: int) -> List[date]:
        """
        Get consecutive calendar dates starting at (and including) start.

        Args:
            start: First date
            count: Number of dates

        Returns:
            List of dates in increasing order
        """
        return [start + timedelta(days=offset) for offset in range(count)]
