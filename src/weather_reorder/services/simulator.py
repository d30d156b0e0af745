"""
Seasonal weather simulator.

Produces plausible weather when no provider API key is configured.
"""

import logging
import math
import random
from datetime import datetime
from typing import Callable, Optional

from ..core import constants, DateUtils
from ..models import DailyForecast, WeatherSnapshot
from ..algorithms import round_half_up


def seasonal_base_temperature(month: int) -> float:
    """
    Get the seasonal base temperature for a calendar month.

    Args:
        month: Month number (1-12)

    Returns:
        Base temperature (°F)
    """
    # Dec-Mar winter, Apr-Jun spring, Jul-Sep summer, Oct-Nov fall
    if month == 12 or month <= 3:
        return constants.SEASONAL_BASE_TEMPS_F["winter"]
    if month <= 6:
        return constants.SEASONAL_BASE_TEMPS_F["spring"]
    if month <= 9:
        return constants.SEASONAL_BASE_TEMPS_F["summer"]
    return constants.SEASONAL_BASE_TEMPS_F["fall"]


def diurnal_adjustment(hour: int) -> float:
    """
    Get the time-of-day temperature offset.

    Coolest at 00:00, warmest at 12:00.

    Args:
        hour: Hour of day (0-23)

    Returns:
        Offset (°F)
    """
    return math.sin((hour - 6) * math.pi / 12) * constants.DIURNAL_AMPLITUDE_F


class SeasonalWeatherSimulator:
    """Generate weather snapshots from season, hour of day and bounded noise."""

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        now: Optional[Callable[[], datetime]] = None,
        timezone: str = "UTC",
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize simulator.

        Args:
            rng: Random source (seed it for reproducible output)
            now: Current local time source
            timezone: Timezone used when now is not given
            logger: Logger instance
        """
        self.rng = rng or random.Random()
        self.logger = logger or logging.getLogger(__name__)
        self.date_utils = DateUtils(logger)
        self.now = now or (lambda: self.date_utils.now_in_timezone(timezone))

    def generate(self, location: str = "") -> WeatherSnapshot:
        """
        Generate a snapshot with a 5-day forecast.

        Args:
            location: Location label attached to the snapshot

        Returns:
            Simulated weather snapshot
        """
        now = self.now()
        jitter = constants.SIMULATED_JITTER_F / 2

        current_temp = round_half_up(
            seasonal_base_temperature(now.month)
            + diurnal_adjustment(now.hour)
            + self.rng.uniform(-jitter, jitter)
        )
        condition = self.rng.choice(constants.SIMULATED_CONDITIONS)
        humidity = round_half_up(self.rng.uniform(*constants.SIMULATED_HUMIDITY_RANGE))

        high_spread = constants.SIMULATED_HIGH_SPREAD_F / 2
        low_spread = constants.SIMULATED_LOW_SPREAD_F / 2
        forecast = []
        for day in self.date_utils.next_days(now.date(), constants.FORECAST_DAYS):
            temp_high = round_half_up(current_temp + self.rng.uniform(-high_spread, high_spread))
            temp_low = round_half_up(
                current_temp - constants.SIMULATED_LOW_OFFSET_F
                + self.rng.uniform(-low_spread, low_spread)
            )
            forecast.append(DailyForecast(
                date=day,
                temp_high=max(temp_high, temp_low),
                temp_low=min(temp_high, temp_low),
                condition=self.rng.choice(constants.SIMULATED_CONDITIONS),
            ))

        self.logger.info(
            f"Simulated weather for '{location}': {current_temp}°F, {condition}, {humidity}%"
        )

        return WeatherSnapshot(
            temperature=current_temp,
            condition=condition,
            humidity=humidity,
            forecast=forecast,
            location=location,
            source="simulated",
        )
