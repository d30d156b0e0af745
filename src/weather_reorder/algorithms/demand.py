"""
Demand forecast engine.

Maps a weather snapshot to per-category demand multipliers. Rules are evaluated
independently, so one snapshot can trigger several forecasts; output order is
rule order.
"""

import logging
from typing import List, Optional

from ..core import constants
from ..models import DemandForecast, WeatherSnapshot
from .heat_index import calculate_heat_index

# Beer, warm side
WARM_BEER_MIN_TEMP = 60
MUGGY_HEAT_INDEX = 85
WARM_TEMP = 75
HUMID_PERCENT = 70
MUGGY_MULTIPLIER = 1.5
WARM_HUMID_MULTIPLIER = 1.4
WARM_MULTIPLIER = 1.3
MILD_MULTIPLIER = 1.2
STRONG_BEER_TIER = 1.4

# Beer, cold side
COLD_BEER_MAX_TEMP = 50
COLD_BEER_MULTIPLIER = 0.8

# Wine
WINE_MAX_TEMP = 60
WINE_MULTIPLIER = 1.2

# Spirits
SPIRITS_MAX_TEMP = 45
SPIRITS_MULTIPLIER = 1.3

# All categories
WET_CONDITIONS = ("Rain", "Thunderstorm")
WET_MULTIPLIER = 1.15


def _fmt(value: float) -> str:
    """Format a reading without a trailing '.0'."""
    return f"{value:g}"


class DemandForecastEngine:
    """Rule-based weather-to-demand mapping."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize demand forecast engine.

        Args:
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)

    def calculate(self, weather: WeatherSnapshot) -> List[DemandForecast]:
        """
        Calculate demand forecasts for a weather snapshot.

        Args:
            weather: Normalized weather snapshot

        Returns:
            Forecasts in rule-evaluation order (may be empty)
        """
        temp = weather.temperature
        humidity = weather.humidity
        condition = weather.condition

        forecasts: List[DemandForecast] = []

        beer = self._beer_forecast(temp, humidity)
        if beer is not None:
            forecasts.append(beer)

        if temp <= WINE_MAX_TEMP or condition == "Rain":
            forecasts.append(DemandForecast(
                product_category="Wine",
                demand_multiplier=WINE_MULTIPLIER,
                reasoning=(
                    f"Cool weather/rain ({_fmt(temp)}°F, {condition}) "
                    "increases wine consumption"
                ),
                recommended_action=(
                    "Increase wine orders by 20%. Focus on reds and full-bodied wines."
                ),
            ))

        if temp <= SPIRITS_MAX_TEMP:
            forecasts.append(DemandForecast(
                product_category="Spirits",
                demand_multiplier=SPIRITS_MULTIPLIER,
                reasoning=(
                    f"Cold weather ({_fmt(temp)}°F) increases cocktail and spirits consumption"
                ),
                recommended_action=(
                    "Increase spirits orders by 30%. Focus on whiskey, rum, "
                    "and hot cocktail ingredients."
                ),
            ))

        if condition in WET_CONDITIONS:
            forecasts.append(DemandForecast(
                product_category=constants.CATEGORY_ALL,
                demand_multiplier=WET_MULTIPLIER,
                reasoning=(
                    "Rainy weather increases overall alcohol consumption "
                    "as customers stay longer"
                ),
                recommended_action=(
                    "Increase all inventory by 15%. Prepare for longer customer visits."
                ),
            ))

        self.logger.debug(
            f"Demand forecasts for {_fmt(temp)}°F/{_fmt(humidity)}%/{condition}: "
            f"{[(f.product_category, f.demand_multiplier) for f in forecasts]}"
        )
        return forecasts

    def _beer_forecast(self, temp: float, humidity: float) -> Optional[DemandForecast]:
        """
        Apply the beer rules.

        Temperatures strictly between the cold and warm thresholds produce no
        beer forecast.
        """
        if temp >= WARM_BEER_MIN_TEMP:
            heat_index = calculate_heat_index(temp, humidity)

            if heat_index >= MUGGY_HEAT_INDEX:
                description = (
                    f"Hot and muggy conditions ({_fmt(temp)}°F, {_fmt(humidity)}% humidity, "
                    f"feels like {_fmt(heat_index)}°F)"
                )
                multiplier = MUGGY_MULTIPLIER
            elif temp >= WARM_TEMP and humidity >= HUMID_PERCENT:
                description = f"Warm and humid weather ({_fmt(temp)}°F, {_fmt(humidity)}% humidity)"
                multiplier = WARM_HUMID_MULTIPLIER
            elif temp >= WARM_TEMP:
                description = f"Pleasant warm weather ({_fmt(temp)}°F)"
                multiplier = WARM_MULTIPLIER
            else:
                description = f"Mild weather ({_fmt(temp)}°F)"
                multiplier = MILD_MULTIPLIER

            if multiplier >= STRONG_BEER_TIER:
                action = "Increase beer orders by 40-50%. Focus on light, refreshing beers."
            else:
                action = "Increase beer orders by 20-30%. All beer types in demand."

            return DemandForecast(
                product_category="Beer",
                demand_multiplier=multiplier,
                reasoning=f"{description} increases beer consumption",
                recommended_action=action,
            )

        if temp <= COLD_BEER_MAX_TEMP:
            return DemandForecast(
                product_category="Beer",
                demand_multiplier=COLD_BEER_MULTIPLIER,
                reasoning=f"Cold weather ({_fmt(temp)}°F) reduces beer consumption",
                recommended_action="Reduce beer orders by 20%. Focus on darker, heavier beers.",
            )

        return None
