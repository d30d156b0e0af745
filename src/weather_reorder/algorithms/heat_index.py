"""
Heat index calculation module.

Implements the NOAA heat index ("feels like" temperature) using the Rothfusz
regression. The regression is only meaningful for hot, humid air; outside that
range the dry-bulb temperature is returned unchanged.

Reference:
    Rothfusz, L.P. (1990). The Heat Index "Equation". NWS Southern Region
    Technical Attachment SR 90-23.
"""

import math

from ..core import constants


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from negative infinity."""
    return int(math.floor(value + 0.5))


def calculate_heat_index(temp_f: float, humidity: float) -> float:
    """
    Calculate the heat index from temperature and relative humidity.

    Args:
        temp_f: Dry-bulb temperature (°F)
        humidity: Relative humidity (%)

    Returns:
        Heat index (°F), rounded to the nearest degree inside the hot-humid
        range, otherwise temp_f unchanged
    """
    if temp_f < constants.HEAT_INDEX_MIN_TEMP_F or humidity < constants.HEAT_INDEX_MIN_HUMIDITY:
        return temp_f

    t = temp_f
    rh = humidity

    hi = (
        constants.ROTHFUSZ_C1
        + constants.ROTHFUSZ_C2 * t
        + constants.ROTHFUSZ_C3 * rh
        + constants.ROTHFUSZ_C4 * t * rh
        + constants.ROTHFUSZ_C5 * t * t
        + constants.ROTHFUSZ_C6 * rh * rh
        + constants.ROTHFUSZ_C7 * t * t * rh
        + constants.ROTHFUSZ_C8 * t * rh * rh
        + constants.ROTHFUSZ_C9 * t * t * rh * rh
    )

    return round_half_up(hi)
