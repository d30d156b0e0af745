"""
Calculation algorithms for weather-driven reordering.

Provides the heat index, the demand forecast rules and reorder generation.
"""

from .heat_index import calculate_heat_index, round_half_up
from .demand import DemandForecastEngine
from .reorder import ReorderGenerator, EmptyMatchPolicy

__all__ = [
    "calculate_heat_index",
    "round_half_up",
    "DemandForecastEngine",
    "ReorderGenerator",
    "EmptyMatchPolicy",
]
