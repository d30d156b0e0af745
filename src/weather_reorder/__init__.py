"""
Weather-Driven Reorder Recommendations

This package turns a location's current and forecast weather into per-category
demand multipliers and ranked, quantity-bearing reorder suggestions for a
beverage inventory.
"""

__version__ = "0.1.0"
__description__ = "Weather-driven beverage reorder recommendations"


def __getattr__(name):
    """Lazy import to avoid importing dependencies when not needed."""
    if name == "WeatherReorderApp":
        from .main import WeatherReorderApp
        return WeatherReorderApp
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "WeatherReorderApp",
]
