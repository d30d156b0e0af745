"""
Weather-driven reorder service.

Composes weather lookup, demand forecasting and reorder generation into a
single report for one location.
"""

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from ..algorithms import DemandForecastEngine, ReorderGenerator
from ..core import constants, LoggerContext
from ..models import CatalogProduct, ReorderReport, ReorderSuggestion, ReorderSummary
from .weather_source import WeatherSource

SuggestionSink = Callable[[List[ReorderSuggestion], ReorderSummary], None]


class ReorderService:
    """Generate weather-adjusted reorder suggestions for a location."""

    def __init__(
        self,
        weather_source: WeatherSource,
        demand_engine: Optional[DemandForecastEngine] = None,
        reorder_generator: Optional[ReorderGenerator] = None,
        revenue_per_unit: float = constants.DEFAULT_REVENUE_PER_UNIT,
        max_suggestions: int = constants.DEFAULT_MAX_SUGGESTIONS,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize reorder service.

        Args:
            weather_source: Weather lookup
            demand_engine: Weather-to-demand rules
            reorder_generator: Forecast-to-suggestion generator
            revenue_per_unit: Revenue estimate per suggested unit
            max_suggestions: Number of suggestions kept in the report
            logger: Logger instance
        """
        self.weather_source = weather_source
        self.logger = logger or logging.getLogger(__name__)
        self.demand_engine = demand_engine or DemandForecastEngine(logger)
        self.reorder_generator = reorder_generator or ReorderGenerator(logger=logger)
        self.revenue_per_unit = revenue_per_unit
        self.max_suggestions = max_suggestions

    def generate_reorder_suggestions(
        self,
        location: str,
        catalog: Iterable[Union[CatalogProduct, Dict[str, Any]]],
        sink: Optional[SuggestionSink] = None
    ) -> ReorderReport:
        """
        Run the full pipeline for one location.

        Weather failures propagate unchanged; no partial report is produced.

        Args:
            location: Free-text place name
            catalog: Catalog products or catalog records
            sink: Optional consumer of the full ranked list and its summary

        Returns:
            Report with weather, demand forecasts, the top suggestions and a
            summary over all suggestions
        """
        products = self._to_products(catalog)

        with LoggerContext(self.logger, f"reorder suggestions for '{location}'"):
            weather = self.weather_source.get_weather(location)
            forecasts = self.demand_engine.calculate(weather)
            suggestions = self.reorder_generator.generate(forecasts, products)

        summary = self.summarize(suggestions)
        if sink is not None:
            sink(suggestions, summary)

        return ReorderReport(
            location=weather.location or location,
            weather=weather,
            demand_forecasts=forecasts,
            reorder_suggestions=suggestions[:self.max_suggestions],
            summary=summary,
        )

    def summarize(self, suggestions: List[ReorderSuggestion]) -> ReorderSummary:
        """
        Summarize a suggestion list.

        Args:
            suggestions: Full ranked suggestion list

        Returns:
            Count, high-priority count and a rough revenue estimate
        """
        total_units = sum(s.suggested_order_quantity for s in suggestions)
        return ReorderSummary(
            total_suggestions=len(suggestions),
            high_priority_count=sum(1 for s in suggestions if s.priority == "High"),
            estimated_additional_revenue=total_units * self.revenue_per_unit,
        )

    @staticmethod
    def _to_products(
        catalog: Iterable[Union[CatalogProduct, Dict[str, Any]]]
    ) -> List[CatalogProduct]:
        """Normalize catalog input to CatalogProduct instances."""
        return [
            item if isinstance(item, CatalogProduct) else CatalogProduct.from_dict(item)
            for item in catalog
        ]
