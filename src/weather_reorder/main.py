"""
Main entry point for the weather reorder system.

Loads a product catalog and prints weather-adjusted reorder suggestions.
"""

import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from .core import Config, setup_logger, constants
from .services import ApiManager, WeatherSource, ReorderService
from .algorithms import DemandForecastEngine, ReorderGenerator
from .models import CatalogProduct, ReorderReport


def load_catalog(catalog_file: Optional[str]) -> List[CatalogProduct]:
    """
    Load a product catalog from a JSON file.

    The file holds either a list of product records or an object with a
    "products" list.

    Args:
        catalog_file: Path to catalog JSON, or None for an empty catalog

    Returns:
        Catalog products
    """
    if catalog_file is None:
        return []

    with open(Path(catalog_file), "r", encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, dict):
        data = data.get("products", [])

    return [CatalogProduct.from_dict(record) for record in data]


class WeatherReorderApp:
    """Main application for weather-driven reorder suggestions."""

    def __init__(self, config_file: Optional[str] = None, log_level: str = "INFO"):
        """
        Initialize application.

        Args:
            config_file: Path to configuration file
            log_level: Logging level
        """
        self.config = Config(config_file)

        self.logger = setup_logger(log_level=log_level)
        self.logger.info("=" * 60)
        self.logger.info("Weather Reorder Recommendations")
        self.logger.info("=" * 60)
        self.logger.info(f"Configuration: {self.config}")

        self.api_manager: Optional[ApiManager] = None
        self.weather_source: Optional[WeatherSource] = None
        self.reorder_service: Optional[ReorderService] = None

    def initialize_components(self) -> None:
        """Initialize all application components."""
        self.logger.info("Initializing components...")

        self.api_manager = ApiManager(config=self.config, logger=self.logger)

        self.weather_source = WeatherSource(
            api_manager=self.api_manager,
            logger=self.logger
        )

        self.reorder_service = ReorderService(
            weather_source=self.weather_source,
            demand_engine=DemandForecastEngine(logger=self.logger),
            reorder_generator=ReorderGenerator(
                empty_match_policy=self.config.reorder_empty_match_policy,
                logger=self.logger
            ),
            revenue_per_unit=self.config.reorder_revenue_per_unit,
            max_suggestions=self.config.reorder_max_suggestions,
            logger=self.logger
        )

        self.logger.info("All components initialized successfully")

    def run(self, location: str, catalog: List[CatalogProduct]) -> ReorderReport:
        """
        Generate reorder suggestions for a location.

        Args:
            location: Free-text place name
            catalog: Product catalog

        Returns:
            Reorder report
        """
        if self.reorder_service is None:
            self.initialize_components()

        report = self.reorder_service.generate_reorder_suggestions(location, catalog)

        self.logger.info(
            f"{report.summary.total_suggestions} suggestions "
            f"({report.summary.high_priority_count} high priority) for '{report.location}'"
        )
        return report

    def status(self) -> Dict[str, Any]:
        """Get service status for monitoring."""
        if self.api_manager is None:
            self.initialize_components()
        return self.api_manager.get_status()


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Weather-driven beverage reorder suggestions"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to configuration file"
    )
    parser.add_argument(
        "--location",
        type=str,
        default=constants.DEFAULT_LOCATION,
        help=f"Location name. Default: {constants.DEFAULT_LOCATION}"
    )
    parser.add_argument(
        "--catalog",
        type=str,
        default=None,
        help="Path to product catalog JSON"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )
    parser.add_argument(
        "--status",
        action="store_true",
        help="Print service status instead of generating suggestions"
    )

    args = parser.parse_args()

    try:
        app = WeatherReorderApp(config_file=args.config, log_level=args.log_level)
        if args.status:
            output = app.status()
        else:
            output = app.run(args.location, load_catalog(args.catalog)).to_dict()
    except Exception as e:
        print(f"Application failed: {e}")
        sys.exit(1)

    print(json.dumps(output, indent=2))


if __name__ == "__main__":
    main()
