"""
Weather-based reorder generation.

Joins demand forecasts against the product catalog, scales par levels by the
forecast multiplier and emits ranked reorder suggestions.
"""

import logging
import random
from enum import Enum
from typing import Iterable, List, Optional, Union

from ..core import constants
from ..models import CatalogProduct, DemandForecast, ReorderSuggestion
from .heat_index import round_half_up


class EmptyMatchPolicy(str, Enum):
    """What to do when a forecast's category matches no catalog product."""

    TOP_N = "top_n"  # fall back to the first few catalog products
    SKIP = "skip"  # no suggestions for that forecast
    ERROR = "error"  # raise ValueError


class ReorderGenerator:
    """Turn demand forecasts and a catalog into ranked reorder suggestions."""

    def __init__(
        self,
        empty_match_policy: Union[EmptyMatchPolicy, str] = EmptyMatchPolicy.TOP_N,
        rng: Optional[random.Random] = None,
        max_per_category: int = constants.MAX_PRODUCTS_PER_FORECAST,
        fallback_count: int = constants.FALLBACK_PRODUCT_COUNT,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize reorder generator.

        Args:
            empty_match_policy: Policy for forecasts that match no product
            rng: Random source for default stock/par values of under-specified
                 products. Pass a seeded instance for reproducible output.
            max_per_category: Maximum candidate products per forecast
            fallback_count: Number of products used by the top_n policy
            logger: Logger instance
        """
        self.empty_match_policy = EmptyMatchPolicy(empty_match_policy)
        self.rng = rng or random.Random()
        self.max_per_category = max_per_category
        self.fallback_count = fallback_count
        self.logger = logger or logging.getLogger(__name__)

    def generate(
        self,
        forecasts: Iterable[DemandForecast],
        catalog: List[CatalogProduct]
    ) -> List[ReorderSuggestion]:
        """
        Generate reorder suggestions.

        Args:
            forecasts: Demand forecasts, in any order
            catalog: Current product catalog

        Returns:
            Suggestions sorted by suggested order quantity, largest first,
            across all categories

        Raises:
            ValueError: If a forecast matches no product and the policy is 'error'
        """
        suggestions: List[ReorderSuggestion] = []

        for forecast in forecasts:
            candidates = self.select_candidates(forecast, catalog)

            for product in candidates[:self.max_per_category]:
                suggestion = self._suggest(product, forecast)
                if suggestion is not None:
                    suggestions.append(suggestion)

        suggestions.sort(key=lambda s: s.suggested_order_quantity, reverse=True)

        self.logger.info(
            f"Generated {len(suggestions)} reorder suggestions from "
            f"{len(catalog)} catalog products"
        )
        return suggestions

    def select_candidates(
        self,
        forecast: DemandForecast,
        catalog: List[CatalogProduct]
    ) -> List[CatalogProduct]:
        """
        Select the catalog products a forecast applies to.

        Args:
            forecast: Demand forecast
            catalog: Current product catalog

        Returns:
            Matching products in catalog order (not yet capped)
        """
        if not catalog:
            return []

        category = forecast.product_category
        if category == constants.CATEGORY_ALL:
            return list(catalog)

        category_id = constants.CATEGORY_IDS.get(category)
        matches = [p for p in catalog if category_id is not None and p.category_id == category_id]

        if not matches and category == "Beer":
            matches = [
                p for p in catalog
                if any(keyword in p.name.lower() for keyword in constants.BEER_NAME_KEYWORDS)
            ]

        if matches:
            return matches

        if self.empty_match_policy is EmptyMatchPolicy.ERROR:
            raise ValueError(f"No catalog products match category '{category}'")

        if self.empty_match_policy is EmptyMatchPolicy.SKIP:
            self.logger.debug(f"No products match '{category}', skipping forecast")
            return []

        self.logger.warning(
            f"No products match '{category}', using first {self.fallback_count} catalog products"
        )
        return list(catalog[:self.fallback_count])

    def _suggest(
        self,
        product: CatalogProduct,
        forecast: DemandForecast
    ) -> Optional[ReorderSuggestion]:
        """Build a suggestion for one product, or None if stock already covers demand."""
        current_stock = product.last_count_quantity
        if current_stock is None:
            current_stock = self.rng.randint(*constants.DEFAULT_STOCK_RANGE)
        if isinstance(current_stock, float) and current_stock.is_integer():
            current_stock = int(current_stock)

        par_level = product.par_level
        if par_level is None:
            par_level = self.rng.randint(*constants.DEFAULT_PAR_RANGE)
        adjusted_par = round_half_up(par_level * forecast.demand_multiplier)

        if current_stock >= adjusted_par:
            return None

        priority = "High" if forecast.demand_multiplier > constants.HIGH_PRIORITY_MULTIPLIER else "Medium"

        return ReorderSuggestion(
            product_id=product.id,
            product_name=product.name,
            current_stock=current_stock,
            normal_par_level=par_level,
            weather_adjusted_par_level=adjusted_par,
            suggested_order_quantity=adjusted_par - current_stock,
            reasoning=forecast.reasoning,
            priority=priority,
        )
