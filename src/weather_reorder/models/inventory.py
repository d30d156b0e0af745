"""
Inventory data models.

Contains DTOs for catalog products, demand forecasts and reorder suggestions.
"""

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional

from .weather import WeatherSnapshot


def _first_present(data: Dict[str, Any], *keys: str) -> Any:
    """Return the value of the first key present in data, else None."""
    for key in keys:
        if key in data:
            return data[key]
    return None


def _optional_number(value: Any, cast) -> Any:
    """Cast value unless it is None or an empty string."""
    if value is None or value == "":
        return None
    return cast(value)


@dataclass
class CatalogProduct:
    """Product as supplied by the catalog provider (read-only here)."""

    id: Any
    name: str
    category_id: Optional[int] = None
    last_count_quantity: Optional[float] = None
    par_level: Optional[int] = None
    unit_price: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CatalogProduct":
        """
        Build a product from a catalog record.

        Accepts both snake_case keys and the camelCase keys used by the
        inventory database (categoryId, lastCountQuantity, parLevel, unitPrice).

        Args:
            data: Catalog record

        Returns:
            CatalogProduct instance

        Raises:
            ValueError: If id or name is missing
        """
        if data.get("id") is None or not data.get("name"):
            raise ValueError(f"Catalog record missing id or name: {data}")

        return cls(
            id=data["id"],
            name=str(data["name"]),
            category_id=_optional_number(
                _first_present(data, "category_id", "categoryId"), int
            ),
            last_count_quantity=_optional_number(
                _first_present(data, "last_count_quantity", "lastCountQuantity"), float
            ),
            par_level=_optional_number(
                _first_present(data, "par_level", "parLevel"), int
            ),
            unit_price=_optional_number(
                _first_present(data, "unit_price", "unitPrice"), float
            ),
        )


@dataclass(frozen=True)
class DemandForecast:
    """Weather-driven demand change for one product category."""

    product_category: str  # "Beer", "Wine", "Spirits" or "All Categories"
    demand_multiplier: float  # 1.0 = no change
    reasoning: str
    recommended_action: str

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-ready dictionary."""
        return asdict(self)


@dataclass
class ReorderSuggestion:
    """Quantity-bearing reorder recommendation for one product."""

    product_id: Any
    product_name: str
    current_stock: float
    normal_par_level: int
    weather_adjusted_par_level: int
    suggested_order_quantity: float
    reasoning: str
    priority: str  # "High" or "Medium"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-ready dictionary."""
        return asdict(self)


@dataclass
class ReorderSummary:
    """Aggregate figures over a full suggestion list."""

    total_suggestions: int
    high_priority_count: int
    estimated_additional_revenue: float

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-ready dictionary."""
        return asdict(self)


@dataclass
class ReorderReport:
    """Result of one weather-driven reorder run."""

    location: str
    weather: WeatherSnapshot
    demand_forecasts: List[DemandForecast] = field(default_factory=list)
    reorder_suggestions: List[ReorderSuggestion] = field(default_factory=list)
    summary: Optional[ReorderSummary] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-ready dictionary."""
        return {
            "location": self.location,
            "weather": self.weather.to_dict(),
            "demand_forecasts": [f.to_dict() for f in self.demand_forecasts],
            "reorder_suggestions": [s.to_dict() for s in self.reorder_suggestions],
            "summary": self.summary.to_dict() if self.summary else None,
        }
