"""
Pydantic models for everything kept in the entity store.

Modules:
- base: StoredModel, TimestampMixin
- catalog: Category, Dish
- inventory: InventoryRecord, BatchResult
- reports: ExportResult
- stats: OrderStats, PromotionStats, ReviewStats and their line items
"""

from .base import StoredModel, TimestampMixin
from .catalog import Category, Dish
from .inventory import InventoryRecord, BatchResult
from .reports import ExportResult
from .stats import (
    TopDish,
    PeakHour,
    OrderStats,
    Promotion,
    OverallPromotionStats,
    PromotionStats,
    DishReview,
    MonthlyTrend,
    ReviewStats,
)

__all__ = [
    "StoredModel",
    "TimestampMixin",
    "Category",
    "Dish",
    "InventoryRecord",
    "BatchResult",
    "ExportResult",
    "TopDish",
    "PeakHour",
    "OrderStats",
    "Promotion",
    "OverallPromotionStats",
    "PromotionStats",
    "DishReview",
    "MonthlyTrend",
    "ReviewStats",
]
