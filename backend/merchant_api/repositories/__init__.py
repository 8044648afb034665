"""
Repositories: typed access to the entity store's collections.

Structure:
    Router (thin controller)
        ↓
    Service (business logic)
        ↓
    Repository (collection access)  ← YOU ARE HERE
        ↓
    EntityStore (JSON files)
"""

from .base import CollectionRepository, DocumentRepository
from .catalog import CategoryRepository, DishRepository
from .inventory import InventoryRepository
from .stats import OrderStatsRepository, PromotionStatsRepository, ReviewStatsRepository

__all__ = [
    "CollectionRepository",
    "DocumentRepository",
    "CategoryRepository",
    "DishRepository",
    "InventoryRepository",
    "OrderStatsRepository",
    "PromotionStatsRepository",
    "ReviewStatsRepository",
]
