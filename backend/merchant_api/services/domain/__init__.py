"""
Domain Services - business logic for the menu and the inventory.

Structure:
    Router (thin controller)
        ↓
    Service (business logic)  ← YOU ARE HERE
        ↓
    Repository (collection access)
        ↓
    EntityStore (JSON files)

Usage:
    from merchant_api.services.domain import DishService

    # In router
    service = DishService(store)
    dishes = service.list_dishes(category_id="cat_1")
"""

from .category_service import CategoryService
from .dish_service import DishService
from .inventory_service import InventoryService

__all__ = [
    "CategoryService",
    "DishService",
    "InventoryService",
]
