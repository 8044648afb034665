"""
Catalog repositories: categories and dishes.
"""

from __future__ import annotations

from shared.config.constants import Collections
from merchant_api.models import Category, Dish
from .base import CollectionRepository


class CategoryRepository(CollectionRepository[Category]):
    collection = Collections.CATEGORIES
    model = Category


class DishRepository(CollectionRepository[Dish]):
    collection = Collections.DISHES
    model = Dish

    def find_by_category(self, category_id: str) -> list[Dish]:
        """Every dish referencing the category, whatever its status."""
        return [dish for dish in self.find_all() if dish.category_id == category_id]
