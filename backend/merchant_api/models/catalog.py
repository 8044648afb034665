"""
Catalog Models: Category, Dish.
"""

from __future__ import annotations

from pydantic import Field

from shared.config.constants import CategoryStatus, DishStatus
from .base import StoredModel, TimestampMixin


class Category(TimestampMixin, StoredModel):
    """
    Menu category.

    Never physically removed: "deleted" categories keep is_active=False so
    that dishes still pointing at them resolve.
    """

    id: str
    name: str
    description: str = ""
    sort_order: int = 1
    is_active: bool = True

    @property
    def status(self) -> CategoryStatus:
        return CategoryStatus.ACTIVE if self.is_active else CategoryStatus.INACTIVE


class Dish(TimestampMixin, StoredModel):
    """
    Orderable dish.

    stock mirrors InventoryRecord.stock and is rewritten whenever inventory
    changes. status=off is also the deleted state.
    """

    id: str
    category_id: str
    name: str
    description: str = ""
    price: float
    status: DishStatus = DishStatus.ON
    stock: int = Field(default=0, ge=0)
    image_url: str = ""
    ingredients: list[str] = Field(default_factory=list)
    allergens: list[str] = Field(default_factory=list)
    is_spicy: bool = False
    is_vegetarian: bool = False
    preparation_time: int = 0
    calories: int = 0

    @property
    def is_available(self) -> bool:
        return self.status == DishStatus.ON
