"""
Inventory repository. Records are keyed by dish_id.
"""

from __future__ import annotations

from shared.config.constants import Collections
from merchant_api.models import InventoryRecord
from .base import CollectionRepository


class InventoryRepository(CollectionRepository[InventoryRecord]):
    collection = Collections.INVENTORY
    model = InventoryRecord
    key_field = "dish_id"
