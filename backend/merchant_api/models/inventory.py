"""
Inventory Models: InventoryRecord, BatchResult.
"""

from __future__ import annotations

import math
from datetime import datetime

from pydantic import BaseModel, Field

from shared.config.constants import StockStatus
from shared.utils.helpers import parse_timestamp, utc_now, utc_now_iso
from .base import StoredModel


class InventoryRecord(StoredModel):
    """
    Stock record for one dish, keyed by dish_id.

    This is the authoritative stock value; Dish.stock mirrors it.
    The adjustment_* / last_adjustment* fields are audit metadata written
    by manual stock adjustments.
    """

    dish_id: str
    stock: int = Field(default=0, ge=0)
    alert_threshold: int = Field(default=5, ge=0)
    supplier: str = ""
    cost: float = Field(default=0.0, ge=0)
    expiry_date: str | None = None
    last_updated: str = Field(default_factory=utc_now_iso)

    # Last manual adjustment
    adjustment_reason: str | None = None
    last_adjustment: int | None = None
    applied_adjustment: int | None = None
    last_adjustment_date: str | None = None

    @property
    def is_low_stock(self) -> bool:
        return self.stock <= self.alert_threshold

    @property
    def is_out_of_stock(self) -> bool:
        return self.stock == 0

    @property
    def stock_status(self) -> str:
        return StockStatus.LOW if self.is_low_stock else StockStatus.NORMAL

    def days_until_expiry(self, now: datetime | None = None) -> int | None:
        """Whole days until expiry, rounded up. Negative once expired."""
        expiry = parse_timestamp(self.expiry_date)
        if expiry is None:
            return None
        seconds = (expiry - (now or utc_now())).total_seconds()
        return math.ceil(seconds / 86400)


class BatchResult(BaseModel):
    """Outcome of a batch stock update: partial success is expected."""

    items: list[InventoryRecord] = Field(default_factory=list)
    succeeded: int = 0
    requested: int = 0
