"""
Pydantic schemas for the merchant API endpoints.
Centralized to avoid circular imports and improve maintainability.

Request bodies are validated here (presence, types, bounds, id patterns);
business rules that need the store live in the services.
"""

import re
from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from shared.config.constants import (
    CATEGORY_ID_PATTERN,
    DISH_ID_PATTERN,
    DishStatus,
    Limits,
)
from shared.utils.helpers import parse_timestamp, utc_now

_DISH_ID = re.compile(DISH_ID_PATTERN)


class _PartialUpdate(BaseModel):
    """Update bodies must set at least one field."""

    @model_validator(mode="after")
    def require_one_field(self):
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided for update")
        return self


def _future_iso_date(value: str | None) -> str | None:
    if value is None:
        return None
    parsed = parse_timestamp(value)
    if parsed is None:
        raise ValueError("Expiry date must be an ISO 8601 date")
    if parsed <= utc_now():
        raise ValueError("Expiry date must be in the future")
    return value


# =============================================================================
# Category Schemas
# =============================================================================


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    description: str | None = Field(default=None, max_length=Limits.MAX_CATEGORY_DESCRIPTION_LENGTH)
    sort_order: int | None = Field(default=None, ge=1)
    is_active: bool | None = None


class CategoryUpdate(_PartialUpdate):
    name: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    description: str | None = Field(default=None, max_length=Limits.MAX_CATEGORY_DESCRIPTION_LENGTH)
    sort_order: int | None = Field(default=None, ge=1)
    is_active: bool | None = None


CategorySortField = Literal["name", "sort_order", "created_at", "updated_at"]


class CategorySortItem(BaseModel):
    id: str = Field(pattern=CATEGORY_ID_PATTERN)
    sort_order: int = Field(ge=1)


# =============================================================================
# Dish Schemas
# =============================================================================


class DishCreate(BaseModel):
    category_id: str = Field(pattern=CATEGORY_ID_PATTERN)
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    description: str | None = Field(default=None, max_length=Limits.MAX_DISH_DESCRIPTION_LENGTH)
    price: float = Field(gt=0)
    status: DishStatus | None = None
    stock: int | None = Field(default=None, ge=0)
    image_url: str | None = None
    ingredients: list[str] | None = None
    allergens: list[str] | None = None
    preparation_time: int | None = Field(default=None, ge=0)
    calories: int | None = Field(default=None, ge=0)
    is_spicy: bool | None = None
    is_vegetarian: bool | None = None


class DishUpdate(_PartialUpdate):
    category_id: str | None = Field(default=None, pattern=CATEGORY_ID_PATTERN)
    name: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    description: str | None = Field(default=None, max_length=Limits.MAX_DISH_DESCRIPTION_LENGTH)
    price: float | None = Field(default=None, gt=0)
    status: DishStatus | None = None
    stock: int | None = Field(default=None, ge=0)
    image_url: str | None = None
    ingredients: list[str] | None = None
    allergens: list[str] | None = None
    preparation_time: int | None = Field(default=None, ge=0)
    calories: int | None = Field(default=None, ge=0)
    is_spicy: bool | None = None
    is_vegetarian: bool | None = None


DishSortField = Literal["name", "price", "created_at", "updated_at", "stock"]


class DishStatusUpdate(BaseModel):
    status: DishStatus


class DishBatchStatusUpdate(BaseModel):
    dish_ids: list[str] = Field(min_length=1, max_length=Limits.MAX_BATCH_SIZE)
    status: DishStatus

    @field_validator("dish_ids")
    @classmethod
    def check_dish_ids(cls, value: list[str]) -> list[str]:
        bad = [dish_id for dish_id in value if not _DISH_ID.match(dish_id)]
        if bad:
            raise ValueError(f"Invalid dish ID format: {', '.join(bad)}")
        return value


class DishImageUpload(BaseModel):
    dish_id: str = Field(pattern=DISH_ID_PATTERN)
    filename: str = Field(default="dish_image.jpg", min_length=1)
    mimetype: str = "image/jpeg"
    size: int = Field(default=1024000, ge=0)


# =============================================================================
# Inventory Schemas
# =============================================================================


class StockUpdate(BaseModel):
    stock: int = Field(ge=0)
    alert_threshold: int | None = Field(default=None, ge=0)
    supplier: str | None = Field(default=None, max_length=Limits.MAX_SUPPLIER_LENGTH)
    cost: float | None = Field(default=None, ge=0)
    expiry_date: str | None = None

    @field_validator("expiry_date")
    @classmethod
    def check_expiry_date(cls, value: str | None) -> str | None:
        return _future_iso_date(value)


class StockAdjustment(BaseModel):
    adjustment: int
    reason: str | None = Field(default=None, max_length=Limits.MAX_REASON_LENGTH)


class BatchStockEntry(StockUpdate):
    dish_id: str = Field(pattern=DISH_ID_PATTERN)


class AlertThresholdUpdate(BaseModel):
    alert_threshold: int = Field(ge=0)


InventorySortField = Literal[
    "dish_id", "stock", "alert_threshold", "last_updated", "supplier", "cost", "expiry_date"
]
SortOrder = Literal["asc", "desc"]


# =============================================================================
# Report Schemas
# =============================================================================


AnalyticsMetric = Literal[
    "revenue",
    "orders",
    "averageOrderValue",
    "conversionRate",
    "topDishes",
    "categoryBreakdown",
    "hourlyTrends",
    "customerSatisfaction",
]

AnalyticsDimension = Literal["time", "category", "dish", "promotion", "rating", "status"]


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


class DateRange(BaseModel):
    start_date: datetime
    end_date: datetime

    @model_validator(mode="after")
    def check_order(self):
        if _as_utc(self.end_date) <= _as_utc(self.start_date):
            raise ValueError("End date must be after start date")
        return self


class CustomAnalyticsRequest(BaseModel):
    metrics: list[AnalyticsMetric] = Field(min_length=1)
    dimensions: list[AnalyticsDimension] | None = None
    date_range: DateRange
    filters: dict[str, Any] | None = None
    aggregation: Literal["sum", "avg", "count", "min", "max"] = "sum"
