"""
Statistics Models: OrderStats, PromotionStats, ReviewStats.

These are static snapshots read by the analytics engine and never mutated
by the API. Unknown keys are preserved (extra="allow") so that fields the
snapshot producer adds flow through to responses and reports untouched.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field

from .base import StoredModel


class SnapshotModel(StoredModel):
    model_config = {"extra": "allow"}


# =============================================================================
# Orders
# =============================================================================


class TopDish(SnapshotModel):
    dish_id: str
    orders: int = 0
    revenue: float = 0.0


class PeakHour(SnapshotModel):
    hour: str
    orders: int = 0


class OrderStats(SnapshotModel):
    today_revenue: float = 0.0
    yesterday_revenue: float = 0.0
    today_orders: int = 0
    yesterday_orders: int = 0
    orders_by_status: dict[str, int] = Field(default_factory=dict)
    top_dishes: list[TopDish] = Field(default_factory=list)
    peak_hours: list[PeakHour] = Field(default_factory=list)
    average_order_value: float = 0.0


# =============================================================================
# Promotions
# =============================================================================


class Promotion(SnapshotModel):
    id: str
    name: str = ""
    applicable_dishes: list[str] = Field(default_factory=list)
    total_orders: int = 0
    total_revenue: float = 0.0
    discount_given: float = 0.0
    conversion_rate: float = 0.0
    start_date: str | None = None
    end_date: str | None = None


class OverallPromotionStats(SnapshotModel):
    total_promotional_orders: int = 0
    total_promotional_revenue: float = 0.0
    total_discount_given: float = 0.0
    average_conversion_rate: float = 0.0


class PromotionStats(SnapshotModel):
    active_promotions: list[Promotion] = Field(default_factory=list)
    completed_promotions: list[Promotion] = Field(default_factory=list)
    overall_stats: OverallPromotionStats = Field(default_factory=OverallPromotionStats)


# =============================================================================
# Reviews
# =============================================================================


def _empty_distribution() -> dict[str, int]:
    return {str(rating): 0 for rating in range(1, 6)}


class DishReview(SnapshotModel):
    dish_id: str
    average_rating: float = 0.0
    total_reviews: int = 0


class MonthlyTrend(SnapshotModel):
    month: str
    average_rating: float = 0.0
    total_reviews: int = 0


class ReviewStats(SnapshotModel):
    total_reviews: int = 0
    average_rating: float = 0.0
    good_rate: float = 0.0
    rating_distribution: dict[str, int] = Field(default_factory=_empty_distribution)
    dish_reviews: list[DishReview] = Field(default_factory=list)
    monthly_trend: list[MonthlyTrend] = Field(default_factory=list)
    recent_reviews: list[dict[str, Any]] = Field(default_factory=list)
