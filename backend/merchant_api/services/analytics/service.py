"""
Analytics Service.

Store-backed entry point of the analytics engine: loads the stats
snapshots and the menu, then delegates to the pure builders.

Usage:
    from merchant_api.services.analytics.service import AnalyticsService

    service = AnalyticsService(store)
    orders = service.order_statistics()
    summary = service.dashboard_summary()
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Iterable

from merchant_api.models import Dish
from merchant_api.repositories import (
    CategoryRepository,
    DishRepository,
    OrderStatsRepository,
    PromotionStatsRepository,
    ReviewStatsRepository,
)
from merchant_api.services.analytics.statistics import (
    build_order_statistics,
    build_promotion_analytics,
    build_promotion_statistics,
    build_review_statistics,
    category_breakdown,
)
from merchant_api.services.base_service import BaseService
from merchant_api.services.domain.inventory_service import InventoryService
from shared.config.logging import StructuredLogger, reports_logger
from shared.infrastructure.store import EntityStore


class AnalyticsService(BaseService):
    """
    Read-only analytics over the stats snapshots.

    Business rules:
    - Snapshots are never written
    - Stat records are joined with the current menu; unknown dishes get
      placeholders rather than failing the request
    """

    def __init__(self, store: EntityStore, *, logger: StructuredLogger | None = None):
        super().__init__(store, logger=logger or reports_logger)
        self._orders = OrderStatsRepository(store)
        self._promotions = PromotionStatsRepository(store)
        self._reviews = ReviewStatsRepository(store)
        self._dishes = DishRepository(store)
        self._categories = CategoryRepository(store)

    def _dish_map(self) -> dict[str, Dish]:
        return self._dishes.as_map()

    # =========================================================================
    # Statistics
    # =========================================================================

    def order_statistics(self) -> dict[str, Any]:
        result = build_order_statistics(self._orders.load(), self._dish_map())
        self._logger.info("Retrieved order statistics")
        return result

    def promotion_statistics(self) -> dict[str, Any]:
        result = build_promotion_statistics(self._promotions.load(), self._dish_map())
        self._logger.info("Retrieved promotion statistics")
        return result

    def promotion_analytics(self, promotion_id: str) -> dict[str, Any]:
        """
        Raises:
            PromotionNotFoundError: Unknown promotion id.
        """
        result = build_promotion_analytics(self._promotions.load(), self._dish_map(), promotion_id)
        self._logger.info("Retrieved promotion analytics", promotion_id=promotion_id)
        return result

    def review_statistics(self) -> dict[str, Any]:
        result = build_review_statistics(self._reviews.load(), self._dish_map())
        self._logger.info("Retrieved review statistics")
        return result

    def sales_category_breakdown(self, top_dishes: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
        return category_breakdown(list(top_dishes), self._dish_map(), self._categories.as_map())

    # =========================================================================
    # Dashboard / custom analytics
    # =========================================================================

    def dashboard_summary(self, *, now: datetime | None = None) -> dict[str, Any]:
        """Headline numbers from every snapshot plus live inventory alerts."""
        orders = self.order_statistics()
        promotions = self.promotion_statistics()
        reviews = self.review_statistics()
        inventory = InventoryService(self._store, logger=self._logger).get_inventory_summary(now=now)

        distribution = reviews["rating_distribution"]
        summary = {
            "orders": {
                "today": orders["today_orders"],
                "revenue": orders["today_revenue"],
                "average_value": orders["average_order_value"],
                "growth": orders["metrics"]["order_growth_rate"],
            },
            "promotions": {
                "active": len(promotions["active_promotions"]),
                "total_revenue": promotions["overall_stats"]["total_promotional_revenue"],
                "total_discount": promotions["overall_stats"]["total_discount_given"],
                "conversion_rate": promotions["overall_stats"]["average_conversion_rate"],
            },
            "reviews": {
                "total": reviews["total_reviews"],
                "average_rating": reviews["average_rating"],
                "satisfaction_rate": reviews["metrics"]["satisfaction_rate"],
                "trend": reviews["metrics"]["review_trend"]["direction"],
            },
            "alerts": {
                "low_stock": inventory["low_stock_items"],
                "out_of_stock": inventory["out_of_stock_items"],
                "expiring_soon": inventory["expiring_items"],
                "negative_reviews": distribution.get("1", 0) + distribution.get("2", 0),
            },
        }
        self._logger.info("Generated dashboard summary")
        return summary

    def custom_analytics(self, metric_names: Iterable[str]) -> dict[str, Any]:
        """
        Compute the requested metrics by name.

        Snapshots are loaded at most once per call. Unknown names map to None.
        """
        cache: dict[str, dict[str, Any]] = {}

        def orders() -> dict[str, Any]:
            if "orders" not in cache:
                cache["orders"] = self.order_statistics()
            return cache["orders"]

        def reviews() -> dict[str, Any]:
            if "reviews" not in cache:
                cache["reviews"] = self.review_statistics()
            return cache["reviews"]

        resolvers: dict[str, Callable[[], Any]] = {
            "revenue": lambda: orders()["today_revenue"],
            "orders": lambda: orders()["today_orders"],
            "averageOrderValue": lambda: orders()["average_order_value"],
            "conversionRate": lambda: orders()["metrics"]["conversion_rate"],
            "topDishes": lambda: orders()["top_dishes"],
            "categoryBreakdown": lambda: self.sales_category_breakdown(orders()["top_dishes"]),
            "hourlyTrends": lambda: orders()["metrics"]["peak_hour_revenue"],
            "customerSatisfaction": lambda: {
                "average_rating": reviews()["average_rating"],
                "satisfaction_rate": reviews()["metrics"]["satisfaction_rate"],
                "total_reviews": reviews()["total_reviews"],
            },
        }

        analytics: dict[str, Any] = {}
        for name in metric_names:
            resolver = resolvers.get(name)
            analytics[name] = resolver() if resolver is not None else None

        self._logger.info("Generated custom analytics", metrics=len(analytics))
        return analytics

