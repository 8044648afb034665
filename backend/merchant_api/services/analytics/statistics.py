"""
Statistics assemblers.

Each builder takes a stats snapshot plus the menu it refers to and returns
the enriched, JSON-ready structure served by the statistics endpoints and
consumed by the report generators. Builders never touch the store.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from merchant_api.models import Category, Dish, OrderStats, PromotionStats, ReviewStats
from merchant_api.services.analytics import metrics
from merchant_api.services.analytics.enrichment import (
    enrich_with_dish,
    resolve_applicable_dishes,
    with_dish_names,
)
from shared.config.constants import UNKNOWN_NAME
from shared.utils.exceptions import PromotionNotFoundError
from shared.utils.helpers import round2


def build_order_statistics(stats: OrderStats, dishes: Mapping[str, Dish]) -> dict[str, Any]:
    data = stats.model_dump(mode="json")
    data["top_dishes"] = enrich_with_dish(data["top_dishes"], dishes)
    data["metrics"] = {
        "revenue_growth_rate": metrics.growth_rate(stats.today_revenue, stats.yesterday_revenue),
        "order_growth_rate": metrics.growth_rate(stats.today_orders, stats.yesterday_orders),
        "average_order_value": stats.average_order_value,
        "conversion_rate": metrics.conversion_rate(stats.today_orders),
        "peak_hour_revenue": metrics.peak_hour_revenue(
            data["peak_hours"], stats.average_order_value
        ),
    }
    return data


def category_breakdown(
    top_dishes: Sequence[Mapping[str, Any]],
    dishes: Mapping[str, Dish],
    categories: Mapping[str, Category],
) -> list[dict[str, Any]]:
    """
    Orders and revenue of the top dishes grouped by category name.

    Top dishes whose dish no longer exists are left out; a dish whose
    category is gone counts under "Unknown". Highest revenue first.
    """
    groups: dict[str, dict[str, Any]] = {}
    for top_dish in top_dishes:
        dish = dishes.get(top_dish.get("dish_id"))
        if dish is None:
            continue
        category = categories.get(dish.category_id)
        name = category.name if category is not None else UNKNOWN_NAME

        group = groups.setdefault(name, {"category_name": name, "orders": 0, "revenue": 0.0})
        group["orders"] += top_dish.get("orders", 0)
        group["revenue"] += top_dish.get("revenue", 0)

    for group in groups.values():
        group["revenue"] = round2(group["revenue"])
    return sorted(groups.values(), key=lambda g: g["revenue"], reverse=True)


def build_promotion_statistics(stats: PromotionStats, dishes: Mapping[str, Dish]) -> dict[str, Any]:
    data = stats.model_dump(mode="json")
    all_promotions = [*data["active_promotions"], *data["completed_promotions"]]
    overall = data["overall_stats"]

    data["active_promotions"] = with_dish_names(data["active_promotions"], dishes)
    data["completed_promotions"] = with_dish_names(data["completed_promotions"], dishes)
    data["metrics"] = {
        "total_promotions": len(all_promotions),
        "average_discount_per_promotion": metrics.average_discount_per_promotion(
            overall["total_discount_given"], len(all_promotions)
        ),
        "promotion_effectiveness": metrics.promotion_effectiveness(overall),
        "best_performing_promotion": metrics.best_performing_promotion(all_promotions),
    }
    return data


def build_promotion_analytics(
    stats: PromotionStats,
    dishes: Mapping[str, Dish],
    promotion_id: str,
) -> dict[str, Any]:
    """
    Detailed analytics of one promotion, searched in active then completed.

    Raises:
        PromotionNotFoundError: id is in neither list.
    """
    promotion = next((p for p in stats.active_promotions if p.id == promotion_id), None)
    is_active = promotion is not None
    if promotion is None:
        promotion = next((p for p in stats.completed_promotions if p.id == promotion_id), None)
    if promotion is None:
        raise PromotionNotFoundError(promotion_id)

    data = promotion.model_dump(mode="json")
    revenue = promotion.total_revenue
    discount = promotion.discount_given

    data["is_active"] = is_active
    data["applicable_dishes"] = resolve_applicable_dishes(promotion.applicable_dishes, dishes)
    data["analytics"] = {
        "roi": metrics.promotion_roi(revenue, discount),
        "average_order_value": metrics.average_order_value(revenue, promotion.total_orders),
        "discount_percentage": metrics.discount_percentage(revenue, discount),
        "orders_per_day": metrics.per_day(
            promotion.total_orders, promotion.start_date, promotion.end_date
        ),
        "revenue_per_day": metrics.per_day(revenue, promotion.start_date, promotion.end_date),
        "effectiveness_score": metrics.effectiveness_score(data),
    }
    return data


def build_review_statistics(stats: ReviewStats, dishes: Mapping[str, Dish]) -> dict[str, Any]:
    data = stats.model_dump(mode="json")
    dish_reviews = enrich_with_dish(data["dish_reviews"], dishes)

    data["dish_reviews"] = dish_reviews
    data["metrics"] = {
        "satisfaction_rate": metrics.satisfaction_rate(
            stats.rating_distribution, stats.total_reviews
        ),
        "average_reviews_per_dish": metrics.average_reviews_per_dish(
            stats.total_reviews, len(dish_reviews)
        ),
        "review_trend": metrics.review_trend(data["monthly_trend"]),
        "top_rated_dish": metrics.top_rated_dish(dish_reviews),
        "improvement_needed": metrics.dishes_needing_improvement(dish_reviews),
    }
    return data
