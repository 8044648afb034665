"""
Report generators.

Each generator shapes already-assembled statistics into the structure that
is exported. Sales, reviews and promotions produce a single object; the
inventory report is a flat list of rows.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from merchant_api.models import Dish, InventoryRecord
from shared.config.constants import StockStatus, UNKNOWN_NAME
from shared.utils.helpers import round2


def sales_report(
    order_statistics: Mapping[str, Any],
    breakdown: list[dict[str, Any]],
    *,
    generated_at: str,
    period: str = "current",
) -> dict[str, Any]:
    return {
        "summary": {
            "report_type": "Sales Report",
            "generated_at": generated_at,
            "period": period,
            "total_orders": order_statistics["today_orders"],
            "total_revenue": order_statistics["today_revenue"],
            "average_order_value": order_statistics["average_order_value"],
        },
        "orders_by_status": order_statistics["orders_by_status"],
        "top_dishes": order_statistics["top_dishes"],
        "peak_hours": order_statistics["peak_hours"],
        "category_breakdown": breakdown,
        "trends": {
            "revenue_growth": order_statistics["metrics"]["revenue_growth_rate"],
            "order_growth": order_statistics["metrics"]["order_growth_rate"],
        },
    }


def inventory_report(
    records: Iterable[InventoryRecord],
    dishes: Mapping[str, Dish],
) -> list[dict[str, Any]]:
    """One row per inventory record, in inventory listing order."""
    rows = []
    for record in records:
        dish = dishes.get(record.dish_id)
        rows.append({
            "dish_id": record.dish_id,
            "dish_name": dish.name if dish is not None else UNKNOWN_NAME,
            "current_stock": record.stock,
            "alert_threshold": record.alert_threshold,
            "stock_status": StockStatus.REPORT_LOW if record.is_low_stock else StockStatus.REPORT_NORMAL,
            "supplier": record.supplier,
            "cost": record.cost,
            "total_value": round2(record.stock * record.cost),
            "expiry_date": record.expiry_date,
            "last_updated": record.last_updated,
        })
    return rows


def reviews_report(review_statistics: Mapping[str, Any], *, generated_at: str) -> dict[str, Any]:
    review_metrics = review_statistics["metrics"]
    return {
        "summary": {
            "report_type": "Reviews Report",
            "generated_at": generated_at,
            "total_reviews": review_statistics["total_reviews"],
            "average_rating": review_statistics["average_rating"],
            "good_rate": review_statistics["good_rate"],
            "satisfaction_rate": review_metrics["satisfaction_rate"],
        },
        "rating_distribution": review_statistics["rating_distribution"],
        "dish_reviews": review_statistics["dish_reviews"],
        "recent_reviews": review_statistics["recent_reviews"],
        "trends": review_statistics["monthly_trend"],
        "insights": {
            "top_rated_dish": review_metrics["top_rated_dish"],
            "improvement_needed": review_metrics["improvement_needed"],
        },
    }


def promotions_report(promotion_statistics: Mapping[str, Any], *, generated_at: str) -> dict[str, Any]:
    overall = promotion_statistics["overall_stats"]
    promotion_metrics = promotion_statistics["metrics"]
    return {
        "summary": {
            "report_type": "Promotions Report",
            "generated_at": generated_at,
            "active_promotions": len(promotion_statistics["active_promotions"]),
            "completed_promotions": len(promotion_statistics["completed_promotions"]),
            "total_promotional_revenue": overall["total_promotional_revenue"],
            "total_discount_given": overall["total_discount_given"],
        },
        "active_promotions": promotion_statistics["active_promotions"],
        "completed_promotions": promotion_statistics["completed_promotions"],
        "overall_stats": overall,
        "insights": {
            "best_performing_promotion": promotion_metrics["best_performing_promotion"],
            "average_discount_per_promotion": promotion_metrics["average_discount_per_promotion"],
            "effectiveness_score": promotion_metrics["promotion_effectiveness"],
        },
    }
