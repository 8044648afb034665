"""
Derived business metrics.

Pure functions over numbers and plain dicts: no store access, no logging.
Every percentage or money value is rounded to 2 decimals with round2().
Ratios whose denominator is zero evaluate to 0 unless stated otherwise.
"""

from __future__ import annotations

import math
from typing import Any, Mapping, Sequence

from shared.config.constants import AnalyticsThresholds, TrendDirection
from shared.utils.helpers import parse_timestamp, round2

_SECONDS_PER_DAY = 86400


# =============================================================================
# Orders
# =============================================================================


def growth_rate(current: float, previous: float) -> float:
    """Percentage change from ``previous`` to ``current``. 0 when previous <= 0."""
    if previous <= 0:
        return 0
    return round2((current - previous) / previous * 100)


def conversion_rate(today_orders: int) -> float:
    """
    Mock conversion rate: assumes a fixed number of visitors per order.

    There is no visitor tracking, so the result is constant (33.33) for any
    positive order count.
    """
    if today_orders <= 0:
        return 0
    visitors = today_orders * AnalyticsThresholds.VISITORS_PER_ORDER
    return round2(today_orders / visitors * 100)


def peak_hour_revenue(
    peak_hours: Sequence[Mapping[str, Any]],
    average_order_value: float,
) -> list[dict[str, Any]]:
    """Peak hours with an estimated ``revenue = orders * average_order_value``."""
    return [
        {**hour, "revenue": round2(hour.get("orders", 0) * average_order_value)}
        for hour in peak_hours
    ]


# =============================================================================
# Promotions
# =============================================================================


def promotion_roi(revenue: float, discount: float) -> float:
    """Return on the discount given, as a percentage."""
    if revenue <= 0 or discount <= 0:
        return 0
    return round2((revenue - discount) / discount * 100)


def roi_bonus(revenue: float, discount: float) -> float:
    if revenue > discount and discount > 0:
        return (revenue - discount) / discount * 10
    return 0


def volume_bonus(total_orders: int) -> float:
    return min(total_orders / 10, AnalyticsThresholds.MAX_VOLUME_BONUS)


def effectiveness_score(promotion: Mapping[str, Any]) -> float:
    """
    Score of a single promotion, capped at 100.

    conversion_rate * 100 + ROI bonus + volume bonus (max 20).
    """
    revenue = promotion.get("total_revenue", 0)
    discount = promotion.get("discount_given", 0)
    score = (
        promotion.get("conversion_rate", 0) * 100
        + roi_bonus(revenue, discount)
        + volume_bonus(promotion.get("total_orders", 0))
    )
    return round2(min(score, AnalyticsThresholds.MAX_EFFECTIVENESS_SCORE))


def promotion_effectiveness(overall: Mapping[str, Any]) -> float:
    """Aggregate effectiveness over all promotions. Not capped."""
    if overall.get("total_promotional_orders", 0) == 0:
        return 0
    total_discount = overall.get("total_discount_given", 0)
    total_revenue = overall.get("total_promotional_revenue", 0)
    roi = (total_revenue - total_discount) / total_discount if total_discount > 0 else 0
    return round2(overall.get("average_conversion_rate", 0) * 100 + roi * 10)


def _performance(promotion: Mapping[str, Any]) -> float:
    return (
        promotion.get("total_revenue", 0) * promotion.get("conversion_rate", 0)
        - promotion.get("discount_given", 0)
    )


def best_performing_promotion(
    promotions: Sequence[Mapping[str, Any]],
) -> Mapping[str, Any] | None:
    """Promotion with the highest revenue * conversion_rate - discount. First wins ties."""
    best = None
    for promotion in promotions:
        if best is None or _performance(promotion) > _performance(best):
            best = promotion
    return best


def promotion_span_days(start_date: str | None, end_date: str | None) -> int:
    """Whole days between the dates, rounded up. 0 if either date is unusable."""
    start = parse_timestamp(start_date)
    end = parse_timestamp(end_date)
    if start is None or end is None:
        return 0
    return math.ceil((end - start).total_seconds() / _SECONDS_PER_DAY)


def per_day(value: float, start_date: str | None, end_date: str | None) -> float:
    days = promotion_span_days(start_date, end_date)
    if days <= 0:
        return 0
    return round2(value / days)


def average_order_value(revenue: float, orders: int) -> float:
    if orders <= 0:
        return 0
    return round2(revenue / orders)


def discount_percentage(revenue: float, discount: float) -> float:
    """Share of the undiscounted amount that was given away."""
    if revenue <= 0:
        return 0
    return round2(discount / (revenue + discount) * 100)


def average_discount_per_promotion(total_discount: float, promotion_count: int) -> float:
    if promotion_count <= 0:
        return 0
    return round2(total_discount / promotion_count)


# =============================================================================
# Reviews
# =============================================================================


def satisfaction_rate(rating_distribution: Mapping[str, int], total_reviews: int) -> float | None:
    """
    Percentage of 4 and 5 star reviews. None when there are no reviews.
    """
    if total_reviews <= 0:
        return None
    satisfied = rating_distribution.get("4", 0) + rating_distribution.get("5", 0)
    return round2(satisfied / total_reviews * 100)


def average_reviews_per_dish(total_reviews: int, dish_count: int) -> float:
    if dish_count <= 0:
        return 0
    return round2(total_reviews / dish_count)


def review_trend(monthly_trend: Sequence[Mapping[str, Any]]) -> dict[str, Any]:
    """
    Compare the last two months.

    Returns {direction, rating_change, review_change, review_growth_rate}.
    A rating move of more than 0.1 either way is a trend; anything smaller
    is stable. With fewer than two months everything is zero and stable.
    """
    if len(monthly_trend) < 2:
        return {
            "direction": TrendDirection.STABLE,
            "rating_change": 0,
            "review_change": 0,
            "review_growth_rate": 0,
        }

    previous, latest = monthly_trend[-2], monthly_trend[-1]
    rating_change = latest.get("average_rating", 0) - previous.get("average_rating", 0)
    review_change = latest.get("total_reviews", 0) - previous.get("total_reviews", 0)

    if rating_change > AnalyticsThresholds.TREND_SENSITIVITY:
        direction = TrendDirection.IMPROVING
    elif rating_change < -AnalyticsThresholds.TREND_SENSITIVITY:
        direction = TrendDirection.DECLINING
    else:
        direction = TrendDirection.STABLE

    return {
        "direction": direction,
        "rating_change": round2(rating_change),
        "review_change": review_change,
        "review_growth_rate": growth_rate(
            latest.get("total_reviews", 0), previous.get("total_reviews", 0)
        ),
    }


def _confidence_weighted_rating(dish_review: Mapping[str, Any]) -> float:
    return dish_review.get("average_rating", 0) * math.log(dish_review.get("total_reviews", 0) + 1)


def top_rated_dish(dish_reviews: Sequence[Mapping[str, Any]]) -> Mapping[str, Any] | None:
    """Highest rating weighted by ln(reviews + 1). First wins ties."""
    top = None
    for review in dish_reviews:
        if top is None or _confidence_weighted_rating(review) > _confidence_weighted_rating(top):
            top = review
    return top


def dishes_needing_improvement(
    dish_reviews: Sequence[Mapping[str, Any]],
) -> list[Mapping[str, Any]]:
    """Dishes rated below 4.0 or with fewer than 10 reviews, worst first, at most 5."""
    candidates = [
        review for review in dish_reviews
        if review.get("average_rating", 0) < AnalyticsThresholds.IMPROVEMENT_RATING
        or review.get("total_reviews", 0) < AnalyticsThresholds.IMPROVEMENT_MIN_REVIEWS
    ]
    candidates.sort(key=lambda review: review.get("average_rating", 0))
    return candidates[:AnalyticsThresholds.IMPROVEMENT_LIMIT]
