"""
Analytics engine: metric formulas, menu enrichment and statistics assembly.

Everything exported here is pure. AnalyticsService (service.py) is the
store-backed entry point and is imported from its module directly.
"""

from merchant_api.services.analytics import metrics
from merchant_api.services.analytics.enrichment import (
    dish_fields,
    enrich_with_dish,
    resolve_applicable_dishes,
    with_dish_names,
)
from merchant_api.services.analytics.statistics import (
    build_order_statistics,
    build_promotion_analytics,
    build_promotion_statistics,
    build_review_statistics,
    category_breakdown,
)

__all__ = [
    "metrics",
    "dish_fields",
    "enrich_with_dish",
    "resolve_applicable_dishes",
    "with_dish_names",
    "build_order_statistics",
    "build_promotion_analytics",
    "build_promotion_statistics",
    "build_review_statistics",
    "category_breakdown",
]
