"""
Statistics repositories. Each snapshot is one JSON document.
"""

from __future__ import annotations

from shared.config.constants import Collections
from merchant_api.models import OrderStats, PromotionStats, ReviewStats
from .base import DocumentRepository


class OrderStatsRepository(DocumentRepository[OrderStats]):
    collection = Collections.ORDER_STATS
    model = OrderStats


class PromotionStatsRepository(DocumentRepository[PromotionStats]):
    collection = Collections.PROMOTION_STATS
    model = PromotionStats


class ReviewStatsRepository(DocumentRepository[ReviewStats]):
    collection = Collections.REVIEW_STATS
    model = ReviewStats
