"""
Centralized constants for the backend application.
Avoid magic strings and repeated constants.

Usage:
    from shared.config.constants import DishStatus, Collections, ReportType

    if dish.status == DishStatus.ON:
        ...
"""

from enum import Enum
from typing import Final


# =============================================================================
# Entity States
# =============================================================================


class DishStatus(str, Enum):
    """Dish availability. OFF doubles as the soft-deleted state."""

    ON = "on"
    OFF = "off"


class CategoryStatus(str, Enum):
    """Category lifecycle state, derived from the persisted is_active flag."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class StockStatus:
    """Stock level labels used in responses and reports."""

    NORMAL: Final[str] = "normal"
    LOW: Final[str] = "low"

    # Labels used in the inventory report
    REPORT_LOW: Final[str] = "Low Stock"
    REPORT_NORMAL: Final[str] = "Normal"


class TrendDirection:
    """Review trend directions."""

    IMPROVING: Final[str] = "improving"
    DECLINING: Final[str] = "declining"
    STABLE: Final[str] = "stable"


# =============================================================================
# Storage
# =============================================================================


class Collections:
    """Collection (file) names in the entity store."""

    CATEGORIES: Final[str] = "categories"
    DISHES: Final[str] = "dishes"
    INVENTORY: Final[str] = "inventory"
    ORDER_STATS: Final[str] = "orders.stats"
    PROMOTION_STATS: Final[str] = "promotions.stats"
    REVIEW_STATS: Final[str] = "reviews.stats"

    # Collections stored as a single JSON document rather than a list
    DOCUMENTS: Final[frozenset[str]] = frozenset({ORDER_STATS, PROMOTION_STATS, REVIEW_STATS})


class IdPrefix:
    """Prefixes for human-readable sequential ids."""

    CATEGORY: Final[str] = "cat_"
    DISH: Final[str] = "dish_"


# Id patterns enforced by the validation layer
CATEGORY_ID_PATTERN: Final[str] = r"^cat_\d+$"
DISH_ID_PATTERN: Final[str] = r"^dish_\d+$"
PROMOTION_ID_PATTERN: Final[str] = r"^promo_\d+$"


# =============================================================================
# Reports
# =============================================================================


class ReportType:
    """Report types supported by the export pipeline."""

    SALES: Final[str] = "sales"
    INVENTORY: Final[str] = "inventory"
    REVIEWS: Final[str] = "reviews"
    PROMOTIONS: Final[str] = "promotions"


class ExportFormat:
    """Export formats."""

    JSON: Final[str] = "json"
    CSV: Final[str] = "csv"

    ALL: Final[list[str]] = [JSON, CSV]


INVENTORY_CSV_HEADERS: Final[list[str]] = [
    "Dish ID",
    "Dish Name",
    "Current Stock",
    "Alert Threshold",
    "Stock Status",
    "Supplier",
    "Cost",
    "Total Value",
    "Expiry Date",
    "Last Updated",
]

# Placeholder used when a stat record references a dish that no longer exists
UNKNOWN_DISH_NAME: Final[str] = "Unknown Dish"
UNKNOWN_NAME: Final[str] = "Unknown"


# =============================================================================
# Analytics
# =============================================================================


class AnalyticsThresholds:
    """Fixed parameters of the derived metrics."""

    # Mock conversion model: assumed visitors per order
    VISITORS_PER_ORDER: Final[int] = 3
    # Rating change (absolute) that counts as a trend
    TREND_SENSITIVITY: Final[float] = 0.1
    # Dishes below this rating or review count need improvement
    IMPROVEMENT_RATING: Final[float] = 4.0
    IMPROVEMENT_MIN_REVIEWS: Final[int] = 10
    IMPROVEMENT_LIMIT: Final[int] = 5
    # Effectiveness score caps
    MAX_EFFECTIVENESS_SCORE: Final[float] = 100.0
    MAX_VOLUME_BONUS: Final[float] = 20.0


# =============================================================================
# Validation Constants
# =============================================================================


class Limits:
    """Validation limits."""

    # String lengths
    MAX_NAME_LENGTH: Final[int] = 100
    MAX_CATEGORY_DESCRIPTION_LENGTH: Final[int] = 500
    MAX_DISH_DESCRIPTION_LENGTH: Final[int] = 1000
    MAX_SUPPLIER_LENGTH: Final[int] = 200
    MAX_REASON_LENGTH: Final[int] = 500

    # Batches
    MAX_BATCH_SIZE: Final[int] = 100

    # Expiry window
    MIN_EXPIRY_WINDOW_DAYS: Final[int] = 1
    MAX_EXPIRY_WINDOW_DAYS: Final[int] = 365

    # Image upload
    MAX_IMAGE_SIZE_BYTES: Final[int] = 5 * 1024 * 1024
    ALLOWED_IMAGE_TYPES: Final[frozenset[str]] = frozenset({
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/gif",
        "image/webp",
    })
