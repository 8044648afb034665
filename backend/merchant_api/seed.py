"""
Seed data for development and testing.
Creates a small menu, its inventory and the statistics snapshots the
analytics endpoints read.

Idempotent: a collection that already has a file is never touched.
"""

from __future__ import annotations

from datetime import timedelta

from merchant_api.models import (
    Category,
    Dish,
    InventoryRecord,
    OrderStats,
    PromotionStats,
    ReviewStats,
)
from shared.config.constants import Collections
from shared.config.logging import get_logger
from shared.infrastructure.store import EntityStore
from shared.utils.helpers import utc_now

logger = get_logger(__name__)


def _categories() -> list[Category]:
    return [
        Category(id="cat_1", name="Starters", description="Small plates to share", sort_order=1),
        Category(id="cat_2", name="Mains", description="Signature main courses", sort_order=2),
        Category(id="cat_3", name="Desserts", description="House-made desserts", sort_order=3),
        Category(id="cat_4", name="Drinks", description="Soft drinks and juices", sort_order=4),
    ]


def _dishes() -> list[Dish]:
    return [
        Dish(
            id="dish_1", category_id="cat_1", name="Beef Empanada",
            description="Baked pastry filled with seasoned beef", price=4.5, stock=40,
            ingredients=["flour", "beef", "onion", "olive"], allergens=["gluten"],
            preparation_time=10, calories=320,
        ),
        Dish(
            id="dish_2", category_id="cat_1", name="Sopaipillas",
            description="Fried pumpkin dough with pebre", price=3.0, stock=4,
            ingredients=["pumpkin", "flour", "tomato", "coriander"], allergens=["gluten"],
            is_vegetarian=True, preparation_time=8, calories=250,
        ),
        Dish(
            id="dish_3", category_id="cat_2", name="Pastel de Choclo",
            description="Corn pie with beef and chicken", price=12.9, stock=18,
            ingredients=["corn", "beef", "chicken", "basil"], allergens=["milk"],
            preparation_time=25, calories=680,
        ),
        Dish(
            id="dish_4", category_id="cat_2", name="Spicy Chorrillana",
            description="Fries topped with steak strips, onion and egg", price=15.5, stock=0,
            ingredients=["potato", "beef", "onion", "egg", "chili"], allergens=["egg"],
            is_spicy=True, preparation_time=20, calories=950,
        ),
        Dish(
            id="dish_5", category_id="cat_3", name="Leche Asada",
            description="Baked milk custard", price=5.2, stock=12,
            ingredients=["milk", "egg", "sugar"], allergens=["milk", "egg"],
            is_vegetarian=True, preparation_time=5, calories=290,
        ),
        Dish(
            id="dish_6", category_id="cat_4", name="Mote con Huesillo",
            description="Peach nectar with husked wheat", price=3.8, stock=25,
            ingredients=["peach", "wheat", "sugar"], allergens=["gluten"],
            is_vegetarian=True, preparation_time=3, calories=210,
        ),
    ]


def _inventory() -> list[InventoryRecord]:
    now = utc_now()
    suppliers = {
        "dish_1": ("Andes Bakery", 1.6, None),
        "dish_2": ("Andes Bakery", 0.9, now + timedelta(days=2)),
        "dish_3": ("Central Market", 4.8, now + timedelta(days=5)),
        "dish_4": ("Central Market", 6.1, None),
        "dish_5": ("Lacteos del Sur", 1.7, now + timedelta(days=10)),
        "dish_6": ("Fruteria Norte", 1.1, None),
    }
    records = []
    for dish in _dishes():
        supplier, cost, expiry = suppliers[dish.id]
        records.append(
            InventoryRecord(
                dish_id=dish.id,
                stock=dish.stock,
                alert_threshold=5,
                supplier=supplier,
                cost=cost,
                expiry_date=expiry.isoformat() if expiry is not None else None,
            )
        )
    return records


def _order_stats() -> OrderStats:
    return OrderStats.model_validate({
        "today_revenue": 1845.6,
        "yesterday_revenue": 1620.0,
        "today_orders": 142,
        "yesterday_orders": 128,
        "orders_by_status": {"pending": 6, "preparing": 9, "completed": 121, "cancelled": 6},
        "top_dishes": [
            {"dish_id": "dish_3", "orders": 48, "revenue": 619.2},
            {"dish_id": "dish_4", "orders": 31, "revenue": 480.5},
            {"dish_id": "dish_1", "orders": 55, "revenue": 247.5},
            {"dish_id": "dish_6", "orders": 40, "revenue": 152.0},
        ],
        "peak_hours": [
            {"hour": "13:00", "orders": 34},
            {"hour": "14:00", "orders": 27},
            {"hour": "20:00", "orders": 31},
        ],
        "average_order_value": 13.0,
    })


def _promotion_stats() -> PromotionStats:
    return PromotionStats.model_validate({
        "active_promotions": [
            {
                "id": "promo_1",
                "name": "Lunch Combo",
                "applicable_dishes": ["dish_1", "dish_3"],
                "total_orders": 86,
                "total_revenue": 1290.0,
                "discount_given": 215.0,
                "conversion_rate": 0.24,
                "start_date": "2024-05-01",
                "end_date": "2024-05-31",
            },
        ],
        "completed_promotions": [
            {
                "id": "promo_2",
                "name": "Dessert Week",
                "applicable_dishes": ["dish_5"],
                "total_orders": 40,
                "total_revenue": 208.0,
                "discount_given": 41.6,
                "conversion_rate": 0.15,
                "start_date": "2024-04-01",
                "end_date": "2024-04-07",
            },
        ],
        "overall_stats": {
            "total_promotional_orders": 126,
            "total_promotional_revenue": 1498.0,
            "total_discount_given": 256.6,
            "average_conversion_rate": 0.195,
        },
    })


def _review_stats() -> ReviewStats:
    return ReviewStats.model_validate({
        "total_reviews": 214,
        "average_rating": 4.3,
        "good_rate": 0.82,
        "rating_distribution": {"1": 6, "2": 9, "3": 24, "4": 71, "5": 104},
        "dish_reviews": [
            {"dish_id": "dish_3", "average_rating": 4.7, "total_reviews": 88},
            {"dish_id": "dish_1", "average_rating": 4.4, "total_reviews": 51},
            {"dish_id": "dish_4", "average_rating": 3.8, "total_reviews": 47},
            {"dish_id": "dish_5", "average_rating": 4.6, "total_reviews": 8},
        ],
        "monthly_trend": [
            {"month": "2024-03", "average_rating": 4.1, "total_reviews": 62},
            {"month": "2024-04", "average_rating": 4.2, "total_reviews": 70},
            {"month": "2024-05", "average_rating": 4.4, "total_reviews": 82},
        ],
        "recent_reviews": [
            {"dish_id": "dish_3", "rating": 5, "comment": "Best pastel de choclo in town"},
            {"dish_id": "dish_4", "rating": 2, "comment": "Too spicy and a bit cold"},
        ],
    })


SAMPLE_COLLECTIONS = {
    Collections.CATEGORIES: lambda: [c.to_record() for c in _categories()],
    Collections.DISHES: lambda: [d.to_record() for d in _dishes()],
    Collections.INVENTORY: lambda: [r.to_record() for r in _inventory()],
    Collections.ORDER_STATS: lambda: _order_stats().to_record(),
    Collections.PROMOTION_STATS: lambda: _promotion_stats().to_record(),
    Collections.REVIEW_STATS: lambda: _review_stats().to_record(),
}


def seed(store: EntityStore, *, overwrite: bool = False) -> list[str]:
    """
    Write the sample collections.

    Args:
        overwrite: Replace collections that already exist.

    Returns:
        Names of the collections written.
    """
    written = []
    for name, build in SAMPLE_COLLECTIONS.items():
        if store.exists(name) and not overwrite:
            logger.debug("Collection already present, skipping seed", collection=name)
            continue
        store.write(name, build())
        written.append(name)

    if written:
        logger.info("Sample data seeded", collections=written)
    else:
        logger.info("Sample data already present, skipping")
    return written
