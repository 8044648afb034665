"""
Pytest configuration and fixtures for backend tests.

Every test gets its own data directory and reports directory under
tmp_path. The seeded collections are small and hand-written so that the
expected numbers in the tests can be checked by hand.
"""

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

import shared.infrastructure.store as store_module
from merchant_api.main import app
from shared.config.constants import Collections
from shared.config.settings import settings
from shared.infrastructure.store import EntityStore, get_store
from shared.utils.helpers import utc_now

TIMESTAMP = "2024-05-01T10:00:00+00:00"


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point every directory setting at tmp_path and disable seeding."""
    monkeypatch.setattr(settings, "data_dir", tmp_path / "data")
    monkeypatch.setattr(settings, "reports_dir", tmp_path / "reports")
    monkeypatch.setattr(settings, "log_dir", tmp_path / "logs")
    monkeypatch.setattr(settings, "seed_sample_data", False)
    monkeypatch.setattr(settings, "log_to_file", False)
    monkeypatch.setattr(store_module, "_store", None)
    return settings


@pytest.fixture
def store(tmp_path):
    """Empty entity store in a fresh directory."""
    return EntityStore(tmp_path / "data")


@pytest.fixture
def seed_categories(store):
    categories = [
        {"id": "cat_1", "name": "Starters", "description": "Small plates", "sort_order": 1,
         "is_active": True, "created_at": TIMESTAMP, "updated_at": TIMESTAMP},
        {"id": "cat_2", "name": "Mains", "description": "", "sort_order": 2,
         "is_active": True, "created_at": TIMESTAMP, "updated_at": TIMESTAMP},
        {"id": "cat_3", "name": "Desserts", "description": "", "sort_order": 3,
         "is_active": True, "created_at": TIMESTAMP, "updated_at": TIMESTAMP},
    ]
    store.write(Collections.CATEGORIES, categories)
    return categories


@pytest.fixture
def seed_dishes(store, seed_categories):
    """
    Four dishes. dish_3 is switched off but still belongs to cat_2.
    """
    def dish(dish_id, category_id, name, price, stock, **extra):
        return {
            "id": dish_id,
            "category_id": category_id,
            "name": name,
            "description": "",
            "price": price,
            "status": extra.pop("status", "on"),
            "stock": stock,
            "image_url": "",
            "ingredients": [],
            "allergens": [],
            "is_spicy": extra.pop("is_spicy", False),
            "is_vegetarian": extra.pop("is_vegetarian", False),
            "preparation_time": 10,
            "calories": 300,
            "created_at": TIMESTAMP,
            "updated_at": TIMESTAMP,
        }

    dishes = [
        dish("dish_1", "cat_1", "Empanada", 4.5, 20),
        dish("dish_2", "cat_2", "Pastel de Choclo", 12.9, 5),
        dish("dish_3", "cat_2", "Chorrillana", 15.5, 0, status="off", is_spicy=True),
        dish("dish_4", "cat_1", "Sopaipilla", 3.0, 8, is_vegetarian=True),
    ]
    store.write(Collections.DISHES, dishes)
    return dishes


@pytest.fixture
def seed_inventory(store, seed_dishes):
    """
    Inventory matching the dishes, all with threshold 5.

    dish_2 sits exactly on its threshold and expires in 2 days; dish_3 is
    out of stock; dish_4 expires in 20 days.
    """
    now = utc_now()
    records = [
        {"dish_id": "dish_1", "stock": 20, "alert_threshold": 5, "supplier": "Andes Bakery",
         "cost": 1.5, "expiry_date": None, "last_updated": "2024-05-01T10:00:00+00:00"},
        {"dish_id": "dish_2", "stock": 5, "alert_threshold": 5, "supplier": "Central Market",
         "cost": 4.0, "expiry_date": (now + timedelta(days=2)).isoformat(),
         "last_updated": "2024-05-02T10:00:00+00:00"},
        {"dish_id": "dish_3", "stock": 0, "alert_threshold": 5, "supplier": "Central Market",
         "cost": 6.0, "expiry_date": None, "last_updated": "2024-05-03T10:00:00+00:00"},
        {"dish_id": "dish_4", "stock": 8, "alert_threshold": 5, "supplier": "Andes Bakery",
         "cost": 1.0, "expiry_date": (now + timedelta(days=20)).isoformat(),
         "last_updated": "2024-05-04T10:00:00+00:00"},
    ]
    store.write(Collections.INVENTORY, records)
    return records


@pytest.fixture
def seed_stats(store):
    """Order, promotion and review snapshots."""
    orders = {
        "today_revenue": 1000.0,
        "yesterday_revenue": 800.0,
        "today_orders": 50,
        "yesterday_orders": 40,
        "orders_by_status": {"completed": 45, "cancelled": 5},
        "top_dishes": [
            {"dish_id": "dish_2", "orders": 20, "revenue": 258.0},
            {"dish_id": "dish_1", "orders": 30, "revenue": 135.0},
            {"dish_id": "dish_99", "orders": 5, "revenue": 50.0},
        ],
        "peak_hours": [{"hour": "13:00", "orders": 12}, {"hour": "20:00", "orders": 9}],
        "average_order_value": 20.0,
    }
    promotions = {
        "active_promotions": [
            {
                "id": "promo_1",
                "name": "Lunch Combo",
                "applicable_dishes": ["dish_1", "dish_2", "dish_99"],
                "total_orders": 100,
                "total_revenue": 1200.0,
                "discount_given": 200.0,
                "conversion_rate": 0.25,
                "start_date": "2024-05-01",
                "end_date": "2024-05-11",
            },
        ],
        "completed_promotions": [
            {
                "id": "promo_2",
                "name": "Dessert Week",
                "applicable_dishes": ["dish_4"],
                "total_orders": 40,
                "total_revenue": 300.0,
                "discount_given": 0.0,
                "conversion_rate": 0.1,
                "start_date": "2024-04-01",
                "end_date": "2024-04-01",
            },
        ],
        "overall_stats": {
            "total_promotional_orders": 140,
            "total_promotional_revenue": 1500.0,
            "total_discount_given": 200.0,
            "average_conversion_rate": 0.2,
        },
    }
    reviews = {
        "total_reviews": 100,
        "average_rating": 4.2,
        "good_rate": 0.8,
        "rating_distribution": {"1": 5, "2": 5, "3": 10, "4": 30, "5": 50},
        "dish_reviews": [
            {"dish_id": "dish_1", "average_rating": 4.8, "total_reviews": 3},
            {"dish_id": "dish_2", "average_rating": 4.5, "total_reviews": 60},
            {"dish_id": "dish_3", "average_rating": 3.5, "total_reviews": 37},
        ],
        "monthly_trend": [
            {"month": "2024-03", "average_rating": 4.0, "total_reviews": 40},
            {"month": "2024-04", "average_rating": 4.3, "total_reviews": 60},
        ],
        "recent_reviews": [{"dish_id": "dish_2", "rating": 5, "comment": "Great"}],
    }
    store.write(Collections.ORDER_STATS, orders)
    store.write(Collections.PROMOTION_STATS, promotions)
    store.write(Collections.REVIEW_STATS, reviews)
    return {"orders": orders, "promotions": promotions, "reviews": reviews}


@pytest.fixture
def seeded_store(store, seed_inventory, seed_stats):
    """Store with every collection written."""
    return store


@pytest.fixture
def client(store):
    """
    Create a test client with the entity store override.
    """
    def override_get_store():
        yield store

    app.dependency_overrides[get_store] = override_get_store

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def seeded_client(client, seeded_store):
    return client
