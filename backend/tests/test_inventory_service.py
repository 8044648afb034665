"""
Tests for InventoryService.

Tests cover:
- Low stock / out of stock / expiring queries
- Stock writes and the dish.stock mirror
- Clamped manual adjustments
- Batch updates with partial success
- Summary totals
- Synchronization with the dish collection
"""

from datetime import timedelta

import pytest

from merchant_api.services.domain import InventoryService
from shared.config.constants import Collections, StockStatus
from shared.utils.exceptions import InventoryNotFoundError, NotFoundError, ValidationError
from shared.utils.helpers import utc_now


@pytest.fixture
def inventory_service(store):
    return InventoryService(store)


def _dish_stock(store, dish_id):
    return {d["id"]: d["stock"] for d in store.read(Collections.DISHES)}[dish_id]


class TestInventoryQueries:
    """Tests for get_inventory() and friends"""

    def test_default_order_is_last_updated_desc(self, inventory_service, seed_inventory):
        records = inventory_service.get_inventory()
        assert [r.dish_id for r in records] == ["dish_4", "dish_3", "dish_2", "dish_1"]

    def test_filter_low_stock_and_supplier(self, inventory_service, seed_inventory):
        records = inventory_service.get_inventory(low_stock=True, supplier="central")
        assert sorted(r.dish_id for r in records) == ["dish_2", "dish_3"]

    def test_filter_out_of_stock(self, inventory_service, seed_inventory):
        records = inventory_service.get_inventory(out_of_stock=True)
        assert [r.dish_id for r in records] == ["dish_3"]

    def test_missing_record_raises_inventory_not_found(self, inventory_service, seed_inventory):
        with pytest.raises(InventoryNotFoundError) as exc:
            inventory_service.get_inventory_by_dish("dish_99")

        assert isinstance(exc.value, NotFoundError)
        assert exc.value.status_code == 404

    def test_find_inventory_returns_none_when_missing(self, inventory_service, seed_inventory):
        assert inventory_service.find_inventory("dish_99") is None
        assert inventory_service.find_inventory("dish_1").stock == 20

    def test_stock_status_labels(self, inventory_service, seed_inventory):
        assert inventory_service.get_inventory_by_dish("dish_2").stock_status == StockStatus.LOW
        assert inventory_service.get_inventory_by_dish("dish_1").stock_status == StockStatus.NORMAL


class TestLowStock:
    """Tests for get_low_stock_dishes() and get_out_of_stock_dishes()"""

    def test_threshold_is_inclusive(self, inventory_service, seed_inventory):
        rows = inventory_service.get_low_stock_dishes()

        # dish_2 sits exactly on its threshold of 5
        assert [row["dish_id"] for row in rows] == ["dish_3", "dish_2"]

    def test_rows_carry_dish_fields(self, inventory_service, seed_inventory):
        row = inventory_service.get_low_stock_dishes()[1]

        assert row["dish_name"] == "Pastel de Choclo"
        assert row["dish_price"] == 12.9
        assert row["category_id"] == "cat_2"
        assert row["dish_status"] == "on"

    def test_custom_threshold_zero_is_honoured(self, inventory_service, seed_inventory):
        rows = inventory_service.get_low_stock_dishes(0)
        assert [row["dish_id"] for row in rows] == ["dish_3"]

    def test_custom_threshold_overrides_record_threshold(self, inventory_service, seed_inventory):
        rows = inventory_service.get_low_stock_dishes(10)
        assert [row["dish_id"] for row in rows] == ["dish_3", "dish_2", "dish_4"]

    def test_missing_dish_gets_placeholders(self, inventory_service, seed_inventory, store):
        inventory_service.update_stock("dish_99", 1)

        rows = {row["dish_id"]: row for row in inventory_service.get_low_stock_dishes()}
        assert rows["dish_99"]["dish_name"] == "Unknown Dish"
        assert rows["dish_99"]["dish_status"] == "unknown"

    def test_out_of_stock(self, inventory_service, seed_inventory):
        rows = inventory_service.get_out_of_stock_dishes()

        assert [row["dish_id"] for row in rows] == ["dish_3"]
        assert rows[0]["dish_status"] == "off"


class TestExpiring:
    """Tests for get_expiring_items()"""

    def test_window_includes_only_future_expiries(self, inventory_service, seed_inventory):
        assert [r.dish_id for r in inventory_service.get_expiring_items(7)] == ["dish_2"]
        assert sorted(r.dish_id for r in inventory_service.get_expiring_items(30)) == [
            "dish_2", "dish_4",
        ]

    def test_already_expired_is_excluded(self, inventory_service, seed_inventory):
        later = utc_now() + timedelta(days=5)
        assert [r.dish_id for r in inventory_service.get_expiring_items(30, now=later)] == ["dish_4"]

    @pytest.mark.parametrize("days", [0, 366, -3])
    def test_window_bounds(self, inventory_service, seed_inventory, days):
        with pytest.raises(ValidationError):
            inventory_service.get_expiring_items(days)

    def test_days_until_expiry(self, inventory_service, seed_inventory):
        record = inventory_service.get_inventory_by_dish("dish_4")
        assert record.days_until_expiry() == 20
        assert inventory_service.get_inventory_by_dish("dish_1").days_until_expiry() is None


class TestStockWrites:
    """Tests for update_stock(), adjust_stock() and update_alert_threshold()"""

    def test_update_mirrors_dish_stock(self, inventory_service, seed_inventory, store):
        record = inventory_service.update_stock("dish_1", 42, supplier="Fresh Farms")

        assert record.stock == 42
        assert record.supplier == "Fresh Farms"
        assert record.cost == 1.5
        assert _dish_stock(store, "dish_1") == 42

    def test_update_creates_missing_record(self, inventory_service, seed_dishes, store):
        record = inventory_service.update_stock("dish_1", 7)

        assert record.alert_threshold == 5
        assert len(store.read(Collections.INVENTORY)) == 1

    def test_update_rejects_negative_stock(self, inventory_service, seed_inventory):
        with pytest.raises(ValidationError):
            inventory_service.update_stock("dish_1", -1)

    def test_adjust_adds_delta(self, inventory_service, seed_inventory, store):
        record = inventory_service.adjust_stock("dish_1", -3, reason="Spoiled")

        assert record.stock == 17
        assert record.last_adjustment == -3
        assert record.applied_adjustment == -3
        assert record.adjustment_reason == "Spoiled"
        assert record.last_adjustment_date is not None
        assert _dish_stock(store, "dish_1") == 17

    def test_adjust_clamps_at_zero(self, inventory_service, seed_inventory):
        record = inventory_service.adjust_stock("dish_2", -8)

        assert record.stock == 0
        assert record.last_adjustment == -8
        assert record.applied_adjustment == -5

    def test_adjust_missing_record(self, inventory_service, seed_inventory):
        with pytest.raises(InventoryNotFoundError):
            inventory_service.adjust_stock("dish_99", 1)

    def test_alert_threshold(self, inventory_service, seed_inventory):
        record = inventory_service.update_alert_threshold("dish_1", 25)

        assert record.alert_threshold == 25
        assert record.is_low_stock

    def test_alert_threshold_rejects_negative(self, inventory_service, seed_inventory):
        with pytest.raises(ValidationError):
            inventory_service.update_alert_threshold("dish_1", -1)

    def test_alert_threshold_missing_record(self, inventory_service, seed_inventory):
        with pytest.raises(InventoryNotFoundError):
            inventory_service.update_alert_threshold("dish_99", 3)

    @pytest.mark.parametrize("field, value", [("alert_threshold", -1), ("cost", -0.5)])
    def test_update_rejects_negative_fields(self, inventory_service, seed_inventory, store, field, value):
        with pytest.raises(ValidationError):
            inventory_service.update_stock("dish_1", 5, **{field: value})

        record = inventory_service.get_inventory_by_dish("dish_1")
        assert record.stock == 20
        assert _dish_stock(store, "dish_1") == 20

    def test_update_survives_dish_mirror_failure(self, inventory_service, seed_inventory, store):
        store.path_for(Collections.DISHES).write_text("{not json", encoding="utf-8")

        record = inventory_service.update_stock("dish_1", 9)

        assert record.stock == 9
        assert store.read(Collections.INVENTORY)[0]["stock"] == 9


class TestBatchUpdate:
    """Tests for batch_update_stock()"""

    def test_partial_success(self, inventory_service, seed_inventory):
        result = inventory_service.batch_update_stock([
            {"dish_id": "dish_1", "stock": 30},
            {"dish_id": "dish_2"},
            {"stock": 3},
            {"dish_id": "dish_4", "stock": -2},
            {"dish_id": "dish_3", "stock": 12, "alert_threshold": 2},
        ])

        assert result.requested == 5
        assert result.succeeded == 2
        assert [r.dish_id for r in result.items] == ["dish_1", "dish_3"]
        assert result.items[1].alert_threshold == 2

    def test_invalid_entry_does_not_abort_batch(self, inventory_service, seed_inventory):
        result = inventory_service.batch_update_stock([
            {"dish_id": "dish_1", "stock": 30},
            {"dish_id": "dish_2", "stock": 7, "cost": "not-a-number"},
            {"dish_id": "dish_3", "stock": 12, "alert_threshold": -4},
            {"dish_id": "dish_4", "stock": 6},
        ])

        assert (result.requested, result.succeeded) == (4, 2)
        assert [r.dish_id for r in result.items] == ["dish_1", "dish_4"]
        assert inventory_service.get_inventory_by_dish("dish_2").stock == 5

    def test_empty_batch(self, inventory_service, seed_inventory):
        result = inventory_service.batch_update_stock([])
        assert (result.requested, result.succeeded) == (0, 0)


class TestSummaryAndSync:
    """Tests for get_inventory_summary() and synchronize_inventory()"""

    def test_summary_totals(self, inventory_service, seed_inventory):
        summary = inventory_service.get_inventory_summary()

        assert summary["total_items"] == 4
        assert summary["total_stock"] == 33
        assert summary["low_stock_items"] == 2
        assert summary["out_of_stock_items"] == 1
        assert summary["expiring_items"] == 1
        assert summary["total_value"] == 58.0
        assert summary["average_stock_per_item"] == 8.25
        assert summary["stock_status"] == {"healthy": 2, "low_stock": 2, "out_of_stock": 1}

    def test_summary_of_empty_inventory(self, inventory_service):
        summary = inventory_service.get_inventory_summary()

        assert summary["total_items"] == 0
        assert summary["average_stock_per_item"] == 0

    def test_sync_creates_and_updates(self, inventory_service, seed_inventory, store):
        dishes = store.read(Collections.DISHES)
        dishes[0]["stock"] = 99
        dishes.append({**dishes[1], "id": "dish_5", "stock": 4})
        store.write(Collections.DISHES, dishes)

        result = inventory_service.synchronize_inventory()

        assert result["created"] == 1
        assert result["updated"] == 1
        assert result["total"] == 5
        assert inventory_service.get_inventory_by_dish("dish_1").stock == 99
        assert inventory_service.get_inventory_by_dish("dish_5").stock == 4

    def test_sync_is_idempotent(self, inventory_service, seed_dishes):
        first = inventory_service.synchronize_inventory()
        second = inventory_service.synchronize_inventory()

        assert first["created"] == 4
        assert second["created"] == 0
        assert second["updated"] == 0
        assert second["message"] == "Synchronized inventory: 0 created, 0 updated"
