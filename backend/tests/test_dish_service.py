"""
Tests for DishService.

Tests cover:
- Creation rules and the inventory record created alongside
- Filters on list_dishes()
- Status changes, single and batch
- Simulated image upload
"""

import re

import pytest

from merchant_api.services.domain import DishService, InventoryService
from shared.config.constants import Collections, DishStatus
from shared.utils.exceptions import NotFoundError, ValidationError


@pytest.fixture
def dish_service(store):
    return DishService(store)


def _dish_payload(**overrides):
    payload = {"name": "Cazuela", "category_id": "cat_2", "price": 9.999}
    payload.update(overrides)
    return payload


class TestDishCreate:
    """Tests for create_dish()"""

    def test_assigns_next_id_and_defaults(self, dish_service, seed_dishes):
        dish = dish_service.create_dish(_dish_payload())

        assert dish.id == "dish_5"
        assert dish.status == DishStatus.ON
        assert dish.stock == 0
        assert dish.ingredients == []

    def test_price_rounded_to_cents(self, dish_service, seed_dishes):
        dish = dish_service.create_dish(_dish_payload(price=9.999))
        assert dish.price == 10.0

    def test_creates_inventory_record(self, dish_service, seed_dishes, store):
        dish = dish_service.create_dish(_dish_payload(stock=12))

        record = InventoryService(store).get_inventory_by_dish(dish.id)
        assert record.stock == 12
        assert record.alert_threshold == 5
        assert record.supplier == ""

    def test_inventory_failure_does_not_block_creation(self, dish_service, seed_dishes, store):
        store.path_for(Collections.INVENTORY).write_text("{not json", encoding="utf-8")

        dish = dish_service.create_dish(_dish_payload(stock=3))

        assert dish.id == "dish_5"
        assert dish_service.get_dish("dish_5").stock == 3
        assert store.path_for(Collections.INVENTORY).read_text(encoding="utf-8") == "{not json"

    def test_unknown_category_rejected(self, dish_service, seed_dishes, store):
        with pytest.raises(ValidationError) as exc:
            dish_service.create_dish(_dish_payload(category_id="cat_42"))

        assert "Category not found" in exc.value.detail
        assert len(store.read(Collections.DISHES)) == 4

    def test_inactive_category_accepted(self, dish_service, seed_dishes, store):
        categories = store.read(Collections.CATEGORIES)
        categories[2]["is_active"] = False
        store.write(Collections.CATEGORIES, categories)

        dish = dish_service.create_dish(_dish_payload(category_id="cat_3"))
        assert dish.category_id == "cat_3"

    @pytest.mark.parametrize("price", [0, -1, "free"])
    def test_invalid_price_rejected(self, dish_service, seed_dishes, price):
        with pytest.raises(ValidationError):
            dish_service.create_dish(_dish_payload(price=price))

    @pytest.mark.parametrize("missing", ["name", "category_id", "price"])
    def test_required_fields(self, dish_service, seed_dishes, missing):
        payload = _dish_payload()
        del payload[missing]

        with pytest.raises(ValidationError) as exc:
            dish_service.create_dish(payload)
        assert missing in exc.value.detail


class TestDishQueries:
    """Tests for list_dishes() and get_dish()"""

    def test_default_order_is_name_ascending(self, dish_service, seed_dishes):
        names = [d.name for d in dish_service.list_dishes()]
        assert names == ["Chorrillana", "Empanada", "Pastel de Choclo", "Sopaipilla"]

    def test_filter_by_category_and_status(self, dish_service, seed_dishes):
        dishes = dish_service.list_dishes(category_id="cat_2", status="on")
        assert [d.id for d in dishes] == ["dish_2"]

    def test_filter_by_flags(self, dish_service, seed_dishes):
        assert [d.id for d in dish_service.list_dishes(is_vegetarian=True)] == ["dish_4"]
        assert [d.id for d in dish_service.list_dishes(is_spicy=True)] == ["dish_3"]

    def test_sort_by_price_desc(self, dish_service, seed_dishes):
        dishes = dish_service.list_dishes(sort_by="price", sort_order="desc")
        assert [d.id for d in dishes] == ["dish_3", "dish_2", "dish_1", "dish_4"]

    def test_get_missing_raises_not_found(self, dish_service, seed_dishes):
        with pytest.raises(NotFoundError):
            dish_service.get_dish("dish_99")


class TestDishUpdateAndDelete:
    """Tests for update_dish(), delete_dish() and status changes"""

    def test_update_rounds_price(self, dish_service, seed_dishes):
        dish = dish_service.update_dish("dish_1", {"price": 5.555})
        assert dish.price == 5.56

    def test_update_rejects_unknown_category(self, dish_service, seed_dishes):
        with pytest.raises(ValidationError):
            dish_service.update_dish("dish_1", {"category_id": "cat_42"})

    def test_delete_is_soft(self, dish_service, seed_dishes, store):
        dish = dish_service.delete_dish("dish_1")

        assert dish.status == DishStatus.OFF
        stored = {d["id"]: d for d in store.read(Collections.DISHES)}
        assert stored["dish_1"]["status"] == "off"

    def test_set_status(self, dish_service, seed_dishes):
        dish = dish_service.set_dish_status("dish_3", "on")
        assert dish.is_available

    def test_set_invalid_status(self, dish_service, seed_dishes):
        with pytest.raises(ValidationError):
            dish_service.set_dish_status("dish_1", "paused")

    def test_batch_status_skips_unknown_ids(self, dish_service, seed_dishes, store):
        updated = dish_service.batch_set_dish_status(["dish_1", "dish_99", "dish_2"], "off")

        assert [d.id for d in updated] == ["dish_1", "dish_2"]
        statuses = {d["id"]: d["status"] for d in store.read(Collections.DISHES)}
        assert statuses == {"dish_1": "off", "dish_2": "off", "dish_3": "off", "dish_4": "on"}

    def test_batch_status_all_unknown_writes_nothing(self, dish_service, seed_dishes):
        assert dish_service.batch_set_dish_status(["dish_98", "dish_99"], "off") == []


class TestDishImageUpload:
    """Tests for upload_dish_image()"""

    def test_synthesizes_url_and_sets_it(self, dish_service, seed_dishes):
        result = dish_service.upload_dish_image("dish_1", mimetype="image/png", size=1024)

        assert result["success"] is True
        assert re.fullmatch(r"/images/dishes/dish_1_\d+\.png", result["image_url"])
        assert dish_service.get_dish("dish_1").image_url == result["image_url"]

    def test_rejects_unsupported_type(self, dish_service, seed_dishes):
        with pytest.raises(ValidationError) as exc:
            dish_service.upload_dish_image("dish_1", mimetype="application/pdf")
        assert "Unsupported image type" in exc.value.detail

    def test_rejects_oversized_file(self, dish_service, seed_dishes):
        with pytest.raises(ValidationError):
            dish_service.upload_dish_image("dish_1", size=6 * 1024 * 1024)

    def test_unknown_dish(self, dish_service, seed_dishes):
        with pytest.raises(NotFoundError):
            dish_service.upload_dish_image("dish_99")
