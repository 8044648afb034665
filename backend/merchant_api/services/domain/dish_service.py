"""
Dish Service.

Handles dish CRUD, availability status and (simulated) image upload.

Usage:
    from merchant_api.services.domain import DishService

    service = DishService(store)
    dish = service.create_dish({"name": "Tiramisu", "category_id": "cat_4", "price": 6.5})
    service.set_dish_status(dish.id, "off")
"""

from __future__ import annotations

import time
from typing import Any, Iterable, Mapping

from merchant_api.models import Dish
from merchant_api.repositories import CategoryRepository, DishRepository
from merchant_api.services.base_service import BaseCRUDService
from merchant_api.services.domain.inventory_service import InventoryService
from shared.config.constants import DishStatus, IdPrefix
from shared.config.logging import StructuredLogger, menu_logger
from shared.infrastructure.store import EntityStore
from shared.utils.exceptions import AppException, ValidationError
from shared.utils.helpers import round2, sort_records
from shared.utils.validators import validate_image_upload

_VALID_STATUSES = {status.value for status in DishStatus}


class DishService(BaseCRUDService[Dish]):
    """
    Service for dish management.

    Business rules:
    - name, category_id and a positive price are required
    - category_id must resolve to an existing category (active or not)
    - price is stored at 2-decimal precision
    - Delete is soft (status="off")
    - Creating a dish creates its inventory record; a failure there is
      logged and never fails the dish creation
    """

    def __init__(self, store: EntityStore, *, logger: StructuredLogger | None = None):
        super().__init__(
            store,
            repo=DishRepository(store),
            entity_name="Dish",
            id_prefix=IdPrefix.DISH,
            logger=logger or menu_logger,
            image_url_fields={"image_url"},
        )
        self._categories = CategoryRepository(store)

    # =========================================================================
    # Query Methods
    # =========================================================================

    def list_dishes(
        self,
        *,
        category_id: str | None = None,
        status: str | None = None,
        is_vegetarian: bool | None = None,
        is_spicy: bool | None = None,
        sort_by: str = "name",
        sort_order: str = "asc",
    ) -> list[Dish]:
        """List dishes with optional filters. Default order: name ascending."""
        dishes = self._repo.find_all()
        if category_id:
            dishes = [d for d in dishes if d.category_id == category_id]
        if status:
            dishes = [d for d in dishes if d.status == status]
        if is_vegetarian is not None:
            dishes = [d for d in dishes if d.is_vegetarian == is_vegetarian]
        if is_spicy is not None:
            dishes = [d for d in dishes if d.is_spicy == is_spicy]
        return sort_records(dishes, sort_by, sort_order)

    def get_dish(self, dish_id: str) -> Dish:
        return self.get_by_id(dish_id)

    # =========================================================================
    # Command Methods
    # =========================================================================

    def create_dish(self, data: Mapping[str, Any]) -> Dish:
        return self.create(dict(data))

    def update_dish(self, dish_id: str, data: Mapping[str, Any]) -> Dish:
        return self.update(dish_id, dict(data))

    def delete_dish(self, dish_id: str) -> Dish:
        return self.delete(dish_id)

    def set_dish_status(self, dish_id: str, status: str) -> Dish:
        """
        Turn a dish on or off.

        Raises:
            ValidationError: status is not "on"/"off".
            NotFoundError: dish does not exist.
        """
        self._check_status(status)
        return self.update(dish_id, {"status": status})

    def batch_set_dish_status(self, dish_ids: Iterable[str], status: str) -> list[Dish]:
        """
        Set the status of several dishes at once.

        Ids that do not resolve are skipped. Returns only the dishes that
        were updated, in request order.
        """
        self._check_status(status)
        updated: list[Dish] = []
        skipped: list[str] = []

        with self._repo.lock():
            dishes = self._repo.find_all()
            for dish_id in dish_ids:
                index = self._repo.index_of(dishes, dish_id)
                if index is None:
                    skipped.append(dish_id)
                    continue
                dishes[index].status = DishStatus(status)
                dishes[index].touch()
                updated.append(dishes[index])
            if updated:
                self._repo.save_all(dishes)

        if skipped:
            self._logger.warning("Skipped unknown dishes in batch status update", dish_ids=skipped)
        self._logger.info("Batch dish status update", status=status, updated=len(updated))
        return updated

    def upload_dish_image(
        self,
        dish_id: str,
        *,
        filename: str = "dish_image.jpg",
        mimetype: str = "image/jpeg",
        size: int = 0,
    ) -> dict[str, Any]:
        """
        Simulated image upload: no bytes are stored, a URL is synthesized
        as ``/images/dishes/<dish_id>_<epoch-ms>.<ext>`` and set on the dish.

        Raises:
            ValidationError: unsupported image type or size.
            NotFoundError: dish does not exist.
        """
        try:
            extension = validate_image_upload(mimetype, size)
        except ValueError as e:
            raise ValidationError(str(e), dish_id=dish_id, filename=filename)

        image_url = f"/images/dishes/{dish_id}_{int(time.time() * 1000)}.{extension}"
        self.update(dish_id, {"image_url": image_url})

        self._logger.info("Dish image uploaded", dish_id=dish_id, filename=filename, size=size)
        return {
            "success": True,
            "image_url": image_url,
            "message": "Image uploaded successfully",
        }

    # =========================================================================
    # Hooks
    # =========================================================================

    def _build_entity(self, entity_id: str, data: dict[str, Any], existing: list[Dish]) -> Dish:
        return Dish(
            id=entity_id,
            category_id=data["category_id"],
            name=str(data["name"]).strip(),
            description=data.get("description") or "",
            price=round2(data["price"]),
            status=data.get("status") or DishStatus.ON,
            stock=data.get("stock") or 0,
            image_url=data.get("image_url") or "",
            ingredients=data.get("ingredients") or [],
            allergens=data.get("allergens") or [],
            is_spicy=bool(data.get("is_spicy", False)),
            is_vegetarian=bool(data.get("is_vegetarian", False)),
            preparation_time=data.get("preparation_time") or 0,
            calories=data.get("calories") or 0,
        )

    def _soft_delete_changes(self) -> dict[str, Any]:
        return {"status": DishStatus.OFF}

    def _prepare_update(self, entity: Dish, data: dict[str, Any]) -> dict[str, Any]:
        if data.get("price") is not None:
            data["price"] = round2(data["price"])
        return data

    def _validate_create(self, data: dict[str, Any]) -> None:
        for field_name in ("name", "category_id", "price"):
            value = data.get(field_name)
            if value is None or (isinstance(value, str) and not value.strip()):
                raise ValidationError(f"Missing required field: {field_name}", field=field_name)

        self._check_price(data["price"])
        self._check_category(data["category_id"])
        if data.get("status") is not None:
            self._check_status(data["status"])

    def _validate_update(self, entity: Dish, data: dict[str, Any]) -> None:
        if data.get("category_id"):
            self._check_category(data["category_id"])
        if data.get("price") is not None:
            self._check_price(data["price"])
        if data.get("status") is not None:
            self._check_status(data["status"])

    def _after_create(self, entity: Dish, data: dict[str, Any]) -> None:
        """Create the matching inventory record. Failures are logged only."""
        try:
            InventoryService(self._store, logger=self._logger).ensure_record(
                entity.id, entity.stock
            )
        except AppException as e:
            self._logger.error(
                "Failed to create inventory entry for new dish",
                dish_id=entity.id,
                error=str(e),
            )

    # =========================================================================
    # Checks
    # =========================================================================

    def _check_category(self, category_id: str) -> None:
        if not self._categories.exists(category_id):
            raise ValidationError("Category not found", field="category_id", category_id=category_id)

    @staticmethod
    def _check_price(price: Any) -> None:
        try:
            value = float(price)
        except (TypeError, ValueError):
            raise ValidationError("Price must be a number", field="price")
        if value <= 0:
            raise ValidationError("Price must be greater than 0", field="price")

    @staticmethod
    def _check_status(status: str | DishStatus) -> None:
        value = status.value if isinstance(status, DishStatus) else status
        if value not in _VALID_STATUSES:
            raise ValidationError('Status must be either "on" or "off"', field="status")
