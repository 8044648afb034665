"""
Category Service.

Handles all category-related business logic.

Usage:
    from merchant_api.services.domain import CategoryService

    service = CategoryService(store)
    categories = service.list_categories(is_active=True)
    category = service.create_category({"name": "Desserts"})
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from merchant_api.models import Category
from merchant_api.repositories import CategoryRepository, DishRepository
from merchant_api.services.base_service import BaseCRUDService
from shared.config.constants import IdPrefix
from shared.config.logging import StructuredLogger, menu_logger
from shared.infrastructure.store import EntityStore
from shared.utils.exceptions import ConflictError, ValidationError
from shared.utils.helpers import sort_records


class CategoryService(BaseCRUDService[Category]):
    """
    Service for category management.

    Business rules:
    - Name is required
    - sort_order defaults to the position after the last category
    - Delete is soft (is_active=False)
    - A category referenced by any dish, on or off, cannot be deleted
    """

    def __init__(self, store: EntityStore, *, logger: StructuredLogger | None = None):
        super().__init__(
            store,
            repo=CategoryRepository(store),
            entity_name="Category",
            id_prefix=IdPrefix.CATEGORY,
            logger=logger or menu_logger,
        )
        self._dishes = DishRepository(store)

    # =========================================================================
    # Query Methods
    # =========================================================================

    def list_categories(
        self,
        *,
        is_active: bool | None = None,
        sort_by: str = "sort_order",
        sort_order: str = "asc",
    ) -> list[Category]:
        """List categories, optionally filtered by active flag."""
        categories = self._repo.find_all()
        if is_active is not None:
            categories = [c for c in categories if c.is_active == is_active]
        return sort_records(categories, sort_by, sort_order)

    def get_category(self, category_id: str) -> Category:
        return self.get_by_id(category_id)

    # =========================================================================
    # Command Methods
    # =========================================================================

    def create_category(self, data: Mapping[str, Any]) -> Category:
        return self.create(dict(data))

    def update_category(self, category_id: str, data: Mapping[str, Any]) -> Category:
        return self.update(category_id, dict(data))

    def delete_category(self, category_id: str) -> Category:
        return self.delete(category_id)

    def reorder_categories(self, items: Iterable[Mapping[str, Any]]) -> list[Category]:
        """
        Apply new sort orders.

        Unknown ids are skipped silently. Returns the whole collection
        sorted by sort_order.

        Args:
            items: Sequence of {"id": ..., "sort_order": ...}.
        """
        applied = 0
        with self._repo.lock():
            categories = self._repo.find_all()
            for item in items:
                index = self._repo.index_of(categories, item["id"])
                if index is None:
                    self._logger.debug("Skipping unknown category in reorder", category_id=item["id"])
                    continue
                categories[index].sort_order = item["sort_order"]
                categories[index].touch()
                applied += 1
            self._repo.save_all(categories)

        self._logger.info("Categories reordered", applied=applied)
        return sorted(categories, key=lambda c: c.sort_order)

    # =========================================================================
    # Hooks
    # =========================================================================

    def _build_entity(
        self, entity_id: str, data: dict[str, Any], existing: list[Category]
    ) -> Category:
        return Category(
            id=entity_id,
            name=data["name"].strip(),
            description=data.get("description") or "",
            sort_order=data.get("sort_order") or len(existing) + 1,
            is_active=data["is_active"] if data.get("is_active") is not None else True,
        )

    def _soft_delete_changes(self) -> dict[str, Any]:
        return {"is_active": False}

    def _validate_create(self, data: dict[str, Any]) -> None:
        name = data.get("name")
        if not name or not str(name).strip():
            raise ValidationError("Category name is required", field="name")

    def _validate_update(self, entity: Category, data: dict[str, Any]) -> None:
        if "name" in data and not str(data["name"] or "").strip():
            raise ValidationError("Category name cannot be empty", field="name")

    def _validate_delete(self, entity: Category) -> None:
        dishes = self._dishes.find_by_category(entity.id)
        if dishes:
            raise ConflictError(
                "Cannot delete category with existing dishes. "
                f"Found {len(dishes)} dishes in this category.",
                category_id=entity.id,
                dish_count=len(dishes),
            )
