"""
Base Service Classes.

Provides base classes for application services that:
- Use Repositories for collection access (never the store files directly)
- Hold the collection lock across every read-modify-write
- Handle business rules through overridable validation hooks
- Log through an injected structured logger

Architecture:
    Router (thin) → Service (business logic) → Repository (collection access) → EntityStore

Usage:
    from merchant_api.services.base_service import BaseCRUDService

    class CategoryService(BaseCRUDService[Category]):
        def __init__(self, store: EntityStore, *, logger=None):
            super().__init__(
                store,
                repo=CategoryRepository(store),
                entity_name="Category",
                id_prefix=IdPrefix.CATEGORY,
                logger=logger,
            )
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError as PydanticValidationError

from merchant_api.repositories.base import CollectionRepository
from shared.config.logging import StructuredLogger, get_logger
from shared.infrastructure.store import EntityStore
from shared.utils.exceptions import NotFoundError, ValidationError
from shared.utils.helpers import generate_id, utc_now_iso
from shared.utils.validators import validate_image_url

ModelT = TypeVar("ModelT", bound=BaseModel)


class BaseService:
    """
    Base service: store access plus an injectable logger.

    Services never reach for a process-wide logger directly; callers may
    pass one in (tests, CLI) and otherwise get the module logger.
    """

    def __init__(self, store: EntityStore, *, logger: StructuredLogger | None = None):
        self._store = store
        self._logger = logger or get_logger(type(self).__module__)


class BaseCRUDService(BaseService, Generic[ModelT]):
    """
    Base service for entities with CRUD operations and soft delete.

    Subclasses provide:
    - _build_entity(): defaults for a new record
    - _soft_delete_changes(): the patch that marks a record deleted
    - _validate_* hooks for business rules
    """

    def __init__(
        self,
        store: EntityStore,
        *,
        repo: CollectionRepository[ModelT],
        entity_name: str,
        id_prefix: str,
        logger: StructuredLogger | None = None,
        image_url_fields: set[str] | None = None,
    ):
        super().__init__(store, logger=logger)
        self._repo = repo
        self._entity_name = entity_name
        self._id_prefix = id_prefix
        self._image_url_fields = image_url_fields or set()

    # =========================================================================
    # Read Operations
    # =========================================================================

    def get_by_id(self, entity_id: str) -> ModelT:
        """
        Get entity by ID.

        Raises:
            NotFoundError: If entity not found.
        """
        entity = self._repo.find_by_key(entity_id)
        if entity is None:
            raise NotFoundError(self._entity_name, entity_id)
        return entity

    # =========================================================================
    # Write Operations
    # =========================================================================

    def create(self, data: dict[str, Any]) -> ModelT:
        """
        Create new entity with the smallest unused ``<prefix><n>`` id.

        Args:
            data: Entity data dictionary.

        Returns:
            The created entity.

        Raises:
            ValidationError: If data is invalid.
            StoreError: If the collection cannot be written.
        """
        self._validate_create(data)
        data = self._validate_image_urls(data)

        with self._repo.lock():
            entities = self._repo.find_all()
            entity_id = generate_id(self._id_prefix, [self._repo.key_of(e) for e in entities])
            entity = self._build_entity(entity_id, data, entities)
            entities.append(entity)
            self._repo.save_all(entities)

        self._logger.info(f"{self._entity_name} created", entity_id=entity_id)

        # Hook for post-create actions
        self._after_create(entity, data)

        return entity

    def update(self, entity_id: str, data: dict[str, Any]) -> ModelT:
        """
        Merge ``data`` onto an existing entity. The id never changes and
        updated_at is refreshed.

        Raises:
            NotFoundError: If entity not found.
            ValidationError: If data is invalid.
        """
        with self._repo.lock():
            entities = self._repo.find_all()
            index = self._repo.index_of(entities, entity_id)
            if index is None:
                raise NotFoundError(self._entity_name, entity_id)

            current = entities[index]
            self._validate_update(current, data)
            data = self._validate_image_urls(data)
            data = self._prepare_update(current, data)

            updated = self._merge(current, data)
            entities[index] = updated
            self._repo.save_all(entities)

        self._logger.info(
            f"{self._entity_name} updated",
            entity_id=entity_id,
            fields=sorted(data.keys()),
        )

        # Hook for post-update actions
        self._after_update(updated, data)

        return updated

    def delete(self, entity_id: str) -> ModelT:
        """
        Soft delete: the record stays in the collection.

        Raises:
            NotFoundError: If entity not found.
            ConflictError: If a business rule forbids the delete.
        """
        with self._repo.lock():
            entity = self.get_by_id(entity_id)
            self._validate_delete(entity)
            deleted = self.update(entity_id, self._soft_delete_changes())

        self._logger.info(f"{self._entity_name} deleted", entity_id=entity_id)
        return deleted

    # =========================================================================
    # Internals
    # =========================================================================

    def _merge(self, current: ModelT, data: dict[str, Any]) -> ModelT:
        merged = {**current.model_dump(), **data}
        merged[self._repo.key_field] = self._repo.key_of(current)
        if "updated_at" in merged:
            merged["updated_at"] = utc_now_iso()
        try:
            return type(current).model_validate(merged)
        except PydanticValidationError as e:
            raise ValidationError(
                f"Invalid {self._entity_name.lower()} data",
                entity_id=self._repo.key_of(current),
                error=str(e),
            )

    def _validate_image_urls(self, data: dict[str, Any]) -> dict[str, Any]:
        """Validate image URL fields in data."""
        for field_name in self._image_url_fields:
            if field_name in data and data[field_name]:
                try:
                    data[field_name] = validate_image_url(data[field_name])
                except ValueError as e:
                    raise ValidationError(str(e), field=field_name)
        return data

    # =========================================================================
    # Hooks (override in subclasses)
    # =========================================================================

    def _build_entity(
        self, entity_id: str, data: dict[str, Any], existing: list[ModelT]
    ) -> ModelT:
        raise NotImplementedError

    def _soft_delete_changes(self) -> dict[str, Any]:
        raise NotImplementedError

    def _prepare_update(self, entity: ModelT, data: dict[str, Any]) -> dict[str, Any]:
        """Normalize an update patch. Default: unchanged."""
        return data

    def _validate_create(self, data: dict[str, Any]) -> None:
        """
        Validate data before create.

        Raises:
            ValidationError: If validation fails.
        """
        pass

    def _validate_update(self, entity: ModelT, data: dict[str, Any]) -> None:
        """
        Validate data before update.

        Raises:
            ValidationError: If validation fails.
        """
        pass

    def _validate_delete(self, entity: ModelT) -> None:
        """
        Validate before delete.

        Raises:
            ConflictError: If dependent entities block the delete.
        """
        pass

    def _after_create(self, entity: ModelT, data: dict[str, Any]) -> None:
        """Hook called after successful create."""
        pass

    def _after_update(self, entity: ModelT, data: dict[str, Any]) -> None:
        """Hook called after successful update."""
        pass
