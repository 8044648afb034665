"""
Repository Pattern over the JSON entity store.

Provides typed access to whole collections: records come out as pydantic
models and go back in as JSON-ready dicts. There is no partial update;
callers load a collection, change it, and save it back while holding the
collection lock.

Usage:
    from merchant_api.repositories import DishRepository

    repo = DishRepository(store)

    with repo.lock():
        dishes = repo.find_all()
        index = repo.index_of(dishes, "dish_3")
        dishes[index].status = DishStatus.OFF
        repo.save_all(dishes)
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Any, ClassVar, Generic, Sequence, TypeVar

from pydantic import ValidationError as PydanticValidationError

from merchant_api.models.base import StoredModel

from shared.infrastructure.store import EntityStore
from shared.utils.exceptions import StoreError

ModelT = TypeVar("ModelT", bound=StoredModel)


class CollectionRepository(Generic[ModelT]):
    """
    Repository for list-shaped collections.

    Subclasses set ``collection``, ``model`` and, when records are not
    keyed by ``id``, ``key_field``.
    """

    collection: ClassVar[str]
    model: ClassVar[type[StoredModel]]
    key_field: ClassVar[str] = "id"

    def __init__(self, store: EntityStore):
        self._store = store

    @property
    def store(self) -> EntityStore:
        return self._store

    def lock(self) -> AbstractContextManager[None]:
        """Hold the collection's write lock across a read-modify-write."""
        return self._store.lock(self.collection)

    # =========================================================================
    # Read
    # =========================================================================

    def find_all(self) -> list[ModelT]:
        raw = self._store.read(self.collection)
        if not isinstance(raw, list):
            raise StoreError("parse", self.collection, error="expected a JSON list")
        try:
            return [self.model.model_validate(item) for item in raw]  # type: ignore[misc]
        except PydanticValidationError as e:
            raise StoreError("parse", self.collection, error=str(e))

    def find_by_key(self, key: str) -> ModelT | None:
        for item in self.find_all():
            if self.key_of(item) == key:
                return item
        return None

    def exists(self, key: str) -> bool:
        return self.find_by_key(key) is not None

    def key_of(self, item: ModelT) -> Any:
        return getattr(item, self.key_field)

    def index_of(self, items: Sequence[ModelT], key: str) -> int | None:
        for index, item in enumerate(items):
            if self.key_of(item) == key:
                return index
        return None

    def as_map(self, items: Sequence[ModelT] | None = None) -> dict[str, ModelT]:
        """Records keyed by their key field, for joins."""
        if items is None:
            items = self.find_all()
        return {self.key_of(item): item for item in items}

    # =========================================================================
    # Write
    # =========================================================================

    def save_all(self, items: Sequence[ModelT]) -> None:
        self._store.write(
            self.collection,
            [item.to_record() for item in items],
        )


class DocumentRepository(Generic[ModelT]):
    """Read-only repository for collections stored as a single JSON document."""

    collection: ClassVar[str]
    model: ClassVar[type[StoredModel]]

    def __init__(self, store: EntityStore):
        self._store = store

    def load(self) -> ModelT:
        """Load the document. A missing file yields the model's defaults."""
        raw = self._store.read(self.collection)
        if not isinstance(raw, dict):
            raise StoreError("parse", self.collection, error="expected a JSON object")
        try:
            return self.model.model_validate(raw)  # type: ignore[return-value]
        except PydanticValidationError as e:
            raise StoreError("parse", self.collection, error=str(e))
