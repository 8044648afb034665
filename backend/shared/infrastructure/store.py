"""
Entity store: flat JSON collections read and written wholesale.

Each collection lives in ``<data_dir>/<name>.json``. Writes go through a
temp file + rename so a crash never leaves a half-written collection, and
the previous file is kept as ``<name>.json.backup``.

Writers of the same collection are serialized with a per-collection
re-entrant lock. Services hold the lock across read-modify-write:

    with store.lock(Collections.DISHES):
        dishes = store.read(Collections.DISHES)
        ...
        store.write(Collections.DISHES, dishes)

There are no cross-collection transactions.
"""

import json
import os
import shutil
import threading
from collections.abc import Generator, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from shared.config.constants import Collections
from shared.config.logging import get_logger
from shared.config.settings import settings
from shared.utils.exceptions import StoreError

logger = get_logger(__name__)


class EntityStore:
    """JSON file store for list collections and single-document collections."""

    def __init__(self, data_dir: Path | str, *, keep_backups: bool = True):
        self._data_dir = Path(data_dir)
        self._keep_backups = keep_backups
        self._locks: dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()
        self._data_dir.mkdir(parents=True, exist_ok=True)

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, name: str) -> Path:
        return self._data_dir / f"{name}.json"

    def exists(self, name: str) -> bool:
        return self.path_for(name).exists()

    def _empty_value(self, name: str) -> Any:
        return {} if name in Collections.DOCUMENTS else []

    # =========================================================================
    # Locking
    # =========================================================================

    def _get_lock(self, name: str) -> threading.RLock:
        with self._locks_guard:
            lock = self._locks.get(name)
            if lock is None:
                lock = threading.RLock()
                self._locks[name] = lock
            return lock

    @contextmanager
    def lock(self, *names: str) -> Iterator[None]:
        """
        Hold the write lock of one or more collections.

        Locks are always taken in sorted name order so that two callers
        locking the same pair of collections cannot deadlock.
        """
        locks = [self._get_lock(name) for name in sorted(set(names))]
        for lock in locks:
            lock.acquire()
        try:
            yield
        finally:
            for lock in reversed(locks):
                lock.release()

    # =========================================================================
    # Read / Write
    # =========================================================================

    def read(self, name: str) -> Any:
        """
        Read a whole collection.

        Returns an empty list (or empty dict for document collections) when
        the file does not exist. Raises StoreError on unreadable/invalid JSON.
        """
        path = self.path_for(name)
        if not path.exists():
            logger.debug("Collection file not found, returning empty", collection=name)
            return self._empty_value(name)

        try:
            with path.open("r", encoding="utf-8") as fh:
                return json.load(fh)
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError("read", name, error=str(e))

    def write(self, name: str, data: Any) -> None:
        """Replace a whole collection. Raises StoreError on failure."""
        path = self.path_for(name)
        tmp_path = path.with_name(path.name + ".tmp")

        with self.lock(name):
            self._backup(name)
            try:
                with tmp_path.open("w", encoding="utf-8") as fh:
                    json.dump(data, fh, indent=2, ensure_ascii=False, default=str)
                os.replace(tmp_path, path)
            except (OSError, TypeError, ValueError) as e:
                tmp_path.unlink(missing_ok=True)
                raise StoreError("write", name, error=str(e))

        logger.debug("Collection written", collection=name)

    def _backup(self, name: str) -> None:
        """Copy the current file aside. Failure is logged, never raised."""
        if not self._keep_backups:
            return
        path = self.path_for(name)
        if not path.exists():
            return
        try:
            shutil.copyfile(path, path.with_name(path.name + ".backup"))
        except OSError as e:
            logger.warning("Failed to create backup", collection=name, error=str(e))


_store: EntityStore | None = None
_store_guard = threading.Lock()


def get_entity_store() -> EntityStore:
    """Process-wide store rooted at settings.data_dir."""
    global _store
    with _store_guard:
        if _store is None:
            _store = EntityStore(settings.data_dir)
        return _store


def get_store() -> Generator[EntityStore, None, None]:
    """
    FastAPI dependency for the entity store.

    Usage:
        @router.get("/dishes")
        def list_dishes(store: EntityStore = Depends(get_store)):
            ...
    """
    yield get_entity_store()
