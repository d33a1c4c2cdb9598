"""Durable key-value storage slots.

Each persistent component (response cache, popularity tracker, user
knowledge base) owns one named slot holding a JSON array. The default
backend is a diskcache directory; :class:`MemoryStore` keeps the same
contract in memory for tests and embedding.
"""

import logging
from typing import Protocol

import diskcache
from pydantic import TypeAdapter

from wastesort.constants import CACHE_DIR

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """String slots addressed by key."""

    def get_string(self, key: str) -> str | None: ...

    def set_string(self, key: str, value: str) -> None: ...


class DiskStore:
    """Key-value slots persisted with diskcache.

    Slots never expire on the backend; entry-level expiry is handled by
    the owning component.
    """

    def __init__(self, directory: str | None = None) -> None:
        self.directory = directory or CACHE_DIR
        self._cache = diskcache.Cache(self.directory)

    def get_string(self, key: str) -> str | None:
        value = self._cache.get(key)
        if value is None:
            return None
        if not isinstance(value, str):
            logger.warning("Ignoring non-text value in slot %s", key)
            return None
        return value

    def set_string(self, key: str, value: str) -> None:
        self._cache.set(key, value)

    def close(self) -> None:
        self._cache.close()

    def __enter__(self) -> "DiskStore":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class MemoryStore:
    """In-process dictionary with the :class:`KeyValueStore` contract."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    def get_string(self, key: str) -> str | None:
        return self.data.get(key)

    def set_string(self, key: str, value: str) -> None:
        self.data[key] = value


def load_list(store: KeyValueStore, key: str, adapter: TypeAdapter) -> list:
    """Read and validate the JSON array held in a slot.

    Missing, corrupt or unreadable slots yield an empty list; the
    failure is logged and never raised.
    """
    try:
        raw = store.get_string(key)
        if not raw:
            return []
        return list(adapter.validate_json(raw))
    except Exception as exc:
        logger.error("Failed to load slot %s: %s", key, exc)
        return []


def save_list(
    store: KeyValueStore, key: str, adapter: TypeAdapter, items: list
) -> bool:
    """Write a whole list to a slot; returns False (and logs) on failure."""
    try:
        store.set_string(key, adapter.dump_json(items).decode("utf-8"))
    except Exception as exc:
        logger.error("Failed to save slot %s: %s", key, exc)
        return False
    return True
