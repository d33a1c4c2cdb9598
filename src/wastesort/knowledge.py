"""Waste knowledge base: the built-in list plus user-added records."""

import logging
from collections.abc import Iterable

from pydantic import TypeAdapter

from wastesort.constants import USER_DATABASE_KEY
from wastesort.data import WASTE_DATABASE
from wastesort.models import WasteRecord
from wastesort.storage import KeyValueStore, load_list, save_list

logger = logging.getLogger(__name__)

_RECORDS = TypeAdapter(list[WasteRecord])


class KnowledgeBase:
    """Read-mostly record list with an append-only user extension.

    User records are prepended on insert and persisted in one storage
    slot. A record whose name equals (case-insensitively) an existing
    name is suppressed.
    """

    def __init__(
        self,
        store: KeyValueStore,
        builtin: Iterable[WasteRecord] = WASTE_DATABASE,
        *,
        key: str = USER_DATABASE_KEY,
    ) -> None:
        self._store = store
        self._key = key
        self._builtin: tuple[WasteRecord, ...] = tuple(builtin)
        self._user: list[WasteRecord] = load_list(store, key, _RECORDS)

    def records(self) -> list[WasteRecord]:
        """Fresh concatenation of built-in and user records."""
        return [*self._builtin, *self._user]

    def user_records(self) -> list[WasteRecord]:
        return list(self._user)

    def _names(self) -> set[str]:
        return {r.name.lower() for r in (*self._builtin, *self._user)}

    def contains(self, name: str) -> bool:
        return name.lower() in self._names()

    def is_user_record(self, name: str) -> bool:
        return any(r.name == name for r in self._user)

    def add(self, record: WasteRecord) -> bool:
        """Insert a user record; False when the name already exists."""
        if self.contains(record.name):
            logger.debug("Skipping duplicate record %r", record.name)
            return False

        self._user = [record, *self._user]
        save_list(self._store, self._key, _RECORDS, self._user)
        return True
