# app/services/selection_service.py
"""
Wishlist and compare sets.

Both are client-side state: the HTTP layer keeps them in the visitor's
cookies, never in the database. A set is stored as a JSON array of id
strings under its own key.
"""
import json
import logging
from typing import MutableMapping

from app.schemas.user import SelectionRead, ToggleResult

logger = logging.getLogger(__name__)

WISHLIST = "wishlist"
COMPARE = "compare"


class SelectionSet:
    """
    Ordered set of product ids persisted in a string key/value store.

    With a `limit`, adding beyond it leaves the set unchanged and reports
    full=True instead of raising.
    """

    def __init__(
        self,
        name: str,
        storage: MutableMapping[str, str],
        limit: int | None = None,
    ):
        self.name = name
        self.storage = storage
        self.limit = limit

    def items(self) -> list[str]:
        """Stored ids; unreadable payloads read as an empty set."""
        raw = self.storage.get(self.name)
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except ValueError:
            logger.debug("Ignoring unreadable %s payload", self.name)
            return []
        if not isinstance(data, list):
            return []
        return [x for x in data if isinstance(x, str)]

    def _save(self, items: list[str]) -> None:
        self.storage[self.name] = json.dumps(items)

    def __contains__(self, item_id: str) -> bool:
        return str(item_id) in self.items()

    def __len__(self) -> int:
        return len(self.items())

    def toggle(self, item_id: str | None) -> ToggleResult:
        key = str(item_id or "").strip()
        items = self.items()
        if not key:
            return ToggleResult(active=False, items=items)

        if key in items:
            items.remove(key)
            self._save(items)
            return ToggleResult(active=False, items=items)

        if self.limit is not None and len(items) >= self.limit:
            return ToggleResult(active=False, items=items, full=True)

        items.append(key)
        self._save(items)
        return ToggleResult(active=True, items=items)

    def clear(self) -> None:
        self._save([])

    def read(self) -> SelectionRead:
        return SelectionRead(name=self.name, items=self.items(), limit=self.limit)


def wishlist(storage: MutableMapping[str, str]) -> SelectionSet:
    return SelectionSet(WISHLIST, storage)


def compare_set(storage: MutableMapping[str, str], limit: int) -> SelectionSet:
    return SelectionSet(COMPARE, storage, limit=limit)
