# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Reunite — Abstract ItemStore
Read access to all item reports; the only engine-side write is the
status / matched_with pair. Report creation and deletion are external
actions that come through the same interface.

InMemoryItemStore  — development / tests
RedisItemStore     — shared state across API workers
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import Optional

from reunite.core.exceptions import DuplicateItemError
from reunite.models.item import Item, ItemStatus, ItemType
from reunite.utils.logger import get_logger

log = get_logger(__name__)


# ─── Abstract Interface ──────────────────────────────────────────────────────

class ItemStore(ABC):
    """
    Abstract base class for item backends.
    All methods are synchronous.
    """

    @abstractmethod
    def add_item(self, item: Item) -> Item:
        """Store a new report. Raises DuplicateItemError if the id is taken."""

    @abstractmethod
    def get_item(self, item_id: str) -> Optional[Item]:
        """Return Item by ID, or None if not found."""

    @abstractmethod
    def list_items(self) -> list[Item]:
        """Return all items in a stable order."""

    @abstractmethod
    def set_status(
        self,
        item_id: str,
        status: ItemStatus,
        matched_with: Optional[str] = None,
    ) -> Optional[Item]:
        """Update status and matched_with. Returns the updated item or None."""

    @abstractmethod
    def delete_item(self, item_id: str) -> bool:
        """Remove an item. Returns False if it did not exist."""

    def count(self) -> int:
        return len(self.list_items())

    def filter_items(
        self,
        type: Optional[ItemType] = None,
        status: Optional[ItemStatus] = None,
        user_id: Optional[str] = None,
    ) -> list[Item]:
        """Convenience listing filtered by direction, status, and owner."""
        return [
            i for i in self.list_items()
            if (type is None or i.type == type)
            and (status is None or i.status == status)
            and (user_id is None or i.user_id == user_id)
        ]


# ─── In-Memory Implementation ────────────────────────────────────────────────

class InMemoryItemStore(ItemStore):
    """
    Thread-safe in-memory item store using a dict + RLock.
    Listing order is insertion order. Data is lost on restart.
    """

    def __init__(self) -> None:
        self._store: dict[str, Item] = {}
        self._lock = threading.RLock()

    def add_item(self, item: Item) -> Item:
        with self._lock:
            if item.item_id in self._store:
                raise DuplicateItemError(item.item_id)
            self._store[item.item_id] = item
        log.info("item_added", item_id=item.item_id, type=item.type.value, backend="memory")
        return item

    def get_item(self, item_id: str) -> Optional[Item]:
        with self._lock:
            return self._store.get(item_id)

    def list_items(self) -> list[Item]:
        with self._lock:
            return list(self._store.values())

    def set_status(
        self,
        item_id: str,
        status: ItemStatus,
        matched_with: Optional[str] = None,
    ) -> Optional[Item]:
        with self._lock:
            item = self._store.get(item_id)
            if item is None:
                log.warning("set_status_item_not_found", item_id=item_id)
                return None
            item.status = status
            item.matched_with = matched_with
        log.debug("item_status_updated", item_id=item_id, status=status.value)
        return item

    def delete_item(self, item_id: str) -> bool:
        with self._lock:
            removed = self._store.pop(item_id, None)
        return removed is not None

    def count(self) -> int:
        with self._lock:
            return len(self._store)


# ─── Redis Implementation ────────────────────────────────────────────────────

class RedisItemStore(ItemStore):
    """
    Redis-backed item store. Items are JSON-serialised under
    {prefix}item:{item_id}; a set {prefix}items indexes all ids.
    Listing is ordered by (reported_at, item_id).
    """

    def __init__(self, redis_url: str, prefix: str = "reunite:", client=None) -> None:
        if client is None:
            try:
                import redis as redis_lib
            except ImportError as e:
                raise ImportError(
                    "redis package required for RedisItemStore. "
                    "Install with: pip install 'reunite[redis]'"
                ) from e
            client = redis_lib.from_url(redis_url, decode_responses=True)
            client.ping()
            log.info("redis_item_store_connected", url=redis_url)

        self._client = client
        self._prefix = prefix
        self._index = f"{prefix}items"

    def _key(self, item_id: str) -> str:
        return f"{self._prefix}item:{item_id}"

    def add_item(self, item: Item) -> Item:
        inserted = self._client.set(
            self._key(item.item_id), item.model_dump_json(), nx=True
        )
        if not inserted:
            raise DuplicateItemError(item.item_id)
        self._client.sadd(self._index, item.item_id)
        log.info("item_added", item_id=item.item_id, type=item.type.value, backend="redis")
        return item

    def get_item(self, item_id: str) -> Optional[Item]:
        raw = self._client.get(self._key(item_id))
        if raw is None:
            return None
        return Item.model_validate_json(raw)

    def list_items(self) -> list[Item]:
        items: list[Item] = []
        for item_id in self._client.smembers(self._index):
            item = self.get_item(item_id)
            if item is not None:
                items.append(item)
        items.sort(key=lambda i: (i.reported_at, i.item_id))
        return items

    def set_status(
        self,
        item_id: str,
        status: ItemStatus,
        matched_with: Optional[str] = None,
    ) -> Optional[Item]:
        item = self.get_item(item_id)
        if item is None:
            log.warning("set_status_item_not_found", item_id=item_id)
            return None
        item.status = status
        item.matched_with = matched_with
        self._client.set(self._key(item_id), item.model_dump_json())
        log.debug("item_status_updated", item_id=item_id, status=status.value)
        return item

    def delete_item(self, item_id: str) -> bool:
        removed = self._client.delete(self._key(item_id))
        self._client.srem(self._index, item_id)
        return bool(removed)

    def count(self) -> int:
        return int(self._client.scard(self._index))
