# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Reunite — Abstract MatchStore
CRUD over Match records keyed by the deterministic pair id.
Swap InMemoryMatchStore for RedisMatchStore with zero engine changes.

add_if_absent() is the only way discovery writes: an existing record for
the same pair keeps its status and notification state.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from reunite.models.match import Match, MatchStatus, Party
from reunite.utils.logger import get_logger

log = get_logger(__name__)


def _sorted(matches: list[Match]) -> list[Match]:
    # Score descending; stable on insertion order for ties
    return sorted(matches, key=lambda m: m.score, reverse=True)


# ─── Abstract Interface ──────────────────────────────────────────────────────

class MatchStore(ABC):
    """
    Abstract base class for match backends.
    All methods are synchronous.
    """

    @abstractmethod
    def add_if_absent(self, match: Match) -> bool:
        """Insert match unless its id exists. Returns True if inserted."""

    @abstractmethod
    def get_match(self, match_id: str) -> Optional[Match]:
        """Return Match by ID, or None if not found."""

    @abstractmethod
    def list_matches(self, status: Optional[MatchStatus] = None) -> list[Match]:
        """Return matches sorted by score descending, optionally by status."""

    @abstractmethod
    def update_match(
        self,
        match_id: str,
        *,
        status: Optional[MatchStatus] = None,
        notification_sent: Optional[bool] = None,
        notified_parties: Optional[list[Party]] = None,
        reviewed_at: Optional[datetime] = None,
    ) -> Optional[Match]:
        """Partially update a match. Only provided fields are changed."""

    @abstractmethod
    def delete_match(self, match_id: str) -> bool:
        """Remove a match. Returns False if it did not exist."""

    def delete_for_item(self, item_id: str) -> list[str]:
        """Remove every match referencing item_id, whatever its status."""
        removed = [
            m.match_id for m in self.list_matches() if m.involves(item_id)
        ]
        for match_id in removed:
            self.delete_match(match_id)
        if removed:
            log.info("matches_cascade_deleted", item_id=item_id, count=len(removed))
        return removed

    def matches_for_item(self, item_id: str) -> list[Match]:
        return [m for m in self.list_matches() if m.involves(item_id)]

    def count(self) -> int:
        return len(self.list_matches())


# ─── In-Memory Implementation ────────────────────────────────────────────────

class InMemoryMatchStore(MatchStore):
    """
    Thread-safe in-memory match store using a dict + RLock.
    Suitable for single-process development and testing.
    """

    def __init__(self) -> None:
        self._store: dict[str, Match] = {}
        self._lock = threading.RLock()

    def add_if_absent(self, match: Match) -> bool:
        with self._lock:
            if match.match_id in self._store:
                return False
            self._store[match.match_id] = match
        log.debug("match_created", match_id=match.match_id, score=round(match.score, 3))
        return True

    def get_match(self, match_id: str) -> Optional[Match]:
        with self._lock:
            return self._store.get(match_id)

    def list_matches(self, status: Optional[MatchStatus] = None) -> list[Match]:
        with self._lock:
            matches = [
                m for m in self._store.values()
                if status is None or m.status == status
            ]
        return _sorted(matches)

    def update_match(
        self,
        match_id: str,
        *,
        status: Optional[MatchStatus] = None,
        notification_sent: Optional[bool] = None,
        notified_parties: Optional[list[Party]] = None,
        reviewed_at: Optional[datetime] = None,
    ) -> Optional[Match]:
        with self._lock:
            match = self._store.get(match_id)
            if match is None:
                log.warning("update_match_not_found", match_id=match_id)
                return None
            if status is not None:
                match.status = status
            if notification_sent is not None:
                match.notification_sent = notification_sent
            if notified_parties is not None:
                match.notified_parties = list(notified_parties)
            if reviewed_at is not None:
                match.reviewed_at = reviewed_at

        log.debug(
            "match_updated",
            match_id=match_id,
            status=status.value if status else None,
            notification_sent=notification_sent,
        )
        return match

    def delete_match(self, match_id: str) -> bool:
        with self._lock:
            return self._store.pop(match_id, None) is not None

    def count(self) -> int:
        with self._lock:
            return len(self._store)


# ─── Redis Implementation ────────────────────────────────────────────────────

class RedisMatchStore(MatchStore):
    """
    Redis-backed match store for multi-worker deployments.
    Matches are JSON-serialised under {prefix}match:{match_id}; a set
    {prefix}matches indexes all ids. Insertion uses SET NX so two workers
    can never create the same pair twice.
    """

    def __init__(self, redis_url: str, prefix: str = "reunite:", client=None) -> None:
        if client is None:
            try:
                import redis as redis_lib
            except ImportError as e:
                raise ImportError(
                    "redis package required for RedisMatchStore. "
                    "Install with: pip install 'reunite[redis]'"
                ) from e
            client = redis_lib.from_url(redis_url, decode_responses=True)
            client.ping()
            log.info("redis_match_store_connected", url=redis_url)

        self._client = client
        self._prefix = prefix
        self._index = f"{prefix}matches"

    def _key(self, match_id: str) -> str:
        return f"{self._prefix}match:{match_id}"

    def _save(self, match: Match) -> None:
        self._client.set(self._key(match.match_id), match.model_dump_json())

    def add_if_absent(self, match: Match) -> bool:
        inserted = self._client.set(
            self._key(match.match_id), match.model_dump_json(), nx=True
        )
        if not inserted:
            return False
        self._client.sadd(self._index, match.match_id)
        log.debug("match_created", match_id=match.match_id, score=round(match.score, 3))
        return True

    def get_match(self, match_id: str) -> Optional[Match]:
        raw = self._client.get(self._key(match_id))
        if raw is None:
            return None
        return Match.model_validate_json(raw)

    def list_matches(self, status: Optional[MatchStatus] = None) -> list[Match]:
        matches: list[Match] = []
        # Sort ids first so ties come back in a repeatable order
        for match_id in sorted(self._client.smembers(self._index)):
            match = self.get_match(match_id)
            if match is not None and (status is None or match.status == status):
                matches.append(match)
        return _sorted(matches)

    def update_match(
        self,
        match_id: str,
        *,
        status: Optional[MatchStatus] = None,
        notification_sent: Optional[bool] = None,
        notified_parties: Optional[list[Party]] = None,
        reviewed_at: Optional[datetime] = None,
    ) -> Optional[Match]:
        match = self.get_match(match_id)
        if match is None:
            log.warning("update_match_not_found", match_id=match_id)
            return None
        if status is not None:
            match.status = status
        if notification_sent is not None:
            match.notification_sent = notification_sent
        if notified_parties is not None:
            match.notified_parties = list(notified_parties)
        if reviewed_at is not None:
            match.reviewed_at = reviewed_at
        self._save(match)

        log.debug(
            "match_updated",
            match_id=match_id,
            status=status.value if status else None,
            notification_sent=notification_sent,
        )
        return match

    def delete_match(self, match_id: str) -> bool:
        removed = self._client.delete(self._key(match_id))
        self._client.srem(self._index, match_id)
        return bool(removed)

    def count(self) -> int:
        return int(self._client.scard(self._index))
