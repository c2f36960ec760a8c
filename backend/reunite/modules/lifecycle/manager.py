# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Reunite — Match Lifecycle Manager
Owns match state transitions and their cascade onto the linked items.

  pending --confirm--> confirmed   (both items → matched, mutual back-refs)
  pending --reject-->  rejected    (items untouched)

confirmed and rejected are terminal. Every precondition is checked
before the first write, so a refused transition leaves no trace.

A rejected match keeps its record so re-discovery cannot resurrect the
same pair, while both items stay active for other candidates.
"""

from __future__ import annotations

from datetime import datetime, timezone

from reunite.core.exceptions import (
    InvalidTransitionError,
    ItemNotFoundError,
    MatchNotFoundError,
)
from reunite.core.item_store import ItemStore
from reunite.core.match_store import MatchStore
from reunite.models.item import Item, ItemStatus
from reunite.models.match import Match, MatchStatus
from reunite.utils.logger import get_logger

log = get_logger(__name__)


class MatchLifecycleManager:

    def __init__(self, item_store: ItemStore, match_store: MatchStore) -> None:
        self.item_store = item_store
        self.match_store = match_store

    def _pending_match(self, match_id: str, action: str) -> Match:
        match = self.match_store.get_match(match_id)
        if match is None:
            raise MatchNotFoundError(match_id)
        if not match.is_pending:
            log.warning(
                "invalid_transition",
                match_id=match_id,
                action=action,
                status=match.status.value,
            )
            raise InvalidTransitionError(match_id, match.status.value, action)
        return match

    def _require_item(self, item_id: str) -> Item:
        item = self.item_store.get_item(item_id)
        if item is None:
            raise ItemNotFoundError(item_id)
        return item

    def confirm(self, match_id: str) -> Match:
        """
        Confirm a pending match and link its two items.

        Every other pending match touching either item is rejected in
        the same step, since each item can be linked to one counterpart.

        Raises:
            MatchNotFoundError:     no such match
            InvalidTransitionError: match is not pending, or either item
                                    is no longer active
            ItemNotFoundError:      a linked item has disappeared
        """
        match = self._pending_match(match_id, "confirm")
        lost = self._require_item(match.lost_item_id)
        found = self._require_item(match.found_item_id)
        for item in (lost, found):
            if not item.is_active:
                log.warning(
                    "invalid_transition",
                    match_id=match_id,
                    action="confirm",
                    item_id=item.item_id,
                    item_status=item.status.value,
                )
                raise InvalidTransitionError(
                    match_id,
                    match.status.value,
                    "confirm",
                    reason=f"item {item.item_id} is already {item.status.value}",
                )

        now = datetime.now(timezone.utc)
        updated = self.match_store.update_match(
            match_id, status=MatchStatus.CONFIRMED, reviewed_at=now
        )
        self.item_store.set_status(lost.item_id, ItemStatus.MATCHED, matched_with=found.item_id)
        self.item_store.set_status(found.item_id, ItemStatus.MATCHED, matched_with=lost.item_id)

        superseded = [
            m.match_id
            for m in self.match_store.list_matches(status=MatchStatus.PENDING)
            if m.involves(lost.item_id) or m.involves(found.item_id)
        ]
        for sibling_id in superseded:
            self.match_store.update_match(
                sibling_id, status=MatchStatus.REJECTED, reviewed_at=now
            )

        log.info(
            "match_confirmed",
            match_id=match_id,
            lost_item_id=lost.item_id,
            found_item_id=found.item_id,
            superseded=superseded,
        )
        return updated

    def reject(self, match_id: str) -> Match:
        """
        Reject a pending match. Item status is left alone.

        Raises:
            MatchNotFoundError:     no such match
            InvalidTransitionError: match is not pending
        """
        self._pending_match(match_id, "reject")
        updated = self.match_store.update_match(
            match_id,
            status=MatchStatus.REJECTED,
            reviewed_at=datetime.now(timezone.utc),
        )
        log.info("match_rejected", match_id=match_id)
        return updated

    def delete_item(self, item_id: str) -> list[str]:
        """
        Remove an item and every match that references it.

        Returns:
            The removed match ids.
        """
        self._require_item(item_id)
        removed = self.match_store.delete_for_item(item_id)
        self.item_store.delete_item(item_id)
        log.info("item_deleted", item_id=item_id, matches_removed=len(removed))
        return removed

    def resolve_item(self, item_id: str) -> Item:
        """External resolve action: the owner marks the report as closed."""
        item = self._require_item(item_id)
        updated = self.item_store.set_status(
            item_id, ItemStatus.RESOLVED, matched_with=item.matched_with
        )
        log.info("item_resolved", item_id=item_id)
        return updated
