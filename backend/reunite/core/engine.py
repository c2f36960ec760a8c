# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Reunite — Matching Engine Service
Explicit service object over an item store and a match store. Wires the
stages in dependency order:

  1. Report intake      (ItemStore.add_item)
  2. Discovery          (score every active lost × found pair)
  3. Persistence        (MatchStore.add_if_absent — existing pairs untouched)
  4. Lifecycle          (confirm / reject / delete / resolve)
  5. Notification       (at most once per match)

Discovery, lifecycle mutations, and the notification check-and-set all
run under one RLock, so concurrent report submissions are serialised
and no discovery pass ever sees a half-updated item set.
"""

from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Iterable, Optional

from reunite.config import Settings, get_settings
from reunite.core.exceptions import ItemNotFoundError, MatchNotFoundError
from reunite.core.item_store import ItemStore
from reunite.core.match_store import MatchStore
from reunite.models.item import Item, ItemStatus, ItemType
from reunite.models.match import Match, MatchStatus
from reunite.models.notification import DispatchReport, ReminderReport
from reunite.modules.lifecycle.manager import MatchLifecycleManager
from reunite.modules.matching.discovery import discover
from reunite.modules.notifications.dispatcher import NotificationDispatcher
from reunite.modules.notifications.transports import Transport
from reunite.utils.dates import days_apart
from reunite.utils.logger import get_logger

log = get_logger(__name__)


class MatchingEngine:

    def __init__(
        self,
        item_store: ItemStore,
        match_store: MatchStore,
        transport: Transport,
        settings: Optional[Settings] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.item_store = item_store
        self.match_store = match_store
        self.transport = transport
        self.lifecycle = MatchLifecycleManager(item_store, match_store)
        self.dispatcher = NotificationDispatcher(
            transport, match_store, signature=self.settings.sender_name
        )
        self._lock = threading.RLock()

    # ── Intake + discovery ───────────────────────────────────────────────────

    def report_item(self, item: Item) -> tuple[Item, list[Match]]:
        """
        Store a new report and run a discovery pass. Returns (item, new matches).

        Raises:
            DuplicateItemError: the report reuses an existing item id
        """
        with self._lock:
            stored = self.item_store.add_item(item)
            new_matches = self.run_discovery()
        return stored, new_matches

    def run_discovery(self) -> list[Match]:
        """
        Discover matches over the current item snapshot and persist the
        ones not seen before.

        Returns:
            Newly created matches, score descending. Pairs that already
            have a record (in any status) are not returned again.
        """
        with self._lock:
            discovered = discover(self.item_store.list_items(), settings=self.settings)
            new_matches = [m for m in discovered if self.match_store.add_if_absent(m)]

        log.info(
            "discovery_persisted",
            discovered=len(discovered),
            new=len(new_matches),
        )
        return new_matches

    # ── Lifecycle ────────────────────────────────────────────────────────────

    def confirm(self, match_id: str) -> Match:
        with self._lock:
            return self.lifecycle.confirm(match_id)

    def reject(self, match_id: str) -> Match:
        with self._lock:
            return self.lifecycle.reject(match_id)

    def delete_item(self, item_id: str) -> list[str]:
        with self._lock:
            return self.lifecycle.delete_item(item_id)

    def resolve_item(self, item_id: str) -> Item:
        with self._lock:
            return self.lifecycle.resolve_item(item_id)

    # ── Notification ─────────────────────────────────────────────────────────

    def notify(self, match_id: str) -> DispatchReport:
        """
        Send the match notifications for one match, at most once.

        Raises:
            MatchNotFoundError: no such match
            ItemNotFoundError:  one of the linked items has been deleted
        """
        with self._lock:
            match = self.match_store.get_match(match_id)
            if match is None:
                raise MatchNotFoundError(match_id)
            lost = self.item_store.get_item(match.lost_item_id)
            if lost is None:
                raise ItemNotFoundError(match.lost_item_id)
            found = self.item_store.get_item(match.found_item_id)
            if found is None:
                raise ItemNotFoundError(match.found_item_id)
            return self.dispatcher.notify(match, lost, found)

    def notify_pending(self, match_ids: Optional[Iterable[str]] = None) -> list[DispatchReport]:
        """
        Notify every pending match whose notifications are outstanding.
        Failures are per match and never stop the remaining ones.

        Args:
            match_ids: Restrict to these matches (e.g. the output of one
                       discovery pass). Defaults to all pending matches.
        """
        if match_ids is None:
            match_ids = [
                m.match_id
                for m in self.match_store.list_matches(status=MatchStatus.PENDING)
                if not m.notification_sent
            ]

        reports: list[DispatchReport] = []
        for match_id in match_ids:
            try:
                reports.append(self.notify(match_id))
            except (MatchNotFoundError, ItemNotFoundError) as exc:
                # The match or an item was removed after discovery
                log.warning("notify_target_missing", match_id=match_id, error=str(exc))
        return reports

    def remind_stale(
        self,
        older_than_days: Optional[float] = None,
        now: Optional[datetime] = None,
    ) -> ReminderReport:
        """
        Send a reminder to the owner of every active report filed more
        than older_than_days ago (default: settings.reminder_after_days).
        Matched and resolved reports are left alone.
        """
        if older_than_days is None:
            older_than_days = self.settings.reminder_after_days
        now = now or datetime.now(timezone.utc)

        report = ReminderReport(older_than_days=older_than_days)
        for item in self.item_store.filter_items(status=ItemStatus.ACTIVE):
            if days_apart(now, item.reported_at) <= older_than_days:
                continue
            if self.dispatcher.remind(item, now=now):
                report.reminded.append(item.item_id)
            else:
                report.failed.append(item.item_id)

        log.info(
            "reminders_sent",
            older_than_days=older_than_days,
            reminded=len(report.reminded),
            failed=len(report.failed),
        )
        return report

    # ── Stats ────────────────────────────────────────────────────────────────

    def stats(self) -> dict:
        """Summary counts for the admin dashboard."""
        items = self.item_store.list_items()
        matches = self.match_store.list_matches()
        return {
            "total_items": len(items),
            "lost_items": sum(1 for i in items if i.type == ItemType.LOST),
            "found_items": sum(1 for i in items if i.type == ItemType.FOUND),
            "active_items": sum(1 for i in items if i.status == ItemStatus.ACTIVE),
            "matched_items": sum(1 for i in items if i.status == ItemStatus.MATCHED),
            "resolved_items": sum(1 for i in items if i.status == ItemStatus.RESOLVED),
            "total_matches": len(matches),
            "pending_reviews": sum(1 for m in matches if m.status == MatchStatus.PENDING),
            "confirmed_matches": sum(1 for m in matches if m.status == MatchStatus.CONFIRMED),
            "unnotified_matches": sum(1 for m in matches if not m.notification_sent),
        }

    def user_stats(self, user_id: str) -> dict:
        """Counts for one reporter's own items and the matches touching them."""
        items = self.item_store.filter_items(user_id=user_id)
        own_ids = {i.item_id for i in items}
        matches = [
            m for m in self.match_store.list_matches()
            if m.lost_item_id in own_ids or m.found_item_id in own_ids
        ]
        return {
            "total_items": len(items),
            "lost_items": sum(1 for i in items if i.type == ItemType.LOST),
            "found_items": sum(1 for i in items if i.type == ItemType.FOUND),
            "matches": len(matches),
            "resolved_items": sum(1 for i in items if i.status == ItemStatus.RESOLVED),
        }
