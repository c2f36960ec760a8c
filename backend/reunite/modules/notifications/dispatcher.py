# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Reunite — Notification Dispatcher
Sends the two match messages at most once per match.

Contract:
  - notification_sent == True  → notify() is a no-op (report.skipped)
  - every party not yet in notified_parties is attempted, in order;
    a False return or a transport exception fails that message only
  - delivered parties are recorded immediately, so a later retry only
    re-attempts the parties that failed
  - notification_sent flips to True once both parties have been delivered

Delivery retries are not performed here; a failed party is surfaced in
the DispatchReport and left for the caller (or the transport) to retry.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from reunite.core.match_store import MatchStore
from reunite.models.item import Item
from reunite.models.match import Match, Party
from reunite.models.notification import DispatchReport
from reunite.modules.notifications.generator import (
    DEFAULT_SIGNATURE,
    build_match_notifications,
    build_reminder,
)
from reunite.modules.notifications.transports import Transport
from reunite.utils.logger import get_logger, match_context

log = get_logger(__name__)


class NotificationDispatcher:

    def __init__(
        self,
        transport: Transport,
        match_store: Optional[MatchStore] = None,
        signature: str = DEFAULT_SIGNATURE,
    ) -> None:
        self.transport = transport
        self.match_store = match_store
        self.signature = signature

    def _send(self, notification) -> bool:
        try:
            return bool(self.transport.send(notification))
        except Exception as exc:
            log.warning(
                "transport_error",
                to=notification.recipient,
                error=str(exc),
                exc_type=type(exc).__name__,
            )
            return False

    def _persist(self, match: Match, delivered: list[Party], done: bool) -> None:
        match.notified_parties = list(delivered)
        match.notification_sent = done
        if self.match_store is not None:
            self.match_store.update_match(
                match.match_id,
                notified_parties=delivered,
                notification_sent=done,
            )

    def remind(self, item: Item, now: Optional[datetime] = None) -> bool:
        """Send one reminder for an open report. Returns True if delivered."""
        delivered = self._send(build_reminder(item, now=now, signature=self.signature))
        if not delivered:
            log.warning("reminder_failed", item_id=item.item_id, to=item.contact_email)
        return delivered

    def notify(self, match: Match, lost: Item, found: Item) -> DispatchReport:
        """
        Dispatch both match notifications unless already sent.

        Args:
            match: The match record (mutated in place, and persisted to
                   the match store when one is configured)
            lost:  The lost item, source of the first recipient
            found: The found item, source of the second recipient

        Returns:
            DispatchReport describing what was delivered or failed.
        """
        if match.notification_sent:
            log.debug("notify_skipped_already_sent", match_id=match.match_id)
            return DispatchReport(
                match_id=match.match_id,
                skipped=True,
                delivered=list(match.notified_parties),
                notification_sent=True,
            )

        with match_context(match.match_id):
            already = list(match.notified_parties)
            delivered = list(already)
            report = DispatchReport(match_id=match.match_id)

            for notification in build_match_notifications(match, lost, found, self.signature):
                party = notification.party
                if party in already:
                    continue
                if self._send(notification):
                    delivered.append(party)
                    report.delivered.append(party)
                else:
                    report.failed.append(party)
                    log.warning("notification_failed", party=party.value, to=notification.recipient)

            done = Party.LOST in delivered and Party.FOUND in delivered
            self._persist(match, delivered, done)
            report.notification_sent = done

            log.info(
                "notify_complete",
                delivered=[p.value for p in report.delivered],
                failed=[p.value for p in report.failed],
                notification_sent=done,
            )
            return report
