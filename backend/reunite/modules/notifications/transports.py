# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Reunite — Notification Transports
The engine only knows send(notification) -> bool. How the message
travels (email, push, in-app) is the transport's business, as is any
retry policy.

LoggingTransport  — logs the envelope; stand-in for a mail relay
InAppOutbox       — keeps messages per recipient for in-app listing
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod

from reunite.models.notification import Notification
from reunite.utils.logger import get_logger

log = get_logger(__name__)


class Transport(ABC):

    @abstractmethod
    def send(self, notification: Notification) -> bool:
        """Deliver one message. Returns True on success."""


class LoggingTransport(Transport):
    """Writes the message envelope to the structured log."""

    def send(self, notification: Notification) -> bool:
        log.info(
            "notification_sent",
            to=notification.recipient,
            subject=notification.subject,
            type=notification.type.value,
            match_id=notification.match_id,
        )
        return True


class InAppOutbox(Transport):
    """
    Thread-safe in-memory outbox keyed by recipient address.
    Always accepts the message.
    """

    def __init__(self) -> None:
        self._messages: dict[str, list[Notification]] = {}
        self._lock = threading.Lock()

    def send(self, notification: Notification) -> bool:
        with self._lock:
            self._messages.setdefault(notification.recipient, []).append(notification)
        log.debug(
            "notification_queued_inapp",
            to=notification.recipient,
            match_id=notification.match_id,
        )
        return True

    def messages_for(self, recipient: str) -> list[Notification]:
        with self._lock:
            return list(self._messages.get(recipient, []))

    def all_messages(self) -> list[Notification]:
        with self._lock:
            return [n for msgs in self._messages.values() for n in msgs]

    def count(self) -> int:
        with self._lock:
            return sum(len(msgs) for msgs in self._messages.values())
