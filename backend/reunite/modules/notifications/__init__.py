# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Reunite — Notifications Module
Public API for message generation, transports, and dispatch.
"""

from reunite.modules.notifications.dispatcher import NotificationDispatcher
from reunite.modules.notifications.generator import (
    build_match_notification,
    build_match_notifications,
    build_reminder,
    describe_fields,
)
from reunite.modules.notifications.transports import (
    InAppOutbox,
    LoggingTransport,
    Transport,
)

__all__ = [
    # Generator
    "build_match_notification",
    "build_match_notifications",
    "build_reminder",
    "describe_fields",
    # Transports
    "Transport",
    "LoggingTransport",
    "InAppOutbox",
    # Dispatch
    "NotificationDispatcher",
]
