# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Reunite — Notification Models
Outbound messages built by the generator and handed to a Transport.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from reunite.models.match import Party


class NotificationType(str, Enum):
    MATCH_FOUND = "match_found"
    REMINDER = "reminder"


class Notification(BaseModel):
    recipient: str = Field(..., description="Recipient email address")
    recipient_name: str = ""
    subject: str
    body: str
    type: NotificationType
    match_id: Optional[str] = None
    item_id: Optional[str] = None
    party: Optional[Party] = None
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )


class DispatchReport(BaseModel):
    """Outcome of one notify() call for a single match."""
    match_id: str
    skipped: bool = Field(False, description="True if notifications were already sent")
    delivered: list[Party] = Field(default_factory=list)
    failed: list[Party] = Field(default_factory=list)
    notification_sent: bool = False

    @property
    def attempted(self) -> int:
        return len(self.delivered) + len(self.failed)


class ReminderReport(BaseModel):
    """Outcome of one reminder sweep over open reports."""
    older_than_days: float
    reminded: list[str] = Field(default_factory=list, description="Item ids delivered")
    failed: list[str] = Field(default_factory=list, description="Item ids not delivered")
