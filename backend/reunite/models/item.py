# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Reunite — Item Data Models
A lost-or-found report as consumed by the matching engine, plus the
request/response schemas used by the /items endpoints.

Items are created externally (report submission). The engine only ever
writes `status` and `matched_with`.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

# ':' is reserved as the match id separator
ITEM_ID_PATTERN = r"^[A-Za-z0-9_-]+$"


class ItemType(str, Enum):
    LOST = "lost"
    FOUND = "found"


class ItemStatus(str, Enum):
    ACTIVE = "active"
    MATCHED = "matched"
    RESOLVED = "resolved"


def new_item_id() -> str:
    return uuid.uuid4().hex


class Item(BaseModel):
    """Full item record stored in the ItemStore."""
    item_id: str = Field(default_factory=new_item_id, pattern=ITEM_ID_PATTERN)
    type: ItemType
    title: str = ""

    # Required for scoring; a partial report is stored but never matched
    category: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None

    ai_description: Optional[str] = None
    occurred_at: datetime
    reported_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    # ── Structured attributes ──
    color: Optional[str] = None
    brand: Optional[str] = None
    size: Optional[str] = None
    reward: Optional[float] = Field(None, ge=0.0)
    tags: list[str] = Field(default_factory=list)

    # Photo embedding, produced externally
    embedding: Optional[list[float]] = None

    status: ItemStatus = ItemStatus.ACTIVE
    matched_with: Optional[str] = None

    # ── Owner / contact ──
    user_id: Optional[str] = None
    contact_name: str = ""
    contact_email: str = ""
    contact_phone: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.status == ItemStatus.ACTIVE

    def missing_fields(self) -> list[str]:
        """Names of scoring-critical fields that are absent or blank."""
        return [
            name
            for name in ("category", "location", "description")
            if not (getattr(self, name) or "").strip()
        ]

    @property
    def is_eligible(self) -> bool:
        return not self.missing_fields()


class ItemAnalysis(BaseModel):
    """Opaque output of an EmbeddingProvider.describe() call."""
    text: str = ""
    tags: list[str] = Field(default_factory=list)
    category: Optional[str] = None
    color: Optional[str] = None
    brand: Optional[str] = None
    confidence: float = Field(0.0, ge=0.0, le=1.0)


# ─── API Request/Response Schemas ────────────────────────────────────────────

class ItemCreate(BaseModel):
    """Request body for POST /items."""
    item_id: Optional[str] = Field(None, pattern=ITEM_ID_PATTERN)
    type: ItemType
    title: str = Field(..., min_length=1, max_length=200)
    category: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    occurred_at: datetime
    ai_description: Optional[str] = None
    color: Optional[str] = None
    brand: Optional[str] = None
    size: Optional[str] = None
    reward: Optional[float] = Field(None, ge=0.0)
    tags: list[str] = Field(default_factory=list)
    embedding: Optional[list[float]] = None
    user_id: Optional[str] = None
    contact_name: str = Field(..., min_length=1)
    contact_email: str = Field(..., min_length=3)
    contact_phone: Optional[str] = None

    def to_item(self) -> Item:
        data = self.model_dump(exclude_none=True)
        return Item(**data)


class ItemReportResponse(BaseModel):
    """Response body for POST /items."""
    item: Item
    new_match_ids: list[str] = Field(default_factory=list)
    message: str = "Item reported. Matching notifications are sent in the background."
