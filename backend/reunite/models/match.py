# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Reunite — Match Data Models
A scored pairing between one lost and one found item, keyed by a
deterministic composite id so each pair has at most one record.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

MATCH_ID_SEPARATOR = ":"


class MatchStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"


class Party(str, Enum):
    """Which side of a match a notification is addressed to."""
    LOST = "lost"
    FOUND = "found"


def match_id_for(lost_item_id: str, found_item_id: str) -> str:
    """
    Stable composite key for a (lost, found) pair.
    Item ids are restricted to [A-Za-z0-9_-], so the separator cannot
    appear inside either half and two distinct pairs never collide.
    """
    for item_id in (lost_item_id, found_item_id):
        if MATCH_ID_SEPARATOR in item_id:
            raise ValueError(f"Item id may not contain '{MATCH_ID_SEPARATOR}': {item_id!r}")
    return f"{lost_item_id}{MATCH_ID_SEPARATOR}{found_item_id}"


def split_match_id(match_id: str) -> tuple[str, str]:
    """Inverse of match_id_for(). Returns (lost_item_id, found_item_id)."""
    lost_id, sep, found_id = match_id.partition(MATCH_ID_SEPARATOR)
    if not sep or not lost_id or not found_id:
        raise ValueError(f"Malformed match id: {match_id!r}")
    return lost_id, found_id


class MatchScore(BaseModel):
    """Scorer output for a single (lost, found) pair."""
    score: float = Field(..., ge=0.0, le=1.0)
    matched_fields: list[str] = Field(default_factory=list)
    # Auxiliary scores, None when the field was not evaluated
    ai_confidence: Optional[float] = Field(None, ge=0.0, le=1.0)
    image_similarity: Optional[float] = Field(None, ge=0.0, le=1.0)


class Match(BaseModel):
    """Full match record stored in the MatchStore."""
    match_id: str
    lost_item_id: str
    found_item_id: str
    score: float = Field(..., ge=0.0, le=1.0)
    matched_fields: list[str] = Field(default_factory=list)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    status: MatchStatus = MatchStatus.PENDING
    notification_sent: bool = False
    # Parties whose message was already delivered; a retry skips them
    notified_parties: list[Party] = Field(default_factory=list)
    ai_confidence: Optional[float] = Field(None, ge=0.0, le=1.0)
    image_similarity: Optional[float] = Field(None, ge=0.0, le=1.0)
    reviewed_at: Optional[datetime] = None

    @property
    def is_pending(self) -> bool:
        return self.status == MatchStatus.PENDING

    def involves(self, item_id: str) -> bool:
        return item_id in (self.lost_item_id, self.found_item_id)

    def counterpart_of(self, item_id: str) -> str:
        """Return the id of the other item in this pair."""
        if item_id == self.lost_item_id:
            return self.found_item_id
        if item_id == self.found_item_id:
            return self.lost_item_id
        raise ValueError(f"Item {item_id} is not part of match {self.match_id}")


# ─── API Request/Response Schemas ────────────────────────────────────────────

class DiscoveryResponse(BaseModel):
    """Response body for POST /matches/discover."""
    total_matches: int
    new_match_ids: list[str] = Field(default_factory=list)


class MatchReviewResponse(BaseModel):
    """Response body for POST /matches/{match_id}/confirm|reject."""
    match: Match
    message: str
