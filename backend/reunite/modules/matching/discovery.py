# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Reunite — Match Discovery
Enumerates every (active lost, active found) pair, scores it, and keeps
pairs at or above the minimum match score.

Full cross product — O(L × F). Item volumes are community-scale, so no
candidate pruning is done here.

Output is deterministic for a given item snapshot: ids derive from the
item pair, and ties in score keep discovery order (stable sort).
Re-running on an unchanged snapshot yields the same match set.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, Optional

from reunite.config import Settings, get_settings
from reunite.models.item import Item, ItemType
from reunite.models.match import Match, match_id_for
from reunite.modules.matching.scorer import score_pair
from reunite.utils.logger import get_logger

log = get_logger(__name__)


def partition_candidates(items: Iterable[Item]) -> tuple[list[Item], list[Item]]:
    """
    Split items into (lost, found), keeping only active, scorable items.
    Items missing category, location, or description are skipped.
    """
    lost: list[Item] = []
    found: list[Item] = []

    for item in items:
        if not item.is_active:
            continue
        missing = item.missing_fields()
        if missing:
            log.debug("item_ineligible", item_id=item.item_id, missing=missing)
            continue
        if item.type == ItemType.LOST:
            lost.append(item)
        else:
            found.append(item)

    return lost, found


def discover(
    items: Iterable[Item],
    min_score: Optional[float] = None,
    settings: Optional[Settings] = None,
    now: Optional[datetime] = None,
) -> list[Match]:
    """
    Discover candidate matches across an item snapshot.

    Args:
        items:     All items (any status, any direction)
        min_score: Keep pairs scoring at least this. Defaults to config.
        settings:  Weight/threshold source. Defaults to get_settings().
        now:       Creation timestamp stamped on new matches

    Returns:
        New pending matches, sorted by score descending.
    """
    settings = settings or get_settings()
    if min_score is None:
        min_score = settings.min_match_score
    created_at = now or datetime.now(timezone.utc)

    lost_items, found_items = partition_candidates(items)
    if not lost_items or not found_items:
        log.debug("discovery_skipped", lost=len(lost_items), found=len(found_items))
        return []

    matches: list[Match] = []
    n_failed = 0

    for lost in lost_items:
        for found in found_items:
            try:
                result = score_pair(lost, found, settings=settings)
            except Exception as exc:
                # One bad pair must not abort the pass
                n_failed += 1
                log.warning(
                    "pair_scoring_failed",
                    lost_item_id=lost.item_id,
                    found_item_id=found.item_id,
                    error=str(exc),
                )
                continue

            if result.score < min_score:
                continue

            matches.append(Match(
                match_id=match_id_for(lost.item_id, found.item_id),
                lost_item_id=lost.item_id,
                found_item_id=found.item_id,
                score=result.score,
                matched_fields=result.matched_fields,
                created_at=created_at,
                ai_confidence=result.ai_confidence,
                image_similarity=result.image_similarity,
            ))

    matches.sort(key=lambda m: m.score, reverse=True)

    log.info(
        "discovery_complete",
        lost=len(lost_items),
        found=len(found_items),
        pairs=len(lost_items) * len(found_items),
        matches=len(matches),
        failed=n_failed,
        min_score=min_score,
    )

    return matches


def matches_for_item(matches: Iterable[Match], item_id: str) -> list[Match]:
    """All matches that reference the given item, in input order."""
    return [m for m in matches if m.involves(item_id)]
