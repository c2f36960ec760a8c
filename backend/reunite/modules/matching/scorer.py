# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Reunite — Match Scorer
Combines per-field comparisons into one weighted score in [0, 1].

Each field contributes weight × contribution (0 ≤ contribution ≤ 1):

  category       exact, case-insensitive
  location       either string contains the other, case-insensitive
                 ("Library" vs "Library Building, 2nd Floor" matches)
  description    keyword Jaccard of the raw descriptions
  aiDescription  keyword Jaccard of AI-enhanced descriptions (both present)
  imageMatch     cosine of photo embeddings (both present)
  color/brand/size  exact, case-insensitive (both present)
  dateRange      max(0, 1 - days/7) when the occurrences are ≤ 7 days apart

The matched-fields list records which criteria crossed their own
"recorded as matched" threshold. It is informational only (shown in
notifications and the UI) and never feeds back into the score.
"""

from __future__ import annotations

from typing import Optional

from reunite.config import MatchingWeights, Settings, get_settings
from reunite.models.item import Item
from reunite.models.match import MatchScore
from reunite.modules.matching.embedding_similarity import cosine, has_embedding
from reunite.modules.matching.text_similarity import text_similarity
from reunite.utils.dates import days_apart

# Field labels as reported in MatchScore.matched_fields
CATEGORY = "category"
LOCATION = "location"
DESCRIPTION = "description"
AI_DESCRIPTION = "aiDescription"
IMAGE_MATCH = "imageMatch"
COLOR = "color"
BRAND = "brand"
SIZE = "size"
DATE_RANGE = "dateRange"

FIELD_ORDER: tuple[str, ...] = (
    CATEGORY, LOCATION, DESCRIPTION, AI_DESCRIPTION, IMAGE_MATCH,
    COLOR, BRAND, SIZE, DATE_RANGE,
)


def _norm(value: Optional[str]) -> str:
    return (value or "").strip().lower()


def _equal_ci(a: Optional[str], b: Optional[str]) -> bool:
    """Case-insensitive equality; False unless both sides are provided."""
    na, nb = _norm(a), _norm(b)
    return bool(na) and bool(nb) and na == nb


def _contains_either_way(a: Optional[str], b: Optional[str]) -> bool:
    na, nb = _norm(a), _norm(b)
    if not na or not nb:
        return False
    return na in nb or nb in na


def date_contribution(lost: Item, found: Item, window_days: float = 7.0) -> float:
    """Linear temporal proximity, 1.0 on the same instant, 0 beyond the window."""
    days = days_apart(lost.occurred_at, found.occurred_at)
    if days > window_days:
        return 0.0
    return max(0.0, 1.0 - days / window_days)


def score_pair(
    lost: Item,
    found: Item,
    weights: Optional[MatchingWeights] = None,
    settings: Optional[Settings] = None,
) -> MatchScore:
    """
    Score a (lost, found) pair.

    The result depends only on the two items' fields, never on their
    position in any collection.

    Args:
        lost:     The lost-direction item
        found:    The found-direction item
        weights:  Field weights. Defaults to settings.match_weights.
        settings: Threshold source. Defaults to get_settings().

    Returns:
        MatchScore with the capped score, ordered matched fields, and
        the auxiliary AI-description and image similarities (None when
        not evaluated).
    """
    settings = settings or get_settings()
    w = weights or settings.match_weights

    score = 0.0
    matched: set[str] = set()
    ai_confidence: Optional[float] = None
    image_similarity: Optional[float] = None

    if _equal_ci(lost.category, found.category):
        score += w.category
        matched.add(CATEGORY)

    if _contains_either_way(lost.location, found.location):
        score += w.location
        matched.add(LOCATION)

    desc_sim = text_similarity(lost.description, found.description)
    score += w.description * desc_sim
    if desc_sim > settings.description_match_threshold:
        matched.add(DESCRIPTION)

    if lost.ai_description and found.ai_description:
        ai_confidence = text_similarity(lost.ai_description, found.ai_description)
        score += w.ai_description * ai_confidence
        if ai_confidence > settings.ai_description_match_threshold:
            matched.add(AI_DESCRIPTION)

    if (
        has_embedding(lost.embedding, settings.embedding_dim)
        and has_embedding(found.embedding, settings.embedding_dim)
    ):
        image_similarity = cosine(lost.embedding, found.embedding)
        score += w.image_match * image_similarity
        if image_similarity > settings.image_match_threshold:
            matched.add(IMAGE_MATCH)

    for field, weight in ((COLOR, w.color), (BRAND, w.brand), (SIZE, w.size)):
        if _equal_ci(getattr(lost, field), getattr(found, field)):
            score += weight
            matched.add(field)

    date_score = date_contribution(lost, found, settings.date_window_days)
    score += w.date_range * date_score
    if date_score > settings.date_match_threshold:
        matched.add(DATE_RANGE)

    return MatchScore(
        score=max(0.0, min(score, 1.0)),
        matched_fields=[f for f in FIELD_ORDER if f in matched],
        ai_confidence=ai_confidence,
        image_similarity=image_similarity,
    )
