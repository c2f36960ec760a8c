# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Reunite — Matching Module
Public API for similarity, scoring, and discovery.
"""

from reunite.modules.matching.discovery import (
    discover,
    matches_for_item,
    partition_candidates,
)
from reunite.modules.matching.embedding_similarity import cosine, has_embedding
from reunite.modules.matching.scorer import FIELD_ORDER, score_pair
from reunite.modules.matching.text_similarity import (
    STOP_WORDS,
    keywords,
    similarity,
    text_similarity,
)

__all__ = [
    # Text
    "STOP_WORDS",
    "keywords",
    "similarity",
    "text_similarity",
    # Embedding
    "cosine",
    "has_embedding",
    # Scorer
    "FIELD_ORDER",
    "score_pair",
    # Discovery
    "discover",
    "partition_candidates",
    "matches_for_item",
]
