# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Reunite — Keyword Similarity
Tokenises free text into normalised keyword sets and compares them
with the Jaccard index. Pure functions, no state.
"""

from __future__ import annotations

import re
from typing import Optional

STOP_WORDS: frozenset[str] = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
    "of", "with", "by", "is", "was", "are", "were", "be", "been", "have",
    "has", "had", "do", "does", "did", "will", "would", "could", "should",
})

_PUNCTUATION = re.compile(r"[^\w\s]")

# Tokens of this length or shorter are dropped
_MIN_TOKEN_LEN = 2


def keywords(text: Optional[str]) -> set[str]:
    """
    Extract the normalised keyword set from free text.

    Lowercases, strips punctuation, splits on whitespace, then drops
    short tokens and stop words. None or empty text yields an empty set.
    """
    if not text:
        return set()
    cleaned = _PUNCTUATION.sub("", text.lower())
    return {
        token
        for token in cleaned.split()
        if len(token) > _MIN_TOKEN_LEN and token not in STOP_WORDS
    }


def similarity(a: set[str], b: set[str]) -> float:
    """Jaccard index |A ∩ B| / |A ∪ B|. Returns 0.0 if either set is empty."""
    if not a or not b:
        return 0.0
    return len(a & b) / len(a | b)


def text_similarity(text_a: Optional[str], text_b: Optional[str]) -> float:
    """Keyword similarity between two raw texts."""
    return similarity(keywords(text_a), keywords(text_b))
