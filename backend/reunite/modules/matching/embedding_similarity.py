# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Reunite — Embedding Similarity
Cosine similarity between two photo embeddings produced by an external
model. Negative similarity carries no meaning for item photos, so
scores are clamped to [0, 1]. Length mismatches score 0 rather than
raising; images are only compared when both sides share a dimension.
"""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np


def has_embedding(
    vector: Optional[Sequence[float]],
    expected_dim: Optional[int] = None,
) -> bool:
    """True if vector is non-empty and (optionally) of the expected length."""
    if vector is None or len(vector) == 0:
        return False
    return expected_dim is None or len(vector) == expected_dim


def cosine(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Cosine similarity dot(a, b) / (‖a‖·‖b‖), clamped to [0, 1].

    Returns 0.0 for mismatched lengths, empty vectors, or a zero-norm
    vector on either side.
    """
    if len(a) != len(b) or len(a) == 0:
        return 0.0

    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)

    denom = float(np.linalg.norm(va) * np.linalg.norm(vb))
    if denom == 0.0 or not np.isfinite(denom):
        return 0.0

    score = float(np.dot(va, vb) / denom)
    return max(0.0, min(1.0, score))
