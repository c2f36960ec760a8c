# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Reunite — Report Enrichment
Attaches the opaque outputs of an image-understanding model to a new
report before it is stored. The matching core never calls the model;
it only reads `embedding` and `ai_description` off the Item.

The provider is injected, so tests use a deterministic fake instead of
a real vision model.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from reunite.models.item import Item, ItemAnalysis
from reunite.utils.logger import get_logger

log = get_logger(__name__)


class EmbeddingProvider(ABC):
    """Interface over an external vision / embedding model."""

    @abstractmethod
    def embed(self, image: bytes) -> list[float]:
        """Return a fixed-length embedding for a photo."""

    @abstractmethod
    def describe(self, image: bytes) -> ItemAnalysis:
        """Return a text description plus extracted attributes."""


def enhance_description(user_description: str, analysis: Optional[ItemAnalysis]) -> str:
    """Append the model's description and tags to the reporter's own text."""
    if analysis is None or not analysis.text:
        return user_description
    enhanced = f"{user_description} AI detected: {analysis.text}."
    if analysis.tags:
        enhanced += f" Key features: {', '.join(analysis.tags)}."
    return enhanced.strip()


def enrich_report(item: Item, image: bytes, provider: EmbeddingProvider) -> Item:
    """
    Return a copy of item with embedding and AI description attached.

    Reporter-supplied category/color/brand always win; the model only
    fills attributes the reporter left blank. A provider failure leaves
    the report unenriched rather than rejecting it.
    """
    try:
        analysis = provider.describe(image)
        embedding = provider.embed(image)
    except Exception as exc:
        log.warning("enrichment_failed", item_id=item.item_id, error=str(exc))
        return item

    updates: dict = {
        "embedding": list(embedding) or None,
        "ai_description": enhance_description(item.description or "", analysis),
        "tags": list(dict.fromkeys(item.tags + analysis.tags)),
    }
    for field in ("category", "color", "brand"):
        if not getattr(item, field) and getattr(analysis, field):
            updates[field] = getattr(analysis, field)

    log.info(
        "report_enriched",
        item_id=item.item_id,
        embedding_dim=len(embedding),
        confidence=round(analysis.confidence, 3),
    )
    return item.model_copy(update=updates)
