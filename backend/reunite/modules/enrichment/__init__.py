# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Reunite — Enrichment Module
Public API for attaching external image analysis to reports.
"""

from reunite.modules.enrichment.provider import (
    EmbeddingProvider,
    enhance_description,
    enrich_report,
)

__all__ = [
    "EmbeddingProvider",
    "enhance_description",
    "enrich_report",
]
