# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Reunite — /stats
Item and match counts for the admin dashboard and per-user profile.
"""

from __future__ import annotations

from fastapi import APIRouter

from reunite.dependencies import EngineDep

router = APIRouter(tags=["stats"])


@router.get("/stats", summary="Global item and match counts")
async def get_stats(engine: EngineDep) -> dict:
    return engine.stats()


@router.get("/stats/users/{user_id}", summary="Counts for one reporter")
async def get_user_stats(user_id: str, engine: EngineDep) -> dict:
    return engine.user_stats(user_id)
