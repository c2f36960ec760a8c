# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Reunite — /matches
Manual discovery runs, match review (confirm / reject), and explicit
notification dispatch.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter

from reunite.core.exceptions import MatchNotFoundError
from reunite.dependencies import EngineDep
from reunite.models.match import DiscoveryResponse, Match, MatchReviewResponse, MatchStatus
from reunite.models.notification import DispatchReport
from reunite.utils.logger import get_logger

router = APIRouter(tags=["matches"])
log = get_logger(__name__)


@router.get("/matches", response_model=list[Match], summary="List matches by score")
async def list_matches(engine: EngineDep, status: Optional[MatchStatus] = None) -> list[Match]:
    return engine.match_store.list_matches(status=status)


@router.post(
    "/matches/discover",
    response_model=DiscoveryResponse,
    summary="Run a discovery pass",
    description=(
        "Scores every active lost × found pair. Idempotent: pairs that "
        "already have a match record are left unchanged."
    ),
)
async def run_discovery(engine: EngineDep) -> DiscoveryResponse:
    new_matches = engine.run_discovery()
    return DiscoveryResponse(
        total_matches=engine.match_store.count(),
        new_match_ids=[m.match_id for m in new_matches],
    )


@router.get("/matches/{match_id}", response_model=Match, summary="Get one match")
async def get_match(match_id: str, engine: EngineDep) -> Match:
    match = engine.match_store.get_match(match_id)
    if match is None:
        raise MatchNotFoundError(match_id)
    return match


@router.post(
    "/matches/{match_id}/confirm",
    response_model=MatchReviewResponse,
    summary="Confirm a pending match",
)
async def confirm_match(match_id: str, engine: EngineDep) -> MatchReviewResponse:
    match = engine.confirm(match_id)
    return MatchReviewResponse(match=match, message="Match confirmed. Both items are now linked.")


@router.post(
    "/matches/{match_id}/reject",
    response_model=MatchReviewResponse,
    summary="Reject a pending match",
)
async def reject_match(match_id: str, engine: EngineDep) -> MatchReviewResponse:
    match = engine.reject(match_id)
    return MatchReviewResponse(match=match, message="Match rejected.")


@router.post(
    "/matches/{match_id}/notify",
    response_model=DispatchReport,
    summary="Send match notifications",
    description="No-op if this match's notifications were already sent.",
)
async def notify_match(match_id: str, engine: EngineDep) -> DispatchReport:
    return engine.notify(match_id)
