# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Reunite — /items
Report submission (runs discovery, then notifies new matches as a
background task), listing, deletion with match cascade, resolve, and
reminders for long-open reports.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Query, status

from reunite.core.exceptions import ItemNotFoundError
from reunite.dependencies import EngineDep
from reunite.models.item import Item, ItemCreate, ItemReportResponse, ItemStatus, ItemType
from reunite.models.match import Match
from reunite.models.notification import ReminderReport
from reunite.utils.logger import get_logger

router = APIRouter(tags=["items"])
log = get_logger(__name__)


@router.post(
    "/items",
    response_model=ItemReportResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Report a lost or found item",
    description=(
        "Stores the report and runs a discovery pass over all active items. "
        "Notifications for newly discovered matches are sent after the "
        "response, at most once per match."
    ),
)
async def report_item(
    body: ItemCreate,
    background_tasks: BackgroundTasks,
    engine: EngineDep,
) -> ItemReportResponse:
    item, new_matches = engine.report_item(body.to_item())
    new_ids = [m.match_id for m in new_matches]

    log.info("item_reported", item_id=item.item_id, type=item.type.value, new_matches=len(new_ids))

    if new_ids:
        background_tasks.add_task(engine.notify_pending, new_ids)

    return ItemReportResponse(item=item, new_match_ids=new_ids)


@router.post(
    "/items/reminders",
    response_model=ReminderReport,
    summary="Remind owners of long-open reports",
    description=(
        "Sends one reminder per active report older than older_than_days "
        "(defaults to REMINDER_AFTER_DAYS). Intended for a periodic job."
    ),
)
async def send_reminders(
    engine: EngineDep,
    older_than_days: Optional[float] = Query(None, gt=0),
) -> ReminderReport:
    return engine.remind_stale(older_than_days)


@router.get("/items", response_model=list[Item], summary="List items")
async def list_items(
    engine: EngineDep,
    type: Optional[ItemType] = None,
    status: Optional[ItemStatus] = None,
    user_id: Optional[str] = None,
) -> list[Item]:
    return engine.item_store.filter_items(type=type, status=status, user_id=user_id)


@router.get("/items/{item_id}", response_model=Item, summary="Get one item")
async def get_item(item_id: str, engine: EngineDep) -> Item:
    item = engine.item_store.get_item(item_id)
    if item is None:
        raise ItemNotFoundError(item_id)
    return item


@router.get(
    "/items/{item_id}/matches",
    response_model=list[Match],
    summary="Matches involving an item",
)
async def item_matches(item_id: str, engine: EngineDep) -> list[Match]:
    if engine.item_store.get_item(item_id) is None:
        raise ItemNotFoundError(item_id)
    return engine.match_store.matches_for_item(item_id)


@router.delete(
    "/items/{item_id}",
    summary="Delete an item and every match referencing it",
)
async def delete_item(item_id: str, engine: EngineDep) -> dict:
    removed = engine.delete_item(item_id)
    return {"item_id": item_id, "removed_match_ids": removed}


@router.post(
    "/items/{item_id}/resolve",
    response_model=Item,
    summary="Mark an item as resolved",
)
async def resolve_item(item_id: str, engine: EngineDep) -> Item:
    return engine.resolve_item(item_id)
