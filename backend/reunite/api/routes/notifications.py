# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Reunite — GET /notifications/{recipient}
In-app listing of delivered messages. Only available when the
configured transport is the in-app outbox.
"""

from __future__ import annotations

from fastapi import APIRouter

from reunite.dependencies import EngineDep
from reunite.models.notification import Notification
from reunite.modules.notifications.transports import InAppOutbox

router = APIRouter(tags=["notifications"])


@router.get(
    "/notifications/{recipient}",
    response_model=list[Notification],
    summary="Messages delivered to a recipient",
)
async def list_notifications(recipient: str, engine: EngineDep) -> list[Notification]:
    if not isinstance(engine.transport, InAppOutbox):
        raise NotImplementedError("In-app notifications require NOTIFICATION_TRANSPORT=outbox")
    return engine.transport.messages_for(recipient)
