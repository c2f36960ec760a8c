# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Reunite — FastAPI Dependencies
Singleton providers for the stores, the transport, and the engine.
Everything is instantiated once at startup via the lifespan event in
main.py. Route handlers access the engine via Depends() injection.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from reunite.config import get_settings
from reunite.core.engine import MatchingEngine
from reunite.core.item_store import InMemoryItemStore, ItemStore, RedisItemStore
from reunite.core.match_store import InMemoryMatchStore, MatchStore, RedisMatchStore
from reunite.modules.notifications.transports import (
    InAppOutbox,
    LoggingTransport,
    Transport,
)
from reunite.utils.logger import get_logger

log = get_logger(__name__)

# ─── Engine Singleton ────────────────────────────────────────────────────────

_engine: MatchingEngine | None = None


def _build_stores() -> tuple[ItemStore, MatchStore]:
    settings = get_settings()
    if settings.store_backend == "redis":
        log.info("init_stores", backend="redis", url=settings.redis_url)
        return (
            RedisItemStore(settings.redis_url, prefix=settings.store_key_prefix),
            RedisMatchStore(settings.redis_url, prefix=settings.store_key_prefix),
        )
    log.info("init_stores", backend="memory")
    return InMemoryItemStore(), InMemoryMatchStore()


def _build_transport() -> Transport:
    if get_settings().notification_transport == "log":
        return LoggingTransport()
    return InAppOutbox()


def init_engine(transport: Transport | None = None) -> MatchingEngine:
    """
    Initialise the MatchingEngine singleton based on config.
    Called once during application lifespan startup.
    """
    global _engine
    item_store, match_store = _build_stores()
    _engine = MatchingEngine(
        item_store=item_store,
        match_store=match_store,
        transport=transport or _build_transport(),
    )
    return _engine


def get_engine() -> MatchingEngine:
    """
    FastAPI dependency: inject the MatchingEngine singleton into route handlers.

    Usage in a route:
        @router.post("/matches/{match_id}/confirm")
        def confirm(match_id: str, engine: EngineDep):
            return engine.confirm(match_id)
    """
    if _engine is None:
        raise RuntimeError(
            "MatchingEngine has not been initialised. "
            "Ensure init_engine() is called during app lifespan startup."
        )
    return _engine


# Annotated type alias for clean route signatures
EngineDep = Annotated[MatchingEngine, Depends(get_engine)]
