# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Reunite — FastAPI Application Entry Point
Creates the app, registers lifespan events, CORS, routers,
and global error handlers.
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from reunite import __version__
from reunite.api.middleware.error_handler import register_error_handlers
from reunite.api.routes import items, matches, notifications, stats
from reunite.config import get_settings
from reunite.dependencies import EngineDep, init_engine
from reunite.utils.logger import configure_logging, get_logger

log = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Startup: configure logging, initialise stores, transport and engine.
    """
    # ── Startup ──────────────────────────────────────────────────────────────
    configure_logging()
    settings = get_settings()

    log.info(
        "reunite_startup",
        version=__version__,
        store=settings.store_backend,
        transport=settings.notification_transport,
        min_match_score=settings.min_match_score,
        embedding_dim=settings.embedding_dim,
    )

    init_engine()

    log.info("reunite_ready")
    yield

    # ── Shutdown ─────────────────────────────────────────────────────────────
    log.info("reunite_shutdown")

def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title="Reunite",
        summary="Pairs lost-item reports with found-item reports and notifies both owners.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # ── CORS ─────────────────────────────────────────────────────────────────
    # Report / review frontends; CORS_ORIGINS='["https://..."]' in production
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
    )

    # ── Error Handlers ───────────────────────────────────────────────────────
    register_error_handlers(app)

    # ── Routers ──────────────────────────────────────────────────────────────
    for router in (items.router, matches.router, notifications.router, stats.router):
        app.include_router(router)

    # ── Health Check ─────────────────────────────────────────────────────────
    @app.get("/health", tags=["health"], summary="Liveness plus store counts")
    async def health(engine: EngineDep) -> dict:
        return {
            "status": "ok",
            "service": "reunite",
            "version": __version__,
            "store": settings.store_backend,
            "transport": settings.notification_transport,
            "items": engine.item_store.count(),
            "matches": engine.match_store.count(),
        }

    return app


# uvicorn reunite.main:app
app = create_app()
