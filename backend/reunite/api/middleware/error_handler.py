# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Reunite — Global Error Handler
Converts domain exceptions and unhandled errors into structured JSON
error responses. Registered on the FastAPI app in main.py.
"""

from __future__ import annotations

import traceback

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from reunite.core.exceptions import (
    DuplicateItemError,
    InvalidTransitionError,
    ItemNotFoundError,
    MatchNotFoundError,
)
from reunite.utils.logger import get_logger

log = get_logger(__name__)


def _key_message(exc: KeyError) -> str:
    # KeyError.__str__ wraps the key in quotes
    return str(exc.args[0]) if exc.args else ""


def _error_body(code: str, message: str, detail: str | None = None) -> dict:
    body = {"error": {"code": code, "message": message}}
    if detail:
        body["error"]["detail"] = detail
    return body


def register_error_handlers(app: FastAPI) -> None:
    """
    Register all global exception handlers on the FastAPI application.
    Call this in main.py after creating the app instance.
    """

    @app.exception_handler(ItemNotFoundError)
    async def item_not_found_handler(
        req: Request, exc: ItemNotFoundError
    ) -> JSONResponse:
        log.warning("item_not_found", path=str(req.url), item_id=_key_message(exc))
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=_error_body(
                code="ITEM_NOT_FOUND",
                message=f"Item not found: {_key_message(exc)}",
            ),
        )

    @app.exception_handler(MatchNotFoundError)
    async def match_not_found_handler(
        req: Request, exc: MatchNotFoundError
    ) -> JSONResponse:
        log.warning("match_not_found", path=str(req.url), match_id=_key_message(exc))
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=_error_body(
                code="MATCH_NOT_FOUND",
                message=f"Match not found: {_key_message(exc)}",
            ),
        )

    @app.exception_handler(InvalidTransitionError)
    async def invalid_transition_handler(
        req: Request, exc: InvalidTransitionError
    ) -> JSONResponse:
        log.warning("invalid_transition", path=str(req.url), error=str(exc))
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content=_error_body(
                code="INVALID_TRANSITION",
                message=str(exc),
                detail=f"current_status={exc.current}",
            ),
        )

    @app.exception_handler(DuplicateItemError)
    async def duplicate_item_handler(
        req: Request, exc: DuplicateItemError
    ) -> JSONResponse:
        log.warning("duplicate_item", path=str(req.url), item_id=exc.item_id)
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content=_error_body(code="DUPLICATE_ITEM", message=str(exc)),
        )

    @app.exception_handler(NotImplementedError)
    async def not_implemented_handler(
        req: Request, exc: NotImplementedError
    ) -> JSONResponse:
        log.warning("not_implemented", path=str(req.url), error=str(exc))
        return JSONResponse(
            status_code=status.HTTP_501_NOT_IMPLEMENTED,
            content=_error_body(
                code="NOT_IMPLEMENTED",
                message="This feature is not enabled in the current configuration.",
                detail=str(exc),
            ),
        )

    @app.exception_handler(Exception)
    async def generic_handler(req: Request, exc: Exception) -> JSONResponse:
        tb = traceback.format_exc()
        log.error(
            "unhandled_exception",
            path=str(req.url),
            error=str(exc),
            exc_type=type(exc).__name__,
            traceback=tb,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(
                code="INTERNAL_SERVER_ERROR",
                message="An unexpected error occurred.",
            ),
        )
