# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Reunite — Structured Logging
structlog event logs, JSON in production and coloured console at DEBUG.
Notification dispatch runs inside match_context() so every send attempt
for one match carries its match_id.
"""

import logging
import sys
from contextlib import contextmanager
from typing import Any, Iterator

import structlog
from structlog.types import EventDict, Processor

from reunite import __version__
from reunite.config import get_settings

# Float fields rounded in log output; raw scores carry 15+ digits
_SCORE_KEYS = ("score", "confidence", "min_score", "image_similarity", "ai_confidence")


def _add_service_info(
    logger: Any, method: str, event_dict: EventDict
) -> EventDict:
    event_dict["app"] = "reunite"
    event_dict["version"] = __version__
    return event_dict


def _round_scores(
    logger: Any, method: str, event_dict: EventDict
) -> EventDict:
    for key in _SCORE_KEYS:
        value = event_dict.get(key)
        if isinstance(value, float):
            event_dict[key] = round(value, 3)
    return event_dict


def _drop_color_message_key(
    logger: Any, method: str, event_dict: EventDict
) -> EventDict:
    """uvicorn adds color_message alongside event."""
    event_dict.pop("color_message", None)
    return event_dict


def _renderers(debug: bool) -> list[Processor]:
    if debug:
        return [structlog.dev.ConsoleRenderer(colors=True)]
    return [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]


def configure_logging() -> None:
    """
    Configure structlog once at startup from Settings.log_level.
    uvicorn / fastapi stdlib records go to the same stream.
    """
    settings = get_settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        _add_service_info,
        _round_scores,
        _drop_color_message_key,
    ]
    processors += _renderers(settings.log_level == "DEBUG")

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(sys.stdout),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)


@contextmanager
def match_context(match_id: str) -> Iterator[None]:
    """Bind match_id to every log line emitted inside the block."""
    structlog.contextvars.bind_contextvars(match_id=match_id)
    try:
        yield
    finally:
        structlog.contextvars.unbind_contextvars("match_id")


def get_logger(name: str = "reunite") -> structlog.BoundLogger:
    """
    Usage:
        log = get_logger(__name__)
        log.info("discovery_complete", lost=5, found=4, matches=3)
    """
    return structlog.get_logger(name)
