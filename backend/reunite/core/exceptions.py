# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Reunite — Domain Exceptions
Local, recoverable failures. Raised before any mutation so callers never
observe a half-applied transition. Mapped to HTTP responses in
api/middleware/error_handler.py.
"""


class ItemNotFoundError(KeyError):
    """Raised when an item_id does not exist in the store."""


class MatchNotFoundError(KeyError):
    """Raised when a match_id does not exist in the store."""


class InvalidTransitionError(ValueError):
    """Raised when a match transition is not allowed from its current status."""

    def __init__(
        self, match_id: str, current: str, action: str, reason: str | None = None
    ) -> None:
        self.match_id = match_id
        self.current = current
        self.action = action
        self.reason = reason or f"status is '{current}', expected 'pending'"
        super().__init__(f"Cannot {action} match {match_id}: {self.reason}")


class DuplicateItemError(ValueError):
    """Raised when a report reuses the id of an existing item."""

    def __init__(self, item_id: str) -> None:
        self.item_id = item_id
        super().__init__(f"Item already exists: {item_id}")
