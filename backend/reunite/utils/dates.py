# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Reunite — Date Helpers
Naive timestamps are treated as UTC so reports from different clients
can always be compared.
"""

from datetime import datetime, timezone

_SECONDS_PER_DAY = 86400.0


def as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def days_apart(a: datetime, b: datetime) -> float:
    """Absolute distance between two timestamps in (fractional) days."""
    return abs((as_utc(a) - as_utc(b)).total_seconds()) / _SECONDS_PER_DAY


def format_item_date(dt: datetime) -> str:
    """Human-readable date for message bodies, e.g. 'Jan 14, 2024'."""
    d = as_utc(dt)
    return f"{d.strftime('%b')} {d.day}, {d.year}"
