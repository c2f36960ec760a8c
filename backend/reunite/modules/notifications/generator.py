# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Reunite — Notification Generator
Builds the human-readable messages for both parties of a match, and the
reminder sent for long-open reports. Pure string building, no I/O.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from reunite.models.item import Item
from reunite.models.match import Match, Party
from reunite.models.notification import Notification, NotificationType
from reunite.modules.matching.scorer import (
    AI_DESCRIPTION,
    BRAND,
    CATEGORY,
    COLOR,
    DATE_RANGE,
    DESCRIPTION,
    IMAGE_MATCH,
    LOCATION,
    SIZE,
)
from reunite.utils.dates import as_utc, format_item_date

FIELD_LABELS: dict[str, str] = {
    CATEGORY: "Category",
    LOCATION: "Location",
    DESCRIPTION: "Description",
    AI_DESCRIPTION: "AI-enhanced description",
    IMAGE_MATCH: "Photo similarity",
    COLOR: "Color",
    BRAND: "Brand",
    SIZE: "Size",
    DATE_RANGE: "Date",
}

DEFAULT_SIGNATURE = "Lost & Found System"


def confidence_percent(match: Match) -> int:
    return int(round(match.score * 100))


def describe_fields(matched_fields: list[str]) -> str:
    """One checkmarked line per matched field, in scorer order."""
    if not matched_fields:
        return "(no individual criteria stood out)"
    return "\n".join(
        f"✓ {FIELD_LABELS.get(field, field[:1].upper() + field[1:])}"
        for field in matched_fields
    )


def _contact_block(item: Item) -> str:
    lines = [f"- Name: {item.contact_name}", f"- Email: {item.contact_email}"]
    if item.contact_phone:
        lines.append(f"- Phone: {item.contact_phone}")
    return "\n".join(lines)


def _category(item: Item) -> str:
    return item.category or "item"


def _lost_party_body(match: Match, lost: Item, found: Item, signature: str) -> str:
    return f"""Dear {lost.contact_name},

Great news! We found a potential match for your lost {_category(lost)}.

MATCH DETAILS:
- Match Confidence: {confidence_percent(match)}%
- Found Item: {found.title}
- Location Found: {found.location}
- Date Found: {format_item_date(found.occurred_at)}
- Description: {found.description}

MATCHED CRITERIA:
{describe_fields(match.matched_fields)}

CONTACT INFORMATION:
The person who found this item can be reached at:
{_contact_block(found)}

Please contact them directly to verify if this is your item and arrange for pickup.

Best regards,
{signature}"""


def _found_party_body(match: Match, lost: Item, found: Item, signature: str) -> str:
    return f"""Dear {found.contact_name},

We found a potential owner for the {_category(found)} you reported as found.

MATCH DETAILS:
- Match Confidence: {confidence_percent(match)}%
- Lost Item: {lost.title}
- Location Lost: {lost.location}
- Date Lost: {format_item_date(lost.occurred_at)}
- Description: {lost.description}

MATCHED CRITERIA:
{describe_fields(match.matched_fields)}

CONTACT INFORMATION:
The person who lost this item can be reached at:
{_contact_block(lost)}

They may contact you directly to verify ownership and arrange for pickup.

Thank you for helping reunite people with their belongings!

Best regards,
{signature}"""


def build_match_notification(
    party: Party,
    match: Match,
    lost: Item,
    found: Item,
    signature: str = DEFAULT_SIGNATURE,
) -> Notification:
    """Build the message addressed to one side of the match."""
    if party == Party.LOST:
        recipient, subject = lost, f"Potential Match Found for Your Lost {_category(lost)}"
        body = _lost_party_body(match, lost, found, signature)
    else:
        recipient, subject = found, f"Potential Owner Found for Your Found {_category(found)}"
        body = _found_party_body(match, lost, found, signature)

    return Notification(
        recipient=recipient.contact_email,
        recipient_name=recipient.contact_name,
        subject=subject,
        body=body,
        type=NotificationType.MATCH_FOUND,
        match_id=match.match_id,
        item_id=recipient.item_id,
        party=party,
    )


def build_match_notifications(
    match: Match,
    lost: Item,
    found: Item,
    signature: str = DEFAULT_SIGNATURE,
) -> list[Notification]:
    """Exactly two messages: the lost item's contact first, then the finder."""
    return [
        build_match_notification(Party.LOST, match, lost, found, signature),
        build_match_notification(Party.FOUND, match, lost, found, signature),
    ]


def build_reminder(
    item: Item,
    now: Optional[datetime] = None,
    signature: str = DEFAULT_SIGNATURE,
) -> Notification:
    """Reminder for a report that is still open, nudging the owner to update it."""
    now = now or datetime.now(timezone.utc)
    days = max(0, int((as_utc(now) - as_utc(item.reported_at)).total_seconds() // 86400))

    body = f"""Dear {item.contact_name},

This is a reminder about your {item.type.value} item report from {days} days ago.

Item: {item.title}
Location: {item.location}
Status: {item.status.value}

If you have found your item or no longer need this report active, please update your listing.
If you have any additional information that might help with matching, please update your description.

Best regards,
{signature}"""

    return Notification(
        recipient=item.contact_email,
        recipient_name=item.contact_name,
        subject=f"Reminder: Your {item.type.value} {_category(item)} report",
        body=body,
        type=NotificationType.REMINDER,
        item_id=item.item_id,
    )
