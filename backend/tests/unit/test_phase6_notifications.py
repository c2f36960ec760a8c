# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Phase 6 — Notifications and report enrichment.
Message content for both parties, at-most-once dispatch, partial
delivery with retry, transport failures, and the enrichment hook.
"""

from datetime import datetime, timezone

import pytest

DAY0 = datetime(2024, 1, 14, 12, 0, tzinfo=timezone.utc)


# ─── Helpers ─────────────────────────────────────────────────────────────────

def _item(item_id: str, type: str, **kw):
    from reunite.models.item import Item
    data = dict(
        item_id=item_id,
        type=type,
        title="Black iPhone 14 Pro" if type == "lost" else "iPhone with Clear Case",
        category="Electronics",
        description="Black phone with clear case",
        location="Library Building, Study Area",
        occurred_at=DAY0,
        contact_name="Alex" if type == "lost" else "Sam",
        contact_email=f"{item_id}@example.edu",
    )
    data.update(kw)
    return Item(**data)


def _match(score: float = 0.856, **kw):
    from reunite.models.match import Match
    data = dict(
        match_id="lost-1:found-1",
        lost_item_id="lost-1",
        found_item_id="found-1",
        score=score,
        matched_fields=["category", "color", "dateRange"],
    )
    data.update(kw)
    return Match(**data)


class RecordingTransport:
    """Records every send; fails for recipients listed in fail_for."""

    def __init__(self, fail_for=(), raise_for=()):
        self.sent = []
        self.fail_for = set(fail_for)
        self.raise_for = set(raise_for)

    def send(self, notification):
        if notification.recipient in self.raise_for:
            raise ConnectionError("smtp unreachable")
        if notification.recipient in self.fail_for:
            return False
        self.sent.append(notification)
        return True


# ─── Generator ───────────────────────────────────────────────────────────────

def test_builds_one_message_per_party_lost_first():
    from reunite.models.match import Party
    from reunite.modules.notifications.generator import build_match_notifications

    lost, found = _item("lost-1", "lost"), _item("found-1", "found")
    msgs = build_match_notifications(_match(), lost, found)

    assert [m.party for m in msgs] == [Party.LOST, Party.FOUND]
    assert msgs[0].recipient == "lost-1@example.edu"
    assert msgs[1].recipient == "found-1@example.edu"
    assert all(m.match_id == "lost-1:found-1" for m in msgs)


def test_lost_party_message_describes_found_item():
    from reunite.modules.notifications.generator import build_match_notifications

    lost = _item("lost-1", "lost")
    found = _item("found-1", "found", contact_phone="555-0100")
    to_lost, _ = build_match_notifications(_match(), lost, found)

    assert to_lost.subject == "Potential Match Found for Your Lost Electronics"
    assert "Dear Alex" in to_lost.body
    assert "Match Confidence: 86%" in to_lost.body
    assert "Found Item: iPhone with Clear Case" in to_lost.body
    assert "Location Found: Library Building, Study Area" in to_lost.body
    assert "Date Found: Jan 14, 2024" in to_lost.body
    assert "- Email: found-1@example.edu" in to_lost.body
    assert "- Phone: 555-0100" in to_lost.body
    assert "✓ Category\n✓ Color\n✓ Date" in to_lost.body


def test_found_party_message_omits_missing_phone():
    from reunite.modules.notifications.generator import build_match_notifications

    lost, found = _item("lost-1", "lost"), _item("found-1", "found")
    _, to_found = build_match_notifications(_match(), lost, found)

    assert to_found.subject == "Potential Owner Found for Your Found Electronics"
    assert "Lost Item: Black iPhone 14 Pro" in to_found.body
    assert "- Email: lost-1@example.edu" in to_found.body
    assert "Phone:" not in to_found.body


def test_describe_fields_with_nothing_matched():
    from reunite.modules.notifications.generator import describe_fields

    assert describe_fields([]) == "(no individual criteria stood out)"
    assert describe_fields(["imageMatch"]) == "✓ Photo similarity"


def test_confidence_percent_rounds():
    from reunite.modules.notifications.generator import confidence_percent

    assert confidence_percent(_match(score=0.6)) == 60
    assert confidence_percent(_match(score=0.999)) == 100


def test_reminder_counts_days_open():
    from reunite.models.notification import NotificationType
    from reunite.modules.notifications.generator import build_reminder

    item = _item("lost-1", "lost", reported_at=DAY0)
    note = build_reminder(item, now=datetime(2024, 1, 24, 13, 0, tzinfo=timezone.utc))

    assert note.type == NotificationType.REMINDER
    assert note.subject == "Reminder: Your lost Electronics report"
    assert "from 10 days ago" in note.body
    assert note.match_id is None


# ─── Dispatcher ──────────────────────────────────────────────────────────────

def test_notify_twice_sends_once():
    from reunite.modules.notifications.dispatcher import NotificationDispatcher

    transport = RecordingTransport()
    dispatcher = NotificationDispatcher(transport)
    match = _match()
    lost, found = _item("lost-1", "lost"), _item("found-1", "found")

    first = dispatcher.notify(match, lost, found)
    second = dispatcher.notify(match, lost, found)

    assert first.notification_sent is True
    assert first.attempted == 2
    assert second.skipped is True
    assert second.attempted == 2  # reports the earlier deliveries
    assert len(transport.sent) == 2
    assert match.notification_sent is True


def test_partial_failure_retries_only_failed_party():
    from reunite.core.match_store import InMemoryMatchStore
    from reunite.models.match import Party
    from reunite.modules.notifications.dispatcher import NotificationDispatcher

    store = InMemoryMatchStore()
    store.add_if_absent(_match())
    lost, found = _item("lost-1", "lost"), _item("found-1", "found")

    flaky = RecordingTransport(fail_for={"found-1@example.edu"})
    report = NotificationDispatcher(flaky, store).notify(store.get_match("lost-1:found-1"), lost, found)

    assert report.delivered == [Party.LOST]
    assert report.failed == [Party.FOUND]
    stored = store.get_match("lost-1:found-1")
    assert stored.notification_sent is False
    assert stored.notified_parties == [Party.LOST]

    healthy = RecordingTransport()
    retry = NotificationDispatcher(healthy, store).notify(stored, lost, found)

    assert [n.party for n in healthy.sent] == [Party.FOUND]
    assert retry.notification_sent is True
    assert store.get_match("lost-1:found-1").notification_sent is True


def test_transport_exception_is_a_failure_not_an_error():
    from reunite.models.match import Party
    from reunite.modules.notifications.dispatcher import NotificationDispatcher

    transport = RecordingTransport(raise_for={"lost-1@example.edu"})
    match = _match()
    report = NotificationDispatcher(transport).notify(
        match, _item("lost-1", "lost"), _item("found-1", "found"),
    )

    assert report.failed == [Party.LOST]
    assert report.delivered == [Party.FOUND]
    assert match.notification_sent is False


def test_remind_reports_delivery():
    from reunite.modules.notifications.dispatcher import NotificationDispatcher

    item = _item("lost-1", "lost", reported_at=DAY0)
    ok = RecordingTransport()
    assert NotificationDispatcher(ok).remind(item) is True
    assert ok.sent[0].subject == "Reminder: Your lost Electronics report"

    down = RecordingTransport(raise_for={"lost-1@example.edu"})
    assert NotificationDispatcher(down).remind(item) is False


def test_inapp_outbox_groups_by_recipient():
    from reunite.modules.notifications.dispatcher import NotificationDispatcher
    from reunite.modules.notifications.transports import InAppOutbox

    outbox = InAppOutbox()
    NotificationDispatcher(outbox).notify(
        _match(), _item("lost-1", "lost"), _item("found-1", "found"),
    )
    assert outbox.count() == 2
    assert len(outbox.messages_for("lost-1@example.edu")) == 1
    assert outbox.messages_for("nobody@example.edu") == []


def test_logging_transport_always_succeeds():
    from reunite.modules.notifications.generator import build_reminder
    from reunite.modules.notifications.transports import LoggingTransport

    assert LoggingTransport().send(build_reminder(_item("lost-1", "lost"))) is True


# ─── Enrichment ──────────────────────────────────────────────────────────────

class FakeProvider:
    def __init__(self, fail: bool = False):
        self.fail = fail

    def embed(self, image):
        if self.fail:
            raise RuntimeError("model offline")
        return [0.6, 0.8]

    def describe(self, image):
        from reunite.models.item import ItemAnalysis
        if self.fail:
            raise RuntimeError("model offline")
        return ItemAnalysis(text="black smartphone", tags=["phone", "case"],
                            category="Phones", color="Black", brand="Apple",
                            confidence=0.9)


def test_enrich_report_fills_blanks_only():
    from reunite.modules.enrichment.provider import enrich_report

    item = _item("lost-1", "lost", category="Electronics", color=None, tags=["case"])
    enriched = enrich_report(item, b"jpeg", FakeProvider())

    assert enriched.embedding == [0.6, 0.8]
    assert enriched.category == "Electronics"
    assert enriched.color == "Black"
    assert enriched.brand == "Apple"
    assert enriched.tags == ["case", "phone"]
    assert enriched.ai_description == (
        "Black phone with clear case AI detected: black smartphone. "
        "Key features: phone, case."
    )
    # Original report untouched
    assert item.embedding is None


def test_enrich_report_provider_failure_keeps_report():
    from reunite.modules.enrichment.provider import enrich_report

    item = _item("lost-1", "lost")
    assert enrich_report(item, b"jpeg", FakeProvider(fail=True)) is item


def test_enhance_description_without_analysis():
    from reunite.modules.enrichment.provider import enhance_description

    assert enhance_description("blue bag", None) == "blue bag"
