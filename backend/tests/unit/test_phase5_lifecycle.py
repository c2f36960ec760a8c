# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Phase 5 — Match lifecycle tests.
confirm / reject transitions, item status cascade, terminal states,
no-partial-mutation on failure, and cascading item deletion.
"""

from datetime import datetime, timezone

import pytest


# ─── Helpers ─────────────────────────────────────────────────────────────────

def _item(item_id: str, type: str):
    from reunite.models.item import Item
    return Item(
        item_id=item_id,
        type=type,
        title="Item",
        category="Electronics",
        description="black phone",
        location="Library",
        occurred_at=datetime(2024, 1, 14, tzinfo=timezone.utc),
        contact_name="Person",
        contact_email=f"{item_id}@example.edu",
    )


def _setup(*pairs: tuple[str, str]):
    """Build stores holding the given (lost, found) pairs as pending matches."""
    from reunite.core.item_store import InMemoryItemStore
    from reunite.core.match_store import InMemoryMatchStore
    from reunite.models.match import Match, match_id_for
    from reunite.modules.lifecycle.manager import MatchLifecycleManager

    items = InMemoryItemStore()
    matches = InMemoryMatchStore()
    for lost_id, found_id in pairs:
        if items.get_item(lost_id) is None:
            items.add_item(_item(lost_id, "lost"))
        if items.get_item(found_id) is None:
            items.add_item(_item(found_id, "found"))
        matches.add_if_absent(Match(
            match_id=match_id_for(lost_id, found_id),
            lost_item_id=lost_id,
            found_item_id=found_id,
            score=0.8,
        ))
    return MatchLifecycleManager(items, matches), items, matches


# ─── Confirm ─────────────────────────────────────────────────────────────────

def test_confirm_links_both_items():
    from reunite.models.item import ItemStatus
    from reunite.models.match import MatchStatus

    mgr, items, matches = _setup(("l1", "f1"))
    confirmed = mgr.confirm("l1:f1")

    assert confirmed.status == MatchStatus.CONFIRMED
    assert confirmed.reviewed_at is not None
    assert items.get_item("l1").status == ItemStatus.MATCHED
    assert items.get_item("l1").matched_with == "f1"
    assert items.get_item("f1").status == ItemStatus.MATCHED
    assert items.get_item("f1").matched_with == "l1"


def test_confirm_twice_is_invalid():
    from reunite.core.exceptions import InvalidTransitionError

    mgr, _, _ = _setup(("l1", "f1"))
    mgr.confirm("l1:f1")
    with pytest.raises(InvalidTransitionError):
        mgr.confirm("l1:f1")


def test_confirm_unknown_match():
    from reunite.core.exceptions import MatchNotFoundError

    mgr, _, _ = _setup()
    with pytest.raises(MatchNotFoundError):
        mgr.confirm("nope:nothing")


def test_confirm_with_missing_item_leaves_match_pending():
    from reunite.core.exceptions import ItemNotFoundError
    from reunite.models.item import ItemStatus
    from reunite.models.match import MatchStatus

    mgr, items, matches = _setup(("l1", "f1"))
    items.delete_item("f1")

    with pytest.raises(ItemNotFoundError):
        mgr.confirm("l1:f1")
    assert matches.get_match("l1:f1").status == MatchStatus.PENDING
    assert items.get_item("l1").status == ItemStatus.ACTIVE


def test_confirm_rejects_competing_matches():
    from reunite.models.match import MatchStatus

    mgr, items, matches = _setup(("l1", "f1"), ("l1", "f2"), ("l2", "f1"), ("l2", "f2"))
    mgr.confirm("l1:f1")

    assert matches.get_match("l1:f2").status == MatchStatus.REJECTED
    assert matches.get_match("l2:f1").status == MatchStatus.REJECTED
    # Touches neither l1 nor f1
    assert matches.get_match("l2:f2").status == MatchStatus.PENDING


def test_second_confirm_for_same_item_keeps_links_mutual():
    from reunite.core.exceptions import InvalidTransitionError

    mgr, items, _ = _setup(("l1", "f1"), ("l1", "f2"))
    mgr.confirm("l1:f1")

    with pytest.raises(InvalidTransitionError):
        mgr.confirm("l1:f2")
    assert items.get_item("l1").matched_with == "f1"
    assert items.get_item("f1").matched_with == "l1"
    assert items.get_item("f2").is_active


def test_confirm_refused_when_item_no_longer_active():
    from reunite.core.exceptions import InvalidTransitionError
    from reunite.models.match import Match, MatchStatus

    mgr, items, matches = _setup(("l1", "f1"))
    mgr.confirm("l1:f1")
    # Pending record created after l1 was linked
    items.add_item(_item("f3", "found"))
    matches.add_if_absent(Match(match_id="l1:f3", lost_item_id="l1",
                                found_item_id="f3", score=0.9))

    with pytest.raises(InvalidTransitionError) as exc_info:
        mgr.confirm("l1:f3")
    assert "l1" in exc_info.value.reason
    assert matches.get_match("l1:f3").status == MatchStatus.PENDING
    assert items.get_item("f3").is_active
    assert items.get_item("l1").matched_with == "f1"


# ─── Reject ──────────────────────────────────────────────────────────────────

def test_reject_leaves_items_active():
    from reunite.models.item import ItemStatus
    from reunite.models.match import MatchStatus

    mgr, items, _ = _setup(("l1", "f1"))
    rejected = mgr.reject("l1:f1")

    assert rejected.status == MatchStatus.REJECTED
    assert items.get_item("l1").status == ItemStatus.ACTIVE
    assert items.get_item("f1").status == ItemStatus.ACTIVE
    assert items.get_item("l1").matched_with is None


def test_terminal_states_block_further_transitions():
    from reunite.core.exceptions import InvalidTransitionError
    from reunite.models.item import ItemStatus

    mgr, items, _ = _setup(("l1", "f1"), ("l2", "f2"))
    mgr.reject("l1:f1")
    mgr.confirm("l2:f2")

    with pytest.raises(InvalidTransitionError):
        mgr.confirm("l1:f1")
    with pytest.raises(InvalidTransitionError) as exc_info:
        mgr.reject("l2:f2")
    assert exc_info.value.current == "confirmed"
    # The failed reject did not touch the confirmed items
    assert items.get_item("l2").status == ItemStatus.MATCHED


# ─── Duplicate reports ───────────────────────────────────────────────────────

def test_duplicate_item_id_is_refused_and_original_kept():
    from reunite.core.exceptions import DuplicateItemError
    from reunite.models.item import ItemType

    _, items, matches = _setup(("l1", "f1"))

    with pytest.raises(DuplicateItemError):
        items.add_item(_item("f1", "lost"))

    assert items.get_item("f1").type == ItemType.FOUND
    match = matches.get_match("l1:f1")
    assert items.get_item(match.lost_item_id).type == ItemType.LOST
    assert items.get_item(match.found_item_id).type == ItemType.FOUND


def test_engine_report_with_taken_id_keeps_match_pairing():
    from reunite.config import Settings
    from reunite.core.engine import MatchingEngine
    from reunite.core.exceptions import DuplicateItemError
    from reunite.core.item_store import InMemoryItemStore
    from reunite.core.match_store import InMemoryMatchStore
    from reunite.models.item import ItemStatus, ItemType
    from reunite.modules.notifications.transports import InAppOutbox

    engine = MatchingEngine(InMemoryItemStore(), InMemoryMatchStore(), InAppOutbox(),
                            settings=Settings(_env_file=None))
    engine.report_item(_item("l1", "lost"))
    engine.report_item(_item("f1", "found"))
    engine.confirm("l1:f1")

    with pytest.raises(DuplicateItemError):
        engine.report_item(_item("f1", "lost"))

    found = engine.item_store.get_item("f1")
    assert found.type == ItemType.FOUND
    assert found.status == ItemStatus.MATCHED
    assert found.matched_with == "l1"


# ─── Delete / resolve ────────────────────────────────────────────────────────

def test_delete_item_cascades_to_all_matches():
    mgr, items, matches = _setup(("l1", "f1"), ("l1", "f2"), ("l2", "f2"))
    mgr.reject("l1:f2")

    removed = mgr.delete_item("l1")

    assert sorted(removed) == ["l1:f1", "l1:f2"]
    assert items.get_item("l1") is None
    assert [m.match_id for m in matches.list_matches()] == ["l2:f2"]


def test_delete_unknown_item():
    from reunite.core.exceptions import ItemNotFoundError

    mgr, _, _ = _setup()
    with pytest.raises(ItemNotFoundError):
        mgr.delete_item("ghost")


def test_resolve_item_sets_resolved():
    from reunite.models.item import ItemStatus

    mgr, items, _ = _setup(("l1", "f1"))
    mgr.confirm("l1:f1")
    resolved = mgr.resolve_item("l1")

    assert resolved.status == ItemStatus.RESOLVED
    assert resolved.matched_with == "f1"
