import pytest

from core.editor.change_tracker import ChangeTracker

pytestmark = [pytest.mark.unit]


def test_fresh_tracker_has_no_changes() -> None:
    tracker = ChangeTracker()
    assert not tracker.has_changes()
    assert tracker.get_change_summary() == {"modified": 0, "new": 0, "deleted": 0, "moved": 0}


def test_modifications_keep_latest_value() -> None:
    tracker = ChangeTracker()
    tracker.mark_item_modified("a", "title", "One")
    tracker.mark_item_modified("a", "title", "Two")
    tracker.mark_item_modified("a", "hidden", True)
    assert tracker.modified_items == {"a": {"title": "Two", "hidden": True}}
    assert tracker.get_change_summary()["modified"] == 1


def test_deleting_forgets_pending_edits() -> None:
    tracker = ChangeTracker()
    tracker.mark_item_added("new")
    tracker.mark_item_modified("old", "title", "X")
    tracker.mark_item_moved("old")

    tracker.mark_items_deleted(["new", "old"])
    assert tracker.added_items == set()
    assert tracker.deleted_items == {"old"}
    assert tracker.modified_items == {}
    assert tracker.moved_items == set()


def test_clear() -> None:
    tracker = ChangeTracker()
    tracker.mark_item_added("a")
    tracker.mark_items_deleted(["b"])
    tracker.clear()
    assert not tracker.has_changes()
