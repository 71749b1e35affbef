import pytest

from core.editor.drag import DragEnd
from core.editor.menu_model import DEFAULT_TITLE, MenuModel

pytestmark = [pytest.mark.unit]


@pytest.fixture
def model(sample_items):
    return MenuModel.from_document({"id": "doc-1", "items": sample_items})


def _ids(nodes):
    return [node.id for node in nodes]


def test_load_document_round_trips_items(model, sample_items) -> None:
    assert model.document_id == "doc-1"
    assert model.to_document_items() == sample_items
    assert not model.has_changes()


def test_empty_document_gives_empty_tree() -> None:
    model = MenuModel.from_document(None)
    assert model.items == []
    assert model.document_id is None


def test_load_normalizes_legacy_orders() -> None:
    model = MenuModel.from_document({"id": "d", "items": [
        {"id": "x", "title": "X", "order": 5},
        {"id": "y", "title": "Y"},
    ]})
    assert [node.order for node in model.items] == [0, 1]


def test_depth_policy(model) -> None:
    assert model.can_add_child("board")
    assert model.can_add_child("home")
    assert not model.can_add_child("board-a")
    assert not model.can_add_child("missing")


def test_deeper_limit_allows_grandchildren(sample_items) -> None:
    model = MenuModel.from_document({"items": sample_items}, max_depth=3)
    assert model.can_add_child("board-a")


def test_add_child_uses_board_url(model) -> None:
    child = model.add_child("board")
    assert child is not None
    assert child.title == DEFAULT_TITLE
    assert child.url == f"/free/{child.id}"
    assert child.parent_id == "board"
    assert child.order == 2
    assert len(child.id) == 11
    assert child.id in model.tracker.added_items


def test_add_child_refused_below_limit(model) -> None:
    assert model.add_child("board-a") is None
    assert not model.has_changes()


def test_add_child_under_untyped_entry_links_nowhere(model) -> None:
    root = model.add_root("Plain")
    child = model.add_child(root.id)
    assert child.url == "#"


def test_add_root_appends(model) -> None:
    node = model.add_root()
    assert model.items[-1] is node
    assert node.order == 3
    assert node.url == "#"
    assert model.tracker.get_change_summary()["new"] == 1


def test_delete_waits_for_confirmation(model) -> None:
    node = model.request_delete("board")
    assert node.id == "board"
    assert model.pending_delete_id == "board"
    assert model.get_item("board") is not None

    model.cancel_delete()
    assert model.pending_delete_id is None
    assert not model.confirm_delete()
    assert model.get_item("board") is not None


def test_confirm_delete_removes_subtree(model) -> None:
    model.select("board-a")
    model.request_delete("board")
    assert model.confirm_delete()

    assert _ids(model.items) == ["home", "notice"]
    assert model.tracker.deleted_items == {"board", "board-a", "board-b"}
    # The selected node went with its parent
    assert model.selection.selected_id is None


def test_deleting_unsaved_item_leaves_no_changes(model) -> None:
    node = model.add_root()
    model.request_delete(node.id)
    model.confirm_delete()
    assert not model.has_changes()


def test_request_delete_unknown_id(model) -> None:
    assert model.request_delete("missing") is None
    assert model.pending_delete_id is None


def test_moves_are_tracked(model) -> None:
    assert model.move_down("board")
    assert not model.move_up("home")
    assert _ids(model.items) == ["home", "board", "notice"]
    assert model.tracker.moved_items == {"board"}


def test_move_to_parent_respects_depth(model) -> None:
    # board has children, so under home it would reach three levels
    assert not model.move_to_parent("board", "home")
    assert model.move_to_parent("home", "notice")
    assert model.parent_of("home") == "notice"
    assert model.move_to_parent("notice-a", None)
    assert model.parent_of("notice-a") is None


def test_reorder_and_drag(model) -> None:
    assert model.reorder_siblings("board", ["board-b", "board-a"])
    assert _ids(model.get_item("board").children) == ["board-b", "board-a"]

    assert model.drag_end(DragEnd("notice", "board"))
    assert _ids(model.items) == ["notice", "board", "home"]
    assert not model.drag_end(DragEnd("notice", None))


def test_reorder_tracks_only_repositioned_items(model) -> None:
    assert model.reorder_siblings(None, ["board", "notice", "home"])
    assert model.tracker.moved_items == {"notice", "home"}


def test_change_field_without_selection(model) -> None:
    assert not model.change_field("title", "X")


def test_change_field_updates_tree_and_tracker(model) -> None:
    model.select("board")
    assert model.change_field("title", "Boards")
    assert model.get_item("board").title == "Boards"
    assert model.selected.title == "Boards"
    assert model.tracker.modified_items == {"board": {"title": "Boards"}}
    assert _ids(model.get_item("board").children) == ["board-a", "board-b"]


def test_change_field_coerces_widget_values(model) -> None:
    model.select("home")
    assert model.change_field("hidden", "true")
    assert model.get_item("home").hidden is True

    assert model.change_field("type", "Q&A")
    home = model.get_item("home")
    assert home.type == "qna"
    assert home.url == "#"
    assert home.title == "Q&A"


def test_change_field_same_value_is_not_a_change(model) -> None:
    model.select("home")
    assert not model.change_field("title", "Home")
    assert not model.has_changes()


def test_selection_follows_moves(model) -> None:
    model.select("notice")
    model.move_up("notice")
    assert model.selected.order == 1


def test_mark_saved_keeps_changes_made_during_save(model) -> None:
    model.move_down("board")
    snapshot = model.items
    model.move_down("board")

    model.mark_saved(snapshot)
    assert model.has_changes()

    model.mark_saved(model.items)
    assert not model.has_changes()
