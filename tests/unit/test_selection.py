import pytest

from core.editor.node import MenuNode
from core.editor.selection import EditorSelection
from core.editor.tree_ops import find_node, insert_child

pytestmark = [pytest.mark.unit]


def test_select_unknown_id_clears_selection(sample_tree) -> None:
    selection = EditorSelection()
    selection.select(sample_tree, "home")
    assert selection.panel_open

    assert selection.select(sample_tree, "missing") is None
    assert selection.selected_id is None
    assert selection.snapshot is None
    assert not selection.panel_open


def test_stale_snapshot_does_not_clobber_children(sample_tree) -> None:
    selection = EditorSelection()
    selection.select(sample_tree, "board")

    # A child is added while the snapshot still holds the old children
    tree = insert_child(sample_tree, "board", MenuNode(id="board-c", title="New"))
    selection.edit("title", "Boards")
    result = selection.fold_into(tree)

    board = find_node(result, "board")
    assert board.title == "Boards"
    assert [child.id for child in board.children] == ["board-a", "board-b", "board-c"]


def test_edit_ignores_structural_fields(sample_tree) -> None:
    selection = EditorSelection()
    selection.select(sample_tree, "board")
    assert selection.edit("children", []) == {}
    assert selection.edit("order", 3) == {}
    assert selection.fold_into(sample_tree) is sample_tree


def test_type_change_applies_leaf_defaults(sample_tree) -> None:
    selection = EditorSelection()
    selection.select(sample_tree, "board-a")
    changes = selection.edit("type", "popular")
    assert changes == {"type": "popular", "title": "Popular", "icon": "TrendingUp", "url": "/popular"}

    node = find_node(selection.fold_into(sample_tree), "board-a")
    assert node.url == "/popular"
    assert node.title == "Popular"


def test_type_change_to_board_links_nowhere(sample_tree) -> None:
    selection = EditorSelection()
    selection.select(sample_tree, "home")
    changes = selection.edit("type", "gallery")
    assert changes["url"] == "#"
    assert changes["icon"] == "Image"


def test_resync_follows_structural_changes(sample_tree) -> None:
    selection = EditorSelection()
    selection.select(sample_tree, "board-a")

    selection.resync([])
    assert selection.selected_id is None
    assert selection.resolve(sample_tree) is None


def test_close_panel_keeps_selection(sample_tree) -> None:
    selection = EditorSelection()
    selection.select(sample_tree, "home")
    selection.close_panel()
    assert selection.selected_id == "home"
    assert selection.resolve(sample_tree).title == "Home"
