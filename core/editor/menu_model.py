"""
Clean in-memory menu model - Single source of truth

MenuModel owns the canonical tree and the selection. Every edit goes through
one of its methods, which swap in a new tree snapshot produced by the
mutation engine and keep the selection and change tracking in step.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from core.editor.change_tracker import ChangeTracker
from core.editor.drag import DragEnd, apply_drag
from core.editor.field_model import MENU_FIELD_MODEL, coerce_value
from core.editor.node import MenuNode, nodes_from_dicts, nodes_to_dicts
from core.editor.selection import EditorSelection
from core.editor.tree_ops import (
    DEFAULT_ID_LENGTH,
    Tree,
    collect_ids,
    delete_node,
    depth_of,
    find_node,
    find_path,
    generate_id,
    insert_child,
    insert_root,
    move_down,
    move_to_parent,
    move_up,
    normalize,
    reorder_siblings,
    sibling_list,
    subtree_height,
)
from core.menu.types import NO_LINK, generate_child_url

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "New Menu"
DEFAULT_MAX_DEPTH = 2


class MenuModel:
    """Complete in-memory menu with hierarchy"""

    def __init__(self, items: Optional[Sequence[MenuNode]] = None,
                 document_id: Optional[str] = None,
                 max_depth: int = DEFAULT_MAX_DEPTH,
                 id_length: int = DEFAULT_ID_LENGTH):
        self.items: Tree = normalize(list(items or []))
        self.document_id = document_id
        self.max_depth = max_depth
        self.id_length = id_length

        self.selection = EditorSelection()
        self.tracker = ChangeTracker()

        # Delete waits for an explicit confirmation
        self.pending_delete_id: Optional[str] = None

    @classmethod
    def from_document(cls, document: Optional[Dict[str, Any]], **kwargs) -> 'MenuModel':
        model = cls(**kwargs)
        model.load_document(document)
        return model

    def load_document(self, document: Optional[Dict[str, Any]]) -> None:
        """Replace the whole tree with a stored menu document (or nothing)"""
        document = document or {}
        self.items = normalize(nodes_from_dicts(document.get('items') or []))
        self.document_id = document.get('id')
        self.selection.clear()
        self.tracker.clear()
        self.pending_delete_id = None
        logger.info(f"MenuModel loaded {len(collect_ids(self.items))} items "
                    f"(document: {self.document_id})")

    def to_document_items(self, items: Optional[Tree] = None) -> List[Dict[str, Any]]:
        return nodes_to_dicts(self.items if items is None else items)

    # ===== Queries =====

    def get_item(self, item_id: str) -> Optional[MenuNode]:
        return find_node(self.items, item_id)

    def parent_of(self, item_id: str) -> Optional[str]:
        """Structural parent id (None for root entries or unknown ids)"""
        path = find_path(self.items, item_id)
        if not path or len(path) < 2:
            return None
        return path[-2].id

    def depth_of(self, item_id: str) -> Optional[int]:
        return depth_of(self.items, item_id)

    def can_add_child(self, item_id: str) -> bool:
        """Only nodes above the deepest allowed level may gain children"""
        depth = self.depth_of(item_id)
        return depth is not None and depth < self.max_depth - 1

    @property
    def selected(self) -> Optional[MenuNode]:
        return self.selection.snapshot

    def has_changes(self) -> bool:
        return self.tracker.has_changes()

    # ===== Structural edits =====

    def _commit(self, new_items: Tree) -> bool:
        if new_items is self.items:
            return False
        self.items = new_items
        self.selection.resync(new_items)
        return True

    def add_root(self, title: str = DEFAULT_TITLE, url: str = NO_LINK) -> MenuNode:
        """Append a new entry at the end of the root list"""
        self._commit(insert_root(self.items, title, url, id_length=self.id_length))
        node = self.items[-1]
        self.tracker.mark_item_added(node.id)
        logger.debug(f"Added root item {node.id}")
        return node

    def add_child(self, parent_id: str, title: str = DEFAULT_TITLE) -> Optional[MenuNode]:
        """Add a child under parent_id when the depth policy allows it"""
        if not self.can_add_child(parent_id):
            logger.info(f"Cannot add a child under {parent_id}")
            return None

        parent = self.get_item(parent_id)
        child_id = generate_id(collect_ids(self.items), self.id_length)
        child = MenuNode(
            id=child_id,
            title=title,
            url=generate_child_url(parent.type, child_id),
        )
        if not self._commit(insert_child(self.items, parent_id, child)):
            return None

        self.tracker.mark_item_added(child_id)
        logger.debug(f"Added child {child_id} under {parent_id}")
        return self.get_item(child_id)

    def request_delete(self, item_id: str) -> Optional[MenuNode]:
        """First step of a delete; returns the node so the UI can ask for confirmation"""
        node = self.get_item(item_id)
        self.pending_delete_id = node.id if node else None
        return node

    def cancel_delete(self) -> None:
        self.pending_delete_id = None

    def confirm_delete(self) -> bool:
        """Delete the pending node and its whole subtree"""
        item_id, self.pending_delete_id = self.pending_delete_id, None
        if item_id is None:
            return False

        node = self.get_item(item_id)
        if node is None:
            return False

        removed = collect_ids([node])
        if not self._commit(delete_node(self.items, item_id)):
            return False

        self.tracker.mark_items_deleted(removed)
        logger.info(f"Deleted {item_id} ({len(removed)} item(s))")
        return True

    def move_up(self, item_id: str) -> bool:
        moved = self._commit(move_up(self.items, item_id))
        if moved:
            self.tracker.mark_item_moved(item_id)
        return moved

    def move_down(self, item_id: str) -> bool:
        moved = self._commit(move_down(self.items, item_id))
        if moved:
            self.tracker.mark_item_moved(item_id)
        return moved

    def move_to_parent(self, item_id: str, new_parent_id: Optional[str]) -> bool:
        """Reassign a node to another parent (or the root list) within the depth limit"""
        node = self.get_item(item_id)
        if node is None:
            return False

        if new_parent_id is not None:
            parent_depth = self.depth_of(new_parent_id)
            if parent_depth is None or parent_depth + 1 + subtree_height(node) > self.max_depth:
                logger.info(f"Cannot move {item_id} under {new_parent_id}: too deep")
                return False

        moved = self._commit(move_to_parent(self.items, item_id, new_parent_id))
        if moved:
            self.tracker.mark_item_moved(item_id)
        return moved

    def reorder_siblings(self, parent_id: Optional[str], ordered_ids: Sequence[str]) -> bool:
        before = [node.id for node in sibling_list(self.items, parent_id) or []]
        moved = self._commit(reorder_siblings(self.items, parent_id, ordered_ids))
        if moved:
            after = [node.id for node in sibling_list(self.items, parent_id)]
            for old_id, item_id in zip(before, after):
                if old_id != item_id:
                    self.tracker.mark_item_moved(item_id)
        return moved

    def drag_end(self, event: DragEnd, parent_id: Optional[str] = None) -> bool:
        """Finish a drag inside the sibling list owned by parent_id"""
        moved = self._commit(apply_drag(self.items, parent_id, event))
        if moved:
            self.tracker.mark_item_moved(event.active_id)
        return moved

    # ===== Selection and field edits =====

    def select(self, item_id: str) -> Optional[MenuNode]:
        return self.selection.select(self.items, item_id)

    def clear_selection(self) -> None:
        self.selection.clear()

    def change_field(self, field: str, value: Any) -> bool:
        """Edit one field of the selected node from the property panel"""
        item_id = self.selection.selected_id
        if item_id is None:
            return False

        field_model = MENU_FIELD_MODEL.get(field)
        if field_model is not None:
            try:
                value = coerce_value(field_model, value)
            except ValueError:
                logger.warning(f"Ignoring invalid value {value!r} for {field}")
                return False

        changes = self.selection.edit(field, value)
        if not changes:
            return False

        new_items = self.selection.fold_into(self.items)
        if new_items is self.items:
            return False

        self.items = new_items
        for key, new_value in changes.items():
            self.tracker.mark_item_modified(item_id, key, new_value)
        return True

    # ===== Persistence bookkeeping =====

    def apply_save(self, document_id: Optional[str], saved_items: Optional[Tree] = None) -> None:
        """Adopt the id the server gave the document and settle change tracking"""
        if document_id:
            self.document_id = document_id
        self.mark_saved(saved_items)

    def mark_saved(self, saved_items: Optional[Tree] = None) -> None:
        """Forget tracked changes, unless the tree moved on while saving"""
        if saved_items is not None and saved_items is not self.items:
            logger.debug("Tree changed during save, keeping change tracking")
            return
        self.tracker.clear()

    def print_debug(self) -> None:
        """Log debug information"""
        logger.debug(f"=== MenuModel (document: {self.document_id}) ===")
        logger.debug(f"Changes: {self.tracker.get_change_summary()}")

        def log_item(item: MenuNode, indent: int = 0):
            flags = " [hidden]" if item.hidden else ""
            logger.debug(f"{'  ' * indent}- {item.title} (id:{item.id}, order:{item.order}){flags}")
            for child in item.children:
                log_item(child, indent + 1)

        for item in self.items:
            log_item(item)
