"""
Selection and field-edit coordination for the property panel
"""

import logging
from dataclasses import replace
from typing import Any, Dict, Optional

from core.editor.node import MenuNode
from core.editor.tree_ops import EDITABLE_FIELDS, Tree, find_node, update_fields
from core.menu.types import type_defaults

logger = logging.getLogger(__name__)


class EditorSelection:
    """At most one selected node, held by id plus an optimistic snapshot.

    The snapshot answers the side panel immediately. Folding it back into
    the canonical tree copies only the editable fields, so children always
    come from the tree and never from a stale snapshot.
    """
    
    def __init__(self):
        self.selected_id: Optional[str] = None
        self.snapshot: Optional[MenuNode] = None
        self.panel_open = False
    
    def select(self, items: Tree, node_id: str) -> Optional[MenuNode]:
        node = find_node(items, node_id)
        if node is None:
            self.clear()
            return None
        
        self.selected_id = node_id
        self.snapshot = node
        self.panel_open = True
        return node
    
    def clear(self):
        self.selected_id = None
        self.snapshot = None
        self.panel_open = False
    
    def close_panel(self):
        self.panel_open = False
    
    def resolve(self, items: Tree) -> Optional[MenuNode]:
        """Current canonical node for the selection"""
        if self.selected_id is None:
            return None
        return find_node(items, self.selected_id)
    
    def resync(self, items: Tree):
        """Re-derive the snapshot after a structural change"""
        if self.selected_id is None:
            return
        
        node = find_node(items, self.selected_id)
        if node is None:
            logger.debug(f"Selected node {self.selected_id} is gone, clearing selection")
            self.clear()
        else:
            self.snapshot = node
    
    def edit(self, field: str, value: Any) -> Dict[str, Any]:
        """Apply one field change to the snapshot, returning every field it set.

        Switching the type pulls in that type's defaults at the same time.
        """
        if self.snapshot is None or field not in EDITABLE_FIELDS:
            return {}
        
        changes = {field: value}
        if field == 'type':
            changes.update(type_defaults(value))
        
        self.snapshot = replace(self.snapshot, **changes)
        return changes
    
    def fold_into(self, items: Tree) -> Tree:
        """Canonical tree with the snapshot's editable fields merged in"""
        if self.snapshot is None:
            return items
        
        edited = {key: getattr(self.snapshot, key) for key in EDITABLE_FIELDS}
        return update_fields(items, self.selected_id, edited)
