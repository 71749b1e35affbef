"""
Drag-reorder protocol - turns "lift A, drop over B" into a sibling permutation
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, TypeVar

from core.editor.node import MenuNode
from core.editor.tree_ops import Tree, reorder_siblings, sibling_list

logger = logging.getLogger(__name__)

T = TypeVar('T')


@dataclass(frozen=True)
class DragEnd:
    """End of a drag gesture within one sibling list"""
    active_id: str
    over_id: Optional[str] = None


def array_move(seq: Sequence[T], old_index: int, new_index: int) -> List[T]:
    """Take the element at old_index out and reinsert it at new_index"""
    moved = list(seq)
    moved.insert(new_index, moved.pop(old_index))
    return moved


def drag_permutation(siblings: Sequence[MenuNode], event: DragEnd) -> Optional[List[str]]:
    """New id order for the list, or None when the drop changes nothing.

    Both ends of the gesture must belong to this list; drags never cross
    levels.
    """
    if event.over_id is None or event.active_id == event.over_id:
        return None
    
    ids = [node.id for node in siblings]
    if event.active_id not in ids or event.over_id not in ids:
        return None
    
    return array_move(ids, ids.index(event.active_id), ids.index(event.over_id))


def apply_drag(items: Tree, parent_id: Optional[str], event: DragEnd) -> Tree:
    """Reorder the sibling list owned by parent_id (root for None)"""
    siblings = sibling_list(items, parent_id)
    if siblings is None:
        return items
    
    ordered = drag_permutation(siblings, event)
    if ordered is None:
        logger.debug(f"Drag {event.active_id} -> {event.over_id} ignored")
        return items
    
    return reorder_siblings(items, parent_id, ordered)
