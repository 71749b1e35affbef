"""
Tree mutation engine - pure operations over the ordered menu tree

Every operation takes the root sibling list and returns a new one. Nodes
that are not on the path to the target come back as the very same objects,
and an operation whose target id is missing returns the input list itself,
so ``result is items`` tells a caller nothing happened.
"""

import logging
import secrets
import string
from dataclasses import fields, replace
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Set

from core.editor.node import MenuNode

logger = logging.getLogger(__name__)

Tree = List[MenuNode]

ID_ALPHABET = string.ascii_letters + string.digits
DEFAULT_ID_LENGTH = 11

# Owned by the structure, never by a field edit
STRUCTURAL_FIELDS = frozenset({'id', 'children', 'order', 'parent_id'})
EDITABLE_FIELDS = tuple(f.name for f in fields(MenuNode) if f.name not in STRUCTURAL_FIELDS)


# ===== Lookup =====

def iter_nodes(items: Sequence[MenuNode]) -> Iterator[MenuNode]:
    """Depth-first, pre-order walk of the whole tree"""
    for node in items:
        yield node
        yield from iter_nodes(node.children)


def collect_ids(items: Sequence[MenuNode]) -> Set[str]:
    return {node.id for node in iter_nodes(items)}


def count_nodes(items: Sequence[MenuNode]) -> int:
    return sum(1 for _ in iter_nodes(items))


def find_node(items: Sequence[MenuNode], node_id: str) -> Optional[MenuNode]:
    for node in iter_nodes(items):
        if node.id == node_id:
            return node
    return None


def find_path(items: Sequence[MenuNode], node_id: str) -> Optional[List[MenuNode]]:
    """Chain of nodes from a root down to node_id (inclusive)"""
    for node in items:
        if node.id == node_id:
            return [node]
        below = find_path(node.children, node_id)
        if below:
            return [node] + below
    return None


def depth_of(items: Sequence[MenuNode], node_id: str) -> Optional[int]:
    """0 for root entries, None when the id is not in the tree"""
    path = find_path(items, node_id)
    return len(path) - 1 if path else None


def subtree_height(node: MenuNode) -> int:
    """Number of levels in node's subtree, 1 for a leaf"""
    if not node.children:
        return 1
    return 1 + max(subtree_height(child) for child in node.children)


def sibling_list(items: Tree, parent_id: Optional[str]) -> Optional[Tree]:
    """Root list for parent_id None, otherwise that node's children"""
    if parent_id is None:
        return items
    parent = find_node(items, parent_id)
    return parent.children if parent else None


def generate_id(existing: Set[str], length: int = DEFAULT_ID_LENGTH) -> str:
    """Random alphanumeric id that does not collide with any existing one"""
    while True:
        candidate = ''.join(secrets.choice(ID_ALPHABET) for _ in range(length))
        if candidate not in existing:
            return candidate


# ===== Helpers =====

def renumber(siblings: Sequence[MenuNode]) -> Tree:
    """Make every order equal its index, reusing nodes that already match"""
    return [node if node.order == index else replace(node, order=index)
            for index, node in enumerate(siblings)]


def normalize(items: Tree, parent_id: Optional[str] = None) -> Tree:
    """Renumber every sibling list and align parent_id with the structure.

    Used on data coming from storage or import, where the invariants were
    not necessarily maintained by this engine.
    """
    result = []
    changed = False
    for index, node in enumerate(items):
        children = normalize(node.children, node.id)
        if node.order != index or node.parent_id != parent_id or children is not node.children:
            node = replace(node, order=index, parent_id=parent_id, children=children)
            changed = True
        result.append(node)
    return result if changed else items


def _edit_list_containing(items: Tree, node_id: str,
                          edit: Callable[[Tree, int], Tree]) -> Tree:
    """Apply edit(siblings, index) to whichever sibling list holds node_id.

    Ancestors of the edited list are rebuilt with their new children; every
    other node is passed through untouched.
    """
    for index, node in enumerate(items):
        if node.id == node_id:
            return edit(items, index)

    for index, node in enumerate(items):
        if not node.children:
            continue
        new_children = _edit_list_containing(node.children, node_id, edit)
        if new_children is not node.children:
            rebuilt = list(items)
            rebuilt[index] = replace(node, children=new_children)
            return rebuilt

    return items


def _edit_node(items: Tree, node_id: str,
               edit: Callable[[MenuNode], MenuNode]) -> Tree:
    """Replace the node with id node_id by edit(node)"""
    def swap_in(siblings: Tree, index: int) -> Tree:
        edited = edit(siblings[index])
        if edited is siblings[index]:
            return siblings
        rebuilt = list(siblings)
        rebuilt[index] = edited
        return rebuilt

    return _edit_list_containing(items, node_id, swap_in)


# ===== Operations =====

def insert_root(items: Tree, title: str, url: Optional[str] = "#",
                id_length: int = DEFAULT_ID_LENGTH) -> Tree:
    """Append a fresh node at the end of the root list"""
    node = MenuNode(
        id=generate_id(collect_ids(items), id_length),
        title=title,
        url=url,
        order=len(items),
    )
    logger.debug(f"Inserted root node {node.id} at position {node.order}")
    return list(items) + [node]


def insert_child(items: Tree, parent_id: str, node: MenuNode) -> Tree:
    """Append node to the children of parent_id, wherever that parent lives.

    Unknown parent ids, and any id of the new subtree that is already in the
    tree or repeated within the subtree, leave the tree unchanged.
    """
    new_ids = [n.id for n in iter_nodes([node])]
    if len(set(new_ids)) != len(new_ids) or collect_ids(items).intersection(new_ids):
        logger.debug(f"Not inserting {node.id}: ids would repeat in tree")
        return items

    def attach(parent: MenuNode) -> MenuNode:
        child = replace(
            node,
            parent_id=parent.id,
            order=len(parent.children),
            children=normalize(node.children, node.id),
        )
        return replace(parent, children=list(parent.children) + [child])

    result = _edit_node(items, parent_id, attach)
    if result is items:
        logger.debug(f"Not inserting {node.id}: parent {parent_id} not found")
    return result


def delete_node(items: Tree, node_id: str) -> Tree:
    """Remove node_id together with its whole subtree; survivors are renumbered"""
    def drop(siblings: Tree, index: int) -> Tree:
        return renumber(siblings[:index] + siblings[index + 1:])

    result = _edit_list_containing(items, node_id, drop)
    if result is items:
        logger.debug(f"Delete ignored: {node_id} not found")
    return result


def update_fields(items: Tree, node_id: str, partial: Dict[str, Any]) -> Tree:
    """Merge partial into the matched node, keeping its children.

    Structural keys (id, children, order, parent_id) and unknown keys are
    ignored; structure only changes through the dedicated operations.
    """
    changes = {key: value for key, value in partial.items() if key in EDITABLE_FIELDS}
    ignored = set(partial) - set(changes)
    if ignored:
        logger.debug(f"Ignoring non-editable fields for {node_id}: {sorted(ignored)}")
    if not changes:
        return items

    def merge(node: MenuNode) -> MenuNode:
        if all(getattr(node, key) == value for key, value in changes.items()):
            return node
        return replace(node, **changes)

    return _edit_node(items, node_id, merge)


def _shift(items: Tree, node_id: str, offset: int) -> Tree:
    def swap(siblings: Tree, index: int) -> Tree:
        target = index + offset
        if target < 0 or target >= len(siblings):
            return siblings
        moved = list(siblings)
        moved[index], moved[target] = moved[target], moved[index]
        return renumber(moved)

    return _edit_list_containing(items, node_id, swap)


def move_up(items: Tree, node_id: str) -> Tree:
    """Swap node_id with its previous sibling; no-op for the first sibling"""
    return _shift(items, node_id, -1)


def move_down(items: Tree, node_id: str) -> Tree:
    """Swap node_id with its next sibling; no-op for the last sibling"""
    return _shift(items, node_id, 1)


def reorder_siblings(items: Tree, parent_id: Optional[str],
                     ordered_ids: Sequence[str]) -> Tree:
    """Replace one sibling list (root when parent_id is None) by a permutation.

    ordered_ids must name exactly the current siblings; anything else is
    ignored.
    """
    siblings = sibling_list(items, parent_id)
    if siblings is None:
        logger.debug(f"Reorder ignored: parent {parent_id} not found")
        return items

    by_id = {node.id: node for node in siblings}
    if len(ordered_ids) != len(siblings) or set(ordered_ids) != set(by_id):
        logger.debug(f"Reorder ignored: {list(ordered_ids)} is not a permutation of {list(by_id)}")
        return items

    reordered = renumber([by_id[node_id] for node_id in ordered_ids])
    if all(new is old for new, old in zip(reordered, siblings)):
        return items

    if parent_id is None:
        return reordered
    return _edit_node(items, parent_id, lambda parent: replace(parent, children=reordered))


def move_to_parent(items: Tree, node_id: str, new_parent_id: Optional[str]) -> Tree:
    """Detach node_id (with its subtree) and append it under new_parent_id.

    new_parent_id None moves the node to the end of the root list. Moving a
    node under itself or one of its own descendants is refused.
    """
    path = find_path(items, node_id)
    if not path:
        logger.debug(f"Move ignored: {node_id} not found")
        return items

    node = path[-1]
    current_parent_id = path[-2].id if len(path) > 1 else None
    if current_parent_id == new_parent_id:
        return items

    if new_parent_id is not None:
        if find_node([node], new_parent_id):
            logger.debug(f"Move ignored: {new_parent_id} is inside {node_id}")
            return items
        if find_node(items, new_parent_id) is None:
            logger.debug(f"Move ignored: parent {new_parent_id} not found")
            return items

    detached = delete_node(items, node_id)
    if new_parent_id is None:
        moved = replace(
            node,
            parent_id=None,
            order=len(detached),
            children=normalize(node.children, node.id),
        )
        return list(detached) + [moved]
    return insert_child(detached, new_parent_id, node)
