"""
Menu node - one entry of the hierarchical forum menu
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional


@dataclass
class MenuNode:
    """In-memory menu entry.

    Ownership flows through ``children``; ``parent_id`` is only a
    back-reference kept in step with the structure by the tree operations.
    Nodes are never mutated in place once they are part of a tree.
    """
    id: str
    title: str
    order: int = 0
    parent_id: Optional[str] = None
    icon: Optional[str] = None
    url: Optional[str] = None
    hidden: Optional[bool] = None
    type: Optional[str] = None
    children: List['MenuNode'] = field(default_factory=list)
    
    def has_children(self) -> bool:
        return bool(self.children)
    
    def to_dict(self) -> Dict[str, Any]:
        """JSON shape stored in the menu document"""
        data: Dict[str, Any] = {'id': self.id, 'title': self.title, 'order': self.order}
        for key in ('parent_id', 'icon', 'url', 'hidden', 'type'):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        if self.children:
            data['children'] = [child.to_dict() for child in self.children]
        return data
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any], order: int = 0) -> 'MenuNode':
        """Build a node (and its subtree) from the stored JSON shape"""
        return cls(
            id=str(data['id']),
            title=data['title'],
            order=data['order'] if data.get('order') is not None else order,
            parent_id=data.get('parent_id'),
            icon=data.get('icon'),
            url=data.get('url'),
            hidden=data.get('hidden'),
            type=data.get('type'),
            children=nodes_from_dicts(data.get('children') or []),
        )


def nodes_from_dicts(items: Iterable[Dict[str, Any]]) -> List[MenuNode]:
    """Sibling list from JSON; a missing order falls back to the list position"""
    return [MenuNode.from_dict(item, order=index) for index, item in enumerate(items)]


def nodes_to_dicts(items: Iterable[MenuNode]) -> List[Dict[str, Any]]:
    return [item.to_dict() for item in items]
