"""
Menu Builder - public navigation from the stored menu document
"""

import logging
from typing import Any, Dict, List, Sequence

from core.editor.node import MenuNode, nodes_from_dicts
from core.menu.types import NO_LINK

logger = logging.getLogger(__name__)


def build_navigation(items: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Visible entries in display order; hidden entries drop their whole subtree"""
    return _visible(nodes_from_dicts(items))


def _visible(nodes: Sequence[MenuNode]) -> List[Dict[str, Any]]:
    entries = []
    for node in sorted(nodes, key=lambda n: n.order):
        if node.hidden:
            continue
        entries.append({
            'id': node.id,
            'title': node.title,
            'url': node.url or NO_LINK,
            'icon': node.icon,
            'children': _visible(node.children),
        })
    return entries


def format_menu(items: Sequence[Dict[str, Any]]) -> str:
    """Indented text outline of a menu, for the command line"""
    lines = []
    
    def add_lines(nodes: Sequence[MenuNode], depth: int):
        for node in nodes:
            flags = " (hidden)" if node.hidden else ""
            lines.append(f"{'  ' * depth}{node.title} [{node.id}] -> {node.url or NO_LINK}{flags}")
            add_lines(node.children, depth + 1)
    
    add_lines(nodes_from_dicts(items), 0)
    return "\n".join(lines)


class MenuBuilder:
    """Builds the site navigation from the menu store"""
    
    def __init__(self, menu_store):
        self.menu_store = menu_store
    
    def build_navigation(self) -> List[Dict[str, Any]]:
        document = self.menu_store.get_menu()
        if not document:
            logger.debug("No menu document stored, navigation is empty")
            return []
        return build_navigation(document['items'])
