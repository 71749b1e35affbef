"""
Menu type registry - what each forum menu entry type means
"""

from dataclasses import dataclass
from typing import Dict, List, Optional


@dataclass(frozen=True)
class MenuType:
    """Definition of one menu entry type"""
    id: str
    label: str
    icon: str
    url: Optional[str]
    has_children: bool
    child_url_prefix: Optional[str] = None


MENU_TYPES: Dict[str, MenuType] = {
    "home": MenuType("home", "Home", "Home", "/", False),
    "popular": MenuType("popular", "Popular", "TrendingUp", "/popular", False),
    "free": MenuType("free", "Free Board", "MessageSquare", None, True, "/free"),
    "notice": MenuType("notice", "Notices", "Bell", None, True, "/notice"),
    "gallery": MenuType("gallery", "Gallery", "Image", None, True, "/gallery"),
    "qna": MenuType("qna", "Q&A", "HelpCircle", None, True, "/qna"),
    "discussion": MenuType("discussion", "Discussion", "Users", None, True, "/discussion"),
    "suggestion": MenuType("suggestion", "Suggestions", "Lightbulb", None, True, "/suggestion"),
    "rule": MenuType("rule", "Rules & Guides", "BookOpen", None, True, "/rule"),
}

MENU_TYPE_LIST: List[MenuType] = list(MENU_TYPES.values())

# Placeholder link used by entries that do not navigate anywhere
NO_LINK = "#"


def get_menu_type(type_id: Optional[str]) -> Optional[MenuType]:
    """Look up a type definition, None for unknown or empty ids"""
    if not type_id:
        return None
    return MENU_TYPES.get(type_id)


def generate_child_url(type_id: Optional[str], slug: str) -> str:
    """URL of a child page under a board type"""
    menu_type = get_menu_type(type_id)
    if not menu_type or not menu_type.child_url_prefix:
        return NO_LINK
    return f"{menu_type.child_url_prefix}/{slug}"


def type_defaults(type_id: Optional[str]) -> Dict[str, str]:
    """Fields forced onto a node when its type is switched to type_id.

    Leaf types carry their own url; board types link nowhere themselves
    because their children hold the pages.
    """
    menu_type = get_menu_type(type_id)
    if not menu_type:
        return {}
    
    return {
        "title": menu_type.label,
        "icon": menu_type.icon,
        "url": menu_type.url if not menu_type.has_children else NO_LINK,
    }
