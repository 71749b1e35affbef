"""
Change tracking for editor
"""

import logging
from typing import Any, Dict, Iterable

logger = logging.getLogger(__name__)


class ChangeTracker:
    """Tracks what changed in the editor since the last save"""
    
    def __init__(self):
        # Item modifications: {item_id: {field: new_value}}
        self.modified_items: Dict[str, Dict[str, Any]] = {}
        
        # Items created since the last save
        self.added_items = set()
        
        # Items removed since the last save (only ones the store knows about)
        self.deleted_items = set()
        
        # Items whose position changed
        self.moved_items = set()
    
    def mark_item_added(self, item_id: str):
        self.added_items.add(item_id)
        logger.debug(f"ChangeTracker: added {item_id}")
    
    def mark_item_modified(self, item_id: str, field: str, value: Any = None):
        """Track modification to an item property"""
        self.modified_items.setdefault(item_id, {})[field] = value
        logger.debug(f"ChangeTracker: {item_id}.{field} = {value!r}")
    
    def mark_item_moved(self, item_id: str):
        self.moved_items.add(item_id)
        logger.debug(f"ChangeTracker: moved {item_id}")
    
    def mark_items_deleted(self, item_ids: Iterable[str]):
        """Mark a removed subtree; items never saved are simply forgotten"""
        for item_id in item_ids:
            self.modified_items.pop(item_id, None)
            self.moved_items.discard(item_id)
            if item_id in self.added_items:
                self.added_items.discard(item_id)
            else:
                self.deleted_items.add(item_id)
        logger.debug(f"ChangeTracker: {len(self.deleted_items)} item(s) pending deletion")
    
    def has_changes(self) -> bool:
        """Check if any changes pending"""
        return bool(self.modified_items or self.added_items or
                    self.deleted_items or self.moved_items)
    
    def clear(self):
        """Clear all tracked changes"""
        self.modified_items.clear()
        self.added_items.clear()
        self.deleted_items.clear()
        self.moved_items.clear()
        logger.debug("ChangeTracker: cleared")
    
    def get_change_summary(self) -> Dict[str, int]:
        """Get summary of changes"""
        return {
            'modified': len(self.modified_items),
            'new': len(self.added_items),
            'deleted': len(self.deleted_items),
            'moved': len(self.moved_items)
        }
