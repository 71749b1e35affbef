"""
Menu Import/Export System
"""

import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from core.editor.node import nodes_from_dicts
from core.editor.tree_ops import count_nodes
from core.menu.schema import validate_menu, validated_items

logger = logging.getLogger(__name__)

EXPORT_VERSION = "1.0"
EXPORT_FORMAT = "menuboard-json"


class ImportExportManager:
    """Move the menu document in and out of JSON files"""
    
    def __init__(self, menu_store, directory: Optional[str] = None):
        self.menu_store = menu_store
        self.directory = directory or '~/.config/menuboard/menus'
    
    def get_default_directory(self) -> str:
        """Directory for exported menus, created on demand"""
        full_path = os.path.expanduser(self.directory)
        os.makedirs(full_path, exist_ok=True)
        return full_path
    
    # ===== EXPORT =====
    
    def export_menu(self) -> Dict[str, Any]:
        """Export the stored menu to the JSON envelope"""
        document = self.menu_store.get_menu()
        if not document:
            raise ValueError("No menu has been saved yet")
        
        items = document['items']
        return {
            "version": EXPORT_VERSION,
            "format": EXPORT_FORMAT,
            "menu": {
                "id": document['id'],
                "items": items
            },
            "metadata": {
                "exported_at": datetime.now().isoformat(),
                "item_count": count_nodes(nodes_from_dicts(items))
            }
        }
    
    def export_to_file(self, filename: str) -> str:
        """Export menu to file"""
        export_data = self.export_menu()
        
        with open(filename, 'w', encoding='utf-8') as f:
            json.dump(export_data, f, indent=2, ensure_ascii=False)
        
        logger.info(f"Exported {export_data['metadata']['item_count']} items to {filename}")
        return filename
    
    # ===== IMPORT =====
    
    def import_menu(self, import_data: Dict[str, Any]) -> Dict[str, Any]:
        """Store imported items, overwriting the current menu if there is one"""
        if not isinstance(import_data, dict) or 'menu' not in import_data:
            raise ValueError("Invalid JSON format: missing 'menu' key")
        
        menu_data = import_data['menu'] or {}
        if not isinstance(menu_data, dict):
            raise ValueError("Invalid JSON format: 'menu' must be an object")
        items = validated_items(validate_menu({'items': menu_data.get('items', [])}))
        
        document = self.menu_store.save_menu(items)
        
        logger.info(f"Imported menu into document {document['id']}")
        return document
    
    def import_from_file(self, filename: str) -> Dict[str, Any]:
        """Import menu from file"""
        with open(filename, 'r', encoding='utf-8') as f:
            import_data = json.load(f)
        
        return self.import_menu(import_data)
    
    # ===== UTILITIES =====
    
    def list_exported_menus(self) -> List[Dict[str, Any]]:
        """List exported menu files in the default directory, newest first"""
        menus_dir = Path(self.get_default_directory())
        menu_files = []
        
        for file in menus_dir.glob("*.json"):
            try:
                with open(file, 'r', encoding='utf-8') as f:
                    data = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.debug(f"Skipping unreadable export {file}: {e}")
                continue
            
            if not isinstance(data, dict) or data.get('format') != EXPORT_FORMAT:
                continue
            
            stat = file.stat()
            menu_files.append({
                'path': str(file),
                'item_count': data.get('metadata', {}).get('item_count', 0),
                'size': stat.st_size,
                'modified': stat.st_mtime
            })
        
        return sorted(menu_files, key=lambda x: x['modified'], reverse=True)
