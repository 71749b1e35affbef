"""
Menu document store - the whole menu tree kept as one JSON document
"""

import json
import logging
import sqlite3
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class MenuStoreError(Exception):
    """Storage failed or returned unusable data"""


class MenuNotFoundError(MenuStoreError):
    """No menu document with the requested id"""


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class MenuStore:
    """Create, read and overwrite menu documents.

    A site has at most one menu document in practice; get_menu returns the
    oldest one. Updates replace ``items`` wholesale, and concurrent writers
    simply overwrite each other.
    """
    
    def __init__(self, db):
        self.db = db
    
    def get_menu(self) -> Optional[Dict[str, Any]]:
        """The site's menu document, or None when nothing was saved yet"""
        row = self._fetch_one("""
            SELECT id, items, created_at, updated_at
            FROM menu
            ORDER BY created_at, rowid
            LIMIT 1
        """)
        return self._row_to_document(row) if row else None
    
    def get_menu_by_id(self, document_id: str) -> Optional[Dict[str, Any]]:
        row = self._fetch_one(
            "SELECT id, items, created_at, updated_at FROM menu WHERE id = ?",
            (document_id,)
        )
        return self._row_to_document(row) if row else None
    
    def create_menu(self, items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Insert a new document; returns the created document(s)"""
        document_id = str(uuid.uuid4())
        now = _now()
        self._execute(
            "INSERT INTO menu (id, items, created_at, updated_at) VALUES (?, ?, ?, ?)",
            (document_id, json.dumps(items, ensure_ascii=False), now, now)
        )
        logger.info(f"Created menu document {document_id}")
        return [self.get_menu_by_id(document_id)]
    
    def update_menu(self, document_id: str, items: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Overwrite the items of an existing document"""
        rows = self._execute(
            "UPDATE menu SET items = ?, updated_at = ? WHERE id = ?",
            (json.dumps(items, ensure_ascii=False), _now(), document_id)
        )
        if rows == 0:
            raise MenuNotFoundError(f"Menu {document_id} not found")
        
        logger.info(f"Updated menu document {document_id}")
        return self.get_menu_by_id(document_id)
    
    def save_menu(self, items: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Overwrite the site's menu, creating it when none exists yet"""
        try:
            with self.db.transaction():
                current = self.get_menu()
                if current:
                    return self.update_menu(current['id'], items)
                return self.create_menu(items)[0]
        except sqlite3.Error as e:
            logger.error(f"Menu save failed: {e}")
            raise MenuStoreError(str(e)) from e

    def _row_to_document(self, row: Dict[str, Any]) -> Dict[str, Any]:
        try:
            items = json.loads(row['items'])
        except json.JSONDecodeError as e:
            raise MenuStoreError(f"Menu {row['id']} holds corrupt items: {e}") from e
        
        return {
            'id': row['id'],
            'items': items,
            'created_at': row['created_at'],
            'updated_at': row['updated_at'],
        }
    
    def _fetch_one(self, query: str, params: tuple = ()):
        try:
            return self.db.fetch_one(query, params)
        except sqlite3.Error as e:
            logger.error(f"Menu query failed: {e}")
            raise MenuStoreError(str(e)) from e
    
    def _execute(self, query: str, params: tuple = ()) -> int:
        try:
            return self.db.execute(query, params)
        except sqlite3.Error as e:
            logger.error(f"Menu write failed: {e}")
            raise MenuStoreError(str(e)) from e
