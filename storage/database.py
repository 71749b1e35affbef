"""
SQLite access for the menu store, one connection per thread
"""

import logging
import shutil
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

SCHEMA = """
    CREATE TABLE IF NOT EXISTS menu (
        id TEXT PRIMARY KEY,
        items TEXT NOT NULL,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    );
    CREATE INDEX IF NOT EXISTS idx_menu_created_at ON menu(created_at);
"""


class Database:
    """Menu database file inside the config directory.

    The API server answers from its own thread, so every thread gets its
    own connection.
    """

    def __init__(self, config_dir: Path, db_name: str = "menuboard.db"):
        self.config_dir = Path(config_dir)
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.db_path = self.config_dir / db_name

        self._local = threading.local()
        self._connection().executescript(SCHEMA)
        logger.info(f"Database ready at {self.db_path}")

    def _connection(self) -> sqlite3.Connection:
        conn = getattr(self._local, 'conn', None)
        if conn is None:
            conn = sqlite3.connect(str(self.db_path), check_same_thread=False, timeout=30)
            conn.row_factory = sqlite3.Row
            self._local.conn = conn
            self._local.depth = 0
        return conn

    @contextmanager
    def transaction(self):
        """Group several statements into one commit"""
        conn = self._connection()
        self._local.depth += 1
        try:
            yield
        except Exception:
            self._local.depth -= 1
            conn.rollback()
            raise
        self._local.depth -= 1
        if self._local.depth == 0:
            conn.commit()

    def execute(self, query: str, params: tuple = ()) -> int:
        """Run a write; commits right away unless inside transaction()"""
        conn = self._connection()
        rowcount = conn.execute(query, params).rowcount
        if self._local.depth == 0:
            conn.commit()
        return rowcount

    def fetch_one(self, query: str, params: tuple = ()) -> Optional[Dict[str, Any]]:
        row = self._connection().execute(query, params).fetchone()
        return dict(row) if row else None

    def backup(self, backup_path: Optional[Path] = None) -> Path:
        """Copy the database file aside, next to it by default"""
        if backup_path is None:
            stamp = datetime.now().strftime('%Y%m%d_%H%M%S')
            backup_path = self.db_path.with_name(f"{self.db_path.name}.backup.{stamp}")

        self._connection().commit()
        shutil.copy2(self.db_path, backup_path)
        logger.info(f"Backup created: {backup_path}")
        return Path(backup_path)

    def close(self):
        conn = getattr(self._local, 'conn', None)
        if conn is not None:
            conn.close()
            self._local.conn = None
