"""
Local key-value store
SQLite-backed replacement for browser localStorage, used for the catalog,
orders, customers and as the best-effort cart save fallback
"""

import os
import json
import sqlite3
import logging
from typing import Any, Optional, List

from config.settings import STORAGE_CONFIG

logger = logging.getLogger(__name__)


class LocalStore:
    """
    Synchronous key-value store with JSON-encoded values

    Every call opens its own connection so the store can be used from
    worker threads as well as the event loop thread.
    """

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = str(db_path or STORAGE_CONFIG['local_db_path'])

        # Only create directory for file-based databases
        if not self.db_path.startswith(":"):
            os.makedirs(os.path.dirname(os.path.abspath(self.db_path)), exist_ok=True)

        self.init_database()

    def init_database(self):
        """Create the key-value table"""
        conn = sqlite3.connect(self.db_path)
        cursor = conn.cursor()

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS local_storage (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        conn.commit()
        conn.close()

    def get(self, key: str, default: Any = None) -> Any:
        """
        Read a value

        Args:
            key: Storage key
            default: Returned when the key is missing or holds invalid JSON

        Returns:
            Decoded value or default
        """
        conn = sqlite3.connect(self.db_path)
        cursor = conn.cursor()

        cursor.execute("SELECT value FROM local_storage WHERE key = ?", (key,))
        row = cursor.fetchone()
        conn.close()

        if row is None:
            return default

        try:
            return json.loads(row[0])
        except json.JSONDecodeError:
            logger.warning("Discarding corrupt local value for %s", key)
            return default

    def set(self, key: str, value: Any):
        """Write a JSON-serializable value"""
        payload = json.dumps(value, ensure_ascii=False)

        conn = sqlite3.connect(self.db_path)
        cursor = conn.cursor()

        cursor.execute("""
            INSERT INTO local_storage (key, value, updated_at)
            VALUES (?, ?, CURRENT_TIMESTAMP)
            ON CONFLICT(key) DO UPDATE SET
                value = excluded.value,
                updated_at = CURRENT_TIMESTAMP
        """, (key, payload))

        conn.commit()
        conn.close()

    def remove(self, key: str) -> bool:
        """Delete a key, returning True if it existed"""
        conn = sqlite3.connect(self.db_path)
        cursor = conn.cursor()

        cursor.execute("DELETE FROM local_storage WHERE key = ?", (key,))
        removed = cursor.rowcount > 0

        conn.commit()
        conn.close()
        return removed

    def keys(self) -> List[str]:
        conn = sqlite3.connect(self.db_path)
        cursor = conn.cursor()

        cursor.execute("SELECT key FROM local_storage ORDER BY key")
        keys = [row[0] for row in cursor.fetchall()]
        conn.close()
        return keys
