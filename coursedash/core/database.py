"""
SQLite access for the user directory

The dashboard persists nothing itself; the only table it reads is `users`,
looked up one row at a time when a request arrives.

Usage:
    db = SQLiteDatabase(config.get_database_path())
    row = db.execute_one("SELECT id, role FROM users WHERE email = ?", (email,))
"""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Optional, Tuple


class SQLiteDatabase:
    """Read-only lookups against the users database file"""

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)

        if not self.db_path.exists():
            raise FileNotFoundError(
                f"Database not found at {self.db_path}. "
                "Run 'python scripts/init_db.py' to create it."
            )

    @contextmanager
    def get_connection(self):
        """Open a connection with name-addressable rows; always closed on exit"""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    def execute_one(self, query: str, params: Tuple = ()) -> Optional[Dict[str, Any]]:
        """First row of a SELECT as a dict, or None when nothing matches"""
        with self.get_connection() as conn:
            row = conn.execute(query, params).fetchone()
        return dict(row) if row is not None else None
