# dupe_finder/database/manager.py
import sqlite3
from pathlib import Path

from ..utils.path import ensure_dir
from .schema import MAIN_SCHEMA


class DatabaseManager:
    """Manages the SQLite connection holding scan records and the result cache."""

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        ensure_dir(self.db_path.parent)
        self.conn = sqlite3.connect(str(self.db_path))
        # Pragmas for performance & integrity
        self.conn.execute("PRAGMA journal_mode=WAL;")
        self.conn.execute("PRAGMA synchronous=NORMAL;")
        self.conn.executescript(MAIN_SCHEMA)
        self.conn.commit()

    def get_connection(self):
        return self.conn

    def get_schema_version(self, name: str):
        row = self.conn.execute("SELECT version FROM schema_meta WHERE name = ?", (name,)).fetchone()
        return row[0] if row else None

    def set_schema_version(self, conn: sqlite3.Connection, name: str, version: str) -> None:
        conn.execute("INSERT OR REPLACE INTO schema_meta (name, version) VALUES (?, ?)", (name, version))

    def close(self) -> None:
        try:
            self.conn.close()
        except sqlite3.Error:
            pass
