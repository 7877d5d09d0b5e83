#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
SQLite implementation of the state backend.
"""

import json
import logging
import sqlite3
from typing import Any, Dict, Optional

from ..config import RECORDS_SCHEMA, CACHE_SCHEMA
from ..database.manager import DatabaseManager
from ..errors import PersistenceError
from .backend import StateBackend

logger = logging.getLogger(__name__)


class SQLiteStateBackend(StateBackend):
    """Stores scan records and the single cache slot in the tool's database."""

    def __init__(self, db_manager: DatabaseManager):
        self.db_manager = db_manager

    def load_records(self) -> Dict[str, float]:
        try:
            version = self.db_manager.get_schema_version("scan_records")
            if version is None:
                return {}
            if version != RECORDS_SCHEMA:
                logger.warning("Ignoring scan records with schema %s (expected %s)", version, RECORDS_SCHEMA)
                return {}
            rows = self.db_manager.get_connection().execute(
                "SELECT item_id, modified_at FROM scan_records"
            ).fetchall()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to load scan records: {e}") from e
        logger.debug("Loaded %d scan records", len(rows))
        return {item_id: float(modified_at) for item_id, modified_at in rows}

    def save_records(self, records: Dict[str, float]) -> None:
        conn = self.db_manager.get_connection()
        try:
            with conn:
                conn.execute("DELETE FROM scan_records")
                conn.executemany(
                    "INSERT INTO scan_records (item_id, modified_at) VALUES (?, ?)",
                    records.items(),
                )
                self.db_manager.set_schema_version(conn, "scan_records", RECORDS_SCHEMA)
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to save {len(records)} scan records: {e}") from e

    def clear_records(self) -> None:
        conn = self.db_manager.get_connection()
        try:
            with conn:
                conn.execute("DELETE FROM scan_records")
                conn.execute("DELETE FROM schema_meta WHERE name = 'scan_records'")
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to clear scan records: {e}") from e

    def load_cache(self) -> Optional[Dict[str, Any]]:
        try:
            row = self.db_manager.get_connection().execute(
                "SELECT payload FROM result_cache WHERE slot = 1"
            ).fetchone()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to load result cache: {e}") from e
        if row is None:
            return None
        try:
            return json.loads(row[0])
        except ValueError as e:
            logger.warning("Discarding unreadable result cache: %s", e)
            return None

    def save_cache(self, payload: Dict[str, Any]) -> None:
        conn = self.db_manager.get_connection()
        try:
            with conn:
                conn.execute(
                    """
                    INSERT OR REPLACE INTO result_cache
                    (slot, scanned_at, item_count, total_savings, payload)
                    VALUES (1, ?, ?, ?, ?)
                    """,
                    (
                        payload.get("scanned_at", 0.0),
                        payload.get("item_count", 0),
                        payload.get("total_savings", 0),
                        json.dumps(payload, ensure_ascii=False),
                    ),
                )
                self.db_manager.set_schema_version(conn, "result_cache", CACHE_SCHEMA)
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to save result cache: {e}") from e

    def clear_cache(self) -> None:
        conn = self.db_manager.get_connection()
        try:
            with conn:
                conn.execute("DELETE FROM result_cache")
                conn.execute("DELETE FROM schema_meta WHERE name = 'result_cache'")
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to clear result cache: {e}") from e
