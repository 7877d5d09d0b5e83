#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Per-item scan records that let a scan skip unchanged items.
"""

import logging
from typing import Dict, Optional

from ..errors import PersistenceError
from ..models.item import Item, ScanRecord
from .backend import StateBackend

logger = logging.getLogger(__name__)


class ScanRecordStore:
    """Tracks the last-seen modification timestamp of every processed item."""

    def __init__(self, backend: StateBackend):
        self.backend = backend
        self._records: Dict[str, float] = self._load()
        self._durable = True
        logger.info("Scan record store initialized with %d records", len(self._records))

    def _load(self) -> Dict[str, float]:
        try:
            return self.backend.load_records()
        except PersistenceError as e:
            logger.warning("Failed to load scan records, starting fresh: %s", e)
            return {}

    @property
    def is_durable(self) -> bool:
        """False while the last persist attempt failed."""
        return self._durable

    def needs_scanning(self, item: Item) -> bool:
        """True if the item is new, has no timestamp, or changed since it was recorded."""
        if item.modified_at is None:
            return True
        recorded = self._records.get(item.item_id)
        if recorded is None:
            return True
        return item.modified_at > recorded

    def record_processed(self, item: Item) -> None:
        """Remember the item's current timestamp. Items without one are not recorded."""
        if item.modified_at is None:
            return
        self._records[item.item_id] = float(item.modified_at)

    def persist(self) -> bool:
        """Write the full record set; on failure keep working from memory."""
        try:
            self.backend.save_records(self._records)
        except PersistenceError as e:
            if self._durable:
                logger.warning("Scan records kept in memory only: %s", e)
            self._durable = False
            return False
        if not self._durable:
            logger.info("Scan record persistence restored")
        self._durable = True
        logger.debug("Persisted %d scan records", len(self._records))
        return True

    def reset(self) -> None:
        """Discard every record, in memory and on disk."""
        self._records.clear()
        try:
            self.backend.clear_records()
        except PersistenceError as e:
            logger.warning("Failed to clear persisted scan records: %s", e)
        logger.info("Cleared all scan records")

    def get(self, item_id: str) -> Optional[ScanRecord]:
        modified_at = self._records.get(item_id)
        return None if modified_at is None else ScanRecord(item_id, modified_at)

    def snapshot(self) -> Dict[str, float]:
        return dict(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._records
