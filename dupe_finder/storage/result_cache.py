#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Single-slot cache of the most recent scan result.
"""

import logging
import time
from typing import Callable, Optional

from ..config import ScanConfig
from ..errors import PersistenceError
from ..models.cache_entry import CacheEntry
from .backend import StateBackend

logger = logging.getLogger(__name__)


class ResultCache:
    """
    Memoizes the last completed scan.

    An entry is only served while the detection settings match the current
    snapshot, the validity window has not elapsed, and every item it refers
    to still exists in the catalogue.
    """

    def __init__(self, backend: StateBackend, clock: Callable[[], float] = time.time):
        self.backend = backend
        self.clock = clock
        self._entry: Optional[CacheEntry] = self._load()

    def _load(self) -> Optional[CacheEntry]:
        try:
            payload = self.backend.load_cache()
        except PersistenceError as e:
            logger.warning("Failed to load result cache: %s", e)
            return None
        if payload is None:
            return None
        try:
            entry = CacheEntry.from_dict(payload)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Discarding result cache: %s", e)
            return None
        logger.info("Loaded cached result from %s (%d groups)", entry.scanned_at, len(entry.groups))
        return entry

    @property
    def entry(self) -> Optional[CacheEntry]:
        return self._entry

    def is_valid(self, config: ScanConfig) -> bool:
        if self._entry is None:
            return False
        if self._entry.config.detection_key() != config.detection_key():
            logger.info("Cache invalid: settings changed")
            return False
        age = self.clock() - self._entry.scanned_at
        if age >= config.cache_validity_seconds:
            logger.info("Cache expired (%.0f s old)", age)
            return False
        return True

    def get_valid_results(self, config: ScanConfig, catalog) -> Optional[CacheEntry]:
        """Return the cached entry if it is still usable; a vanished item clears it."""
        if not self.is_valid(config):
            return None
        referenced = self._entry.referenced_ids()
        existing = catalog.resolve_exists(referenced)
        missing = referenced - set(existing)
        if missing:
            logger.info("%d cached items no longer exist, clearing cache", len(missing))
            self.clear()
            return None
        return self._entry

    def store(self, entry: CacheEntry) -> None:
        self._entry = entry
        try:
            self.backend.save_cache(entry.to_dict())
        except PersistenceError as e:
            logger.warning("Result cache kept in memory only: %s", e)
            return
        logger.info("Saved cache with %d duplicate groups", len(entry.groups))

    def clear(self) -> None:
        self._entry = None
        try:
            self.backend.clear_cache()
        except PersistenceError as e:
            logger.warning("Failed to clear persisted result cache: %s", e)
