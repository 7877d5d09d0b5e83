"""
Bounded cache of computed feature vectors.
"""

import logging
from collections import OrderedDict
from typing import Hashable, Optional

from ..config import FEATURE_CACHE_MAX_ENTRIES, FEATURE_CACHE_LOW_MEMORY_ENTRIES
from ..models.feature import FeatureVector

logger = logging.getLogger(__name__)


class FeatureCache:
    """Insertion-ordered cache; the oldest entries are evicted first."""

    def __init__(self, max_entries: int = FEATURE_CACHE_MAX_ENTRIES,
                 low_memory_entries: int = FEATURE_CACHE_LOW_MEMORY_ENTRIES):
        self.max_entries = max_entries
        self.low_memory_entries = min(low_memory_entries, max_entries)
        self._entries: "OrderedDict[Hashable, FeatureVector]" = OrderedDict()

    def get(self, key: Hashable) -> Optional[FeatureVector]:
        return self._entries.get(key)

    def put(self, key: Hashable, value: FeatureVector) -> None:
        self._entries.pop(key, None)
        self._entries[key] = value
        self._trim(self.max_entries)

    def _trim(self, limit: int) -> int:
        evicted = 0
        while len(self._entries) > limit:
            self._entries.popitem(last=False)
            evicted += 1
        return evicted

    def housekeeping(self) -> int:
        """
        Trim to the configured cap; returns the number of evicted entries.

        put() already enforces the cap, so in steady state this evicts nothing.
        It only bites after max_entries was lowered at runtime.
        """
        return self._trim(self.max_entries)

    def handle_low_memory(self) -> None:
        evicted = self._trim(self.low_memory_entries)
        dropped = len(self._entries)
        self._entries.clear()
        logger.info("Low memory: evicted %d feature vectors, dropped %d more", evicted, dropped)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries
