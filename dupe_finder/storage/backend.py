"""
Persistence port shared by the scan record store and the result cache.
"""

import copy
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class StateBackend(ABC):
    """Typed read/write access to the persisted scan state."""

    @abstractmethod
    def load_records(self) -> Dict[str, float]:
        """Return the persisted item_id -> modified_at map (empty if none)."""

    @abstractmethod
    def save_records(self, records: Dict[str, float]) -> None:
        """Replace the persisted record set. Raises PersistenceError."""

    @abstractmethod
    def clear_records(self) -> None:
        """Remove the persisted record set."""

    @abstractmethod
    def load_cache(self) -> Optional[Dict[str, Any]]:
        """Return the serialized cache entry, or None."""

    @abstractmethod
    def save_cache(self, payload: Dict[str, Any]) -> None:
        """Overwrite the single cache slot. Raises PersistenceError."""

    @abstractmethod
    def clear_cache(self) -> None:
        """Remove the cache slot."""


class MemoryStateBackend(StateBackend):
    """Process-local backend used by tests and one-off scans."""

    def __init__(self):
        self._records: Dict[str, float] = {}
        self._cache: Optional[Dict[str, Any]] = None

    def load_records(self) -> Dict[str, float]:
        return dict(self._records)

    def save_records(self, records: Dict[str, float]) -> None:
        self._records = dict(records)

    def clear_records(self) -> None:
        self._records = {}

    def load_cache(self) -> Optional[Dict[str, Any]]:
        return copy.deepcopy(self._cache)

    def save_cache(self, payload: Dict[str, Any]) -> None:
        self._cache = copy.deepcopy(payload)

    def clear_cache(self) -> None:
        self._cache = None
