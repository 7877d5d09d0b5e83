"""Persistence for scan records and cached results."""

from .backend import StateBackend, MemoryStateBackend
from .sqlite_backend import SQLiteStateBackend
from .records import ScanRecordStore
from .result_cache import ResultCache

__all__ = ['StateBackend', 'MemoryStateBackend', 'SQLiteStateBackend', 'ScanRecordStore', 'ResultCache']
