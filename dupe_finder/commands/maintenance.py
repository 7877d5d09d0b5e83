"""
Record store and cache maintenance commands.
"""

from ..database.manager import DatabaseManager
from ..jsonio import success
from ..storage.records import ScanRecordStore
from ..storage.result_cache import ResultCache
from ..storage.sqlite_backend import SQLiteStateBackend


def cmd_reset(db_manager: DatabaseManager, records: bool = True, cache: bool = True,
              as_json: bool = False):
    """Forget scan records (forcing a full rescan) and/or the cached result."""
    backend = SQLiteStateBackend(db_manager)
    cleared_records = 0
    if records:
        store = ScanRecordStore(backend)
        cleared_records = len(store)
        store.reset()
    if cache:
        ResultCache(backend).clear()

    if as_json:
        return success("reset", {
            "records_cleared": records,
            "record_count": cleared_records,
            "cache_cleared": cache,
        })
    if records:
        print(f"Cleared {cleared_records:,} scan records.")
    if cache:
        print("Cleared cached results.")
    return 0
