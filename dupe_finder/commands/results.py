#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Cached result and clean-up command implementations for the Duplicate Finder.
"""

from pathlib import Path
from typing import Optional

from ..config import ScanConfig
from ..database.manager import DatabaseManager
from ..errors import DeleteError
from ..grouping import removable_ids
from ..jsonio import success, error
from ..models.group import GroupType
from ..utils.format import format_size
from ..utils.time import format_timestamp
from .scan import build_orchestrator, print_groups


def cmd_show_results(db_manager: DatabaseManager, source: Path, config: ScanConfig,
                     as_json: bool = False):
    """Show the most recent scan result if it is still valid."""
    engine = build_orchestrator(db_manager, source, config)
    entry = engine.cached_results()

    if entry is None:
        if as_json:
            return success("results", {"cached": False, "groups": []})
        print("No valid cached results. Run a scan first.")
        return 0

    if as_json:
        return success("results", {
            "cached": True,
            "scanned_at": entry.scanned_at,
            "item_count": entry.item_count,
            "total_savings": entry.total_savings,
            "groups": [g.to_dict() for g in entry.groups],
        })

    print(f"=== Cached results from {format_timestamp(entry.scanned_at)} ===")
    print(f"Items scanned: {entry.item_count:,}")
    print(f"Groups: {len(entry.groups):,}")
    print(f"Potential savings: {format_size(entry.total_savings)}")
    print_groups(entry.groups)
    return 0


def cmd_delete_duplicates(db_manager: DatabaseManager, source: Path, config: ScanConfig,
                          group_type: Optional[str] = None, assume_yes: bool = False,
                          as_json: bool = False):
    """Delete every non-retained member of the cached groups."""
    engine = build_orchestrator(db_manager, source, config)
    entry = engine.cached_results()
    if entry is None:
        message = "No valid cached results to delete from. Run a scan first."
        if as_json:
            return error("delete", message)
        print(message)
        return 1

    selected_type = GroupType(group_type) if group_type else None
    ids = removable_ids(entry.groups, selected_type)
    if not ids:
        if as_json:
            return success("delete", {"deleted": [], "deleted_count": 0})
        print("Nothing to delete.")
        return 0

    if not assume_yes:
        if as_json:
            return error("delete", f"Refusing to delete {len(ids)} items without --yes")
        print(f"Would delete {len(ids)} items:")
        for item_id in ids:
            print(f"  {item_id}")
        print("Re-run with --yes to delete them. This cannot be undone.")
        return 1

    try:
        engine.catalog.delete(ids)
    except DeleteError as e:
        if as_json:
            return error("delete", str(e), debug={"item_ids": e.item_ids})
        print(f"Delete failed: {e}")
        return 1

    # Cached groups now reference deleted items
    engine.clear_cache()

    if as_json:
        return success("delete", {"deleted": ids, "deleted_count": len(ids)})
    print(f"Deleted {len(ids)} duplicate items.")
    return 0
