#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Scan command.
Wires the filesystem catalogue and the SQLite-backed stores into the
orchestrator, then drives it batch by batch with a progress bar.
"""

import logging
import time
from pathlib import Path
from typing import List, Optional

from tqdm import tqdm

from ..catalog.folder import FolderCatalog
from ..config import ScanConfig
from ..database.manager import DatabaseManager
from ..jsonio import success, error
from ..models.status import ScanState, ScanStatus, Scanning, Completed, Failed
from ..scanning.scanner import ScanOrchestrator
from ..storage.records import ScanRecordStore
from ..storage.result_cache import ResultCache
from ..storage.sqlite_backend import SQLiteStateBackend
from ..utils.format import format_size, format_duration, format_percentage
from ..utils.time import utc_now_str

logger = logging.getLogger(__name__)


def print_groups(groups, indent: str = "  "):
    """Human-readable listing of duplicate groups."""
    for number, group in enumerate(groups, 1):
        print(f"{indent}[{group.group_type.value}] group {number}: {len(group)} items, "
              f"{format_size(group.potential_savings)} reclaimable")
        for item in group.items:
            marker = "keep" if item.item_id == group.retained_id else "dup "
            print(f"{indent}    {marker} {item.item_id} ({format_size(item.size_bytes)})")


def build_orchestrator(db_manager: DatabaseManager, source: Path, config: ScanConfig,
                       on_status=None) -> ScanOrchestrator:
    backend = SQLiteStateBackend(db_manager)
    return ScanOrchestrator(
        catalog=FolderCatalog(source),
        record_store=ScanRecordStore(backend),
        result_cache=ResultCache(backend),
        config=config,
        on_status=on_status,
    )


class ScanCommand:
    def __init__(self, db_manager: DatabaseManager, source: Path, config: ScanConfig,
                 show_progress: bool = True):
        self.source = Path(source)
        self.config = config
        self.show_progress = show_progress
        self._bar: Optional[tqdm] = None
        self.engine = build_orchestrator(db_manager, self.source, config, on_status=self._on_status)

    def _on_status(self, status: ScanStatus) -> None:
        if isinstance(status, Scanning):
            if self._bar is None:
                self._bar = tqdm(
                    total=status.total_items,
                    desc=f"Batch {status.current_batch}/{status.total_batches}",
                    unit="img",
                    disable=not self.show_progress,
                )
            self._bar.update(status.current_item - self._bar.n)
        else:
            self._close_bar()

    def _close_bar(self) -> None:
        if self._bar is not None:
            self._bar.close()
            self._bar = None

    def _print_header(self, full_scan: bool):
        print("=" * 80)
        print(f"DUPLICATE SCAN - {utc_now_str()}")
        print("=" * 80)
        print(f"Source: {self.source}")
        print(f"Mode: {'full (batched)' if full_scan else 'partial'}")
        if full_scan:
            print(f"Batch size: {self.config.batch_size}")
        else:
            print(f"Max items: {self.config.max_items_to_process}")
        similar = f"on (threshold {self.config.similarity_threshold})" if self.config.similarity_enabled else "off"
        print(f"Similarity detection: {similar}")
        print()

    def _print_report(self, status: Completed):
        print(f"Batch {status.batch_number}/{status.total_batches}: "
              f"{status.items_processed} items, {len(status.groups)} groups, "
              f"{format_size(status.total_savings)} reclaimable")
        print_groups(status.groups)

    def execute(self, full_scan: bool = False, max_batches: Optional[int] = None,
                as_json: bool = False):
        """Run a scan; a full scan keeps resuming until done or max_batches is reached."""
        if not as_json:
            self._print_header(full_scan)

        reports: List[Completed] = []
        interrupted = False
        started = time.time()
        try:
            status = self.engine.start_scan(full_scan)
            while isinstance(status, Completed):
                reports.append(status)
                if not as_json:
                    self._print_report(status)
                if self.engine.state is not ScanState.BATCH_SUSPENDED:
                    break
                if max_batches is not None and len(reports) >= max_batches:
                    logger.info("Stopping after %d batches at user request", len(reports))
                    self.engine.pause()
                    break
                status = self.engine.continue_scan()
        except KeyboardInterrupt:
            interrupted = True
            logger.warning("Scan interrupted; saving progress")
            self.engine.pause()
            self.engine.record_store.persist()
            status = self.engine.status
        finally:
            self._close_bar()

        elapsed = time.time() - started
        remaining = max(0, self.engine.work_list_size - self.engine.offset)
        groups = [g for r in reports for g in r.groups]
        savings = sum(r.total_savings for r in reports)

        if isinstance(status, Failed):
            if as_json:
                return error("scan", status.message)
            print(f"Scan failed: {status.message}")
            return 1

        if as_json:
            return success("scan", {
                "source": str(self.source),
                "full_scan": full_scan,
                "state": self.engine.state.value,
                "interrupted": interrupted,
                "work_list_size": self.engine.work_list_size,
                "remaining": remaining,
                "batches": [
                    {
                        "batch_number": r.batch_number,
                        "total_batches": r.total_batches,
                        "items_processed": r.items_processed,
                        "is_final_batch": r.is_final_batch,
                        "total_savings": r.total_savings,
                        "groups": [g.to_dict() for g in r.groups],
                    }
                    for r in reports
                ],
                "total_groups": len(groups),
                "total_savings": savings,
                "elapsed_seconds": round(elapsed, 3),
            })

        print()
        print("=== SCAN SUMMARY ===")
        print(f"Changed items: {self.engine.work_list_size:,}")
        print(f"Groups found: {len(groups):,}")
        print(f"Potential savings: {format_size(savings)}")
        print(f"Elapsed: {format_duration(elapsed)}")
        if remaining and full_scan:
            done = format_percentage(self.engine.offset / self.engine.work_list_size)
            print(f"Remaining items: {remaining:,} ({done} done, run the scan again to continue)")
        if interrupted:
            print("Scan interrupted; progress so far is recorded.")
        return 0
