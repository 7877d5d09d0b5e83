#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Main scanner for the Duplicate Finder.
Coordinates incremental filtering, batch processing and grouping.
"""

import logging
import math
import time
from typing import Callable, List, Optional

from ..config import ScanConfig, EXCLUDED_FORMAT, HOUSEKEEPING_INTERVAL
from ..errors import ConfigurationError
from ..grouping import DuplicateGrouper
from ..models.cache_entry import CacheEntry
from ..models.group import DuplicateGroup
from ..models.item import Item
from ..models.status import ScanState, ScanStatus, NotStarted, Scanning, Completed, Failed
from ..storage.records import ScanRecordStore
from ..storage.result_cache import ResultCache
from .extractor import FeatureExtractor
from .feature_cache import FeatureCache
from .hasher import ContentHasher

logger = logging.getLogger(__name__)

StatusListener = Callable[[ScanStatus], None]


class ScanOrchestrator:
    """
    Incremental, batched duplicate scan over an asset catalogue.

    A partial scan processes the first `max_items_to_process` changed items in
    one go. A full scan splits every changed item into batches of `batch_size`
    and returns after each one; call continue_scan() to process the next.
    Only the scan record store carries state from one batch to the next.
    """

    def __init__(self, catalog, record_store: ScanRecordStore,
                 result_cache: Optional[ResultCache] = None,
                 config: Optional[ScanConfig] = None,
                 on_status: Optional[StatusListener] = None,
                 feature_cache: Optional[FeatureCache] = None,
                 clock: Callable[[], float] = time.time):
        self.catalog = catalog
        self.record_store = record_store
        self.result_cache = result_cache
        self.config = config or ScanConfig()
        self.on_status = on_status
        self.feature_cache = feature_cache if feature_cache is not None else FeatureCache()
        self.clock = clock

        self._state = ScanState.IDLE
        self._status: ScanStatus = NotStarted()
        self._work_list: List[Item] = []
        self._offset = 0
        self._full_scan = False
        self._pause_requested = False
        self._session_groups: List[DuplicateGroup] = []
        self._session_items = 0

    # ------------------------------------------------------------------
    # State

    @property
    def state(self) -> ScanState:
        return self._state

    @property
    def status(self) -> ScanStatus:
        return self._status

    @property
    def work_list_size(self) -> int:
        return len(self._work_list)

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def is_active(self) -> bool:
        return self._state in (ScanState.FILTERING, ScanState.BATCH_ACTIVE)

    def _emit(self, status: ScanStatus) -> ScanStatus:
        self._status = status
        if self.on_status is not None:
            self.on_status(status)
        return status

    def _fail(self, message: str) -> ScanStatus:
        self._state = ScanState.ERROR
        logger.error("Scan failed: %s", message)
        return self._emit(Failed(message))

    def update_config(self, config: ScanConfig) -> None:
        """Swap in a new configuration snapshot between scans."""
        if self.is_active:
            raise ConfigurationError("Cannot change configuration while a batch is running")
        self.config = config

    # ------------------------------------------------------------------
    # Public operations

    def start_scan(self, full_scan: bool) -> ScanStatus:
        """Enumerate the catalogue, keep changed items, and process the first batch."""
        if self.is_active:
            logger.warning("start_scan ignored: a batch is already running")
            return self._status

        self._state = ScanState.FILTERING
        self._full_scan = full_scan
        self._offset = 0
        self._pause_requested = False
        self._session_groups = []
        self._session_items = 0

        try:
            catalogue = self.catalog.enumerate()
        except Exception as e:
            logger.exception("Catalogue enumeration failed")
            return self._fail(f"Catalogue enumeration failed: {e}")
        except BaseException:
            self._state = ScanState.IDLE
            raise

        self._work_list = [item for item in catalogue if self.record_store.needs_scanning(item)]
        logger.info("Found %d new or modified items out of %d", len(self._work_list), len(catalogue))
        return self._process_next_batch()

    def continue_scan(self) -> ScanStatus:
        """Resume a suspended full scan with its next batch."""
        if not self._full_scan or self._state is not ScanState.BATCH_SUSPENDED:
            logger.debug("continue_scan ignored in state %s", self._state.value)
            return self._status
        self._pause_requested = False
        return self._process_next_batch()

    def run_remaining(self) -> List[ScanStatus]:
        """Keep resuming until the final batch, an error, or a pause request."""
        reports = []
        while self._state is ScanState.BATCH_SUSPENDED and not self._pause_requested:
            reports.append(self.continue_scan())
        return reports

    def pause(self) -> None:
        """Stop before the next batch; the item in flight still completes."""
        self._pause_requested = True

    @property
    def pause_requested(self) -> bool:
        return self._pause_requested

    def handle_low_memory(self) -> None:
        self.feature_cache.handle_low_memory()

    def reset_records(self) -> None:
        self.record_store.reset()

    def clear_cache(self) -> None:
        if self.result_cache is not None:
            self.result_cache.clear()

    def cached_results(self) -> Optional[CacheEntry]:
        """Most recent complete result, if the cache is enabled and still valid."""
        if self.result_cache is None or not self.config.cache_enabled:
            return None
        return self.result_cache.get_valid_results(self.config, self.catalog)

    # ------------------------------------------------------------------
    # Batch processing

    def _process_next_batch(self) -> ScanStatus:
        total = len(self._work_list)
        if total == 0:
            # Nothing changed; the previously cached result stays in place
            self._state = ScanState.COMPLETED
            return self._emit(Completed(groups=[], total_savings=0, is_final_batch=True,
                                        batch_number=1, total_batches=1, items_processed=0))

        if not self._full_scan:
            batch = self._work_list[:max(0, self.config.max_items_to_process)]
            self._offset = len(batch)
            logger.info("Partial scan of %d items", len(batch))
            return self._run_batch(batch, 1, 1)

        try:
            self.config.validate_batching()
        except ConfigurationError as e:
            return self._fail(str(e))

        batch_size = self.config.batch_size
        if self._offset >= total:
            self._state = ScanState.COMPLETED
            return self._emit(Completed(groups=[], total_savings=0, is_final_batch=True,
                                        batch_number=math.ceil(total / batch_size),
                                        total_batches=math.ceil(total / batch_size)))

        current_size = min(batch_size, total - self._offset)
        total_batches = math.ceil(total / batch_size)
        batch_number = self._offset // batch_size + 1
        batch = self._work_list[self._offset:self._offset + current_size]

        # Advance before processing so a repeated resume cannot re-run this slice
        self._offset += current_size
        logger.info("Batch %d/%d: %d items", batch_number, total_batches, current_size)
        return self._run_batch(batch, batch_number, total_batches)

    def _is_excluded(self, item: Item) -> bool:
        return self.config.skip_heic and (item.media_format or "").lower() == EXCLUDED_FORMAT

    def _run_batch(self, batch: List[Item], batch_number: int, total_batches: int) -> ScanStatus:
        self._state = ScanState.BATCH_ACTIVE
        config = self.config
        hasher = ContentHasher(self.catalog)
        extractor = FeatureExtractor(self.catalog, config.max_image_dimension, cache=self.feature_cache)
        grouper = DuplicateGrouper(config)

        try:
            to_process = [item for item in batch if not self._is_excluded(item)]
            skipped = len(batch) - len(to_process)
            if skipped:
                logger.info("Skipping %d %s items", skipped, EXCLUDED_FORMAT.upper())

            processed: List[Item] = []
            total_in_batch = len(to_process)
            for index, item in enumerate(to_process):
                self._emit(Scanning(progress=(index + 1) / total_in_batch,
                                    current_item=index + 1, total_items=total_in_batch,
                                    current_batch=batch_number, total_batches=total_batches))

                content_hash = hasher.compute(item)
                features = extractor.extract(item) if config.similarity_enabled else None
                processed.append(item.annotated(content_hash=content_hash, features=features))

                self.record_store.record_processed(item)

                if (index + 1) % HOUSEKEEPING_INTERVAL == 0:
                    self.feature_cache.housekeeping()

            groups = grouper.group(processed)
        except Exception as e:
            logger.exception("Batch %d failed", batch_number)
            self.record_store.persist()
            return self._fail(f"Batch {batch_number} failed: {e}")
        except BaseException:
            # Interrupted mid-item: keep what was recorded and leave the session resumable
            logger.warning("Batch %d interrupted", batch_number)
            self.record_store.persist()
            self._state = ScanState.BATCH_SUSPENDED if self._full_scan else ScanState.IDLE
            raise

        self.record_store.persist()
        savings = sum(g.potential_savings for g in groups)
        self._session_groups.extend(groups)
        self._session_items += len(processed)

        is_final = not self._full_scan or self._offset >= len(self._work_list)
        logger.info("Batch %d/%d done: %d groups, %d bytes reclaimable",
                    batch_number, total_batches, len(groups), savings)

        if is_final:
            self._state = ScanState.COMPLETED
            self._store_result()
        else:
            self._state = ScanState.BATCH_SUSPENDED

        return self._emit(Completed(groups=groups, total_savings=savings, is_final_batch=is_final,
                                    batch_number=batch_number, total_batches=total_batches,
                                    items_processed=len(processed)))

    def _store_result(self) -> None:
        if self.result_cache is None or not self.config.cache_enabled:
            return
        groups = list(self._session_groups)
        self.result_cache.store(CacheEntry(
            scanned_at=self.clock(),
            item_count=self._session_items,
            groups=groups,
            total_savings=sum(g.potential_savings for g in groups),
            config=self.config,
        ))
