"""
Scan state machine and the status values reported to callers.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from .group import DuplicateGroup


class ScanState(str, Enum):
    IDLE = "idle"
    FILTERING = "filtering"
    BATCH_ACTIVE = "batch_active"
    BATCH_SUSPENDED = "batch_suspended"
    COMPLETED = "completed"
    ERROR = "error"


class ScanStatus:
    """Base class of the status variants."""
    kind = "unknown"


@dataclass(frozen=True)
class NotStarted(ScanStatus):
    kind = "not_started"


@dataclass(frozen=True)
class Scanning(ScanStatus):
    progress: float
    current_item: int
    total_items: int
    current_batch: int
    total_batches: int
    kind = "scanning"


@dataclass(frozen=True)
class Completed(ScanStatus):
    groups: List[DuplicateGroup] = field(default_factory=list)
    total_savings: int = 0
    is_final_batch: bool = True
    batch_number: int = 1
    total_batches: int = 1
    items_processed: int = 0
    kind = "completed"


@dataclass(frozen=True)
class Failed(ScanStatus):
    message: str
    kind = "error"
