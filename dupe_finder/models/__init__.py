"""Data models for the Duplicate Finder."""

from .feature import FeatureVector
from .item import Item, ScanRecord
from .group import DuplicateGroup, GroupType, select_retained
from .cache_entry import CacheEntry
from .status import ScanState, ScanStatus, NotStarted, Scanning, Completed, Failed

__all__ = [
    'FeatureVector', 'Item', 'ScanRecord', 'DuplicateGroup', 'GroupType', 'select_retained',
    'CacheEntry', 'ScanState', 'ScanStatus', 'NotStarted', 'Scanning', 'Completed', 'Failed',
]
