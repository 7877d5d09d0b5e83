"""Duplicate Finder - incremental exact and near-duplicate image scanner."""

__version__ = "1.0.0"
__author__ = "Duplicate Finder Team"

# Import key classes for convenient top-level access
from .config import ScanConfig, RetentionPolicy, ClusteringMode
from .database import DatabaseManager
from .catalog import AssetCatalog, FolderCatalog
from .scanning import ScanOrchestrator, ContentHasher, FeatureExtractor, FeatureCache
from .grouping import DuplicateGrouper
from .storage import ScanRecordStore, ResultCache, MemoryStateBackend, SQLiteStateBackend
from .models import Item, DuplicateGroup, GroupType, CacheEntry, ScanState

__all__ = [
    # Configuration
    'ScanConfig',
    'RetentionPolicy',
    'ClusteringMode',

    # Core classes
    'ScanOrchestrator',
    'DuplicateGrouper',
    'ScanRecordStore',
    'ResultCache',

    # Scanning components
    'ContentHasher',
    'FeatureExtractor',
    'FeatureCache',

    # Catalogues and persistence
    'AssetCatalog',
    'FolderCatalog',
    'DatabaseManager',
    'MemoryStateBackend',
    'SQLiteStateBackend',

    # Data models
    'Item',
    'DuplicateGroup',
    'GroupType',
    'CacheEntry',
    'ScanState',

    # Package metadata
    '__version__',
    '__author__'
]
