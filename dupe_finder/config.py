#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Global configuration and constants for the Duplicate Finder.
"""

import json
from dataclasses import dataclass, asdict, fields, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Set, Tuple

from .errors import ConfigurationError

# File type categories
IMAGE_EXT: Set[str] = {".jpg", ".jpeg", ".png", ".bmp", ".gif", ".tiff", ".tif", ".webp", ".heic"}

# Format skipped when ScanConfig.skip_heic is set
EXCLUDED_FORMAT = "heic"

# Exact-duplicate fingerprint parameters
HASH_TARGET_SIZE: Tuple[int, int] = (128, 128)
HASH_JPEG_QUALITY = 50

# Similarity descriptor parameters
FEATURE_HASH_SIZE = 16

# Memory management
FEATURE_CACHE_MAX_ENTRIES = 50
FEATURE_CACHE_LOW_MEMORY_ENTRIES = 10
HOUSEKEEPING_INTERVAL = 20

# Defaults (can be overridden by CLI or a settings file)
DEFAULT_SIMILARITY_THRESHOLD = 0.2
DEFAULT_MAX_IMAGE_DIMENSION = 1024
DEFAULT_MAX_ITEMS_TO_PROCESS = 1000
DEFAULT_BATCH_SIZE = 100
DEFAULT_CACHE_VALIDITY_HOURS = 24.0

# Persisted schema tags
RECORDS_SCHEMA = "scan_records_v2"
CACHE_SCHEMA = "result_cache_v1"


class RetentionPolicy(str, Enum):
    KEEP_NEWEST = "keep_newest"
    KEEP_FIRST = "keep_first"


class ClusteringMode(str, Enum):
    UNION_FIND = "union_find"
    GREEDY = "greedy"


@dataclass(frozen=True)
class ScanConfig:
    """Immutable snapshot of the options that drive a scan."""
    similarity_enabled: bool = True
    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD  # 0.0 identical .. 1.0 unrelated
    skip_heic: bool = False
    max_image_dimension: int = DEFAULT_MAX_IMAGE_DIMENSION
    max_items_to_process: int = DEFAULT_MAX_ITEMS_TO_PROCESS
    batch_size: int = DEFAULT_BATCH_SIZE
    cache_enabled: bool = True
    cache_validity_hours: float = DEFAULT_CACHE_VALIDITY_HOURS
    retention: RetentionPolicy = RetentionPolicy.KEEP_NEWEST
    clustering: ClusteringMode = ClusteringMode.UNION_FIND

    def with_changes(self, **changes: Any) -> 'ScanConfig':
        """Return a new snapshot with the given fields replaced."""
        return replace(self, **changes)

    def detection_key(self) -> Tuple[Any, ...]:
        """Fields whose change alters which groups a scan reports."""
        return (
            self.similarity_enabled,
            float(self.similarity_threshold),
            self.skip_heic,
            int(self.max_image_dimension),
            RetentionPolicy(self.retention),
            ClusteringMode(self.clustering),
        )

    def validate_batching(self) -> None:
        if self.batch_size <= 0:
            raise ConfigurationError(f"Batch size must be greater than 0 (got {self.batch_size})")

    @property
    def cache_validity_seconds(self) -> float:
        return float(self.cache_validity_hours) * 3600.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to a JSON-friendly dictionary."""
        data = asdict(self)
        data['retention'] = RetentionPolicy(self.retention).value
        data['clustering'] = ClusteringMode(self.clustering).value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ScanConfig':
        """Create config from dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        try:
            if 'retention' in values:
                values['retention'] = RetentionPolicy(values['retention'])
            if 'clustering' in values:
                values['clustering'] = ClusteringMode(values['clustering'])
        except ValueError as e:
            raise ConfigurationError(str(e)) from e
        return cls(**values)

    @classmethod
    def load(cls, path: Path) -> 'ScanConfig':
        """Load a settings file written by save()."""
        try:
            with Path(path).open('r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise ConfigurationError(f"Cannot read settings file {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"Settings file {path} must contain a JSON object")
        return cls.from_dict(data)

    def save(self, path: Path) -> None:
        with Path(path).open('w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2)
