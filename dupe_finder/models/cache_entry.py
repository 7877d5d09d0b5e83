#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Data structure for the cached result of the most recent scan.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Set

from ..config import ScanConfig, CACHE_SCHEMA
from .group import DuplicateGroup


@dataclass
class CacheEntry:
    """Aggregate result of one completed scan plus the settings that produced it."""
    scanned_at: float
    item_count: int
    groups: List[DuplicateGroup] = field(default_factory=list)
    total_savings: int = 0
    config: ScanConfig = field(default_factory=ScanConfig)

    def referenced_ids(self) -> Set[str]:
        return {item_id for group in self.groups for item_id in group.item_ids}

    def to_dict(self) -> Dict[str, Any]:
        """Convert entry to dictionary for serialization."""
        return {
            "schema": CACHE_SCHEMA,
            "scanned_at": self.scanned_at,
            "item_count": self.item_count,
            "groups": [g.to_dict() for g in self.groups],
            "total_savings": self.total_savings,
            "config": self.config.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CacheEntry':
        """Create entry from dictionary; raises ValueError on a foreign schema."""
        if data.get("schema") != CACHE_SCHEMA:
            raise ValueError(f"Unsupported cache schema: {data.get('schema')!r}")
        return cls(
            scanned_at=float(data["scanned_at"]),
            item_count=int(data["item_count"]),
            groups=[DuplicateGroup.from_dict(g) for g in data.get("groups", [])],
            total_savings=int(data.get("total_savings", 0)),
            config=ScanConfig.from_dict(data.get("config", {})),
        )
