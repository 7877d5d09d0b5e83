#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Data structures for catalogue items in the Duplicate Finder.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

from .feature import FeatureVector


@dataclass(eq=False)
class Item:
    """
    A single asset from the catalogue.

    Identity is the stable item_id only; content_hash and features are filled
    in progressively while scanning, so they never take part in equality.
    """
    item_id: str
    modified_at: Optional[float]
    size_bytes: int
    width: int = 0
    height: int = 0
    media_format: Optional[str] = None

    # Computed features (filled by the scan)
    content_hash: Optional[str] = None
    features: Optional[FeatureVector] = None

    @property
    def pixels(self) -> int:
        """Return pixel count."""
        return (self.width or 0) * (self.height or 0)

    def annotated(self, content_hash: Optional[str] = None,
                  features: Optional[FeatureVector] = None) -> 'Item':
        """Return a copy carrying the computed fingerprint and descriptor."""
        return replace(self, content_hash=content_hash, features=features)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Item):
            return NotImplemented
        return self.item_id == other.item_id

    def __hash__(self) -> int:
        return hash(self.item_id)

    def to_dict(self) -> Dict[str, Any]:
        # Feature vectors are regenerated on demand, never persisted
        data = {
            'item_id': self.item_id,
            'modified_at': self.modified_at,
            'size_bytes': self.size_bytes,
            'width': self.width,
            'height': self.height,
            'media_format': self.media_format,
            'content_hash': self.content_hash,
        }
        return {k: v for k, v in data.items() if v is not None}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Item':
        return cls(
            item_id=data['item_id'],
            modified_at=data.get('modified_at'),
            size_bytes=int(data.get('size_bytes', 0)),
            width=int(data.get('width', 0)),
            height=int(data.get('height', 0)),
            media_format=data.get('media_format'),
            content_hash=data.get('content_hash'),
        )

    def __repr__(self):
        return f"<Item id={self.item_id}, size={self.size_bytes}>"


@dataclass(frozen=True)
class ScanRecord:
    """Last-seen modification timestamp for an item."""
    item_id: str
    modified_at: float
