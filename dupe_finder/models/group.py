#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Data structures for duplicate groups in the Duplicate Finder.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Sequence, Tuple

from ..config import RetentionPolicy
from .item import Item


class GroupType(str, Enum):
    EXACT = "exact"      # identical fingerprint
    SIMILAR = "similar"  # feature distance within threshold


def select_retained(items: Sequence[Item], policy: RetentionPolicy) -> Item:
    """Pick the member to keep; ties fall back to enumeration order."""
    if not items:
        raise ValueError("Cannot select a retained item from an empty group")
    if RetentionPolicy(policy) is RetentionPolicy.KEEP_FIRST:
        return items[0]
    newest = items[0]
    for item in items[1:]:
        if item.modified_at is None:
            continue
        if newest.modified_at is None or item.modified_at > newest.modified_at:
            newest = item
    return newest


@dataclass(frozen=True)
class DuplicateGroup:
    """
    A set of at least two items reported together.
    Members keep catalogue enumeration order; the retained member is the one
    a clean-up would keep.
    """
    group_type: GroupType
    items: Tuple[Item, ...]
    retained_id: str

    def __post_init__(self):
        if len(self.items) < 2:
            raise ValueError(f"A duplicate group needs at least two items (got {len(self.items)})")
        if self.retained_id not in {i.item_id for i in self.items}:
            raise ValueError(f"Retained item {self.retained_id} is not a member of the group")

    @classmethod
    def build(cls, group_type: GroupType, items: Sequence[Item],
              policy: RetentionPolicy = RetentionPolicy.KEEP_NEWEST) -> 'DuplicateGroup':
        members = tuple(items)
        return cls(group_type=group_type, items=members,
                   retained_id=select_retained(members, policy).item_id if members else "")

    @property
    def retained(self) -> Item:
        return next(i for i in self.items if i.item_id == self.retained_id)

    @property
    def removable(self) -> List[Item]:
        """Members a clean-up would delete."""
        return [i for i in self.items if i.item_id != self.retained_id]

    @property
    def item_ids(self) -> List[str]:
        return [i.item_id for i in self.items]

    @property
    def total_size(self) -> int:
        return sum(i.size_bytes for i in self.items)

    @property
    def potential_savings(self) -> int:
        return self.total_size - self.retained.size_bytes

    def __len__(self) -> int:
        return len(self.items)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "group_type": self.group_type.value,
            "retained_id": self.retained_id,
            "items": [item.to_dict() for item in self.items],
            "total_size": self.total_size,
            "potential_savings": self.potential_savings,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DuplicateGroup':
        return cls(
            group_type=GroupType(data["group_type"]),
            items=tuple(Item.from_dict(d) for d in data.get("items", [])),
            retained_id=data["retained_id"],
        )

    def __repr__(self):
        return f"<DuplicateGroup {self.group_type.value} count={len(self.items)} savings={self.potential_savings}>"
