import logging
from typing import Dict, List, Optional, Sequence

from .config import ScanConfig, ClusteringMode
from .models.group import DuplicateGroup, GroupType
from .models.item import Item

logger = logging.getLogger(__name__)


class DisjointSet:
    """Union-find over item positions with path halving."""

    def __init__(self, size: int):
        self.parent = list(range(size))

    def find(self, i: int) -> int:
        while self.parent[i] != i:
            self.parent[i] = self.parent[self.parent[i]]
            i = self.parent[i]
        return i

    def union(self, a: int, b: int) -> None:
        ra, rb = self.find(a), self.find(b)
        if ra == rb:
            return
        # Lower index becomes the root so components keep enumeration order
        if rb < ra:
            ra, rb = rb, ra
        self.parent[rb] = ra


def _same_content(a: Item, b: Item) -> bool:
    return a.content_hash is not None and a.content_hash == b.content_hash


class DuplicateGrouper:
    """Builds exact and similar groups for one batch of annotated items."""

    def __init__(self, config: Optional[ScanConfig] = None):
        self.config = config or ScanConfig()

    def group(self, items: Sequence[Item]) -> List[DuplicateGroup]:
        groups = self.exact_groups(items)
        if self.config.similarity_enabled:
            groups.extend(self.similar_groups(items))
        logger.debug("Grouped %d items into %d groups", len(items), len(groups))
        return groups

    def exact_groups(self, items: Sequence[Item]) -> List[DuplicateGroup]:
        by_hash: Dict[str, List[Item]] = {}
        for item in items:
            if item.content_hash is None:
                continue
            by_hash.setdefault(item.content_hash, []).append(item)
        return [
            DuplicateGroup.build(GroupType.EXACT, members, self.config.retention)
            for members in by_hash.values() if len(members) > 1
        ]

    def _similar_pairs(self, candidates: List[Item]):
        threshold = self.config.similarity_threshold
        for i in range(len(candidates)):
            for j in range(i + 1, len(candidates)):
                a, b = candidates[i], candidates[j]
                if _same_content(a, b):
                    continue
                if a.features.distance(b.features) <= threshold:
                    yield i, j

    def similar_groups(self, items: Sequence[Item]) -> List[DuplicateGroup]:
        candidates = [i for i in items if i.features is not None]
        if len(candidates) < 2:
            return []
        if ClusteringMode(self.config.clustering) is ClusteringMode.GREEDY:
            clusters = self._greedy_clusters(candidates)
        else:
            clusters = self._connected_clusters(candidates)
        return [
            DuplicateGroup.build(GroupType.SIMILAR, members, self.config.retention)
            for members in clusters
        ]

    def _connected_clusters(self, candidates: List[Item]) -> List[List[Item]]:
        ds = DisjointSet(len(candidates))
        for i, j in self._similar_pairs(candidates):
            ds.union(i, j)
        components: Dict[int, List[Item]] = {}
        for index, item in enumerate(candidates):
            components.setdefault(ds.find(index), []).append(item)
        return [members for members in components.values() if len(members) > 1]

    def _greedy_clusters(self, candidates: List[Item]) -> List[List[Item]]:
        """
        Single-pass merge: a matching pair joins the first group that already
        holds either item, otherwise it starts a new group. The outcome depends
        on pair order when matches chain (A~B, B~C, A!~C).
        """
        clusters: List[List[Item]] = []
        for i, j in self._similar_pairs(candidates):
            a, b = candidates[i], candidates[j]
            target = next((c for c in clusters if a in c or b in c), None)
            if target is None:
                clusters.append([a, b])
                continue
            for item in (a, b):
                if item not in target:
                    target.append(item)
        return clusters


def removable_ids(groups: Sequence[DuplicateGroup], group_type: Optional[GroupType] = None) -> List[str]:
    """Ids a clean-up would delete: every non-retained member, optionally of one group type."""
    selected: List[str] = []
    seen = set()
    for group in groups:
        if group_type is not None and group.group_type is not GroupType(group_type):
            continue
        for item in group.removable:
            if item.item_id not in seen:
                seen.add(item.item_id)
                selected.append(item.item_id)
    return selected
