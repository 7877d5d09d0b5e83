#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Tests for exact and similarity grouping.
"""

import pytest

from conftest import make_item, vector

from dupe_finder.config import ScanConfig, RetentionPolicy, ClusteringMode
from dupe_finder.grouping import DisjointSet, DuplicateGrouper, removable_ids
from dupe_finder.models.group import GroupType


def ids(group):
    return [i.item_id for i in group.items]


class TestExactGroups:

    def test_two_hash_buckets(self):
        items = ([make_item(f"x{n}", content_hash="h1") for n in range(3)]
                 + [make_item(f"y{n}", content_hash="h2") for n in range(4)]
                 + [make_item("lonely", content_hash="h3")])
        groups = DuplicateGrouper(ScanConfig(similarity_enabled=False)).group(items)

        assert [len(g) for g in groups] == [3, 4]
        assert all(g.group_type is GroupType.EXACT for g in groups)

    def test_items_without_hash_never_grouped(self):
        items = [make_item("a", content_hash=None), make_item("b", content_hash=None),
                 make_item("c", content_hash="h"), make_item("d", content_hash="h")]
        groups = DuplicateGrouper(ScanConfig(similarity_enabled=False)).exact_groups(items)

        assert len(groups) == 1
        assert ids(groups[0]) == ["c", "d"]

    def test_members_keep_enumeration_order(self):
        items = [make_item(n, content_hash="h") for n in ("z", "m", "a")]
        group = DuplicateGrouper().exact_groups(items)[0]
        assert ids(group) == ["z", "m", "a"]


class TestSimilarGroups:

    def test_distance_is_symmetric(self):
        a, b = vector(10), vector(70)
        assert a.distance(b) == b.distance(a) == pytest.approx(60 / 256)

    def test_pairs_within_threshold_grouped(self):
        items = [make_item("d", content_hash="hd", features=vector(0)),
                 make_item("e", content_hash="he", features=vector(13)),
                 make_item("c", content_hash="hc", features=vector(200))]
        groups = DuplicateGrouper(ScanConfig(similarity_threshold=0.2)).similar_groups(items)

        assert len(groups) == 1
        assert groups[0].group_type is GroupType.SIMILAR
        assert ids(groups[0]) == ["d", "e"]

    def test_threshold_is_inclusive(self):
        items = [make_item("a", features=vector(0)), make_item("b", features=vector(64))]
        assert len(DuplicateGrouper(ScanConfig(similarity_threshold=0.25)).similar_groups(items)) == 1
        assert DuplicateGrouper(ScanConfig(similarity_threshold=0.24)).similar_groups(items) == []

    def test_exact_duplicates_not_repeated_as_similar(self):
        items = [make_item("a", content_hash="h", features=vector(0)),
                 make_item("b", content_hash="h", features=vector(0))]
        groups = DuplicateGrouper().group(items)

        assert [g.group_type for g in groups] == [GroupType.EXACT]

    def test_unknown_hash_does_not_block_similarity(self):
        items = [make_item("a", content_hash=None, features=vector(0)),
                 make_item("b", content_hash=None, features=vector(0))]
        groups = DuplicateGrouper().group(items)

        assert [g.group_type for g in groups] == [GroupType.SIMILAR]

    def test_items_without_features_skipped(self):
        items = [make_item("a", features=None), make_item("b", features=vector(0)),
                 make_item("c", features=vector(1))]
        group = DuplicateGrouper().similar_groups(items)[0]
        assert ids(group) == ["b", "c"]

    def test_disabled_similarity_gives_exact_only(self):
        items = [make_item("a", content_hash="h1", features=vector(0)),
                 make_item("b", content_hash="h2", features=vector(1))]
        assert DuplicateGrouper(ScanConfig(similarity_enabled=False)).group(items) == []


class TestClustering:
    # P~R, R~S, S~Q while P!~S, P!~Q, R!~Q at threshold 0.2 (51 bits)
    def chain(self):
        return [make_item("P", features=vector(0)), make_item("Q", features=vector(120)),
                make_item("R", features=vector(40)), make_item("S", features=vector(80))]

    def test_union_find_joins_chains(self):
        groups = DuplicateGrouper(ScanConfig(clustering=ClusteringMode.UNION_FIND)).similar_groups(self.chain())

        assert len(groups) == 1
        assert ids(groups[0]) == ["P", "Q", "R", "S"]

    def test_greedy_merge_depends_on_pair_order(self):
        groups = DuplicateGrouper(ScanConfig(clustering=ClusteringMode.GREEDY)).similar_groups(self.chain())

        assert [ids(g) for g in groups] == [["P", "R", "S"], ["Q", "S"]]

    def test_disjoint_set_roots_at_lowest_index(self):
        ds = DisjointSet(5)
        ds.union(4, 2)
        ds.union(2, 3)
        ds.union(0, 1)

        assert ds.find(4) == ds.find(3) == 2
        assert ds.find(1) == 0
        assert ds.find(0) != ds.find(2)


class TestSavings:

    def test_end_to_end_exact_savings(self):
        a = make_item("A", modified_at=200.0, size_bytes=10, content_hash="h1")
        b = make_item("B", modified_at=100.0, size_bytes=12, content_hash="h1")
        group = DuplicateGrouper(ScanConfig(retention=RetentionPolicy.KEEP_NEWEST)).exact_groups([a, b])[0]

        assert group.retained_id == "A"
        assert group.potential_savings == 12

    def test_keep_newest_retains_latest_timestamp(self):
        items = [make_item("old", modified_at=1.0, size_bytes=10, content_hash="h"),
                 make_item("new", modified_at=9.0, size_bytes=50, content_hash="h")]
        group = DuplicateGrouper(ScanConfig(retention=RetentionPolicy.KEEP_NEWEST)).exact_groups(items)[0]

        assert group.retained_id == "new"
        assert group.potential_savings == 10

    def test_keep_first_retains_enumeration_first(self):
        items = [make_item("old", modified_at=1.0, size_bytes=10, content_hash="h"),
                 make_item("new", modified_at=9.0, size_bytes=50, content_hash="h")]
        group = DuplicateGrouper(ScanConfig(retention=RetentionPolicy.KEEP_FIRST)).exact_groups(items)[0]

        assert group.retained_id == "old"
        assert group.potential_savings == 50

    def test_newest_tie_goes_to_first(self):
        items = [make_item("a", modified_at=5.0, content_hash="h"),
                 make_item("b", modified_at=5.0, content_hash="h"),
                 make_item("c", modified_at=None, content_hash="h")]
        group = DuplicateGrouper().exact_groups(items)[0]
        assert group.retained_id == "a"


class TestRemovableIds:

    def test_selects_non_retained_members(self):
        exact = DuplicateGrouper(ScanConfig(retention=RetentionPolicy.KEEP_FIRST)).exact_groups(
            [make_item("a", content_hash="h"), make_item("b", content_hash="h"),
             make_item("c", content_hash="h")])
        similar = DuplicateGrouper(ScanConfig(retention=RetentionPolicy.KEEP_FIRST)).similar_groups(
            [make_item("d", features=vector(0)), make_item("e", features=vector(3))])
        groups = exact + similar

        assert removable_ids(groups) == ["b", "c", "e"]
        assert removable_ids(groups, GroupType.EXACT) == ["b", "c"]
        assert removable_ids(groups, "similar") == ["e"]

    def test_items_listed_once(self):
        groups = DuplicateGrouper(ScanConfig(clustering=ClusteringMode.GREEDY,
                                             retention=RetentionPolicy.KEEP_FIRST)).similar_groups(
            TestClustering().chain())
        assert removable_ids(groups) == ["R", "S"]
