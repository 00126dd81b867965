#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
AlignWeaver v0.1.0

Tests for path extraction.

Author: AlignWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import pytest

from alignweaver.assembly_core import OverlapGraph, Path, PathExtractor, build_overlap_graph, extract_paths
from alignweaver.utils import CancelledError


def graph_from_edges(read_ids, edges):
    """Build a graph from read ids and (source read, target read, overlap) triples."""
    graph = OverlapGraph()
    for read_id in read_ids:
        graph.add_node(read_id)
    for source, target, overlap in edges:
        graph.add_edge(graph.node_for_read(source).index, graph.node_for_read(target).index, overlap)
    return graph


class TestPathValue:
    """Test the Path value type."""

    def test_singleton(self):
        path = Path(read_ids=(4,))
        assert path.is_singleton
        assert len(path) == 1

    def test_overlap_count_must_match(self):
        with pytest.raises(ValueError):
            Path(read_ids=(1, 2), overlaps=())

    def test_empty_path_rejected(self):
        with pytest.raises(ValueError):
            Path(read_ids=())


class TestPathExtraction:
    """Test chain extraction rules."""

    def test_linear_chain(self, chain_reads):
        """Scenario: a simple tiling yields one path and no singletons."""
        graph, _ = build_overlap_graph(chain_reads, 4)
        paths, singletons = extract_paths(graph)

        assert paths == [Path(read_ids=(0, 1, 2), overlaps=(4, 4))]
        assert singletons == []

    def test_no_edges_gives_singletons(self, chain_reads):
        graph, _ = build_overlap_graph(chain_reads, 5)
        paths, singletons = extract_paths(graph)

        assert paths == []
        assert [s.read_ids for s in singletons] == [(0,), (1,), (2,)]

    def test_branch_point_terminates_path(self, fork_reads):
        """A node with two successors ends its chain; successors start new ones."""
        graph, _ = build_overlap_graph(fork_reads, 3)
        paths, singletons = extract_paths(graph)

        assert paths == [Path(read_ids=(0, 1), overlaps=(4,))]
        assert [s.read_ids for s in singletons] == [(2,), (3,)]

    def test_merge_point_starts_new_chain(self):
        """A node with two predecessors is never appended to either chain."""
        graph = graph_from_edges(
            [0, 1, 2, 3],
            [(0, 2, 5), (1, 2, 5), (2, 3, 5)]
        )
        paths, singletons = extract_paths(graph)

        assert paths == [Path(read_ids=(2, 3), overlaps=(5,))]
        assert [s.read_ids for s in singletons] == [(0,), (1,)]

    def test_chains_after_branch_are_extended(self):
        """Chains that start after a branch still extend through unique links."""
        graph = graph_from_edges(
            [0, 1, 2, 3, 4],
            [(0, 1, 3), (0, 2, 3), (1, 3, 6), (3, 4, 2)]
        )
        paths, singletons = extract_paths(graph)

        assert paths == [Path(read_ids=(1, 3, 4), overlaps=(6, 2))]
        assert [s.read_ids for s in singletons] == [(0,), (2,)]

    def test_cycle_is_still_partitioned(self):
        """Nodes on a cycle are visited once each."""
        graph = graph_from_edges([0, 1, 2], [(0, 1, 2), (1, 2, 2), (2, 0, 2)])
        paths, singletons = extract_paths(graph)

        visited = [r for p in paths + singletons for r in p.read_ids]
        assert sorted(visited) == [0, 1, 2]
        assert paths == [Path(read_ids=(0, 1, 2), overlaps=(2, 2))]

    def test_cancellation(self, chain_reads, cancel_after):
        graph, _ = build_overlap_graph(chain_reads, 4)
        with pytest.raises(CancelledError):
            PathExtractor(graph).extract(cancel_after(1))


@pytest.mark.parametrize("seed", [1, 2, 3, 4, 5, 6])
@pytest.mark.parametrize("min_overlap", [1, 8, 25])
class TestPathProperties:
    """Invariants on random read sets."""

    def test_paths_partition_nodes(self, random_reads, seed, min_overlap):
        """Every node is in exactly one path or singleton."""
        _, reads = random_reads(seed)
        graph, _ = build_overlap_graph(reads, min_overlap)
        paths, singletons = extract_paths(graph)

        visited = [r for p in paths + singletons for r in p.read_ids]
        assert len(visited) == len(set(visited))
        assert sorted(visited) == graph.read_ids()
        assert all(len(p) >= 2 for p in paths)
        assert all(len(s) == 1 for s in singletons)

    def test_path_steps_are_unbranched_edges(self, random_reads, seed, min_overlap):
        _, reads = random_reads(seed)
        graph, _ = build_overlap_graph(reads, min_overlap)
        paths, _ = extract_paths(graph)

        for path in paths:
            for (a, b), overlap in zip(zip(path.read_ids, path.read_ids[1:]), path.overlaps):
                u = graph.node_for_read(a).index
                v = graph.node_for_read(b).index
                assert graph.get_edge(u, v).overlap == overlap
                assert graph.out_degree(u) == 1
                assert graph.in_degree(v) == 1

# AlignWeaver v0.1.0
# Any usage is subject to this software's license.
