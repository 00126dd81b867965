#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
AlignWeaver v0.1.0

Overlap graph construction from aligned reads.

Reads come from one multiple alignment, so two reads overlap exactly where
their aligned column ranges intersect. No sequence alignment is performed.

Process:
1. Sort reads by (offset, -span, read id)
2. Containment pass: assign every fully subsumed read to one container
3. Edge pass: connect non-contained reads sharing at least min_overlap residues

Containment tie-break: a contained read goes to the containing read with the
longest span, then the lowest read id. Among reads with identical spans the
lowest id is the container. Every container is therefore a graph node.

Author: AlignWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from __future__ import annotations
import logging
from typing import Dict, List, Optional, Tuple

import numpy as np

from .data_structures import ContainmentIndex, OverlapGraph
from ..io_utils.alignment_io import GAP_SYMBOLS, AlignedReadSource
from ..utils.progress import ProgressListener, SilentProgress, check_cancelled

logger = logging.getLogger(__name__)


def _residue_sums(block: str) -> np.ndarray:
    """Running residue count of an aligned block, with a leading zero."""
    is_residue = np.fromiter((c not in GAP_SYMBOLS for c in block), dtype=np.int64, count=len(block))
    return np.concatenate(([0], np.cumsum(is_residue)))


class OverlapGraphBuilder:
    """
    Build the overlap graph and containment index for a set of aligned reads.

    Args:
        min_overlap: Minimum number of shared residues (>= 1)
    """

    def __init__(self, min_overlap: int):
        if isinstance(min_overlap, bool) or not isinstance(min_overlap, (int, np.integer)):
            raise ValueError(f"min_overlap must be an integer, got {min_overlap!r}")
        if min_overlap < 1:
            raise ValueError(f"min_overlap must be >= 1, got {min_overlap}")
        self.min_overlap = int(min_overlap)

        self.stats = {
            'reads_input': 0,
            'empty_reads': 0,
            'contained_reads': 0,
            'nodes': 0,
            'edges': 0,
            'overlaps_below_threshold': 0,
        }

    def build(
        self,
        reads: AlignedReadSource,
        progress: Optional[ProgressListener] = None
    ) -> Tuple[OverlapGraph, ContainmentIndex]:
        """
        Build the overlap graph.

        Args:
            reads: Aligned read source
            progress: Progress listener, polled once per read per pass

        Returns:
            (graph, containment index)

        Raises:
            CancelledError: If the listener requests an abort
        """
        progress = progress or SilentProgress()
        n = reads.count()
        self.stats['reads_input'] = n

        starts = np.fromiter((reads.offset(i) for i in range(n)), dtype=np.int64, count=n)
        spans = np.fromiter((len(reads.sequence(i)) for i in range(n)), dtype=np.int64, count=n)
        ends = starts + spans

        non_empty = np.flatnonzero(spans > 0)
        self.stats['empty_reads'] = n - len(non_empty)

        progress.set_subtask("Building overlap graph")
        progress.set_maximum(2 * len(non_empty))
        progress.set_progress(0)

        order = self._sort_reads(non_empty, starts, spans)
        container = self._find_containers(order, starts, ends, spans, progress)

        containment: ContainmentIndex = {}
        for read_id in sorted(container):
            containment.setdefault(container[read_id], []).append(read_id)
        self.stats['contained_reads'] = len(container)

        node_order = np.array([i for i in order if int(i) not in container], dtype=np.int64)
        residue_sums = {int(i): _residue_sums(reads.sequence(int(i))) for i in node_order}
        read_edges = self._find_overlaps(node_order, starts, ends, residue_sums, progress)

        # Graph is assembled only after both passes, so a cancelled scan leaves nothing behind
        graph = OverlapGraph()
        for read_id in range(n):
            if read_id not in container:
                graph.add_node(read_id)
        for source, target, overlap, columns in sorted(read_edges):
            graph.add_edge(
                graph.node_for_read(source).index,
                graph.node_for_read(target).index,
                overlap,
                columns
            )

        self.stats['nodes'] = graph.num_nodes
        self.stats['edges'] = graph.num_edges
        logger.info(
            f"Overlap graph: {graph.num_nodes:,} nodes, {graph.num_edges:,} edges, "
            f"{self.stats['contained_reads']:,} contained reads (min_overlap={self.min_overlap})"
        )
        return graph, containment

    @staticmethod
    def _sort_reads(read_ids: np.ndarray, starts: np.ndarray, spans: np.ndarray) -> np.ndarray:
        """Sort read ids by (offset, -span, read id)."""
        if len(read_ids) == 0:
            return read_ids
        keys = np.lexsort((read_ids, -spans[read_ids], starts[read_ids]))
        return read_ids[keys]

    def _find_containers(
        self,
        order: np.ndarray,
        starts: np.ndarray,
        ends: np.ndarray,
        spans: np.ndarray,
        progress: ProgressListener
    ) -> Dict[int, int]:
        """
        Map each contained read to its container.

        All containers of a read precede it in `order`, so only forward
        windows need to be scanned.
        """
        sorted_starts = starts[order]
        best: Dict[int, Tuple[int, int]] = {}

        for pos, i in enumerate(order):
            check_cancelled(progress)
            end_i = ends[i]
            hi = int(np.searchsorted(sorted_starts, end_i, side='left'))
            rank = (-int(spans[i]), int(i))
            for j in order[pos + 1:hi]:
                if ends[j] <= end_i:
                    j = int(j)
                    if j not in best or rank < best[j]:
                        best[j] = rank
            progress.increment_progress()

        return {read_id: rank[1] for read_id, rank in best.items()}

    def _find_overlaps(
        self,
        order: np.ndarray,
        starts: np.ndarray,
        ends: np.ndarray,
        residue_sums: Dict[int, np.ndarray],
        progress: ProgressListener
    ) -> List[Tuple[int, int, int, int]]:
        """
        Find qualifying overlaps between non-contained reads.

        Non-contained reads never share a start column and each later read
        ends after every earlier read it overlaps, so the overlap window of
        i -> j spans end_i - start_j columns. The window's overlap length is
        the smaller of the two reads' residue counts inside it.

        Returns:
            (source, target, residues, columns) per qualifying overlap
        """
        sorted_starts = starts[order]
        read_edges: List[Tuple[int, int, int, int]] = []

        for pos, i in enumerate(order):
            check_cancelled(progress)
            end_i = ends[i]
            hi = int(np.searchsorted(sorted_starts, end_i, side='left'))
            sums_i = residue_sums[int(i)]
            for j in order[pos + 1:hi]:
                columns = int(end_i - starts[j])
                suffix = int(sums_i[-1] - sums_i[-1 - columns])
                prefix = int(residue_sums[int(j)][columns])
                overlap = min(suffix, prefix)
                if overlap >= self.min_overlap:
                    read_edges.append((int(i), int(j), overlap, columns))
                else:
                    self.stats['overlaps_below_threshold'] += 1
            progress.increment_progress()

        return read_edges


def build_overlap_graph(
    reads: AlignedReadSource,
    min_overlap: int,
    progress: Optional[ProgressListener] = None
) -> Tuple[OverlapGraph, ContainmentIndex]:
    """
    Convenience wrapper around OverlapGraphBuilder.

    Args:
        reads: Aligned read source
        min_overlap: Minimum number of shared residues
        progress: Optional progress listener

    Returns:
        (graph, containment index)
    """
    return OverlapGraphBuilder(min_overlap).build(reads, progress)

# AlignWeaver v0.1.0
# Any usage is subject to this software's license.
