#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
AlignWeaver v0.1.0

Path extraction: split the overlap graph into maximal non-branching chains.

A chain starts at every node whose in-degree is not 1, or whose only
predecessor has more than one successor. It extends while the current node
has exactly one successor and that successor has exactly one predecessor.
Branch and merge points end chains; no choice is ever made between
alternative branches, so repeat regions yield shorter contigs instead of
misjoins.

Author: AlignWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from __future__ import annotations
import logging
from typing import List, Optional, Tuple

from .data_structures import OverlapGraph, Path
from ..utils.progress import ProgressListener, SilentProgress, check_cancelled

logger = logging.getLogger(__name__)


class PathExtractor:
    """
    Extract paths and singletons from an overlap graph.

    Args:
        graph: Overlap graph (nodes stored in ascending read id)
    """

    def __init__(self, graph: OverlapGraph):
        self.graph = graph

    def extract(
        self,
        progress: Optional[ProgressListener] = None
    ) -> Tuple[List[Path], List[Path]]:
        """
        Partition the graph nodes into chains.

        Args:
            progress: Progress listener, polled once per node

        Returns:
            (paths with >= 2 reads, singleton paths), each ordered by the
            read id of the first read

        Raises:
            CancelledError: If the listener requests an abort
        """
        progress = progress or SilentProgress()
        graph = self.graph

        progress.set_subtask("Extracting paths")
        progress.set_maximum(graph.num_nodes)
        progress.set_progress(0)

        visited = [False] * graph.num_nodes
        chains: List[Path] = []

        heads = [node.index for node in graph.nodes if self._is_chain_head(node.index)]
        for head in heads:
            if not visited[head]:
                chains.append(self._walk(head, visited, progress))

        # Only reachable on a cycle, which the builder never produces
        for node in graph.nodes:
            if not visited[node.index]:
                chains.append(self._walk(node.index, visited, progress))

        chains.sort(key=lambda p: p.read_ids[0])
        paths = [c for c in chains if not c.is_singleton]
        singletons = [c for c in chains if c.is_singleton]

        logger.info(f"Extracted {len(paths):,} paths and {len(singletons):,} singletons")
        return paths, singletons

    def _is_chain_head(self, node: int) -> bool:
        graph = self.graph
        if graph.in_degree(node) != 1:
            return True
        predecessor = graph.incoming(node)[0].source
        return graph.out_degree(predecessor) != 1

    def _walk(self, start: int, visited: List[bool], progress: ProgressListener) -> Path:
        """Follow the unique extension from `start` until a branch, merge or dead end."""
        graph = self.graph
        read_ids = []
        overlaps = []
        trims = []

        current = start
        while True:
            check_cancelled(progress)
            visited[current] = True
            read_ids.append(graph.nodes[current].read_id)
            progress.increment_progress()

            if graph.out_degree(current) != 1:
                break
            edge = graph.outgoing(current)[0]
            following = edge.target
            if graph.in_degree(following) != 1 or visited[following]:
                break
            overlaps.append(edge.overlap)
            trims.append(edge.columns)
            current = following

        return Path(read_ids=tuple(read_ids), overlaps=tuple(overlaps), trims=tuple(trims))


def extract_paths(
    graph: OverlapGraph,
    progress: Optional[ProgressListener] = None
) -> Tuple[List[Path], List[Path]]:
    """Convenience wrapper around PathExtractor."""
    return PathExtractor(graph).extract(progress)

# AlignWeaver v0.1.0
# Any usage is subject to this software's license.
