#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
AlignWeaver v0.1.0

Core data structures for alignment-based assembly: the overlap graph, the
containment index, paths and contigs.

The overlap graph is stored arena style. Nodes and edges live in dense lists
and refer to each other by integer index; the read id of a node and the
overlap length of an edge are stored inline.

Author: AlignWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

# Container read id -> ascending contained read ids
ContainmentIndex = Dict[int, List[int]]


# ============================================================================
#                           OVERLAP GRAPH
# ============================================================================

@dataclass(frozen=True)
class GraphNode:
    """Graph node for one non-contained read."""
    index: int
    read_id: int


@dataclass(frozen=True)
class GraphEdge:
    """
    Overlap edge between two reads.

    source's aligned suffix overlaps target's aligned prefix:

        source: ------------>
        target:       ------------>
                      <---->  columns

    `overlap` counts the residues shared in the window and `columns` is the
    window width in alignment columns. The two differ only when the window
    holds gap symbols; merging trims by `columns`.
    """
    index: int
    source: int  # node index
    target: int  # node index
    overlap: int
    columns: int


class OverlapGraph:
    """
    Directed overlap graph.

    Nodes = non-contained reads
    Edges = suffix/prefix overlaps of at least the minimum length
    """

    def __init__(self):
        self.nodes: List[GraphNode] = []
        self.edges: List[GraphEdge] = []
        self._out: List[List[int]] = []
        self._in: List[List[int]] = []
        self._node_of_read: Dict[int, int] = {}
        self._pairs: Dict[Tuple[int, int], int] = {}

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def add_node(self, read_id: int) -> GraphNode:
        """Add a node for a read and return it."""
        if read_id in self._node_of_read:
            raise ValueError(f"Read {read_id} already has a node")
        node = GraphNode(index=len(self.nodes), read_id=read_id)
        self.nodes.append(node)
        self._out.append([])
        self._in.append([])
        self._node_of_read[read_id] = node.index
        return node

    def add_edge(self, source: int, target: int, overlap: int, columns: Optional[int] = None) -> GraphEdge:
        """
        Add an edge between two node indices.

        Args:
            source: Source node index
            target: Target node index
            overlap: Residues shared by the two reads
            columns: Overlap width in alignment columns (default: overlap)

        Raises:
            ValueError: On self loops, duplicate edges, non-positive overlap
                or a column width narrower than the overlap
        """
        columns = overlap if columns is None else columns
        if source == target:
            raise ValueError(f"Self loop on node {source}")
        if overlap <= 0:
            raise ValueError(f"Overlap must be positive, got {overlap}")
        if columns < overlap:
            raise ValueError(f"Overlap of {overlap} residues cannot span {columns} columns")
        if (source, target) in self._pairs:
            raise ValueError(f"Duplicate edge {source} -> {target}")
        edge = GraphEdge(index=len(self.edges), source=source, target=target,
                         overlap=overlap, columns=columns)
        self.edges.append(edge)
        self._out[source].append(edge.index)
        self._in[target].append(edge.index)
        self._pairs[(source, target)] = edge.index
        return edge

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def num_nodes(self) -> int:
        return len(self.nodes)

    @property
    def num_edges(self) -> int:
        return len(self.edges)

    def node_for_read(self, read_id: int) -> Optional[GraphNode]:
        """Return the node of a read, or None if the read is not a node."""
        index = self._node_of_read.get(read_id)
        return None if index is None else self.nodes[index]

    def has_read(self, read_id: int) -> bool:
        return read_id in self._node_of_read

    def read_ids(self) -> List[int]:
        return [node.read_id for node in self.nodes]

    def outgoing(self, node: int) -> List[GraphEdge]:
        return [self.edges[e] for e in self._out[node]]

    def incoming(self, node: int) -> List[GraphEdge]:
        return [self.edges[e] for e in self._in[node]]

    def out_degree(self, node: int) -> int:
        return len(self._out[node])

    def in_degree(self, node: int) -> int:
        return len(self._in[node])

    def get_edge(self, source: int, target: int) -> Optional[GraphEdge]:
        index = self._pairs.get((source, target))
        return None if index is None else self.edges[index]

    def iter_read_edges(self) -> Iterator[Tuple[int, int, int]]:
        """Yield (source read id, target read id, overlap) per edge."""
        for edge in self.edges:
            yield self.nodes[edge.source].read_id, self.nodes[edge.target].read_id, edge.overlap

    def iter_edges_by_read(self) -> Iterator[Tuple[int, int, GraphEdge]]:
        """Yield (source read id, target read id, edge) per edge."""
        for edge in self.edges:
            yield self.nodes[edge.source].read_id, self.nodes[edge.target].read_id, edge

    def __repr__(self) -> str:
        return f"OverlapGraph(nodes={self.num_nodes}, edges={self.num_edges})"


# ============================================================================
#                           PATHS AND CONTIGS
# ============================================================================

@dataclass(frozen=True)
class Path:
    """
    Non-branching chain of reads through the overlap graph.

    overlaps[i] is the residue overlap between read_ids[i] and read_ids[i + 1]
    and trims[i] the matching width in alignment columns (defaults to
    overlaps). A singleton is a path of one read with no overlaps.
    """
    read_ids: Tuple[int, ...]
    overlaps: Tuple[int, ...] = ()
    trims: Tuple[int, ...] = ()

    def __post_init__(self):
        if not self.read_ids:
            raise ValueError("A path needs at least one read")
        if len(self.overlaps) != len(self.read_ids) - 1:
            raise ValueError("A path needs one overlap per step")
        if not self.trims:
            object.__setattr__(self, 'trims', tuple(self.overlaps))
        elif len(self.trims) != len(self.overlaps):
            raise ValueError("A path needs one trim per step")

    def __len__(self) -> int:
        return len(self.read_ids)

    @property
    def is_singleton(self) -> bool:
        return len(self.read_ids) == 1


@dataclass
class Contig:
    """
    Merged sequence of one path plus the reads contained under it.

    Attributes:
        number: 1-based position among surviving contigs
        header: Identifying header line (starts with '>')
        sequence: Merged sequence, gaps removed
        read_ids: All contributing read ids (path reads and contained reads)
        coverage: Contributing residues per contig position
    """
    number: int
    header: str
    sequence: str
    read_ids: List[int] = field(default_factory=list)
    coverage: float = 0.0

    @property
    def length(self) -> int:
        return len(self.sequence)

    @property
    def read_count(self) -> int:
        return len(self.read_ids)

    def to_record(self) -> Tuple[str, str]:
        """Return the (header, sequence) export record."""
        return self.header.strip(), self.sequence.strip()

# AlignWeaver v0.1.0
# Any usage is subject to this software's license.
