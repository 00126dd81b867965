#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
AlignWeaver v0.1.0

Assembly Export: GML overlap graph export and import, contig records,
GFA graph export and assembly statistics JSON.

Author: AlignWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from __future__ import annotations
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterable, Optional, Sequence, TextIO, Tuple

import networkx as nx

if TYPE_CHECKING:
    from ..assembly_core.data_structures import Contig, OverlapGraph

from .alignment_io import strip_gaps
from ..utils.progress import ProgressListener, SilentProgress, check_cancelled

logger = logging.getLogger(__name__)

GML_COMMENT = "Overlap graph generated by AlignWeaver"


# ============================================================================
#                       GML EXPORT FUNCTIONS
# ============================================================================

def first_word(name: str) -> str:
    """Return the first whitespace-delimited word of a read name."""
    parts = name.split()
    return parts[0] if parts else ""


@dataclass(frozen=True)
class GMLNodeKey:
    """
    networkx node key for one read.

    Keys are unique by read id; the GML writer labels each node with the
    first word of the read name, which need not be unique.
    """
    read_id: int
    label: str


def _gml_stringizer(value: Any) -> str:
    if isinstance(value, GMLNodeKey):
        return value.label
    if isinstance(value, str):
        return value
    raise ValueError(f"Cannot write {value!r} to GML")


def overlap_graph_to_networkx(
    graph: OverlapGraph,
    reads: Any,
    progress: Optional[ProgressListener] = None
) -> nx.DiGraph:
    """
    Convert an overlap graph into a networkx DiGraph for GML output.

    Nodes are GMLNodeKey objects carrying `read_id` and `sequence`
    attributes; edges carry an empty `label` and the residue `overlap`, plus
    `columns` when the overlap window holds gap columns.

    Args:
        graph: Overlap graph
        reads: AlignedReadSource the graph was built from
        progress: Optional progress listener, polled once per node and edge
    """
    progress = progress or SilentProgress()
    nx_graph = nx.DiGraph(comment=GML_COMMENT, id=1, label=reads.source_label())
    keys = {}

    for node in graph.nodes:
        check_cancelled(progress)
        key = GMLNodeKey(node.read_id, first_word(reads.name(node.read_id)))
        keys[node.read_id] = key
        nx_graph.add_node(key, read_id=node.read_id, sequence=reads.sequence(node.read_id))
        progress.increment_progress()

    for source, target, edge in graph.iter_edges_by_read():
        check_cancelled(progress)
        attrs = {'label': "", 'overlap': edge.overlap}
        if edge.columns != edge.overlap:
            attrs['columns'] = edge.columns
        nx_graph.add_edge(keys[source], keys[target], **attrs)
        progress.increment_progress()

    return nx_graph


def write_overlap_graph_gml(
    sink: TextIO,
    graph: OverlapGraph,
    reads: Any,
    progress: Optional[ProgressListener] = None
) -> Tuple[int, int]:
    """
    Write an overlap graph in GML.

    Node ids are positions in ascending read id order. Each node carries a
    `label` (first word of the read name), its `read_id` and a `sequence`
    (aligned block). Edges are written in ascending (source, target).

    Args:
        sink: Writable text stream
        graph: Overlap graph
        reads: AlignedReadSource the graph was built from
        progress: Optional progress listener, polled once per node and edge

    Returns:
        (number of nodes, number of edges)
    """
    progress = progress or SilentProgress()
    progress.set_subtask("Writing overlap graph")
    progress.set_maximum(graph.num_nodes + graph.num_edges)
    progress.set_progress(0)

    nx_graph = overlap_graph_to_networkx(graph, reads, progress)
    for line in nx.generate_gml(nx_graph, stringizer=_gml_stringizer):
        sink.write(line + "\n")

    sink.flush()
    logger.info(f"Wrote overlap graph: {graph.num_nodes:,} nodes, {graph.num_edges:,} edges")
    return graph.num_nodes, graph.num_edges


# ============================================================================
#                           GML READER (Graph Import)
# ============================================================================

@dataclass
class LoadedGraph:
    """Overlap graph read back from GML with its node attributes."""
    graph: OverlapGraph
    title: str = ""
    comment: str = ""
    directed: bool = True
    labels: dict = field(default_factory=dict)     # read id -> label
    sequences: dict = field(default_factory=dict)  # read id -> sequence


def networkx_to_loaded_graph(nx_graph: nx.Graph) -> LoadedGraph:
    """
    Convert a graph parsed by networkx (keyed by GML id) into a LoadedGraph.

    Raises:
        ValueError: If nodes repeat a read id or edges lack an overlap
    """
    from ..assembly_core.data_structures import OverlapGraph

    loaded = LoadedGraph(
        graph=OverlapGraph(),
        title=str(nx_graph.graph.get('label', "")),
        comment=str(nx_graph.graph.get('comment', "")),
        directed=nx_graph.is_directed(),
    )
    graph = loaded.graph

    read_of_node = {}
    for node_id, attrs in nx_graph.nodes(data=True):
        read_id = int(attrs.get('read_id', node_id))
        graph.add_node(read_id)
        read_of_node[node_id] = read_id
        loaded.labels[read_id] = attrs.get('label', "")
        loaded.sequences[read_id] = attrs.get('sequence', "")

    for source, target, attrs in nx_graph.edges(data=True):
        if 'overlap' not in attrs:
            raise ValueError(f"Edge {source} -> {target} has no overlap attribute")
        overlap = int(attrs['overlap'])
        graph.add_edge(
            graph.node_for_read(read_of_node[source]).index,
            graph.node_for_read(read_of_node[target]).index,
            overlap,
            int(attrs.get('columns', overlap))
        )
    return loaded


def parse_gml(text: str) -> LoadedGraph:
    """
    Parse GML produced by write_overlap_graph_gml().

    Raises:
        ValueError: On malformed input
    """
    try:
        nx_graph = nx.parse_gml(text, label='id')
    except nx.NetworkXError as e:
        raise ValueError(f"Malformed GML: {e}") from e
    return networkx_to_loaded_graph(nx_graph)


def load_graph_from_gml(gml_path: str | Path) -> LoadedGraph:
    """
    Load an overlap graph from a GML file.

    Raises:
        FileNotFoundError: If gml_path does not exist
        ValueError: On malformed GML
    """
    gml_path = Path(gml_path)
    if not gml_path.exists():
        raise FileNotFoundError(f"GML file not found: {gml_path}")
    logger.info(f"Loading graph from GML: {gml_path}")
    try:
        nx_graph = nx.read_gml(gml_path, label='id')
    except nx.NetworkXError as e:
        raise ValueError(f"Malformed GML in {gml_path}: {e}") from e
    return networkx_to_loaded_graph(nx_graph)


# ============================================================================
#                       CONTIG EXPORT FUNCTIONS
# ============================================================================

def write_contig_records(
    sink: TextIO,
    contigs: Iterable[Contig],
    progress: Optional[ProgressListener] = None
) -> int:
    """
    Write each contig as a header line and a sequence line, then flush.

    Args:
        sink: Writable text stream
        contigs: Contigs in output order
        progress: Optional progress listener, advanced once per contig

    Returns:
        Number of contigs written
    """
    progress = progress or SilentProgress()
    contigs = list(contigs)
    progress.set_subtask("Writing contigs")
    progress.set_maximum(len(contigs))
    progress.set_progress(0)

    for contig in contigs:
        check_cancelled(progress)
        header, sequence = contig.to_record()
        sink.write(header)
        sink.write("\n")
        sink.write(sequence)
        sink.write("\n")
        progress.increment_progress()

    sink.flush()
    return len(contigs)


def write_contigs_fasta(
    contigs: Sequence[Contig],
    output_path: str | Path,
    progress: Optional[ProgressListener] = None
) -> Path:
    """
    Write contigs to a FASTA file.

    Returns:
        Path of the written file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w') as f:
        count = write_contig_records(f, contigs, progress)
    logger.info(f"Wrote {count:,} contigs to {output_path}")
    return output_path


# ============================================================================
#                       GFA EXPORT FUNCTIONS
# ============================================================================

@dataclass
class GFASegment:
    """Represents a GFA S-line (segment)."""
    name: str
    sequence: str

    def to_gfa_line(self) -> str:
        """Format: S <name> <sequence> LN:i:<length>"""
        return f"S\t{self.name}\t{self.sequence or '*'}\tLN:i:{len(self.sequence)}"


@dataclass
class GFALink:
    """Represents a GFA L-line (link/edge)."""
    from_name: str
    to_name: str
    overlap: int

    def to_gfa_line(self) -> str:
        """Format: L <from> + <to> + <overlap>M"""
        return f"L\t{self.from_name}\t+\t{self.to_name}\t+\t{self.overlap}M"


def generate_read_segment_name(read_id: int) -> str:
    """Generate a GFA segment name from a read id (e.g. 'read-7')."""
    return f"read-{read_id}"


def export_graph_to_gfa(
    graph: OverlapGraph,
    reads: Any,
    output_path: str | Path
) -> Path:
    """
    Export an overlap graph to GFA v1 for graph viewers.

    Segments carry the aligned block with gaps removed; links carry the
    overlap length as an `M` CIGAR.

    Returns:
        Path of the written file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    logger.info(f"Exporting graph to GFA: {output_path}")

    segments = [
        GFASegment(
            name=generate_read_segment_name(node.read_id),
            sequence=strip_gaps(reads.sequence(node.read_id))
        )
        for node in graph.nodes
    ]
    links = [
        GFALink(
            from_name=generate_read_segment_name(source),
            to_name=generate_read_segment_name(target),
            overlap=overlap
        )
        for source, target, overlap in graph.iter_read_edges()
    ]

    with open(output_path, 'w') as f:
        f.write("H\tVN:Z:1.0\n")
        for seg in segments:
            f.write(seg.to_gfa_line() + "\n")
        for link in links:
            f.write(link.to_gfa_line() + "\n")

    logger.info(f"GFA export complete: {len(segments)} segments, {len(links)} links")
    return output_path


# ============================================================================
#                       ASSEMBLY STATISTICS
# ============================================================================

def calculate_n50(lengths: Sequence[int]) -> int:
    """Return the N50 of a set of sequence lengths (0 if empty)."""
    if not lengths:
        return 0
    ordered = sorted(lengths, reverse=True)
    half = sum(ordered) / 2
    running = 0
    for length in ordered:
        running += length
        if running >= half:
            return length
    return ordered[-1]


def assembly_stats(contigs: Sequence[Contig]) -> dict:
    """Summary statistics for a set of contigs."""
    lengths = [c.length for c in contigs]
    return {
        'num_contigs': len(contigs),
        'total_length': sum(lengths),
        'longest_contig': max(lengths, default=0),
        'n50': calculate_n50(lengths),
        'mean_coverage': (sum(c.coverage for c in contigs) / len(contigs)) if contigs else 0.0,
        'reads_in_contigs': sum(c.read_count for c in contigs),
    }


def export_assembly_stats(contigs: Sequence[Contig], output_path: str | Path) -> dict:
    """
    Write assembly statistics as JSON.

    Returns:
        The statistics dictionary
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    stats = assembly_stats(contigs)
    with open(output_path, 'w') as f:
        json.dump(stats, f, indent=2)
    logger.info(f"Assembly statistics written: {output_path}")
    return stats

# AlignWeaver v0.1.0
# Any usage is subject to this software's license.
