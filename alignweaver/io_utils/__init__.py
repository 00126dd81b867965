"""
AlignWeaver v0.1.0

I/O Module for AlignWeaver.

1. alignment_io.py - Aligned read sources and alignment FASTA I/O
2. assembly_export.py - Graph/contig export (GML, GFA, FASTA, JSON)

Author: AlignWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

# Read sources and alignment I/O
from .alignment_io import (
    GAP_SYMBOLS,
    AlignedRead,
    AlignedReads,
    AlignedReadSource,
    count_residues,
    strip_gaps,
    parse_alignment_row,
    read_alignment_fasta,
    write_reordered_alignment,
)

# Assembly export functions
from .assembly_export import (
    # Graph export
    GML_COMMENT,
    write_overlap_graph_gml,
    overlap_graph_to_networkx,
    GMLNodeKey,
    export_graph_to_gfa,
    # Graph import
    parse_gml,
    load_graph_from_gml,
    networkx_to_loaded_graph,
    LoadedGraph,
    # Contig export
    write_contig_records,
    write_contigs_fasta,
    export_assembly_stats,
    assembly_stats,
    calculate_n50,
)

__all__ = [
    "GAP_SYMBOLS",
    "AlignedRead",
    "AlignedReads",
    "AlignedReadSource",
    "count_residues",
    "strip_gaps",
    "parse_alignment_row",
    "read_alignment_fasta",
    "write_reordered_alignment",
    "GML_COMMENT",
    "write_overlap_graph_gml",
    "overlap_graph_to_networkx",
    "GMLNodeKey",
    "export_graph_to_gfa",
    "parse_gml",
    "load_graph_from_gml",
    "networkx_to_loaded_graph",
    "LoadedGraph",
    "write_contig_records",
    "write_contigs_fasta",
    "export_assembly_stats",
    "assembly_stats",
    "calculate_n50",
]
