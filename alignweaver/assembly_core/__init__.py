"""
Assembly Core module for AlignWeaver.

This module provides overlap-layout-consensus assembly of aligned reads:
- Overlap graph construction with containment detection
- Extraction of non-branching paths
- Contig building with read, coverage and length filters
- The AlignmentAssembler that runs the stages and owns their results
"""

from .data_structures import (
    ContainmentIndex,
    Contig,
    GraphEdge,
    GraphNode,
    OverlapGraph,
    Path,
)

from .overlap_graph_module import OverlapGraphBuilder, build_overlap_graph
from .path_extractor_module import PathExtractor, extract_paths
from .contig_builder_module import ContigBuilder, ContigBuildResult
from .alignment_assembler import AlignmentAssembler, AssemblyRunState, RunStage

__all__ = [
    # Data structures
    "ContainmentIndex",
    "Contig",
    "GraphEdge",
    "GraphNode",
    "OverlapGraph",
    "Path",
    # Stages
    "OverlapGraphBuilder",
    "build_overlap_graph",
    "PathExtractor",
    "extract_paths",
    "ContigBuilder",
    "ContigBuildResult",
    # Orchestration
    "AlignmentAssembler",
    "AssemblyRunState",
    "RunStage",
]
