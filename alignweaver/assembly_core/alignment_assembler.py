#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
AlignWeaver v0.1.0

Alignment assembler: runs overlap graph construction, path extraction and
contig building, and owns the results of one assembly run.

Run state moves EMPTY -> GRAPH_READY -> CONTIGS_READY. A stage commits a new
state object only after it completes; a cancelled or failed stage leaves the
previous state in place.

One assembler holds one run at a time and is not re-entrant. Callers that
drive it from several threads must serialize the calls.

Author: AlignWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional, TextIO, Tuple

from .contig_builder_module import ContigBuilder
from .data_structures import ContainmentIndex, Contig, OverlapGraph, Path
from .overlap_graph_module import OverlapGraphBuilder
from .path_extractor_module import PathExtractor
from ..io_utils.alignment_io import AlignedReadSource
from ..io_utils.assembly_export import write_contig_records, write_overlap_graph_gml
from ..utils.errors import CancelledError, InvalidStateError
from ..utils.progress import ProgressListener, SilentProgress


class RunStage(Enum):
    """Lifecycle stage of an assembly run."""
    EMPTY = "empty"
    GRAPH_READY = "graph_ready"
    CONTIGS_READY = "contigs_ready"


@dataclass(frozen=True)
class AssemblyRunState:
    """
    Results of one assembly run.

    Instances are never mutated; each completed stage produces a new one.
    """
    stage: RunStage = RunStage.EMPTY
    reads: Optional[AlignedReadSource] = None
    min_overlap: Optional[int] = None
    graph: Optional[OverlapGraph] = None
    containment: ContainmentIndex = field(default_factory=dict)
    paths: Tuple[Path, ...] = ()
    singletons: Tuple[Path, ...] = ()
    contigs: Optional[Tuple[Contig, ...]] = None
    read_order: Optional[Tuple[int, ...]] = None

    @property
    def has_graph(self) -> bool:
        return self.graph is not None

    @property
    def has_contigs(self) -> bool:
        return self.contigs is not None


class AlignmentAssembler:
    """
    Assemble contigs from an alignment.

    Usage:
        assembler = AlignmentAssembler()
        assembler.compute_overlap_graph(20, reads, progress)
        count = assembler.compute_contigs("1", 5, 2.0, 200, False, progress)
        assembler.export_contigs(handle, progress)
    """

    def __init__(self):
        self._state = AssemblyRunState()
        self.logger = logging.getLogger(__name__)

    # ------------------------------------------------------------------
    # Read-only views of the current run
    # ------------------------------------------------------------------

    @property
    def state(self) -> AssemblyRunState:
        return self._state

    @property
    def graph(self) -> Optional[OverlapGraph]:
        return self._state.graph

    @property
    def containment(self) -> ContainmentIndex:
        return self._state.containment

    @property
    def paths(self) -> List[Path]:
        return list(self._state.paths)

    @property
    def singletons(self) -> List[Path]:
        return list(self._state.singletons)

    @property
    def contigs(self) -> Optional[List[Contig]]:
        return None if self._state.contigs is None else list(self._state.contigs)

    @property
    def read_order(self) -> Optional[List[int]]:
        return None if self._state.read_order is None else list(self._state.read_order)

    def reset(self):
        """Discard the current run."""
        self._state = AssemblyRunState()

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def compute_overlap_graph(
        self,
        min_overlap: int,
        reads: AlignedReadSource,
        progress: Optional[ProgressListener] = None
    ) -> Tuple[int, int]:
        """
        Compute the overlap graph and containment index.

        Args:
            min_overlap: Minimum overlap length (>= 1)
            reads: Aligned read source
            progress: Progress listener

        Returns:
            (number of nodes, number of edges)

        Raises:
            CancelledError: If cancelled; the previous run state is kept
        """
        progress = progress or SilentProgress()
        self.logger.info(f"Computing overlap graph for {reads.count():,} reads from {reads.source_label()}")

        try:
            graph, containment = OverlapGraphBuilder(min_overlap).build(reads, progress)
        except CancelledError:
            self.logger.warning("Overlap graph computation cancelled; previous results kept")
            raise

        self._state = AssemblyRunState(
            stage=RunStage.GRAPH_READY,
            reads=reads,
            min_overlap=min_overlap,
            graph=graph,
            containment=containment,
        )
        return graph.num_nodes, graph.num_edges

    def compute_contigs(
        self,
        alignment_id: str,
        min_reads: int,
        min_coverage: float,
        min_length: int,
        reorder: bool = False,
        progress: Optional[ProgressListener] = None
    ) -> int:
        """
        Extract paths and build contigs from the current overlap graph.

        Args:
            alignment_id: Identifier placed in contig headers
            min_reads: Minimum contributing reads per contig
            min_coverage: Minimum coverage per contig
            min_length: Minimum contig length
            reorder: Also compute a read order grouped by contig
            progress: Progress listener

        Returns:
            Number of contigs that passed the filters

        Raises:
            InvalidStateError: If no overlap graph has been computed
            CancelledError: If cancelled; the previous run state is kept
        """
        state = self._state
        if not state.has_graph:
            raise InvalidStateError("compute_overlap_graph must succeed before compute_contigs")
        progress = progress or SilentProgress()

        try:
            paths, singletons = PathExtractor(state.graph).extract(progress)
            builder = ContigBuilder(
                state.containment,
                state.reads,
                alignment_id=alignment_id,
                min_reads=min_reads,
                min_coverage=min_coverage,
                min_length=min_length,
            )
            result = builder.build(paths, singletons, reorder=reorder, progress=progress)
        except CancelledError:
            self.logger.warning("Contig computation cancelled; previous results kept")
            raise

        self._state = replace(
            state,
            stage=RunStage.CONTIGS_READY,
            paths=tuple(paths),
            singletons=tuple(singletons),
            contigs=tuple(result.contigs),
            read_order=None if result.read_order is None else tuple(result.read_order),
        )
        return result.count

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def export_graph(
        self,
        sink: TextIO,
        progress: Optional[ProgressListener] = None
    ) -> Tuple[int, int]:
        """
        Write the overlap graph as GML.

        Returns:
            (number of nodes, number of edges)

        Raises:
            InvalidStateError: If no overlap graph has been computed
        """
        state = self._state
        if not state.has_graph:
            raise InvalidStateError("No overlap graph to export")
        return write_overlap_graph_gml(sink, state.graph, state.reads, progress=progress)

    def export_contigs(
        self,
        sink: TextIO,
        progress: Optional[ProgressListener] = None
    ) -> int:
        """
        Write contigs as two-line header/sequence records.

        Returns:
            Number of contigs written

        Raises:
            InvalidStateError: If contigs have not been computed
        """
        state = self._state
        if not state.has_contigs:
            raise InvalidStateError("No contigs to export")
        return write_contig_records(sink, state.contigs, progress=progress)

# AlignWeaver v0.1.0
# Any usage is subject to this software's license.
