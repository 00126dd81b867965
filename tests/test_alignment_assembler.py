#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
AlignWeaver v0.1.0

Tests for the assembler run state and its export operations.

Author: AlignWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import io

import pytest

from alignweaver.assembly_core import AlignmentAssembler, RunStage
from alignweaver.utils import AssemblyError, CancelledError, InvalidStateError, SilentProgress


class FailingSink(io.StringIO):
    """Text sink that fails on the first write."""

    def write(self, text):
        raise OSError("disk full")


@pytest.fixture
def assembler():
    return AlignmentAssembler()


class TestRunState:
    """Test stage ordering and state commits."""

    def test_initial_state(self, assembler):
        assert assembler.state.stage == RunStage.EMPTY
        assert assembler.graph is None
        assert assembler.contigs is None

    def test_contigs_require_graph(self, assembler):
        with pytest.raises(InvalidStateError):
            assembler.compute_contigs("1", 1, 0.0, 0)

    def test_export_graph_requires_graph(self, assembler):
        with pytest.raises(InvalidStateError):
            assembler.export_graph(io.StringIO())

    def test_export_contigs_requires_contigs(self, assembler, chain_reads):
        with pytest.raises(InvalidStateError):
            assembler.export_contigs(io.StringIO())

        assembler.compute_overlap_graph(4, chain_reads)
        with pytest.raises(InvalidStateError):
            assembler.export_contigs(io.StringIO())

    def test_invalid_state_is_assembly_error(self):
        assert issubclass(InvalidStateError, AssemblyError)
        assert issubclass(CancelledError, AssemblyError)

    def test_full_run(self, assembler, chain_reads):
        nodes, edges = assembler.compute_overlap_graph(4, chain_reads)
        assert (nodes, edges) == (3, 2)
        assert assembler.state.stage == RunStage.GRAPH_READY

        count = assembler.compute_contigs("1", 1, 0.0, 0)
        assert count == 1
        assert assembler.state.stage == RunStage.CONTIGS_READY
        assert [p.read_ids for p in assembler.paths] == [(0, 1, 2)]
        assert assembler.singletons == []

    def test_new_graph_discards_contigs(self, assembler, chain_reads, contained_reads):
        assembler.compute_overlap_graph(4, chain_reads)
        assembler.compute_contigs("1", 1, 0.0, 0)

        assembler.compute_overlap_graph(4, contained_reads)
        assert assembler.state.stage == RunStage.GRAPH_READY
        assert assembler.contigs is None
        assert assembler.containment == {0: [3]}

    def test_recompute_contigs_with_other_filters(self, assembler, chain_reads):
        assembler.compute_overlap_graph(5, chain_reads)
        assert assembler.compute_contigs("1", 1, 0.0, 0) == 3
        assert assembler.compute_contigs("1", 1, 0.0, 9) == 0
        assert assembler.contigs == []

    def test_read_order(self, assembler, contained_reads):
        assembler.compute_overlap_graph(4, contained_reads)
        assembler.compute_contigs("1", 1, 0.0, 0, reorder=True)
        assert assembler.read_order == [0, 1, 3, 2]

    def test_reset(self, assembler, chain_reads):
        assembler.compute_overlap_graph(4, chain_reads)
        assembler.reset()
        assert assembler.state.stage == RunStage.EMPTY


class TestCancellation:
    """A cancelled stage keeps the previously committed state."""

    def test_cancelled_graph_leaves_empty_state(self, assembler, chain_reads):
        """Scenario: cancelling the first stage leaves nothing to build on."""
        progress = SilentProgress()
        progress.cancel()

        with pytest.raises(CancelledError):
            assembler.compute_overlap_graph(4, chain_reads, progress)

        with pytest.raises(InvalidStateError):
            assembler.compute_contigs("1", 1, 0.0, 0)

    def test_cancelled_graph_keeps_previous_run(self, assembler, chain_reads, contained_reads):
        assembler.compute_overlap_graph(4, chain_reads)
        assembler.compute_contigs("1", 1, 0.0, 0)
        before = assembler.state

        progress = SilentProgress()
        progress.cancel()
        with pytest.raises(CancelledError):
            assembler.compute_overlap_graph(4, contained_reads, progress)

        assert assembler.state is before
        assert assembler.contigs[0].read_ids == [0, 1, 2]

    def test_cancelled_contigs_keep_graph(self, assembler, chain_reads, cancel_after):
        assembler.compute_overlap_graph(4, chain_reads)
        before = assembler.state

        with pytest.raises(CancelledError):
            assembler.compute_contigs("1", 1, 0.0, 0, progress=cancel_after(1))

        assert assembler.state is before
        assert assembler.state.stage == RunStage.GRAPH_READY
        assert assembler.contigs is None


class TestExports:
    """Test graph and contig export through the assembler."""

    def test_export_contigs_text(self, assembler, chain_reads):
        assembler.compute_overlap_graph(4, chain_reads)
        assembler.compute_contigs("1", 1, 0.0, 0)

        sink = io.StringIO()
        assert assembler.export_contigs(sink) == 1
        assert sink.getvalue() == ">1.contig-1 length=16 reads=3 coverage=1.50\nAAAABBBBCCCCDDDD\n"

    def test_export_no_surviving_contigs(self, assembler, chain_reads):
        assembler.compute_overlap_graph(4, chain_reads)
        assembler.compute_contigs("1", 5, 0.0, 0)

        sink = io.StringIO()
        assert assembler.export_contigs(sink) == 0
        assert sink.getvalue() == ""

    def test_exports_are_repeatable(self, assembler, chain_reads):
        assembler.compute_overlap_graph(4, chain_reads)
        assembler.compute_contigs("1", 1, 0.0, 0)

        first, second = io.StringIO(), io.StringIO()
        assembler.export_graph(first)
        assembler.export_graph(second)
        assert first.getvalue() == second.getvalue()

        first, second = io.StringIO(), io.StringIO()
        assembler.export_contigs(first)
        assembler.export_contigs(second)
        assert first.getvalue() == second.getvalue()

    def test_export_graph_counts(self, assembler, contained_reads):
        assembler.compute_overlap_graph(4, contained_reads)
        assert assembler.export_graph(io.StringIO()) == (3, 2)

    def test_sink_errors_propagate(self, assembler, chain_reads):
        assembler.compute_overlap_graph(4, chain_reads)
        assembler.compute_contigs("1", 1, 0.0, 0)

        with pytest.raises(OSError):
            assembler.export_graph(FailingSink())
        with pytest.raises(OSError):
            assembler.export_contigs(FailingSink())

        assert assembler.state.stage == RunStage.CONTIGS_READY

# AlignWeaver v0.1.0
# Any usage is subject to this software's license.
