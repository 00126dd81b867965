#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
AlignWeaver v0.1.0

Tests for aligned read sources and alignment FASTA I/O.

Author: AlignWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import gzip

import pytest

from alignweaver.io_utils import (
    AlignedRead,
    AlignedReads,
    count_residues,
    parse_alignment_row,
    read_alignment_fasta,
    strip_gaps,
    write_reordered_alignment,
)


ALIGNMENT_FASTA = """>r0 first read
ACGTAC--
>r1 second read
--gtacgt
>r2
--------
>r3
---T-A--
"""


class TestAlignmentRows:
    """Test conversion of gapped rows to offset/block pairs."""

    @pytest.mark.parametrize("row, offset, block", [
        ("ACGT", 0, "ACGT"),
        ("--ACGT", 2, "ACGT"),
        ("..AC-GT--", 2, "AC-GT"),
        ("-.-A", 3, "A"),
        ("----", 0, ""),
        ("", 0, ""),
    ])
    def test_parse_row(self, row, offset, block):
        read = parse_alignment_row("r", row)
        assert read.offset == offset
        assert read.sequence == block

    def test_read_properties(self):
        read = AlignedRead("r", 5, "AC-GT")
        assert read.end == 10
        assert read.residues == 4

    def test_count_residues(self):
        assert count_residues("A-C.G") == 3
        assert count_residues("") == 0

    @pytest.mark.parametrize("block, residues", [
        ("AC-G.T", "ACGT"),
        ("..--", ""),
        ("acgt", "acgt"),
        ("", ""),
    ])
    def test_strip_gaps(self, block, residues):
        assert strip_gaps(block) == residues
        assert len(strip_gaps(block)) == count_residues(block)


class TestAlignedReads:
    """Test the list-backed read source."""

    def test_source_protocol(self, chain_reads):
        assert chain_reads.count() == 3
        assert chain_reads.name(1) == "read1"
        assert chain_reads.offset(2) == 8
        assert chain_reads.sequence(0) == "AAAABBBB"
        assert chain_reads.source_label() == "chain"

    def test_from_rows(self):
        reads = AlignedReads.from_rows([("a", "AC--"), ("b", "--GT")], label="rows")
        assert [(r.offset, r.sequence) for r in reads] == [(0, "AC"), (2, "GT")]
        assert reads.source_label() == "rows"

    def test_reorder(self, chain_reads):
        reordered = chain_reads.reorder([2, 0, 1])
        assert [r.name for r in reordered] == ["read2", "read0", "read1"]
        assert reordered.source_label() == "chain"

    @pytest.mark.parametrize("order", [[0, 1], [0, 1, 1], [0, 1, 3]])
    def test_reorder_rejects_non_permutation(self, chain_reads, order):
        with pytest.raises(ValueError):
            chain_reads.reorder(order)


class TestAlignmentFasta:
    """Test reading and writing alignment FASTA files."""

    def test_read(self, temp_output_dir):
        path = temp_output_dir / "sample.fasta"
        path.write_text(ALIGNMENT_FASTA)

        reads = read_alignment_fasta(path)

        assert reads.count() == 4
        assert reads.source_label() == "sample"
        assert reads.name(0) == "r0 first read"
        assert (reads.offset(1), reads.sequence(1)) == (2, "GTACGT")
        assert (reads.offset(2), reads.sequence(2)) == (0, "")
        assert (reads.offset(3), reads.sequence(3)) == (3, "T-A")

    def test_read_gzipped(self, temp_output_dir):
        path = temp_output_dir / "sample.fasta.gz"
        with gzip.open(path, "wt") as f:
            f.write(ALIGNMENT_FASTA)

        reads = read_alignment_fasta(path, label="custom")

        assert reads.count() == 4
        assert reads.source_label() == "custom"

    def test_gzipped_default_label(self, temp_output_dir):
        path = temp_output_dir / "sample.fasta.gz"
        with gzip.open(path, "wt") as f:
            f.write(ALIGNMENT_FASTA)

        assert read_alignment_fasta(path).source_label() == "sample"

    def test_missing_file(self, temp_output_dir):
        with pytest.raises(FileNotFoundError):
            read_alignment_fasta(temp_output_dir / "missing.fasta")

    def test_write_reordered(self, temp_output_dir):
        reads = AlignedReads.from_rows([
            ("r0", "ACGT----"),
            ("r1", "--GTAC--"),
            ("r2", "--------"),
        ])
        path = temp_output_dir / "reordered.fasta"

        assert write_reordered_alignment(reads, [1, 0, 2], path) == 3
        assert path.read_text() == ">r1\n--GTAC\n>r0\nACGT--\n>r2\n------\n"

    def test_written_alignment_reads_back(self, temp_output_dir):
        path = temp_output_dir / "sample.fasta"
        path.write_text(ALIGNMENT_FASTA)
        reads = read_alignment_fasta(path)

        out = temp_output_dir / "reordered.fasta"
        write_reordered_alignment(reads, [3, 2, 1, 0], out)
        again = read_alignment_fasta(out)

        assert [again.name(i) for i in range(4)] == ["r3", "r2", "r1 second read", "r0 first read"]
        assert [(again.offset(i), again.sequence(i)) for i in range(4)] == [
            (reads.offset(i), reads.sequence(i)) for i in [3, 2, 1, 0]
        ]

# AlignWeaver v0.1.0
# Any usage is subject to this software's license.
