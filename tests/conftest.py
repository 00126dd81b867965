#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
AlignWeaver v0.1.0

Pytest configuration and shared fixtures.

Author: AlignWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import random

import pytest
from pathlib import Path
import tempfile
import shutil

from alignweaver.io_utils import AlignedRead, AlignedReads
from alignweaver.utils import SilentProgress


class CancelAfterPolls(SilentProgress):
    """Progress listener that requests cancellation after a number of polls."""

    def __init__(self, polls: int):
        super().__init__()
        self.remaining = polls
        self.polls = 0

    def is_cancelled(self) -> bool:
        self.polls += 1
        self.remaining -= 1
        return self.remaining < 0


@pytest.fixture
def temp_output_dir():
    """Create temporary output directory for tests."""
    temp_dir = tempfile.mkdtemp(prefix="alignweaver_test_")
    yield Path(temp_dir)
    # Cleanup after test
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def cancel_after():
    """Factory for progress listeners that cancel after N polls."""
    return CancelAfterPolls


@pytest.fixture
def chain_reads():
    """Three reads tiling AAAABBBBCCCCDDDD with 4-column overlaps."""
    return AlignedReads([
        AlignedRead("read0", 0, "AAAABBBB"),
        AlignedRead("read1", 4, "BBBBCCCC"),
        AlignedRead("read2", 8, "CCCCDDDD"),
    ], label="chain")


@pytest.fixture
def contained_reads():
    """The chain reads plus read3, lying inside read0 (and read1)."""
    return AlignedReads([
        AlignedRead("read0", 0, "AAAABBBB"),
        AlignedRead("read1", 4, "BBBBCCCC"),
        AlignedRead("read2", 8, "CCCCDDDD"),
        AlignedRead("read3", 4, "BBBB"),
    ], label="contained")


@pytest.fixture
def fork_reads():
    """
    read1 has two successors (read2, read3) with min_overlap=3.

        read0: [0, 10)
        read1: [6, 16)
        read2: [12, 22)
        read3: [13, 23)
    """
    genome = "ACGTTGCAAGGCTTACCGATGCATCGA"
    spans = [(0, 10), (6, 16), (12, 22), (13, 23)]
    return AlignedReads(
        [AlignedRead(f"read{i}", s, genome[s:e]) for i, (s, e) in enumerate(spans)],
        label="fork"
    )


def make_random_reads(seed: int, n_reads: int = 60, genome_length: int = 400):
    """
    Sample reads from a random genome.

    Returns:
        (genome, AlignedReads)
    """
    rng = random.Random(seed)
    genome = "".join(rng.choice("ACGT") for _ in range(genome_length))
    reads = []
    for i in range(n_reads):
        length = rng.randint(0, 60) if rng.random() > 0.05 else 0
        start = rng.randint(0, genome_length - 1)
        end = min(genome_length, start + length)
        reads.append(AlignedRead(f"r{i} sample", start, genome[start:end]))
    return genome, AlignedReads(reads, label=f"random{seed}")


@pytest.fixture
def random_reads():
    """Factory for reproducible random read sets."""
    return make_random_reads

# AlignWeaver v0.1.0
# Any usage is subject to this software's license.
