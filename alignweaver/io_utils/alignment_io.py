#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
AlignWeaver v0.1.0

Aligned read sources: the AlignedReadSource protocol consumed by the
assembly core, a list-backed implementation, and FASTA alignment I/O.

An aligned read is a block of residues placed at an offset in the shared
column coordinate system of a multiple alignment:

    column:   0123456789012345
    read 0:   AAAABBBB
    read 1:       BBBBCCCC
    read 2:           CCCCDDDD

Author: AlignWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from __future__ import annotations
import gzip
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Protocol, Sequence, Union

from Bio import SeqIO

logger = logging.getLogger(__name__)

# Symbols that mark alignment gaps rather than residues
GAP_SYMBOLS = "-."
_GAP_TABLE = str.maketrans("", "", GAP_SYMBOLS)


# ============================================================================
#                           READ SOURCE PROTOCOL
# ============================================================================

class AlignedReadSource(Protocol):
    """
    Protocol defining the read access needed by the assembly core.

    Reads are addressed by integer id 0..count()-1.
    """

    def count(self) -> int:
        """Return the number of reads."""
        ...

    def name(self, read_id: int) -> str:
        """Return the display name of a read."""
        ...

    def offset(self, read_id: int) -> int:
        """Return the first aligned column of a read."""
        ...

    def sequence(self, read_id: int) -> str:
        """Return the aligned block of a read."""
        ...

    def source_label(self) -> str:
        """Return a human-readable provenance tag."""
        ...


@dataclass(frozen=True)
class AlignedRead:
    """
    One aligned read.

    Attributes:
        name: Read name (display label)
        offset: First aligned column
        sequence: Aligned block, may contain interior gap symbols
    """
    name: str
    offset: int
    sequence: str

    @property
    def end(self) -> int:
        """Column one past the last aligned residue."""
        return self.offset + len(self.sequence)

    @property
    def residues(self) -> int:
        """Number of non-gap residues in the block."""
        return count_residues(self.sequence)


class AlignedReads:
    """
    List-backed AlignedReadSource.

    Args:
        reads: Aligned reads; read id is the list position
        label: Provenance tag used in exports
    """

    def __init__(self, reads: Iterable[AlignedRead], label: str = "alignment"):
        self._reads: List[AlignedRead] = list(reads)
        self.label = label

    def __len__(self) -> int:
        return len(self._reads)

    def __getitem__(self, read_id: int) -> AlignedRead:
        return self._reads[read_id]

    def __iter__(self):
        return iter(self._reads)

    def count(self) -> int:
        return len(self._reads)

    def name(self, read_id: int) -> str:
        return self._reads[read_id].name

    def offset(self, read_id: int) -> int:
        return self._reads[read_id].offset

    def sequence(self, read_id: int) -> str:
        return self._reads[read_id].sequence

    def source_label(self) -> str:
        return self.label

    def reorder(self, order: Sequence[int]) -> "AlignedReads":
        """
        Return a new source with reads permuted by `order`.

        Args:
            order: Permutation of all read ids

        Raises:
            ValueError: If order is not a permutation of 0..count()-1
        """
        if sorted(order) != list(range(len(self._reads))):
            raise ValueError("Read order must be a permutation of all read ids")
        return AlignedReads((self._reads[i] for i in order), label=self.label)

    @classmethod
    def from_rows(cls, rows: Iterable[tuple], label: str = "alignment") -> "AlignedReads":
        """
        Build a source from gapped alignment rows.

        Args:
            rows: (name, row) pairs where row spans the full alignment width
            label: Provenance tag
        """
        return cls((parse_alignment_row(name, row) for name, row in rows), label=label)


def count_residues(sequence: str) -> int:
    """Count the non-gap symbols in a sequence."""
    return sum(1 for c in sequence if c not in GAP_SYMBOLS)


def strip_gaps(sequence: str) -> str:
    """Return the sequence with all gap symbols removed."""
    return sequence.translate(_GAP_TABLE)


def parse_alignment_row(name: str, row: str) -> AlignedRead:
    """
    Convert a full-width gapped alignment row into an AlignedRead.

    Leading gap symbols determine the offset; trailing gap symbols are
    dropped. Interior gaps stay part of the block. A row made only of gaps
    yields an empty block at offset 0.

    Args:
        name: Read name
        row: Alignment row

    Returns:
        AlignedRead
    """
    stripped = row.lstrip(GAP_SYMBOLS)
    if not stripped:
        return AlignedRead(name=name, offset=0, sequence="")
    offset = len(row) - len(stripped)
    return AlignedRead(name=name, offset=offset, sequence=stripped.rstrip(GAP_SYMBOLS))


# ============================================================================
#                           FASTA ALIGNMENT I/O
# ============================================================================

def read_alignment_fasta(
    filepath: Union[str, Path],
    label: Optional[str] = None
) -> AlignedReads:
    """
    Read a gapped multiple-alignment FASTA file.

    Args:
        filepath: Path to FASTA file (can be gzipped)
        label: Provenance tag (default: file name without suffix)

    Returns:
        AlignedReads in file order

    Raises:
        FileNotFoundError: If filepath does not exist
    """
    filepath = Path(filepath)

    if not filepath.exists():
        raise FileNotFoundError(f"Alignment file not found: {filepath}")

    if filepath.suffix in ('.gz', '.gzip'):
        handle = gzip.open(filepath, 'rt')
        default_label = Path(filepath.stem).stem
    else:
        handle = open(filepath, 'r')
        default_label = filepath.stem

    try:
        rows = [(record.description, str(record.seq).upper()) for record in SeqIO.parse(handle, "fasta")]
    finally:
        handle.close()

    reads = AlignedReads.from_rows(rows, label=label or default_label)
    logger.info(f"Loaded {reads.count():,} aligned reads from {filepath}")
    return reads


def write_reordered_alignment(
    reads: AlignedReadSource,
    order: Sequence[int],
    filepath: Union[str, Path]
) -> int:
    """
    Write alignment rows in the given read order.

    Rows are padded with gaps to the alignment width so the output is a valid
    multiple-alignment FASTA.

    Args:
        reads: Read source
        order: Read ids in output order
        filepath: Output FASTA path

    Returns:
        Number of rows written
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    width = max((reads.offset(i) + len(reads.sequence(i)) for i in range(reads.count())), default=0)

    count = 0
    with open(filepath, 'w') as handle:
        for read_id in order:
            block = reads.sequence(read_id)
            lead = reads.offset(read_id) if block else 0
            row = "-" * lead + block + "-" * (width - lead - len(block))
            handle.write(f">{reads.name(read_id)}\n{row}\n")
            count += 1

    logger.info(f"Wrote {count:,} reordered alignment rows to {filepath}")
    return count

# AlignWeaver v0.1.0
# Any usage is subject to this software's license.
