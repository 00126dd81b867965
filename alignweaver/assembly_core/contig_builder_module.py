#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
AlignWeaver v0.1.0

Contig construction: lay out each path's reads by their overlaps and collapse
them into one sequence.

Layout of a path [A, B, C] with overlaps [o1, o2]:

    A: AAAABBBB
    B:     BBBBCCCC          B[o1:] appended
    C:         CCCCDDDD      C[o2:] appended
       AAAABBBBCCCCDDDD

Within an overlap window the earlier read wins. Reads all come from one
alignment, so residues in the window agree up to alignment errors and no
voting is done. Gap symbols are removed from the merged sequence.

Author: AlignWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Set

from .data_structures import ContainmentIndex, Contig, Path
from ..io_utils.alignment_io import AlignedReadSource, count_residues, strip_gaps
from ..utils.progress import ProgressListener, SilentProgress, check_cancelled

logger = logging.getLogger(__name__)


@dataclass
class ContigBuildResult:
    """Output of ContigBuilder.build()."""
    contigs: List[Contig] = field(default_factory=list)
    read_order: Optional[List[int]] = None
    candidates: int = 0

    @property
    def count(self) -> int:
        return len(self.contigs)


class ContigBuilder:
    """
    Build filtered contigs from paths and singletons.

    Args:
        containment: Container read id -> contained read ids
        reads: Aligned read source
        alignment_id: Identifier placed in every contig header
        min_reads: Minimum contributing reads per contig
        min_coverage: Minimum coverage per contig
        min_length: Minimum merged length per contig
    """

    def __init__(
        self,
        containment: ContainmentIndex,
        reads: AlignedReadSource,
        alignment_id: str = "1",
        min_reads: int = 1,
        min_coverage: float = 0.0,
        min_length: int = 0
    ):
        self.containment = containment
        self.reads = reads
        self.alignment_id = str(alignment_id)
        self.min_reads = min_reads
        self.min_coverage = min_coverage
        self.min_length = min_length

        self.stats = {
            'candidates': 0,
            'contigs_built': 0,
            'discarded_min_reads': 0,
            'discarded_min_coverage': 0,
            'discarded_min_length': 0,
        }

    def build(
        self,
        paths: List[Path],
        singletons: List[Path],
        reorder: bool = False,
        progress: Optional[ProgressListener] = None
    ) -> ContigBuildResult:
        """
        Build contigs.

        Args:
            paths: Chains of >= 2 reads
            singletons: One-read chains
            reorder: Also compute a read permutation grouped by contig
            progress: Progress listener, polled once per candidate

        Returns:
            ContigBuildResult

        Raises:
            CancelledError: If the listener requests an abort
        """
        progress = progress or SilentProgress()
        candidates = list(paths) + list(singletons)

        progress.set_subtask("Building contigs")
        progress.set_maximum(len(candidates))
        progress.set_progress(0)

        contigs: List[Contig] = []
        for path in candidates:
            check_cancelled(progress)
            contig = self._build_one(path, len(contigs) + 1)
            if contig is not None:
                contigs.append(contig)
            progress.increment_progress()

        self.stats['candidates'] = len(candidates)
        self.stats['contigs_built'] = len(contigs)
        logger.info(
            f"Built {len(contigs):,} contigs from {len(candidates):,} candidates "
            f"(min_reads={self.min_reads}, min_coverage={self.min_coverage}, min_length={self.min_length})"
        )

        read_order = self._group_reads_by_contig(contigs) if reorder else None
        return ContigBuildResult(contigs=contigs, read_order=read_order, candidates=len(candidates))

    def _build_one(self, path: Path, number: int) -> Optional[Contig]:
        read_ids = self.collect_reads(path)
        sequence = self.merge_path(path)
        length = len(sequence)
        residues = sum(count_residues(self.reads.sequence(i)) for i in read_ids)
        coverage = residues / length if length > 0 else 0.0

        if len(read_ids) < self.min_reads:
            self.stats['discarded_min_reads'] += 1
            return None
        if coverage < self.min_coverage:
            self.stats['discarded_min_coverage'] += 1
            return None
        if length < self.min_length:
            self.stats['discarded_min_length'] += 1
            return None

        header = (
            f">{self.alignment_id}.contig-{number} "
            f"length={length} reads={len(read_ids)} coverage={coverage:.2f}"
        )
        logger.debug(f"  contig {number}: {len(path)} path reads, {len(read_ids)} total, {length} bp")
        return Contig(number=number, header=header, sequence=sequence,
                      read_ids=read_ids, coverage=coverage)

    def collect_reads(self, path: Path) -> List[int]:
        """
        Return the path reads plus every read transitively contained under them.

        Returns:
            Ascending read ids
        """
        seen: Set[int] = set()
        stack = list(path.read_ids)
        while stack:
            read_id = stack.pop()
            if read_id in seen:
                continue
            seen.add(read_id)
            stack.extend(self.containment.get(read_id, ()))
        return sorted(seen)

    def merge_path(self, path: Path) -> str:
        """Merge the path reads in order, trimming each by its overlap columns."""
        parts = [self.reads.sequence(path.read_ids[0])]
        for read_id, trim in zip(path.read_ids[1:], path.trims):
            parts.append(self.reads.sequence(read_id)[trim:])
        return strip_gaps("".join(parts))

    def _group_reads_by_contig(self, contigs: List[Contig]) -> List[int]:
        """
        Permute all read ids so that each contig's reads are adjacent.

        Contigs keep their order; within a contig reads are ordered by
        (offset, read id). Reads in no contig follow in ascending id.
        """
        order: List[int] = []
        assigned: Set[int] = set()
        for contig in contigs:
            members = sorted(contig.read_ids, key=lambda i: (self.reads.offset(i), i))
            order.extend(members)
            assigned.update(members)
        order.extend(i for i in range(self.reads.count()) if i not in assigned)
        return order

# AlignWeaver v0.1.0
# Any usage is subject to this software's license.
