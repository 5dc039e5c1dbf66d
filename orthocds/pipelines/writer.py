#!/usr/bin/env python3
"""
Paired CDS/PEP FASTA output for validated transcripts.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from orthocds.models.transcript import TranscriptStore
from orthocds.utils.fasta import LINE_WIDTH, write_fasta


@dataclass(frozen=True)
class WrittenPair:
    """Files written for one store"""
    cds_path: str
    pep_path: str
    count: int
    omitted: int = 0


class SequenceWriter:
    """Writes CDS and PEP FASTA files that always hold the same ids"""

    def __init__(self, line_width: int = LINE_WIDTH, logger: Optional[logging.Logger] = None):
        self.line_width = line_width
        self.logger = logger or logging.getLogger("orthocds.pipelines.writer")

    def write(self, store: TranscriptStore, cds_path: str, pep_path: str,
              min_length: Optional[int] = None) -> WrittenPair:
        """Write records sorted by id

        Args:
            store: Validated transcripts
            cds_path: Destination of the nucleotide FASTA
            pep_path: Destination of the protein FASTA
            min_length: Records with a shorter CDS are left out of both files

        Returns:
            WrittenPair with the number of records written
        """
        if min_length:
            store_kept = store.filter(lambda r: r.cds_length >= min_length)
        else:
            store_kept = store
        kept = store_kept.sorted_records()
        omitted = len(store) - len(kept)

        write_fasta(cds_path, ((r.canonical_id, r.cds) for r in kept), self.line_width)
        write_fasta(pep_path, ((r.canonical_id, r.pep) for r in kept), self.line_width)

        if omitted:
            self.logger.info(f"Omitted {omitted} transcripts shorter than {min_length} nt")
        self.logger.info(f"Wrote {len(kept)} CDS/protein pairs to {cds_path} and {pep_path}")
        return WrittenPair(cds_path=cds_path, pep_path=pep_path, count=len(kept), omitted=omitted)
