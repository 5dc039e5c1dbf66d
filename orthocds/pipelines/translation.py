#!/usr/bin/env python3
"""
Codon-by-codon check of predicted translations.
"""
import logging
from enum import Enum
from typing import Dict, Optional, Tuple

from Bio.Data.CodonTable import standard_dna_table

from orthocds.models.transcript import TranscriptRecord, TranscriptStore

STOP_CODONS = frozenset(standard_dna_table.stop_codons)
STOP_MARKERS = frozenset('*X')


def protein_without_stop(record: TranscriptRecord) -> str:
    """Protein of a validated record without its terminal stop marker

    The marker is only dropped when it sits over a stop codon, so a trailing
    ambiguous residue 'X' is kept.
    """
    pep = record.pep
    if pep and pep[-1].upper() in STOP_MARKERS and record.cds[-3:].upper() in STOP_CODONS:
        return pep[:-1]
    return pep


class RejectionReason(Enum):
    """Why a transcript failed validation"""
    MISSING_SEQUENCE = "missing CDS or protein sequence"
    NOT_TRIPLET = "CDS length is not a multiple of 3"
    TOO_FEW_CODONS = "fewer codons than residues"
    INTERNAL_STOP = "internal stop codon"


def validate_record(record: TranscriptRecord) -> Tuple[Optional[TranscriptRecord], Optional[RejectionReason]]:
    """Walk residues against codons

    Returns the validated (possibly shortened) record, or None and the reason
    it was rejected. A stop marker over a stop codon ends the record there.
    """
    cds, pep = record.cds, record.pep
    if not cds or not pep:
        return None, RejectionReason.MISSING_SEQUENCE
    if len(cds) % 3 != 0:
        return None, RejectionReason.NOT_TRIPLET
    if len(cds) // 3 < len(pep):
        return None, RejectionReason.TOO_FEW_CODONS

    codons = []
    residues = []
    for index, residue in enumerate(pep):
        codon = cds[3 * index:3 * index + 3]
        is_stop_codon = codon.upper() in STOP_CODONS
        if residue.upper() in STOP_MARKERS and is_stop_codon:
            codons.append(codon)
            residues.append(residue)
            break
        if is_stop_codon:
            return None, RejectionReason.INTERNAL_STOP
        codons.append(codon)
        residues.append(residue)

    return TranscriptRecord(
        canonical_id=record.canonical_id,
        cds=''.join(codons),
        pep=''.join(residues),
    ), None


class TranslationValidator:
    """Keeps only transcripts whose CDS encodes their protein"""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger("orthocds.pipelines.translation")
        self.rejected: Dict[str, RejectionReason] = {}

    def validate(self, store: TranscriptStore) -> TranscriptStore:
        """Validate every record of a store

        Args:
            store: Reconciled transcripts

        Returns:
            New store with the records that passed in full
        """
        self.rejected = {}
        validated = TranscriptStore()

        for record in store:
            checked, reason = validate_record(record)
            if checked is None:
                self.rejected[record.canonical_id] = reason
                self.logger.debug(f"{record.canonical_id}: rejected ({reason.value})")
                continue
            if checked.cds_length < record.cds_length:
                self.logger.debug(
                    f"{record.canonical_id}: truncated from {record.cds_length} to {checked.cds_length} nt"
                )
            validated.add(checked)

        if self.rejected:
            self.logger.info(f"Rejected {len(self.rejected)} of {len(store)} transcripts during translation check")
        self.logger.info(f"Validated {len(validated)} transcripts")
        return validated
