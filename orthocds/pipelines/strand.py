#!/usr/bin/env python3
"""
Strand reconciliation of raw predictor output.

Merges per-strand CDS and PEP predictions into one TranscriptRecord per
transcript. For strand-specific libraries the strand carrying more
transcripts wins for the whole run and the other strand is dropped.
"""
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from orthocds.exceptions import StrandAmbiguityError
from orthocds.models.transcript import RawPrediction, Strand, TranscriptRecord, TranscriptStore


@dataclass
class StrandSummary:
    """Bucket sizes seen by the last stranded reconciliation"""
    plus_count: int = 0
    minus_count: int = 0
    winner: Optional[Strand] = None

    @property
    def total(self) -> int:
        return self.plus_count + self.minus_count

    @property
    def discarded_count(self) -> int:
        if self.winner is None:
            return 0
        return self.minus_count if self.winner == Strand.PLUS else self.plus_count

    @property
    def discarded_fraction(self) -> float:
        if self.total == 0:
            return 0.0
        return self.discarded_count / self.total


def keep_longest(predictions: Sequence[RawPrediction]) -> Dict[str, RawPrediction]:
    """Longest prediction per canonical id; on equal length the first one stays"""
    longest: Dict[str, RawPrediction] = {}
    for prediction in predictions:
        current = longest.get(prediction.canonical_id)
        if current is None or len(prediction) > len(current):
            longest[prediction.canonical_id] = prediction
    return longest


def count_transcripts(predictions: Sequence[RawPrediction], strand: Strand) -> int:
    """Distinct canonical ids predicted on one strand"""
    return len({p.canonical_id for p in predictions if p.strand == strand})


class StrandReconciler:
    """Builds the per-transcript CDS/PEP store from raw predictions"""

    SKEW_WARNING_FRACTION = 0.25

    def __init__(self, stranded: bool = False, logger: Optional[logging.Logger] = None):
        self.stranded = stranded
        self.logger = logger or logging.getLogger("orthocds.pipelines.strand")
        self.summary = StrandSummary()
        self.unpaired: List[str] = []

    def reconcile(self, cds: Sequence[RawPrediction],
                  pep: Sequence[RawPrediction]) -> TranscriptStore:
        """Reconcile CDS and PEP predictions

        Args:
            cds: Raw CDS predictions in file order
            pep: Raw PEP predictions in file order

        Returns:
            Store holding transcripts present on both sides

        Raises:
            StrandAmbiguityError: If stranded and both strands hold the same
                number of transcripts
        """
        self.summary = StrandSummary()
        self.unpaired = []

        if self.stranded:
            winner = self.select_strand(cds or pep)
            if winner is not None:
                cds = [p for p in cds if p.strand == winner]
                pep = [p for p in pep if p.strand == winner]

        return self._pair(cds, pep)

    def select_strand(self, predictions: Sequence[RawPrediction]) -> Optional[Strand]:
        """Pick the strand holding more transcripts

        Returns None when there are no predictions at all.
        """
        plus = count_transcripts(predictions, Strand.PLUS)
        minus = count_transcripts(predictions, Strand.MINUS)
        self.summary = StrandSummary(plus_count=plus, minus_count=minus)

        if plus == 0 and minus == 0:
            self.logger.warning("No predictions to assign to a strand")
            return None

        if plus == minus:
            raise StrandAmbiguityError(
                f"Plus and minus strands both hold {plus} transcripts; cannot choose a strand",
                {'plus': plus, 'minus': minus}
            )

        winner = Strand.PLUS if plus > minus else Strand.MINUS
        self.summary.winner = winner
        self.logger.info(
            f"Strand-specific run: keeping {winner.name.lower()} strand "
            f"({plus} plus / {minus} minus transcripts)"
        )

        if self.summary.discarded_fraction > self.SKEW_WARNING_FRACTION:
            self.logger.warning(
                f"{self.summary.discarded_count} of {self.summary.total} transcripts "
                f"({self.summary.discarded_fraction:.0%}) were predicted on the discarded strand; "
                f"the library may not be strand-specific"
            )
        return winner

    def _pair(self, cds: Sequence[RawPrediction], pep: Sequence[RawPrediction]) -> TranscriptStore:
        """Join the longest CDS of each transcript with the PEP of the same ORF"""
        longest_cds = keep_longest(cds)
        longest_pep = keep_longest(pep)

        pep_by_raw_id: Dict[str, RawPrediction] = {}
        for prediction in pep:
            current = pep_by_raw_id.get(prediction.raw_id)
            if current is None or len(prediction) > len(current):
                pep_by_raw_id[prediction.raw_id] = prediction

        store = TranscriptStore()
        for canonical_id, cds_prediction in longest_cds.items():
            pep_prediction = pep_by_raw_id.get(cds_prediction.raw_id) or longest_pep.get(canonical_id)
            if pep_prediction is None:
                self.unpaired.append(canonical_id)
                self.logger.debug(f"{canonical_id}: CDS without protein prediction, dropped")
                continue
            store.add(TranscriptRecord(
                canonical_id=canonical_id,
                cds=cds_prediction.sequence,
                pep=pep_prediction.sequence,
            ))

        for canonical_id in longest_pep:
            if canonical_id not in longest_cds:
                self.unpaired.append(canonical_id)
                self.logger.debug(f"{canonical_id}: protein without CDS prediction, dropped")

        if self.unpaired:
            self.logger.warning(f"Dropped {len(self.unpaired)} transcripts predicted on one side only")

        self.logger.info(f"Reconciled {len(store)} transcripts")
        return store
