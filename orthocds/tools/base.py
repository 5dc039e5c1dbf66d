#!/usr/bin/env python3
"""
Interfaces for the external tools the pipeline drives.

Every tool is a black box: it gets input files and is judged only by the
files it leaves behind. A wrapper returns the path of its expected output,
or None when that output is missing or empty.
"""
import abc
import logging
from dataclasses import dataclass
from typing import Optional

from orthocds.core.file_utils import has_content
from orthocds.models.transcript import PredictorVariant

logger = logging.getLogger("orthocds.tools")


def output_or_none(path: str, tool: str) -> Optional[str]:
    """Path if the tool wrote a non-empty file there, else None"""
    if has_content(path):
        return path
    logger.debug(f"{tool} produced no output at {path}")
    return None


@dataclass(frozen=True)
class PredictionOutput:
    """CDS and PEP files written by a coding-region predictor"""
    cds_path: str
    pep_path: str


@dataclass(frozen=True)
class AssemblyOutput:
    """Contigs and unassembled singletons written by an overlap assembler"""
    contigs_path: Optional[str]
    singletons_path: Optional[str]

    @property
    def empty(self) -> bool:
        return self.contigs_path is None and self.singletons_path is None


class CodingRegionPredictor(abc.ABC):
    """Predicts coding regions in transcripts"""

    name: str
    variant: PredictorVariant

    @abc.abstractmethod
    def predict(self, input_fasta: str, work_dir: str, stranded: bool = False,
                score_matrix: Optional[str] = None) -> Optional[PredictionOutput]:
        """Run the predictor

        Args:
            input_fasta: Transcript nucleotide FASTA
            work_dir: Directory the predictor may write into
            stranded: Whether the library is strand-specific
            score_matrix: Optional predictor scoring matrix

        Returns:
            PredictionOutput, or None when either output is missing or empty
        """
        pass


class ProfileSearch(abc.ABC):
    """Searches a profile HMM against a protein set"""

    @abc.abstractmethod
    def search(self, profile: str, protein_fasta: str, output_path: str,
               evalue: float, threads: int = 1) -> Optional[str]:
        """Run the search and return the hit table path (None if absent)"""
        pass


class ContigAssembler(abc.ABC):
    """Overlap assembler for a small set of contigs"""

    @abc.abstractmethod
    def assemble(self, contig_fasta: str, overlap_length: int,
                 percent_identity: int) -> AssemblyOutput:
        """Assemble contigs; either output may be None"""
        pass


class AlignmentAdder(abc.ABC):
    """Adds sequences to an existing alignment, keeping its columns"""

    @abc.abstractmethod
    def add(self, new_sequences: str, reference_alignment: str, output_path: str,
            threads: int = 1) -> Optional[str]:
        """Write the combined alignment and return its path (None if absent)"""
        pass


class AlignmentTrimmer(abc.ABC):
    """Removes poorly occupied alignment columns"""

    @abc.abstractmethod
    def trim(self, alignment: str, output_path: str, gap_threshold: float) -> Optional[str]:
        """Write the trimmed alignment and return its path (None if absent)"""
        pass


class SequenceDeduplicator(abc.ABC):
    """Keeps one representative per identical sequence"""

    @abc.abstractmethod
    def dedup(self, fasta: str, output_path: str) -> Optional[str]:
        """Write the non-redundant FASTA and return its path (None if absent)"""
        pass
