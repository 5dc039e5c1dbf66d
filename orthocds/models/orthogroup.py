#!/usr/bin/env python3
"""
Orthogroup targets, assigned contigs and alignment coverage records
"""
import os
import logging
from dataclasses import dataclass
from typing import List, Optional

from orthocds.exceptions import InputNotFoundError, ValidationError

logger = logging.getLogger("orthocds.models.orthogroup")

UNDEFINED = "NA"


@dataclass(frozen=True)
class OrthogroupTarget:
    """Profile and reference alignment for one orthogroup"""
    orthogroup_id: str
    profile_path: str
    alignment_path: str

    def validate(self) -> None:
        """Check that both reference files are present

        Raises:
            InputNotFoundError: If the profile or the alignment is missing
        """
        for label, path in (('profile', self.profile_path), ('alignment', self.alignment_path)):
            if not os.path.isfile(path) or os.path.getsize(path) == 0:
                raise InputNotFoundError(
                    f"Reference {label} for orthogroup {self.orthogroup_id} not found: {path}",
                    {'orthogroup': self.orthogroup_id, label: path}
                )


@dataclass(frozen=True)
class AssignedContig:
    """Transcript pulled out for an orthogroup by a profile search hit"""
    contig_id: str
    sequence: str
    orthogroup_id: str


@dataclass(frozen=True)
class CoverageRecord:
    """Alignment coverage of one sequence in a trimmed alignment"""
    seq_id: str
    coverage: float
    length: int
    is_backbone: bool = False


@dataclass(frozen=True)
class BackboneStats:
    """Mean and standard deviation over the reference sequences

    Every statistic is None when the trimmed alignment kept no reference
    sequence.
    """
    count: int = 0
    avg_cov: Optional[float] = None
    sd_cov: Optional[float] = None
    avg_len: Optional[int] = None
    sd_len: Optional[int] = None

    @property
    def defined(self) -> bool:
        return self.count > 0 and self.avg_cov is not None

    @staticmethod
    def render(value) -> str:
        if value is None:
            return UNDEFINED
        if isinstance(value, float):
            return f"{value:.2f}"
        return str(value)


@dataclass
class RankedCandidate:
    """Candidate sequence with everything needed for the output files"""
    seq_id: str
    coverage: CoverageRecord
    pep: str
    cds: str
    contig: str


def load_targets(targets_path: str, base_dir: Optional[str] = None) -> List[OrthogroupTarget]:
    """Read a tab-separated orthogroup table

    Each non-comment line holds ``orthogroup_id  profile_path  alignment_path``.
    Relative paths are resolved against ``base_dir`` (default: the table's
    own directory).

    Raises:
        InputNotFoundError: If the table does not exist
        ValidationError: If a line has fewer than three columns
    """
    if not os.path.isfile(targets_path):
        raise InputNotFoundError(f"Targets file not found: {targets_path}")

    base_dir = base_dir or os.path.dirname(os.path.abspath(targets_path))
    targets = []
    seen = set()

    with open(targets_path, 'r') as f:
        for line_number, line in enumerate(f, 1):
            line = line.strip()
            if not line or line.startswith('#'):
                continue
            fields = line.split('\t') if '\t' in line else line.split()
            if len(fields) < 3:
                raise ValidationError(
                    f"Malformed targets line {line_number}: expected 3 columns, got {len(fields)}",
                    {'file': targets_path, 'line': line_number}
                )
            orthogroup_id, profile, alignment = (x.strip() for x in fields[:3])
            if orthogroup_id in seen:
                logger.warning(f"Orthogroup {orthogroup_id} listed twice in {targets_path}; keeping the first")
                continue
            seen.add(orthogroup_id)
            targets.append(OrthogroupTarget(
                orthogroup_id=orthogroup_id,
                profile_path=os.path.join(base_dir, profile),
                alignment_path=os.path.join(base_dir, alignment),
            ))

    logger.info(f"Loaded {len(targets)} orthogroup targets from {targets_path}")
    return targets
