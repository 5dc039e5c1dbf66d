#!/usr/bin/env python3
"""
Transcript-level models: raw predictor output and reconciled CDS/PEP records.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, Iterator, List, Optional

from orthocds.exceptions import ValidationError


class Strand(Enum):
    """Reading strand of a predicted coding region"""
    PLUS = "+"
    MINUS = "-"


class PredictorVariant(Enum):
    """Coding-region predictor whose header convention applies"""
    TRANSDECODER = "transdecoder"
    ESTSCAN = "estscan"

    @classmethod
    def from_name(cls, name: str) -> 'PredictorVariant':
        try:
            return cls(name.lower())
        except ValueError:
            valid = ', '.join(v.value for v in cls)
            raise ValidationError(f"Unknown prediction method '{name}' (expected one of {valid})")


@dataclass(frozen=True)
class ParsedHeader:
    """Identifier and strand decoded from a predictor FASTA header"""
    raw_id: str
    canonical_id: str
    strand: Strand
    variant: PredictorVariant


@dataclass(frozen=True)
class RawPrediction:
    """One CDS or PEP entry exactly as a predictor wrote it"""
    header: ParsedHeader
    sequence: str

    @property
    def raw_id(self) -> str:
        return self.header.raw_id

    @property
    def canonical_id(self) -> str:
        return self.header.canonical_id

    @property
    def strand(self) -> Strand:
        return self.header.strand

    def __len__(self) -> int:
        return len(self.sequence)


@dataclass(frozen=True)
class TranscriptRecord:
    """Paired coding sequence and translation for one transcript"""
    canonical_id: str
    cds: str
    pep: str

    @property
    def cds_length(self) -> int:
        return len(self.cds)

    @property
    def pep_length(self) -> int:
        return len(self.pep)

    def is_consistent(self) -> bool:
        """True when every residue has exactly one codon"""
        return len(self.cds) == 3 * len(self.pep)


class TranscriptStore:
    """Records of one pipeline stage, keyed by canonical id

    A store is filled once by the stage that owns it and then handed on;
    later stages build new stores instead of editing this one.
    """

    def __init__(self, records: Optional[Iterable[TranscriptRecord]] = None):
        self._records: Dict[str, TranscriptRecord] = {}
        for record in records or []:
            self.add(record)

    def add(self, record: TranscriptRecord) -> None:
        if record.canonical_id in self._records:
            raise ValidationError(f"Duplicate transcript id in store: {record.canonical_id}")
        self._records[record.canonical_id] = record

    def get(self, canonical_id: str) -> Optional[TranscriptRecord]:
        return self._records.get(canonical_id)

    def __contains__(self, canonical_id: object) -> bool:
        return canonical_id in self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[TranscriptRecord]:
        return iter(self._records.values())

    def ids(self) -> List[str]:
        return list(self._records)

    def sorted_records(self) -> List[TranscriptRecord]:
        """Records ordered by canonical id (plain string comparison)"""
        return [self._records[key] for key in sorted(self._records)]

    def filter(self, predicate: Callable[[TranscriptRecord], bool]) -> 'TranscriptStore':
        return TranscriptStore(r for r in self if predicate(r))

    def subset(self, ids: Iterable[str]) -> 'TranscriptStore':
        """New store with the given ids, in the order given; unknown ids are ignored"""
        wanted = []
        seen = set()
        for canonical_id in ids:
            if canonical_id in self._records and canonical_id not in seen:
                wanted.append(self._records[canonical_id])
                seen.add(canonical_id)
        return TranscriptStore(wanted)

    def cds_map(self) -> Dict[str, str]:
        return {key: r.cds for key, r in self._records.items()}

    def pep_map(self) -> Dict[str, str]:
        return {key: r.pep for key, r in self._records.items()}
