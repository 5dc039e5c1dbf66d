"""
Data models for transcripts, orthogroups and pipeline runs
"""
from .transcript import (
    Strand,
    PredictorVariant,
    ParsedHeader,
    RawPrediction,
    TranscriptRecord,
    TranscriptStore,
)
from .orthogroup import (
    OrthogroupTarget,
    AssignedContig,
    CoverageRecord,
    BackboneStats,
    RankedCandidate,
    load_targets,
)
from .pipeline import CleaningResult

__all__ = [
    'Strand',
    'PredictorVariant',
    'ParsedHeader',
    'RawPrediction',
    'TranscriptRecord',
    'TranscriptStore',
    'OrthogroupTarget',
    'AssignedContig',
    'CoverageRecord',
    'BackboneStats',
    'RankedCandidate',
    'load_targets',
    'CleaningResult',
]
