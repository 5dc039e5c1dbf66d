#!/usr/bin/env python3
"""
External tool wrappers for the orthocds pipeline.
"""
from .base import (
    CodingRegionPredictor,
    ProfileSearch,
    ContigAssembler,
    AlignmentAdder,
    AlignmentTrimmer,
    SequenceDeduplicator,
    PredictionOutput,
    AssemblyOutput,
)
from .predictors import TransDecoderPredictor, ESTScanPredictor
from .search import HmmSearch, parse_hit_table
from .assembly import Cap3Assembler
from .alignment import MafftAdd, TrimAl
from .dedup import CdHitDedup
from .factory import ToolFactory

__all__ = [
    'CodingRegionPredictor',
    'ProfileSearch',
    'ContigAssembler',
    'AlignmentAdder',
    'AlignmentTrimmer',
    'SequenceDeduplicator',
    'PredictionOutput',
    'AssemblyOutput',
    'TransDecoderPredictor',
    'ESTScanPredictor',
    'HmmSearch',
    'parse_hit_table',
    'Cap3Assembler',
    'MafftAdd',
    'TrimAl',
    'CdHitDedup',
    'ToolFactory',
]
