"""
Processing stages of the orthocds pipeline
"""
from .strand import StrandReconciler, StrandSummary
from .translation import TranslationValidator, RejectionReason
from .writer import SequenceWriter, WrittenPair
from .dedup import Deduplicator
from .cleaning import TranscriptCleaningPipeline, clean_transcripts

__all__ = [
    'StrandReconciler', 'StrandSummary',
    'TranslationValidator', 'RejectionReason',
    'SequenceWriter', 'WrittenPair',
    'Deduplicator',
    'TranscriptCleaningPipeline', 'clean_transcripts'
]
