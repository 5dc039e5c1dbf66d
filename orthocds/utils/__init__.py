"""
Utility functions for the orthocds pipeline
"""
from .fasta import read_fasta, read_fasta_entries, read_ids, write_fasta, iter_fasta
from .headers import (
    HeaderParser,
    TransDecoderHeaderParser,
    ESTScanHeaderParser,
    get_header_parser,
    parse_predictions,
)
from .statistics import (
    average,
    standard_deviation,
    round_decimal,
    round_half_up,
    backbone_statistics,
    rank_by_coverage,
)

__all__ = [
    'read_fasta', 'read_fasta_entries', 'read_ids', 'write_fasta', 'iter_fasta',
    'HeaderParser', 'TransDecoderHeaderParser', 'ESTScanHeaderParser',
    'get_header_parser', 'parse_predictions',
    'average', 'standard_deviation', 'round_decimal', 'round_half_up',
    'backbone_statistics', 'rank_by_coverage',
]
