#!/usr/bin/env python3
"""
Header parsers for coding-region predictor output

Each predictor encodes the transcript of origin and the reading strand in
its FASTA headers in its own way. A parser turns one header line into a
ParsedHeader so that reconciliation never looks at raw header text.

TransDecoder::

    >TRINITY_DN10_c0_g1_i1|m.3 TRINITY_DN10_c0_g1_i1|g.3 ORF ... type:complete len:212 (-)
    >TRINITY_DN10_c0_g1_i1.p1 GENE.TRINITY_DN10_c0_g1_i1~~TRINITY_DN10_c0_g1_i1.p1 ORF type:5prime_partial len:91 (+),score=8.77 TRINITY_DN10_c0_g1_i1:2-274(+)

ESTScan::

    >contig_12;minus 41.29 3 512
    >contig_12 41.29 3 512
"""
import abc
import re
import logging
from typing import List

from orthocds.models.transcript import ParsedHeader, PredictorVariant, RawPrediction, Strand
from orthocds.exceptions import ValidationError
from .fasta import iter_fasta

logger = logging.getLogger("orthocds.utils.headers")


class HeaderParser(abc.ABC):
    """Base interface for predictor header parsers"""

    variant: PredictorVariant

    def parse(self, title: str) -> ParsedHeader:
        """Decode a header line (without the leading '>')

        Raises:
            ValidationError: If the header has no identifier
        """
        title = title.strip()
        if not title:
            raise ValidationError("Empty FASTA header in predictor output")
        raw_id = title.split(None, 1)[0]
        return ParsedHeader(
            raw_id=raw_id,
            canonical_id=self.canonical_id(raw_id),
            strand=self.strand(title),
            variant=self.variant,
        )

    @abc.abstractmethod
    def canonical_id(self, raw_id: str) -> str:
        """Transcript id with predictor-specific suffixes removed"""
        pass

    @abc.abstractmethod
    def strand(self, title: str) -> Strand:
        """Strand annotation carried by the header"""
        pass


class TransDecoderHeaderParser(HeaderParser):
    """Headers ending in '(+)' or '(-)', ids suffixed with '|m.<n>' or '.p<n>'"""

    variant = PredictorVariant.TRANSDECODER

    ORF_SUFFIX = re.compile(r'(\|m\.\d+|\.p\d+)$')
    STRAND_MARK = re.compile(r'\(([+-])\)')

    def canonical_id(self, raw_id: str) -> str:
        return self.ORF_SUFFIX.sub('', raw_id)

    def strand(self, title: str) -> Strand:
        marks = self.STRAND_MARK.findall(title)
        if not marks:
            return Strand.PLUS
        # The trailing mark refers to the transcript coordinates of the ORF
        return Strand.MINUS if marks[-1] == '-' else Strand.PLUS


class ESTScanHeaderParser(HeaderParser):
    """Ids suffixed with ';<annotation>', strand given as a 'minus'/'plus' token"""

    variant = PredictorVariant.ESTSCAN

    TOKEN_SPLIT = re.compile(r'[\s;]+')

    def canonical_id(self, raw_id: str) -> str:
        return raw_id.split(';', 1)[0]

    def strand(self, title: str) -> Strand:
        tokens = {token.lower() for token in self.TOKEN_SPLIT.split(title) if token}
        if 'minus' in tokens:
            return Strand.MINUS
        return Strand.PLUS


_PARSERS = {
    PredictorVariant.TRANSDECODER: TransDecoderHeaderParser,
    PredictorVariant.ESTSCAN: ESTScanHeaderParser,
}


def get_header_parser(variant: PredictorVariant) -> HeaderParser:
    """Header parser for a predictor variant"""
    return _PARSERS[variant]()


def parse_predictions(file_path: str, parser: HeaderParser) -> List[RawPrediction]:
    """Read a predictor FASTA file into RawPrediction entries, in file order"""
    predictions = []
    for title, sequence in iter_fasta(file_path):
        predictions.append(RawPrediction(header=parser.parse(title), sequence=sequence))
    logger.debug(f"Parsed {len(predictions)} {parser.variant.value} predictions from {file_path}")
    return predictions
