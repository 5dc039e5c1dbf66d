#!/usr/bin/env python3
"""
Transcript cleaning pipeline

Predicts coding regions in assembled transcripts, reconciles strands,
validates translations and writes paired CDS/PEP FASTA files. Optionally
removes identical sequences and runs targeted gene-family assembly on the
result.
"""
import os
import logging
from typing import List, Optional, Sequence, Tuple

from orthocds.core.file_utils import create_fresh_dir, remove_path, require_file
from orthocds.exceptions import PredictionError
from orthocds.models.orthogroup import OrthogroupTarget
from orthocds.models.pipeline import CleaningResult
from orthocds.models.transcript import RawPrediction
from orthocds.tools.base import CodingRegionPredictor, SequenceDeduplicator
from orthocds.utils.fasta import read_fasta
from orthocds.utils.headers import get_header_parser, parse_predictions
from .dedup import Deduplicator
from .strand import StrandReconciler
from .translation import TranslationValidator
from .writer import SequenceWriter
from .targeted import TargetedAssembler

PREDICTION_SUBDIR = "prediction"


def output_stem(transcripts_path: str) -> str:
    """'reads/assembly.fasta' -> 'assembly'"""
    return os.path.splitext(os.path.basename(transcripts_path))[0]


class TranscriptCleaningPipeline:
    """Top-level control flow of a cleaning run"""

    def __init__(self, predictor: CodingRegionPredictor,
                 deduplicator: Optional[SequenceDeduplicator] = None,
                 targeted: Optional[TargetedAssembler] = None,
                 stranded: bool = False,
                 min_length: int = 0,
                 score_matrix: Optional[str] = None,
                 keep_intermediates: bool = False,
                 logger: Optional[logging.Logger] = None):
        self.predictor = predictor
        self.deduplicator = deduplicator
        self.targeted = targeted
        self.stranded = stranded
        self.min_length = min_length
        self.score_matrix = score_matrix or None
        self.keep_intermediates = keep_intermediates
        self.logger = logger or logging.getLogger("orthocds.pipelines.cleaning")
        self.writer = SequenceWriter()

    @property
    def method(self) -> str:
        return self.predictor.variant.value

    @classmethod
    def from_context(cls, context, method: Optional[str] = None, stranded: Optional[bool] = None,
                     min_length: Optional[int] = None, score_matrix: Optional[str] = None,
                     dedup: Optional[bool] = None, targeted: bool = False,
                     **targeted_overrides) -> 'TranscriptCleaningPipeline':
        """Build the pipeline and its tools from an ApplicationContext

        Arguments left as None fall back to the configuration.
        """
        config = context.config
        prediction = config.get('prediction', {})

        method = method or prediction.get('method', 'transdecoder')
        stranded = prediction.get('stranded', False) if stranded is None else stranded
        min_length = prediction.get('min_length', 0) if min_length is None else min_length
        score_matrix = score_matrix or prediction.get('score_matrix') or None
        dedup = config.get('dedup', {}).get('enabled', False) if dedup is None else dedup

        assembler = None
        if targeted:
            assembler = TargetedAssembler.from_context(
                context, method=method, stranded=stranded, score_matrix=score_matrix,
                deduplicate=dedup, **targeted_overrides
            )

        return cls(
            predictor=context.tools.create_predictor(method),
            deduplicator=context.tools.create_deduplicator() if dedup else None,
            targeted=assembler,
            stranded=stranded,
            min_length=min_length,
            score_matrix=score_matrix,
            keep_intermediates=config.get('targeted', {}).get('keep_intermediates', False),
        )

    def run(self, transcripts_path: str, output_dir: str,
            targets: Optional[Sequence[OrthogroupTarget]] = None) -> CleaningResult:
        """Run the whole pipeline

        Args:
            transcripts_path: Assembled transcripts (nucleotide FASTA)
            output_dir: Output directory; must not exist yet
            targets: Orthogroups for targeted assembly (needs a TargetedAssembler)

        Returns:
            CleaningResult with counts and output paths

        Raises:
            InputNotFoundError: If the transcripts file is missing or empty
            OutputExistsError: If output_dir already exists
            StrandAmbiguityError: If a stranded run cannot pick a strand
            PredictionError: If nothing was predicted and no targets were given
        """
        require_file(transcripts_path, "Transcript FASTA")
        create_fresh_dir(output_dir)

        targets = list(targets or [])
        if targets and self.targeted is None:
            self.logger.warning("Orthogroup targets given but targeted assembly is not configured; ignoring them")
            targets = []

        result = CleaningResult(transcripts_path=transcripts_path, output_dir=output_dir,
                                method=self.method, stranded=self.stranded)
        self.logger.info(f"Cleaning {transcripts_path} with {self.method} "
                         f"({'strand-specific' if self.stranded else 'unstranded'})")

        prediction_dir = os.path.join(output_dir, PREDICTION_SUBDIR)
        cds, pep = self._predict(transcripts_path, prediction_dir)
        result.raw_predictions = len(cds)

        if not cds or not pep:
            if not targets:
                raise PredictionError(
                    f"{self.method} predicted no coding regions in {transcripts_path}",
                    {'transcripts': transcripts_path, 'method': self.method}
                )
            self.logger.warning("No coding regions predicted; continuing with targeted assembly only")

        reconciler = StrandReconciler(self.stranded, self.logger)
        store = reconciler.reconcile(cds, pep)
        result.reconciled = len(store)

        validator = TranslationValidator(self.logger)
        validated = validator.validate(store)
        result.validated = len(validated)
        result.rejected = len(validator.rejected)

        stem = f"{output_stem(transcripts_path)}.{self.method}"
        written = self.writer.write(validated,
                                    os.path.join(output_dir, f"{stem}.cds.fasta"),
                                    os.path.join(output_dir, f"{stem}.pep.fasta"),
                                    min_length=self.min_length)
        result.written = written.count
        result.output_files['cds'] = written.cds_path
        result.output_files['pep'] = written.pep_path
        protein_fasta = written.pep_path

        if self.deduplicator is not None:
            nonredundant = Deduplicator(self.deduplicator, self.writer, self.logger).deduplicate(
                written.cds_path, written.pep_path
            )
            result.deduplicated = nonredundant.count
            result.output_files['nr_cds'] = nonredundant.cds_path
            result.output_files['nr_pep'] = nonredundant.pep_path
            protein_fasta = nonredundant.pep_path

        if not self.keep_intermediates:
            remove_path(prediction_dir)

        if targets:
            transcripts = read_fasta(transcripts_path)
            result.targeted = self.targeted.run(targets, protein_fasta, transcripts, output_dir)

        result.finalize()
        self.logger.info(
            f"Cleaning complete: {result.written} of {result.raw_predictions} predictions written "
            f"in {result.processing_time:.1f}s"
        )
        return result

    def _predict(self, transcripts_path: str,
                 work_dir: str) -> Tuple[List[RawPrediction], List[RawPrediction]]:
        prediction = self.predictor.predict(transcripts_path, work_dir,
                                            stranded=self.stranded,
                                            score_matrix=self.score_matrix)
        if prediction is None:
            return [], []

        parser = get_header_parser(self.predictor.variant)
        cds = parse_predictions(prediction.cds_path, parser)
        pep = parse_predictions(prediction.pep_path, parser)
        self.logger.info(f"{self.method} predicted {len(cds)} CDS and {len(pep)} proteins")
        return cds, pep


def clean_transcripts(context, transcripts_path: str, output_dir: str,
                      targets: Optional[Sequence[OrthogroupTarget]] = None,
                      **options) -> CleaningResult:
    """Convenience wrapper building the pipeline from a context and running it"""
    pipeline = TranscriptCleaningPipeline.from_context(context, targeted=bool(targets), **options)
    return pipeline.run(transcripts_path, output_dir, targets)
