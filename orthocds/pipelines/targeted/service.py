#!/usr/bin/env python3
"""
Targeted gene-family assembler

For every orthogroup target: search the profile against the predicted
proteins, pull the hit transcripts, assemble them, re-predict and validate
coding regions, search again with a stricter cutoff, add the survivors to the
reference alignment and rank them by alignment coverage. An orthogroup that
fails at any stage is aborted and its working directory removed; the run
continues with the next one.
"""
import os
import time
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, List, Optional, Sequence

from orthocds.core.file_utils import ensure_dir
from orthocds.error_handlers import log_exception
from orthocds.exceptions import OrthoCDSError, OrthogroupAbort
from orthocds.models.orthogroup import AssignedContig, OrthogroupTarget, RankedCandidate
from orthocds.models.transcript import TranscriptStore
from orthocds.tools.base import (
    CodingRegionPredictor, ProfileSearch, ContigAssembler,
    AlignmentAdder, AlignmentTrimmer, SequenceDeduplicator
)
from orthocds.tools.search import parse_hit_table
from orthocds.utils.fasta import iter_fasta, read_fasta, read_ids, write_fasta
from orthocds.utils.headers import get_header_parser, parse_predictions
from orthocds.utils.statistics import backbone_statistics, rank_by_coverage
from ..dedup import Deduplicator
from ..strand import StrandReconciler
from ..translation import TranslationValidator, protein_without_stop
from ..writer import SequenceWriter
from .models import OrthogroupResult, OrthogroupStatus, TargetedConfig, TargetedRunResult
from .scoring import annotated_header, score_alignment, stats_file_name, write_stats
from .workspace import OrthogroupWorkspace

WORK_SUBDIR = "targeted_gene_families"


class TargetedAssembler:
    """Reassembles transcripts belonging to target orthogroups"""

    def __init__(self, predictor: CodingRegionPredictor, profile_search: ProfileSearch,
                 assembler: ContigAssembler, aligner: AlignmentAdder, trimmer: AlignmentTrimmer,
                 deduplicator: Optional[SequenceDeduplicator] = None,
                 config: Optional[TargetedConfig] = None,
                 logger: Optional[logging.Logger] = None):
        self.predictor = predictor
        self.profile_search = profile_search
        self.assembler = assembler
        self.aligner = aligner
        self.trimmer = trimmer
        self.deduplicator = deduplicator
        self.config = config or TargetedConfig()
        self.config.validate()
        self.logger = logger or logging.getLogger("orthocds.pipelines.targeted")
        self.writer = SequenceWriter()

    @classmethod
    def from_context(cls, context, **overrides) -> 'TargetedAssembler':
        """Build from an ApplicationContext

        Keyword overrides replace the matching TargetedConfig fields.
        """
        config = TargetedConfig.from_config(context.config, **overrides)
        tools = context.tools
        return cls(
            predictor=tools.create_predictor(config.method),
            profile_search=tools.create_profile_search(),
            assembler=tools.create_assembler(),
            aligner=tools.create_aligner(),
            trimmer=tools.create_trimmer(),
            deduplicator=tools.create_deduplicator() if config.deduplicate else None,
            config=config,
        )

    def run(self, targets: Sequence[OrthogroupTarget], protein_fasta: str,
            transcripts: Dict[str, str], output_dir: str) -> TargetedRunResult:
        """Process every target

        Args:
            targets: Orthogroups to assemble
            protein_fasta: Validated proteins of the whole transcriptome
            transcripts: Original transcript sequences by id
            output_dir: Run output directory; orthogroups go under WORK_SUBDIR

        Returns:
            TargetedRunResult with one OrthogroupResult per target
        """
        results = TargetedRunResult()
        work_root = os.path.join(output_dir, WORK_SUBDIR)
        ensure_dir(work_root)

        self.logger.info(f"Targeted assembly of {len(targets)} orthogroups")

        if self.config.max_workers > 1 and len(targets) > 1:
            self._process_parallel(targets, protein_fasta, transcripts, work_root, results)
        else:
            self._process_sequential(targets, protein_fasta, transcripts, work_root, results)

        results.finalize()
        self.logger.info(
            f"Targeted assembly complete: {results.done} done, {results.aborted} aborted "
            f"({results.success_rate:.1f}% success)"
        )
        return results

    def _process_sequential(self, targets: Sequence[OrthogroupTarget], protein_fasta: str,
                            transcripts: Dict[str, str], work_root: str,
                            results: TargetedRunResult) -> None:
        for i, target in enumerate(targets, 1):
            results.add_result(self.process_orthogroup(target, protein_fasta, transcripts, work_root))
            if i % 10 == 0:
                self.logger.info(f"Progress: {i}/{len(targets)} orthogroups")

    def _process_parallel(self, targets: Sequence[OrthogroupTarget], protein_fasta: str,
                          transcripts: Dict[str, str], work_root: str,
                          results: TargetedRunResult) -> None:
        max_workers = min(self.config.max_workers, len(targets))

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            future_to_target = {
                executor.submit(self.process_orthogroup, target, protein_fasta,
                                transcripts, work_root): target
                for target in targets
            }

            completed = 0
            for future in as_completed(future_to_target):
                target = future_to_target[future]
                completed += 1
                try:
                    results.add_result(future.result())
                except Exception as e:
                    self.logger.error(f"Error processing orthogroup {target.orthogroup_id}: {e}")
                    results.add_result(OrthogroupResult(
                        orthogroup_id=target.orthogroup_id,
                        status=OrthogroupStatus.ABORTED,
                        error=str(e),
                    ))

                if completed % 10 == 0:
                    self.logger.info(f"Completed {completed}/{len(targets)} orthogroups")

        # Report in target order regardless of completion order
        order = {t.orthogroup_id: i for i, t in enumerate(targets)}
        results.results.sort(key=lambda r: order.get(r.orthogroup_id, len(order)))

    def process_orthogroup(self, target: OrthogroupTarget, protein_fasta: str,
                           transcripts: Dict[str, str], work_root: str) -> OrthogroupResult:
        """Run every stage for one orthogroup

        Never raises for orthogroup-level failures; they are reported as an
        ABORTED result.
        """
        og = target.orthogroup_id
        result = OrthogroupResult(orthogroup_id=og)
        start_time = time.time()

        try:
            result.status = OrthogroupStatus.SEARCHING
            target.validate()
            with OrthogroupWorkspace(work_root, og, self.config.keep_intermediates,
                                     self.logger) as ws:
                self._run_stages(target, protein_fasta, transcripts, ws, result)
                ws.commit()
            result.status = OrthogroupStatus.DONE
            self.logger.info(f"Orthogroup {og}: {len(result.candidates)} candidates written")

        except OrthogroupAbort as e:
            self._mark_aborted(result, e)
            self.logger.warning(f"Orthogroup {og} aborted while {e.stage}: {e.message}")

        except OrthoCDSError as e:
            self._mark_aborted(result, e)
            log_exception(self.logger, e, level=logging.WARNING, context={'orthogroup': og})

        except Exception as e:
            self._mark_aborted(result, e)
            log_exception(self.logger, e, context={'orthogroup': og})

        result.processing_time = time.time() - start_time
        return result

    @staticmethod
    def _mark_aborted(result: OrthogroupResult, error: Exception) -> None:
        result.failed_stage = result.status
        result.status = OrthogroupStatus.ABORTED
        result.error = getattr(error, 'message', None) or str(error)
        result.candidates = []
        result.output_files = {}

    def _abort(self, result: OrthogroupResult, message: str) -> None:
        raise OrthogroupAbort(result.orthogroup_id, result.status.value, message)

    def _run_stages(self, target: OrthogroupTarget, protein_fasta: str,
                    transcripts: Dict[str, str], ws: OrthogroupWorkspace,
                    result: OrthogroupResult) -> None:
        og = target.orthogroup_id
        cfg = self.config

        # Profile search against the whole transcriptome
        result.status = OrthogroupStatus.SEARCHING
        table = self.profile_search.search(target.profile_path, protein_fasta,
                                           ws.file(f"{og}.search.tbl"), cfg.evalue, cfg.threads)
        hits = parse_hit_table(table)
        if not hits:
            self._abort(result, "no profile hits")
        self.logger.debug(f"Orthogroup {og}: {len(hits)} profile hits")

        result.status = OrthogroupStatus.EXTRACTING
        contigs = self._extract(og, hits, transcripts)
        if not contigs:
            self._abort(result, "none of the hits is a known transcript")
        hits_fasta = ws.file(f"{og}.hits.fasta")
        write_fasta(hits_fasta, ((c.contig_id, c.sequence) for c in contigs))

        result.status = OrthogroupStatus.ASSEMBLING
        assembled = self._assemble(og, hits_fasta)
        if not assembled:
            self._abort(result, "assembler produced neither contigs nor singletons")
        assembled_fasta = ws.file(f"{og}.assembled.fasta")
        write_fasta(assembled_fasta, assembled.items())

        result.status = OrthogroupStatus.TRANSLATING
        store = self._translate(assembled_fasta, ws.file("prediction"))
        if not len(store):
            self._abort(result, "no credible coding region in the assembled contigs")
        cds_path = ws.file(f"{og}.cds.fasta")
        pep_path = ws.file(f"{og}.pep.fasta")
        self.writer.write(store, cds_path, pep_path)

        if cfg.deduplicate and self.deduplicator is not None:
            result.status = OrthogroupStatus.DEDUPLICATING
            written = Deduplicator(self.deduplicator, self.writer).deduplicate(cds_path, pep_path)
            if written.count == 0:
                self._abort(result, "nothing left after removing duplicates")
            store = store.subset(read_ids(written.cds_path))
            pep_path = written.pep_path

        result.status = OrthogroupStatus.RESEARCHING
        strict_table = self.profile_search.search(target.profile_path, pep_path,
                                                  ws.file(f"{og}.strict.tbl"),
                                                  cfg.strict_evalue, cfg.threads)
        candidate_ids = [h for h in parse_hit_table(strict_table) if h in store]
        if not candidate_ids:
            self._abort(result, "no candidate passed the strict profile search")

        result.status = OrthogroupStatus.ALIGNING
        candidates_fasta = ws.file(f"{og}.candidates.pep.fasta")
        write_fasta(candidates_fasta,
                    ((seq_id, protein_without_stop(store.get(seq_id))) for seq_id in candidate_ids))
        aligned = self.aligner.add(candidates_fasta, target.alignment_path,
                                   ws.file(f"{og}.aln.fasta"), cfg.threads)
        if aligned is None:
            self._abort(result, "aligner produced no alignment")
        trimmed = self.trimmer.trim(aligned, ws.file(f"{og}.trimmed.aln.fasta"), cfg.gap_threshold)
        if trimmed is None:
            self._abort(result, "trimmer produced no alignment")

        result.status = OrthogroupStatus.SCORING
        records = score_alignment(read_fasta(trimmed), read_ids(target.alignment_path), candidate_ids)
        backbone = backbone_statistics(records)
        ranked = rank_by_coverage(r for r in records if not r.is_backbone)
        if not ranked:
            self._abort(result, "no candidate left in the trimmed alignment")

        result.candidates = [
            RankedCandidate(
                seq_id=r.seq_id,
                coverage=r,
                pep=store.get(r.seq_id).pep,
                cds=store.get(r.seq_id).cds,
                contig=assembled[r.seq_id],
            )
            for r in ranked
        ]
        result.backbone = backbone
        result.output_files = self._write_outputs(og, result.candidates, backbone, ws)

    def _extract(self, og: str, hits: List[str],
                 transcripts: Dict[str, str]) -> List[AssignedContig]:
        contigs = []
        for seq_id in hits:
            sequence = transcripts.get(seq_id)
            if sequence is None:
                self.logger.warning(f"Orthogroup {og}: hit {seq_id} is not among the transcripts")
                continue
            contigs.append(AssignedContig(contig_id=seq_id, sequence=sequence, orthogroup_id=og))
        return contigs

    def _assemble(self, og: str, hits_fasta: str) -> Dict[str, str]:
        """Assemble and rename contigs then singletons with one running index"""
        output = self.assembler.assemble(hits_fasta, self.config.overlap_length,
                                         self.config.percent_identity)
        if output.empty:
            self.logger.debug(f"Orthogroup {og}: assembler wrote no contigs or singletons")
            return {}
        renamed: Dict[str, str] = {}
        index = 0
        for path in (output.contigs_path, output.singletons_path):
            if path is None:
                continue
            for _, sequence in iter_fasta(path):
                index += 1
                name = f"{self.config.scaffold}_{self.config.method}_{og}_{index}"
                renamed[name] = sequence
        self.logger.debug(f"Orthogroup {og}: {index} assembled sequences")
        return renamed

    def _translate(self, assembled_fasta: str, work_dir: str) -> TranscriptStore:
        """Re-predict, reconcile and validate the assembled contigs"""
        prediction = self.predictor.predict(assembled_fasta, work_dir,
                                            stranded=self.config.stranded,
                                            score_matrix=self.config.score_matrix)
        if prediction is None:
            return TranscriptStore()

        parser = get_header_parser(self.predictor.variant)
        cds = parse_predictions(prediction.cds_path, parser)
        pep = parse_predictions(prediction.pep_path, parser)

        store = StrandReconciler(self.config.stranded, self.logger).reconcile(cds, pep)
        return TranslationValidator(self.logger).validate(store)

    def _write_outputs(self, og: str, candidates: List[RankedCandidate], backbone,
                       ws: OrthogroupWorkspace) -> Dict[str, str]:
        headers = [annotated_header(c.seq_id, c.coverage, backbone, og) for c in candidates]

        outputs = {
            'pep': ws.file(f"{og}.targeted.pep.fasta"),
            'cds': ws.file(f"{og}.targeted.cds.fasta"),
            'contigs': ws.file(f"{og}.contigs.fasta"),
            'stats': ws.file(stats_file_name(og)),
        }
        write_fasta(outputs['pep'], zip(headers, (c.pep for c in candidates)))
        write_fasta(outputs['cds'], zip(headers, (c.cds for c in candidates)))
        write_fasta(outputs['contigs'], zip(headers, (c.contig for c in candidates)))
        write_stats(outputs['stats'], og, candidates, backbone)

        for path in outputs.values():
            ws.keep(path)
        return outputs
