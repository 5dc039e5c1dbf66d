#!/usr/bin/env python3
"""
Coverage scoring of candidates against the reference alignment, and the
annotated outputs built from it.
"""
import logging
from typing import Dict, Iterable, List, Sequence, Tuple

import pandas as pd

from orthocds.core.file_utils import atomic_write
from orthocds.models.orthogroup import BackboneStats, CoverageRecord, RankedCandidate
from orthocds.utils.statistics import round_decimal

logger = logging.getLogger("orthocds.pipelines.targeted.scoring")

GAP_CHARACTERS = frozenset('-.')
STATS_COLUMNS = ['seq_id', 'cov', 'avg_cov', 'sd_cov', 'len', 'avg_len', 'sd_len']


def stats_file_name(orthogroup_id: str) -> str:
    return f"{orthogroup_id}.contigs.fasta.stats"


def ungapped_length(aligned: str) -> int:
    """Residues in an aligned sequence"""
    return sum(1 for char in aligned if char not in GAP_CHARACTERS)


def score_alignment(alignment: Dict[str, str], reference_ids: Iterable[str],
                    candidate_ids: Iterable[str]) -> List[CoverageRecord]:
    """Coverage and conserved length of every known sequence in an alignment

    Candidates are the newly assembled sequences; backbone sequences are the
    reference sequences that are not candidates. Anything else is ignored.
    """
    candidates = set(candidate_ids)
    references = set(reference_ids) - candidates
    if not alignment:
        return []

    lengths = {len(seq) for seq in alignment.values()}
    columns = max(lengths)
    if len(lengths) > 1:
        logger.warning(f"Aligned sequences differ in length ({min(lengths)}-{columns}); using {columns} columns")

    records = []
    for seq_id, aligned in alignment.items():
        if seq_id in candidates:
            is_backbone = False
        elif seq_id in references:
            is_backbone = True
        else:
            logger.debug(f"{seq_id} is neither a reference nor a candidate; not scored")
            continue
        length = ungapped_length(aligned)
        coverage = round_decimal(length / columns) if columns else 0.0
        records.append(CoverageRecord(seq_id=seq_id, coverage=coverage, length=length,
                                      is_backbone=is_backbone))
    return records


def annotated_header(seq_id: str, record: CoverageRecord, backbone: BackboneStats,
                     orthogroup_id: str) -> str:
    """FASTA header carrying a candidate's own and the backbone statistics"""
    render = BackboneStats.render
    return (
        f"{seq_id} cov={record.coverage:.2f} avg_cov={render(backbone.avg_cov)} "
        f"sd_cov={render(backbone.sd_cov)} len={record.length} "
        f"avg_len={render(backbone.avg_len)} sd_len={render(backbone.sd_len)} "
        f"[details in {stats_file_name(orthogroup_id)}]"
    )


def stats_table(candidates: Sequence[RankedCandidate], backbone: BackboneStats) -> pd.DataFrame:
    """One row per ranked candidate"""
    render = BackboneStats.render
    rows = [
        {
            'seq_id': c.seq_id,
            'cov': f"{c.coverage.coverage:.2f}",
            'avg_cov': render(backbone.avg_cov),
            'sd_cov': render(backbone.sd_cov),
            'len': str(c.coverage.length),
            'avg_len': render(backbone.avg_len),
            'sd_len': render(backbone.sd_len),
        }
        for c in candidates
    ]
    return pd.DataFrame(rows, columns=STATS_COLUMNS)


def write_stats(path: str, orthogroup_id: str, candidates: Sequence[RankedCandidate],
                backbone: BackboneStats, comments: Sequence[Tuple[str, str]] = ()) -> str:
    """Write the tab-separated statistics file with its comment header"""
    render = BackboneStats.render
    header_lines = [
        ('orthogroup', orthogroup_id),
        ('backbone sequences', str(backbone.count)),
        ('candidate sequences', str(len(candidates))),
        ('backbone coverage (avg/sd)', f"{render(backbone.avg_cov)}/{render(backbone.sd_cov)}"),
        ('backbone length (avg/sd)', f"{render(backbone.avg_len)}/{render(backbone.sd_len)}"),
    ] + list(comments)

    table = stats_table(candidates, backbone)
    with atomic_write(path, 'w') as f:
        for key, value in header_lines:
            f.write(f"# {key}: {value}\n")
        table.to_csv(f, sep='\t', index=False)
    return path


def read_stats(path: str) -> pd.DataFrame:
    """Load a statistics file written by write_stats"""
    return pd.read_csv(path, sep='\t', comment='#', dtype={'seq_id': str}, keep_default_na=False)
