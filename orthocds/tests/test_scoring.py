#!/usr/bin/env python3
"""
Tests for alignment coverage scoring and the statistics table
"""
import os

import pytest

from orthocds.models.orthogroup import BackboneStats, CoverageRecord, RankedCandidate
from orthocds.pipelines.targeted.scoring import (
    annotated_header, read_stats, score_alignment, ungapped_length, write_stats,
    STATS_COLUMNS
)


@pytest.fixture
def alignment():
    return {
        "ref1": "MKPGFW",
        "ref2": "MKP---",
        "cand1": "MKPGF-",
        "cand2": "M.P---",
        "stray": "MKPGFW",
    }


@pytest.mark.unit
class TestScoreAlignment:

    def test_coverage_and_length(self, alignment):
        records = {r.seq_id: r for r in score_alignment(alignment, ["ref1", "ref2"], ["cand1", "cand2"])}

        assert records["ref1"] == CoverageRecord("ref1", 1.0, 6, is_backbone=True)
        assert records["ref2"] == CoverageRecord("ref2", 0.5, 3, is_backbone=True)
        assert records["cand1"] == CoverageRecord("cand1", 0.83, 5, is_backbone=False)
        assert records["cand2"] == CoverageRecord("cand2", 0.33, 2, is_backbone=False)

    def test_unknown_sequences_are_not_scored(self, alignment):
        records = score_alignment(alignment, ["ref1", "ref2"], ["cand1", "cand2"])
        assert "stray" not in {r.seq_id for r in records}

    def test_candidate_in_reference_is_not_backbone(self, alignment):
        records = {r.seq_id: r for r in score_alignment(alignment, ["ref1", "cand1"], ["cand1"])}
        assert not records["cand1"].is_backbone
        assert records["ref1"].is_backbone

    def test_empty_alignment(self):
        assert score_alignment({}, ["ref1"], ["cand1"]) == []

    def test_ungapped_length(self):
        assert ungapped_length("-A.C--G") == 3


@pytest.mark.unit
class TestOutputs:

    @pytest.fixture
    def backbone(self):
        return BackboneStats(count=2, avg_cov=0.75, sd_cov=0.25, avg_len=5, sd_len=2)

    @pytest.fixture
    def candidates(self):
        return [
            RankedCandidate("scaffold_transdecoder_1001_1", CoverageRecord("scaffold_transdecoder_1001_1", 0.83, 5),
                            pep="MKPGF*", cds="ATGAAACCCGGGTTTTAA", contig="ATGAAACCCGGGTTTTAA"),
            RankedCandidate("scaffold_transdecoder_1001_2", CoverageRecord("scaffold_transdecoder_1001_2", 0.5, 3),
                            pep="MKP*", cds="ATGAAACCCTAA", contig="ATGAAACCCTAA"),
        ]

    def test_annotated_header(self, candidates, backbone):
        header = annotated_header(candidates[0].seq_id, candidates[0].coverage, backbone, "1001")
        assert header == (
            "scaffold_transdecoder_1001_1 cov=0.83 avg_cov=0.75 sd_cov=0.25 len=5 "
            "avg_len=5 sd_len=2 [details in 1001.contigs.fasta.stats]"
        )

    def test_annotated_header_with_undefined_backbone(self, candidates):
        header = annotated_header(candidates[1].seq_id, candidates[1].coverage, BackboneStats(), "1001")
        assert "cov=0.50 avg_cov=NA sd_cov=NA len=3 avg_len=NA sd_len=NA" in header

    def test_stats_file_layout(self, temp_dir, candidates, backbone):
        path = os.path.join(temp_dir, "1001.contigs.fasta.stats")
        write_stats(path, "1001", candidates, backbone)

        with open(path) as f:
            lines = f.read().splitlines()
        comments = [line for line in lines if line.startswith('#')]
        body = [line for line in lines if not line.startswith('#')]

        assert comments[0] == "# orthogroup: 1001"
        assert "# backbone sequences: 2" in comments
        assert body[0].split('\t') == STATS_COLUMNS
        assert body[1].split('\t') == ["scaffold_transdecoder_1001_1", "0.83", "0.75", "0.25", "5", "5", "2"]
        assert len(body) == 3

    def test_stats_round_trip(self, temp_dir, candidates):
        path = os.path.join(temp_dir, "1001.contigs.fasta.stats")
        write_stats(path, "1001", candidates, BackboneStats())

        table = read_stats(path)

        assert list(table.columns) == STATS_COLUMNS
        assert list(table['seq_id']) == [c.seq_id for c in candidates]
        assert list(table['avg_cov']) == ["NA", "NA"]
