#!/usr/bin/env python3
"""
Tests for duplicate removal
"""
import os

import pytest

from orthocds.exceptions import PipelineError
from orthocds.models.transcript import TranscriptRecord, TranscriptStore
from orthocds.pipelines.dedup import Deduplicator, nonredundant_path
from orthocds.pipelines.writer import SequenceWriter
from orthocds.tools.base import SequenceDeduplicator
from orthocds.utils.fasta import read_fasta, read_ids

from .conftest import FakeDeduplicator


class SilentDeduplicator(SequenceDeduplicator):
    def dedup(self, fasta, output_path):
        return None


@pytest.fixture
def cleaned_files(temp_dir):
    store = TranscriptStore([
        TranscriptRecord("t1", "ATGAAATAA", "MK*"),
        TranscriptRecord("t2", "ATGAAATAA", "MK*"),
        TranscriptRecord("t3", "ATGCCCTAA", "MP*"),
        TranscriptRecord("t4", "ATGAAATAA", "MK*"),
    ])
    cds = os.path.join(temp_dir, "sample.transdecoder.cds.fasta")
    pep = os.path.join(temp_dir, "sample.transdecoder.pep.fasta")
    SequenceWriter().write(store, cds, pep)
    return cds, pep


@pytest.mark.unit
class TestNonredundantPath:

    def test_tag_goes_before_suffix(self):
        assert nonredundant_path("/x/s.transdecoder.cds.fasta") == "/x/s.transdecoder.nr.cds.fasta"
        assert nonredundant_path("/x/s.pep.fasta", "/y") == "/y/s.nr.pep.fasta"

    def test_unknown_suffix(self):
        assert nonredundant_path("s.fa") == "s.fa.nr"


@pytest.mark.unit
class TestDeduplicator:

    def test_identical_cds_collapse(self, cleaned_files):
        written = Deduplicator(FakeDeduplicator()).deduplicate(*cleaned_files)

        assert written.count == 2
        assert read_ids(written.cds_path) == ["t1", "t3"]

    def test_cds_and_pep_ids_match(self, cleaned_files):
        written = Deduplicator(FakeDeduplicator()).deduplicate(*cleaned_files)
        assert read_ids(written.cds_path) == read_ids(written.pep_path)

    def test_idempotent(self, cleaned_files, temp_dir):
        deduplicator = Deduplicator(FakeDeduplicator())
        once = deduplicator.deduplicate(*cleaned_files)
        twice = deduplicator.deduplicate(once.cds_path, once.pep_path,
                                         output_dir=os.path.join(temp_dir, "again"))

        assert read_fasta(twice.cds_path) == read_fasta(once.cds_path)
        assert read_fasta(twice.pep_path) == read_fasta(once.pep_path)

    def test_tool_scratch_files_removed(self, cleaned_files, temp_dir):
        Deduplicator(FakeDeduplicator()).deduplicate(*cleaned_files)
        assert not [name for name in os.listdir(temp_dir) if ".dedup" in name]

    def test_missing_tool_output_is_an_error(self, cleaned_files):
        with pytest.raises(PipelineError):
            Deduplicator(SilentDeduplicator()).deduplicate(*cleaned_files)

    def test_empty_input_skips_tool(self, temp_dir):
        cds = os.path.join(temp_dir, "e.cds.fasta")
        pep = os.path.join(temp_dir, "e.pep.fasta")
        SequenceWriter().write(TranscriptStore(), cds, pep)
        tool = FakeDeduplicator()

        written = Deduplicator(tool).deduplicate(cds, pep)

        assert written.count == 0
        assert tool.calls == 0

    def test_directory_mode(self, cleaned_files, temp_dir):
        results = Deduplicator(FakeDeduplicator()).deduplicate_directory(temp_dir)

        assert len(results) == 1
        assert results[0].cds_path.endswith("sample.transdecoder.nr.cds.fasta")
