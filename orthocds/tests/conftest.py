#!/usr/bin/env python3
"""
Shared fixtures for the orthocds test suite

External tools are replaced by in-process fakes that write the files the
real tools would write, so every stage runs against real files on disk.
"""
import os
import shutil
import tempfile
from typing import Dict, Iterable, List, Optional, Set, Tuple

import pytest
from Bio.Seq import Seq

from orthocds.models.transcript import PredictorVariant
from orthocds.tools.base import (
    CodingRegionPredictor, ProfileSearch, ContigAssembler, AlignmentAdder,
    AlignmentTrimmer, SequenceDeduplicator, PredictionOutput, AssemblyOutput,
    output_or_none
)
from orthocds.utils.fasta import iter_fasta, read_fasta, write_fasta


# ===== FAKE TOOLS =====

class FakePredictor(CodingRegionPredictor):
    """Translates every input sequence from its first base, TransDecoder style

    Ids listed in ``minus`` are reported on the minus strand; ids listed in
    ``skip`` get no prediction at all. Stops are written as ``stop_marker``.
    """

    name = "transdecoder"
    variant = PredictorVariant.TRANSDECODER

    def __init__(self, minus: Iterable[str] = (), skip: Iterable[str] = (), stop_marker: str = '*'):
        self.minus: Set[str] = set(minus)
        self.skip: Set[str] = set(skip)
        self.stop_marker = stop_marker
        self.calls: List[Tuple[str, bool]] = []

    def predict(self, input_fasta, work_dir, stranded=False, score_matrix=None):
        self.calls.append((input_fasta, stranded))
        os.makedirs(work_dir, exist_ok=True)
        prefix = os.path.join(work_dir, os.path.basename(input_fasta) + ".transdecoder")

        cds_entries, pep_entries = [], []
        for seq_id, sequence in iter_fasta(input_fasta):
            if seq_id in self.skip:
                continue
            coding = sequence[:len(sequence) - len(sequence) % 3]
            if not coding:
                continue
            protein = str(Seq(coding).translate()).replace('*', self.stop_marker)
            strand = '-' if seq_id in self.minus else '+'
            header = (f"{seq_id}.p1 GENE.{seq_id}~~{seq_id}.p1 ORF type:complete "
                      f"len:{len(protein)} ({strand})")
            cds_entries.append((header, coding))
            pep_entries.append((header, protein))

        if not cds_entries:
            return None
        write_fasta(prefix + ".cds", cds_entries)
        write_fasta(prefix + ".pep", pep_entries)
        return PredictionOutput(cds_path=prefix + ".cds", pep_path=prefix + ".pep")


class FakeProfileSearch(ProfileSearch):
    """Treats the profile file's content as a protein motif

    Every protein containing the motif is a hit, in file order.
    """

    def __init__(self):
        self.calls: List[Tuple[str, str, float]] = []

    def search(self, profile, protein_fasta, output_path, evalue, threads=1):
        self.calls.append((profile, protein_fasta, evalue))
        with open(profile) as f:
            motif = f.read().strip()
        hits = [seq_id for seq_id, seq in iter_fasta(protein_fasta) if motif in seq]
        with open(output_path, 'w') as f:
            f.write("# target name  accession  query name\n")
            for seq_id in hits:
                f.write(f"{seq_id}  -  profile  -  {evalue}\n")
        return output_or_none(output_path, "fake-search")


class FakeAssembler(ContigAssembler):
    """Leaves every sequence unassembled except the first ``contig_count``"""

    def __init__(self, contig_count: int = 0, produce_nothing: bool = False):
        self.contig_count = contig_count
        self.produce_nothing = produce_nothing

    def assemble(self, contig_fasta, overlap_length, percent_identity):
        if self.produce_nothing:
            return AssemblyOutput(contigs_path=None, singletons_path=None)
        entries = list(iter_fasta(contig_fasta))
        contigs = [(f"Contig{i}", seq) for i, (_, seq) in enumerate(entries[:self.contig_count], 1)]
        singlets = entries[self.contig_count:]
        contigs_path = contig_fasta + ".cap.contigs"
        singlets_path = contig_fasta + ".cap.singlets"
        write_fasta(contigs_path, contigs)
        write_fasta(singlets_path, singlets)
        return AssemblyOutput(
            contigs_path=output_or_none(contigs_path, "fake-assembler"),
            singletons_path=output_or_none(singlets_path, "fake-assembler"),
        )


class FakeAligner(AlignmentAdder):
    """Appends new sequences cut or gap-padded to the reference width"""

    def __init__(self, fail: bool = False):
        self.fail = fail

    def add(self, new_sequences, reference_alignment, output_path, threads=1):
        if self.fail:
            return None
        reference = list(iter_fasta(reference_alignment))
        width = len(reference[0][1])
        added = [(seq_id, seq[:width].ljust(width, '-')) for seq_id, seq in iter_fasta(new_sequences)]
        write_fasta(output_path, reference + added, line_width=1000)
        return output_path


class FakeTrimmer(AlignmentTrimmer):
    """Keeps every column"""

    def trim(self, alignment, output_path, gap_threshold):
        shutil.copyfile(alignment, output_path)
        return output_or_none(output_path, "fake-trimmer")


class FakeDeduplicator(SequenceDeduplicator):
    """Keeps the first of each set of identical sequences"""

    def __init__(self):
        self.calls = 0

    def dedup(self, fasta, output_path):
        self.calls += 1
        seen = set()
        kept = []
        for seq_id, seq in iter_fasta(fasta):
            if seq.upper() in seen:
                continue
            seen.add(seq.upper())
            kept.append((seq_id, seq))
        write_fasta(output_path, kept)
        # cd-hit also writes a cluster file next to its output
        with open(output_path + ".clstr", 'w') as f:
            f.write(">Cluster 0\n")
        return output_or_none(output_path, "fake-dedup")


# ===== FIXTURES =====

@pytest.fixture
def temp_dir():
    """Scratch directory removed after the test"""
    path = tempfile.mkdtemp(prefix="orthocds_test_")
    yield path
    shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def write_file(temp_dir):
    """Write text into the scratch directory and return its path"""
    def _write(name: str, content: str) -> str:
        path = os.path.join(temp_dir, name)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, 'w') as f:
            f.write(content)
        return path
    return _write


@pytest.fixture
def transcripts() -> Dict[str, str]:
    """Three transcripts; tA and tB share the 'MKP' motif"""
    return {
        'tA': "ATGAAACCCGGGTTTTAA",   # M K P G F *
        'tB': "ATGAAACCCTAA",         # M K P *
        'tC': "ATGGGGTAA",            # M G *
    }


@pytest.fixture
def transcripts_fasta(temp_dir, transcripts) -> str:
    path = os.path.join(temp_dir, "assembly.fasta")
    write_fasta(path, transcripts.items())
    return path


@pytest.fixture
def orthogroup_files(write_file):
    """Profile motifs and reference alignments for two orthogroups

    Orthogroup 1001 matches tA and tB; 2002 matches nothing.
    """
    return {
        '1001': (write_file("refs/1001.hmm", "MKP\n"),
                 write_file("refs/1001.aln.fasta", ">ref1\nMKPGFW\n>ref2\nMKP---\n")),
        '2002': (write_file("refs/2002.hmm", "WWWW\n"),
                 write_file("refs/2002.aln.fasta", ">ref9\nWWWWWW\n")),
    }


@pytest.fixture
def fake_tools():
    """One instance of every fake tool"""
    return {
        'predictor': FakePredictor(),
        'profile_search': FakeProfileSearch(),
        'assembler': FakeAssembler(),
        'aligner': FakeAligner(),
        'trimmer': FakeTrimmer(),
        'deduplicator': FakeDeduplicator(),
    }


def fasta_lines(path: str) -> List[str]:
    with open(path) as f:
        return [line.rstrip('\n') for line in f]


def fasta_dict(path: str) -> Dict[str, str]:
    return read_fasta(path)
