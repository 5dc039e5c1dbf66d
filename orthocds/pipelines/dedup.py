#!/usr/bin/env python3
"""
Removal of identical coding sequences while keeping CDS and PEP paired.
"""
import os
import glob
import logging
from typing import List, Optional

from orthocds.core.file_utils import has_content, remove_path
from orthocds.exceptions import PipelineError
from orthocds.models.transcript import TranscriptRecord, TranscriptStore
from orthocds.tools.base import SequenceDeduplicator
from orthocds.utils.fasta import read_fasta, read_ids
from .writer import SequenceWriter, WrittenPair

CDS_SUFFIX = ".cds.fasta"
PEP_SUFFIX = ".pep.fasta"
NR_TAG = ".nr"


def nonredundant_path(path: str, output_dir: Optional[str] = None) -> str:
    """'x.cds.fasta' -> 'x.nr.cds.fasta', optionally in another directory"""
    directory, name = os.path.split(path)
    for suffix in (CDS_SUFFIX, PEP_SUFFIX):
        if name.endswith(suffix):
            name = name[:-len(suffix)] + NR_TAG + suffix
            break
    else:
        name = name + NR_TAG
    return os.path.join(output_dir or directory, name)


class Deduplicator:
    """Runs the dedup tool on CDS and rebuilds the matching protein set"""

    def __init__(self, tool: SequenceDeduplicator, writer: Optional[SequenceWriter] = None,
                 logger: Optional[logging.Logger] = None):
        self.tool = tool
        self.writer = writer or SequenceWriter()
        self.logger = logger or logging.getLogger("orthocds.pipelines.dedup")

    def deduplicate(self, cds_path: str, pep_path: str,
                    output_dir: Optional[str] = None) -> WrittenPair:
        """Write non-redundant CDS/PEP files next to the inputs (or in output_dir)

        Raises:
            PipelineError: If the dedup tool writes nothing for a non-empty input
        """
        out_cds = nonredundant_path(cds_path, output_dir)
        out_pep = nonredundant_path(pep_path, output_dir)

        cds = read_fasta(cds_path) if has_content(cds_path) else {}
        pep = read_fasta(pep_path) if has_content(pep_path) else {}

        if cds:
            scratch = out_cds + ".dedup"
            try:
                result = self.tool.dedup(cds_path, scratch)
                if result is None:
                    raise PipelineError(f"Deduplication produced no output for {cds_path}",
                                        {'input': cds_path})
                kept_ids = read_ids(result)
            finally:
                for leftover in glob.glob(scratch + "*"):
                    remove_path(leftover)
        else:
            kept_ids = []

        store = TranscriptStore()
        missing_pep = 0
        for seq_id in kept_ids:
            if seq_id not in cds:
                self.logger.warning(f"Dedup output names unknown sequence {seq_id}; skipped")
                continue
            if seq_id not in pep:
                missing_pep += 1
                continue
            store.add(TranscriptRecord(canonical_id=seq_id, cds=cds[seq_id], pep=pep[seq_id]))

        if missing_pep:
            self.logger.warning(f"{missing_pep} non-redundant CDS had no protein and were dropped")

        written = self.writer.write(store, out_cds, out_pep)
        self.logger.info(f"Kept {written.count} of {len(cds)} sequences after removing duplicates")
        return written

    def deduplicate_directory(self, directory: str,
                              output_dir: Optional[str] = None) -> List[WrittenPair]:
        """Deduplicate every '<name>.cds.fasta' / '<name>.pep.fasta' pair in a directory"""
        results = []
        for cds_path in sorted(glob.glob(os.path.join(directory, "*" + CDS_SUFFIX))):
            if cds_path.endswith(NR_TAG + CDS_SUFFIX):
                continue
            pep_path = cds_path[:-len(CDS_SUFFIX)] + PEP_SUFFIX
            if not os.path.exists(pep_path):
                self.logger.warning(f"No protein file next to {cds_path}; skipped")
                continue
            results.append(self.deduplicate(cds_path, pep_path, output_dir))
        return results
