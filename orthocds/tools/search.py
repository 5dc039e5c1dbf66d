#!/usr/bin/env python3
"""
Profile search with HMMER's hmmsearch and parsing of its hit tables.
"""
import logging
from typing import List, Optional

from orthocds.core.command_utils import run_command
from orthocds.core.file_utils import has_content
from orthocds.exceptions import FileOperationError
from .base import ProfileSearch, output_or_none

logger = logging.getLogger("orthocds.tools.search")


class HmmSearch(ProfileSearch):
    """hmmsearch writing a per-target table (--tblout)"""

    def __init__(self, hmmsearch_path: str = "hmmsearch"):
        self.hmmsearch_path = hmmsearch_path

    def search(self, profile: str, protein_fasta: str, output_path: str,
               evalue: float, threads: int = 1) -> Optional[str]:
        cmd = [
            self.hmmsearch_path,
            "--noali",
            "--tblout", output_path,
            "-E", str(evalue),
            "--cpu", str(threads),
            "-o", output_path + ".log",
            profile,
            protein_fasta,
        ]
        run_command(cmd)
        return output_or_none(output_path, "hmmsearch")


def parse_hit_table(table_path: Optional[str]) -> List[str]:
    """Ranked, distinct sequence ids from a hit table

    Lines starting with '#' are comments; the first tab- or space-separated
    column is the sequence id. A missing or empty table has no hits.
    """
    if not has_content(table_path):
        return []

    hits: List[str] = []
    seen = set()
    try:
        with open(table_path, 'r') as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith('#'):
                    continue
                seq_id = line.split(None, 1)[0]
                if seq_id not in seen:
                    seen.add(seq_id)
                    hits.append(seq_id)
    except OSError as e:
        raise FileOperationError(f"Error reading hit table {table_path}: {str(e)}",
                                 {"file_path": table_path}) from e

    logger.debug(f"{len(hits)} hits in {table_path}")
    return hits
