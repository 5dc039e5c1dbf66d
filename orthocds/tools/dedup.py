#!/usr/bin/env python3
"""
Identical-sequence removal with CD-HIT-EST.
"""
import logging
from typing import Optional

from orthocds.core.command_utils import run_command
from .base import SequenceDeduplicator, output_or_none

logger = logging.getLogger("orthocds.tools.dedup")


class CdHitDedup(SequenceDeduplicator):
    """cd-hit-est at identity 1.0; the representative choice is CD-HIT's"""

    IDENTITY = "1.0"

    def __init__(self, cdhit_path: str = "cd-hit-est", threads: int = 1):
        self.cdhit_path = cdhit_path
        self.threads = threads

    def dedup(self, fasta: str, output_path: str) -> Optional[str]:
        cmd = [
            self.cdhit_path,
            "-i", fasta,
            "-o", output_path,
            "-c", self.IDENTITY,
            "-d", "0",
            "-T", str(self.threads),
        ]
        run_command(cmd)
        return output_or_none(output_path, "cd-hit-est")
