#!/usr/bin/env python3
"""
Alignment insertion with MAFFT and column trimming with trimAl.
"""
import logging
from typing import Optional

from orthocds.core.command_utils import run_command
from .base import AlignmentAdder, AlignmentTrimmer, output_or_none

logger = logging.getLogger("orthocds.tools.alignment")


class MafftAdd(AlignmentAdder):
    """mafft --add with --keeplength so reference columns are preserved"""

    def __init__(self, mafft_path: str = "mafft"):
        self.mafft_path = mafft_path

    def add(self, new_sequences: str, reference_alignment: str, output_path: str,
            threads: int = 1) -> Optional[str]:
        cmd = [
            self.mafft_path,
            "--quiet",
            "--thread", str(threads),
            "--add", new_sequences,
            "--keeplength",
            reference_alignment,
        ]
        run_command(cmd, stdout_path=output_path)
        return output_or_none(output_path, "mafft")


class TrimAl(AlignmentTrimmer):
    """trimAl with a gap threshold (-gt)"""

    def __init__(self, trimal_path: str = "trimal"):
        self.trimal_path = trimal_path

    def trim(self, alignment: str, output_path: str, gap_threshold: float) -> Optional[str]:
        cmd = [
            self.trimal_path,
            "-in", alignment,
            "-out", output_path,
            "-gt", str(gap_threshold),
        ]
        run_command(cmd)
        return output_or_none(output_path, "trimal")
