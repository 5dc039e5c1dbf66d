#!/usr/bin/env python3
"""
Overlap assembly with CAP3.
"""
import logging

from orthocds.core.command_utils import run_command
from .base import ContigAssembler, AssemblyOutput, output_or_none

logger = logging.getLogger("orthocds.tools.assembly")


class Cap3Assembler(ContigAssembler):
    """CAP3; outputs land next to the input as .cap.contigs / .cap.singlets"""

    def __init__(self, cap3_path: str = "cap3"):
        self.cap3_path = cap3_path

    def assemble(self, contig_fasta: str, overlap_length: int,
                 percent_identity: int) -> AssemblyOutput:
        cmd = [
            self.cap3_path,
            contig_fasta,
            "-o", str(overlap_length),
            "-p", str(percent_identity),
        ]
        # CAP3 reports the alignments on stdout
        run_command(cmd, stdout_path=contig_fasta + ".cap.log")
        return AssemblyOutput(
            contigs_path=output_or_none(contig_fasta + ".cap.contigs", "cap3"),
            singletons_path=output_or_none(contig_fasta + ".cap.singlets", "cap3"),
        )
