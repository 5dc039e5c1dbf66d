#!/usr/bin/env python3
"""
Coding-region predictor wrappers: TransDecoder and ESTScan.
"""
import os
import logging
from typing import Optional

from orthocds.core.command_utils import run_command
from orthocds.core.file_utils import ensure_dir
from orthocds.models.transcript import PredictorVariant
from .base import CodingRegionPredictor, PredictionOutput, output_or_none

logger = logging.getLogger("orthocds.tools.predictors")


class TransDecoderPredictor(CodingRegionPredictor):
    """TransDecoder.LongOrfs followed by TransDecoder.Predict"""

    name = "transdecoder"
    variant = PredictorVariant.TRANSDECODER

    def __init__(self, longorfs_path: str = "TransDecoder.LongOrfs",
                 predict_path: str = "TransDecoder.Predict"):
        self.longorfs_path = longorfs_path
        self.predict_path = predict_path

    def predict(self, input_fasta: str, work_dir: str, stranded: bool = False,
                score_matrix: Optional[str] = None) -> Optional[PredictionOutput]:
        ensure_dir(work_dir)
        input_fasta = os.path.abspath(input_fasta)
        if score_matrix:
            logger.debug("TransDecoder does not use a score matrix; ignoring it")

        longorfs_cmd = [self.longorfs_path, "-t", input_fasta]
        if stranded:
            longorfs_cmd.append("-S")
        run_command(longorfs_cmd, cwd=work_dir)
        run_command([self.predict_path, "-t", input_fasta], cwd=work_dir)

        # TransDecoder names its outputs after the input file, in the cwd
        prefix = os.path.join(work_dir, os.path.basename(input_fasta) + ".transdecoder")
        cds_path = output_or_none(prefix + ".cds", self.name)
        pep_path = output_or_none(prefix + ".pep", self.name)
        if cds_path is None or pep_path is None:
            return None
        return PredictionOutput(cds_path=cds_path, pep_path=pep_path)


class ESTScanPredictor(CodingRegionPredictor):
    """ESTScan with nucleotide (-o) and translation (-t) outputs"""

    name = "estscan"
    variant = PredictorVariant.ESTSCAN

    def __init__(self, estscan_path: str = "estscan"):
        self.estscan_path = estscan_path

    def predict(self, input_fasta: str, work_dir: str, stranded: bool = False,
                score_matrix: Optional[str] = None) -> Optional[PredictionOutput]:
        ensure_dir(work_dir)
        stem = os.path.basename(input_fasta)
        cds_out = os.path.join(work_dir, f"{stem}.estscan.cds")
        pep_out = os.path.join(work_dir, f"{stem}.estscan.pep")

        cmd = [self.estscan_path]
        if score_matrix:
            cmd += ["-M", os.path.abspath(score_matrix)]
        cmd += ["-t", pep_out, "-o", cds_out, os.path.abspath(input_fasta)]
        run_command(cmd, cwd=work_dir)

        cds_path = output_or_none(cds_out, self.name)
        pep_path = output_or_none(pep_out, self.name)
        if cds_path is None or pep_path is None:
            return None
        return PredictionOutput(cds_path=cds_path, pep_path=pep_path)
