#!/usr/bin/env python3
"""
Tool factory for the orthocds pipeline.
"""
import logging
from typing import Any, Dict, List, Optional

from orthocds.core.command_utils import check_tool_requirements
from orthocds.exceptions import ConfigurationError, ToolError, ValidationError
from orthocds.models.transcript import PredictorVariant
from .base import (
    CodingRegionPredictor, ProfileSearch, ContigAssembler,
    AlignmentAdder, AlignmentTrimmer, SequenceDeduplicator
)
from .predictors import TransDecoderPredictor, ESTScanPredictor
from .search import HmmSearch
from .assembly import Cap3Assembler
from .alignment import MafftAdd, TrimAl
from .dedup import CdHitDedup

logger = logging.getLogger("orthocds.tools.factory")


class ToolFactory:
    """Builds tool wrappers from the 'tools' configuration section"""

    def __init__(self, config: Dict[str, Any]):
        """Initialize with the full configuration dictionary"""
        self.config = config
        self.tools = config.get('tools', {})

    def _path(self, name: str, default: str) -> str:
        return self.tools.get(f"{name}_path") or default

    def create_predictor(self, method: Optional[str] = None) -> CodingRegionPredictor:
        """Predictor for a method name ('transdecoder' or 'estscan')

        Raises:
            ConfigurationError: If the method is unknown
        """
        method = method or self.config.get('prediction', {}).get('method', 'transdecoder')
        try:
            variant = PredictorVariant.from_name(method)
        except ValidationError as e:
            raise ConfigurationError(e.message) from e

        logger.debug(f"Creating predictor: {variant.value}")
        if variant == PredictorVariant.ESTSCAN:
            return ESTScanPredictor(self._path('estscan', 'estscan'))
        return TransDecoderPredictor(
            self._path('transdecoder_longorfs', 'TransDecoder.LongOrfs'),
            self._path('transdecoder_predict', 'TransDecoder.Predict'),
        )

    def create_profile_search(self) -> ProfileSearch:
        return HmmSearch(self._path('hmmsearch', 'hmmsearch'))

    def create_assembler(self) -> ContigAssembler:
        return Cap3Assembler(self._path('cap3', 'cap3'))

    def create_aligner(self) -> AlignmentAdder:
        return MafftAdd(self._path('mafft', 'mafft'))

    def create_trimmer(self) -> AlignmentTrimmer:
        return TrimAl(self._path('trimal', 'trimal'))

    def create_deduplicator(self) -> SequenceDeduplicator:
        return CdHitDedup(
            self._path('cdhit', 'cd-hit-est'),
            threads=self.config.get('targeted', {}).get('threads', 1),
        )

    def required_tools(self, method: Optional[str] = None, dedup: bool = False,
                       targeted: bool = False) -> List[str]:
        """Executables a run with these options needs"""
        method = (method or self.config.get('prediction', {}).get('method', 'transdecoder')).lower()
        if method == PredictorVariant.ESTSCAN.value:
            tools = [self._path('estscan', 'estscan')]
        else:
            tools = [self._path('transdecoder_longorfs', 'TransDecoder.LongOrfs'),
                     self._path('transdecoder_predict', 'TransDecoder.Predict')]
        if dedup:
            tools.append(self._path('cdhit', 'cd-hit-est'))
        if targeted:
            tools += [self._path('hmmsearch', 'hmmsearch'), self._path('cap3', 'cap3'),
                      self._path('mafft', 'mafft'), self._path('trimal', 'trimal')]
        return tools

    def check_requirements(self, method: Optional[str] = None, dedup: bool = False,
                           targeted: bool = False) -> None:
        """Raise ToolError naming every missing executable"""
        available, missing = check_tool_requirements(self.required_tools(method, dedup, targeted))
        if not available:
            raise ToolError(f"Required tools not found: {', '.join(missing)}", {"missing": missing})
