#!/usr/bin/env python3
"""
Run summary for the transcript cleaning pipeline
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass
class CleaningResult:
    """Counts and output files of one cleaning run"""
    transcripts_path: str
    output_dir: str
    method: str
    stranded: bool = False
    raw_predictions: int = 0
    reconciled: int = 0
    validated: int = 0
    rejected: int = 0
    written: int = 0
    deduplicated: Optional[int] = None
    output_files: Dict[str, str] = field(default_factory=dict)
    targeted: Optional[Any] = None
    start_time: datetime = field(default_factory=datetime.now)
    end_time: Optional[datetime] = None

    @property
    def processing_time(self) -> float:
        if not self.end_time:
            return 0.0
        return (self.end_time - self.start_time).total_seconds()

    def finalize(self) -> None:
        """Mark the run as complete"""
        self.end_time = datetime.now()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'transcripts': self.transcripts_path,
            'output_dir': self.output_dir,
            'method': self.method,
            'stranded': self.stranded,
            'raw_predictions': self.raw_predictions,
            'reconciled': self.reconciled,
            'validated': self.validated,
            'rejected': self.rejected,
            'written': self.written,
            'deduplicated': self.deduplicated,
            'output_files': dict(self.output_files),
            'targeted': self.targeted.to_dict() if self.targeted is not None else None,
            'processing_time': self.processing_time,
        }
