#!/usr/bin/env python3
"""
Models for the targeted gene-family assembler
"""
from dataclasses import dataclass, field, fields
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from orthocds.exceptions import ConfigurationError
from orthocds.models.orthogroup import BackboneStats, RankedCandidate


class OrthogroupStatus(Enum):
    """Stage reached by an orthogroup"""
    PENDING = "pending"
    SEARCHING = "searching"
    EXTRACTING = "extracting"
    ASSEMBLING = "assembling"
    TRANSLATING = "translating"
    DEDUPLICATING = "deduplicating"
    RESEARCHING = "researching"
    ALIGNING = "aligning"
    SCORING = "scoring"
    DONE = "done"
    ABORTED = "aborted"


@dataclass
class TargetedConfig:
    """Settings for targeted assembly"""
    scaffold: str = "scaffold"
    method: str = "transdecoder"
    stranded: bool = False
    score_matrix: Optional[str] = None
    evalue: float = 1e-5
    strict_evalue: float = 1e-10
    overlap_length: int = 40
    percent_identity: int = 90
    gap_threshold: float = 0.1
    threads: int = 1
    max_workers: int = 1
    deduplicate: bool = False
    keep_intermediates: bool = False

    def validate(self) -> None:
        """Raise ConfigurationError on settings no run can use"""
        if not 0.0 <= float(self.gap_threshold) <= 1.0:
            raise ConfigurationError(
                f"Gap threshold must be between 0 and 1, got {self.gap_threshold}",
                {'gap_threshold': self.gap_threshold}
            )
        if self.max_workers < 1:
            raise ConfigurationError(f"max_workers must be at least 1, got {self.max_workers}")
        if not self.scaffold:
            raise ConfigurationError("A scaffold name is required for targeted assembly")

    @classmethod
    def from_config(cls, config: Dict[str, Any], **overrides) -> 'TargetedConfig':
        """Build from the 'targeted', 'prediction' and 'dedup' sections

        Keyword overrides whose value is None are ignored.
        """
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in config.get('targeted', {}).items() if k in known}

        prediction = config.get('prediction', {})
        values.setdefault('method', prediction.get('method', cls.method))
        values.setdefault('stranded', prediction.get('stranded', cls.stranded))
        values.setdefault('score_matrix', prediction.get('score_matrix') or None)
        values.setdefault('deduplicate', config.get('dedup', {}).get('enabled', cls.deduplicate))

        values.update({k: v for k, v in overrides.items() if v is not None and k in known})
        return cls(**values)


@dataclass
class OrthogroupResult:
    """Outcome of targeted assembly for one orthogroup"""
    orthogroup_id: str
    status: OrthogroupStatus = OrthogroupStatus.PENDING
    failed_stage: Optional[OrthogroupStatus] = None
    error: Optional[str] = None
    candidates: List[RankedCandidate] = field(default_factory=list)
    backbone: Optional[BackboneStats] = None
    output_files: Dict[str, str] = field(default_factory=dict)
    processing_time: float = 0.0

    @property
    def success(self) -> bool:
        return self.status == OrthogroupStatus.DONE

    def to_dict(self) -> Dict[str, Any]:
        return {
            'orthogroup': self.orthogroup_id,
            'status': self.status.value,
            'failed_stage': self.failed_stage.value if self.failed_stage else None,
            'error': self.error,
            'candidates': [
                {'seq_id': c.seq_id, 'cov': c.coverage.coverage, 'len': c.coverage.length}
                for c in self.candidates
            ],
            'backbone_sequences': self.backbone.count if self.backbone else 0,
            'output_files': dict(self.output_files),
            'processing_time': self.processing_time,
        }


@dataclass
class TargetedRunResult:
    """Results of targeted assembly over all orthogroups"""
    total: int = 0
    done: int = 0
    aborted: int = 0
    results: List[OrthogroupResult] = field(default_factory=list)
    start_time: datetime = field(default_factory=datetime.now)
    end_time: Optional[datetime] = None

    @property
    def success_rate(self) -> float:
        if self.total == 0:
            return 0.0
        return (self.done / self.total) * 100

    @property
    def processing_time(self) -> float:
        if not self.end_time:
            return 0.0
        return (self.end_time - self.start_time).total_seconds()

    def add_result(self, result: OrthogroupResult):
        """Add an orthogroup result"""
        self.results.append(result)
        if result.success:
            self.done += 1
        else:
            self.aborted += 1

    def get(self, orthogroup_id: str) -> Optional[OrthogroupResult]:
        for result in self.results:
            if result.orthogroup_id == orthogroup_id:
                return result
        return None

    def finalize(self):
        """Mark processing as complete"""
        self.end_time = datetime.now()
        self.total = len(self.results)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total': self.total,
            'done': self.done,
            'aborted': self.aborted,
            'success_rate': self.success_rate,
            'processing_time': self.processing_time,
            'orthogroups': [r.to_dict() for r in self.results],
        }
