"""
Targeted gene-family assembly against reference orthogroups
"""
from .models import OrthogroupStatus, TargetedConfig, OrthogroupResult, TargetedRunResult
from .service import TargetedAssembler, WORK_SUBDIR
from .workspace import OrthogroupWorkspace

__all__ = [
    'OrthogroupStatus', 'TargetedConfig', 'OrthogroupResult', 'TargetedRunResult',
    'TargetedAssembler', 'WORK_SUBDIR', 'OrthogroupWorkspace'
]
