#!/usr/bin/env python3
"""
Exception hierarchy for the orthocds pipeline.
All custom exceptions should inherit from OrthoCDSError.
"""
from typing import Dict, Any, Optional


class OrthoCDSError(Exception):
    """Base exception for all orthocds errors"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """Initialize with error message and optional details

        Args:
            message: Error message
            details: Optional details dictionary with context
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConfigurationError(OrthoCDSError):
    """Error related to configuration issues"""
    pass


class FileOperationError(OrthoCDSError):
    """Error during file operations"""
    pass


class InputNotFoundError(FileOperationError):
    """A required input file is missing or empty"""
    pass


class OutputExistsError(FileOperationError):
    """The output directory of a run already exists"""
    pass


class ValidationError(OrthoCDSError):
    """Data validation error"""
    pass


class PipelineError(OrthoCDSError):
    """Error in pipeline processing"""
    pass


class PredictionError(PipelineError):
    """Coding-region prediction produced nothing usable"""
    pass


class StrandAmbiguityError(PipelineError):
    """Plus and minus strand buckets hold the same number of transcripts"""
    pass


class OrthogroupAbort(PipelineError):
    """A stage of the targeted assembly failed for a single orthogroup"""

    def __init__(self, orthogroup_id: str, stage: str, message: str,
                 details: Optional[Dict[str, Any]] = None):
        self.orthogroup_id = orthogroup_id
        self.stage = stage
        super().__init__(message, {'orthogroup': orthogroup_id, 'stage': stage, **(details or {})})


class StatisticsError(PipelineError):
    """Statistic requested over an empty set of values"""
    pass


class ToolError(OrthoCDSError):
    """External tool is not configured or not available"""
    pass
