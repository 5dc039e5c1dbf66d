#!/usr/bin/env python3
"""
orthocds: transcriptome CDS/protein post-processing

Turns de novo assembled transcripts into validated, strand-consistent coding
sequences and translations, and reassembles target gene families against
reference orthogroup profiles and alignments.
"""

__version__ = '0.1.0'
__license__ = 'MIT'

# Import core modules for easier access
from .core.context import ApplicationContext
from .exceptions import OrthoCDSError
from .error_handlers import handle_exceptions

# Make key classes available at package level
__all__ = ['ApplicationContext', 'OrthoCDSError', 'handle_exceptions']
