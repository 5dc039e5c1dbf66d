#!/usr/bin/env python3
"""
Default configuration values for the orthocds pipeline
"""

DEFAULT_CONFIG = {
    'tools': {
        'transdecoder_longorfs_path': 'TransDecoder.LongOrfs',
        'transdecoder_predict_path': 'TransDecoder.Predict',
        'estscan_path': 'estscan',
        'hmmsearch_path': 'hmmsearch',
        'cap3_path': 'cap3',
        'mafft_path': 'mafft',
        'trimal_path': 'trimal',
        'cdhit_path': 'cd-hit-est',
    },
    'prediction': {
        'method': 'transdecoder',
        'stranded': False,
        'score_matrix': '',
        'min_length': 0,
    },
    'dedup': {
        'enabled': False,
    },
    'targeted': {
        'scaffold': 'scaffold',
        'evalue': 1e-5,
        'strict_evalue': 1e-10,
        'overlap_length': 40,
        'percent_identity': 90,
        'gap_threshold': 0.1,
        'threads': 1,
        'max_workers': 1,
        'keep_intermediates': False,
    },
    'logging': {
        'level': 'INFO',
        'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        'tool_level': 'INFO',
    },
}
