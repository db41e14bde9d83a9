#!/usr/bin/env python3
"""
Default configuration values for the ribotyper pipeline
"""

DEFAULT_CONFIG = {
    'search': {
        'method': 'cmsearch-fast',
    },
    'logging': {
        'level': 'INFO',
        'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    },
    'classification': {
        'min_score': 20.0,
        'low_ppos_score': 0.5,
        'total_coverage': 0.88,
        'low_ppos_diff': 0.10,
        'vlow_ppos_diff': 0.04,
        'absolute_diff': False,
        'low_abs_diff': 100.0,
        'vlow_abs_diff': 40.0,
        'max_overlap': 10,
        'use_evalues': False,
        'same_model': False,
        'minus_fail': False,
        'score_fail': False,
        'diff_fail': False,
        'cov_fail': False,
        'mult_fail': False,
    }
}
