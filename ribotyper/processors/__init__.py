#!/usr/bin/env python3
"""
Normalizers for search-tool tabular output
"""

from .tblout import (
    HitParser, FastCMParser, CMParser, NhmmerParser, SSUAlignParser,
    get_hit_parser, load_sorted_hits
)

__all__ = [
    'HitParser', 'FastCMParser', 'CMParser', 'NhmmerParser', 'SSUAlignParser',
    'get_hit_parser', 'load_sorted_hits',
]
