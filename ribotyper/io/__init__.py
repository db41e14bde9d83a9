#!/usr/bin/env python3
"""
Readers for lookup tables and sequence lengths
"""

from .model_info import ModelInfo, parse_model_info_file, parse_accept_file, read_model_names
from .sequences import SequenceUniverse, parse_seqstat_file, read_fasta_lengths

__all__ = [
    'ModelInfo', 'parse_model_info_file', 'parse_accept_file', 'read_model_names',
    'SequenceUniverse', 'parse_seqstat_file', 'read_fasta_lengths',
]
