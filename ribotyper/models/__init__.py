#!/usr/bin/env python3
"""
Ribotyper data models
"""

from .hit import Hit, Strand
from .search import SearchMethod
from .options import ClassificationOptions
from .aggregate import FamilyRanking, SequenceAggregate
from .result import Verdict, Feature, ClassificationResult

__all__ = [
    'Hit', 'Strand', 'SearchMethod', 'ClassificationOptions',
    'FamilyRanking', 'SequenceAggregate',
    'Verdict', 'Feature', 'ClassificationResult',
]
