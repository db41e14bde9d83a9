#!/usr/bin/env python3
"""
Hit aggregation and classification pipeline
"""

from .ranking import HitRanker
from .aggregator import SequenceAggregator
from .classifier import SequenceClassifier
from .pipeline import ClassificationPipeline
from .summary import summarize_results

__all__ = [
    'HitRanker', 'SequenceAggregator', 'SequenceClassifier',
    'ClassificationPipeline', 'summarize_results',
]
