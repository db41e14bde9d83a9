#!/usr/bin/env python3
"""
Ribotyper Classification Pipeline

A Python framework for classifying ribosomal RNA sequences from
tabular covariance-model, profile-HMM and alignment search results.
"""

__version__ = '0.2.0'
__author__ = 'Ribotyper Team'
__email__ = 'example@example.org'
__license__ = 'MIT'

# Import core modules for easier access
from .exceptions import RiboError
from .error_handlers import handle_exceptions
from .models.options import ClassificationOptions
from .pipelines.classification.pipeline import ClassificationPipeline

# Make key classes available at package level
__all__ = ['ClassificationOptions', 'ClassificationPipeline', 'RiboError', 'handle_exceptions']
