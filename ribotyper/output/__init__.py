#!/usr/bin/env python3
"""
Formatted short and long result files
"""

from .writer import ColumnWidths, ResultWriter

__all__ = ['ColumnWidths', 'ResultWriter']
