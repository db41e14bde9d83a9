#!/usr/bin/env python3
"""
Errors raised by ribotyper.

Everything derives from RiboError, which carries a ``details`` mapping
(file path, line, target name) alongside the message so callers can log
context without parsing the text.
"""
from typing import Dict, Any, Optional


class RiboError(Exception):
    """Base class for ribotyper errors"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = dict(details) if details else {}


class ConfigurationError(RiboError):
    """Bad configuration file, environment override or option value"""


class FileOperationError(RiboError):
    """An input or output file could not be opened or written"""


class ValidationError(RiboError):
    """Malformed input data"""


class InvalidIntervalError(ValidationError):
    """Two regions compared on different strands, or a malformed region"""


class DuplicateIntervalError(ValidationError):
    """Identical regions found where duplicates are not allowed"""


class MissingLookupError(ValidationError):
    """A hit references a model absent from the model info table"""


class OutOfOrderSequenceError(ValidationError):
    """A sequence reappears in the hit stream after it was finalized"""
