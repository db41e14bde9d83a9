#!/usr/bin/env python3
"""
Canonical hit record shared by every search backend.

A Hit is one reported alignment of a sequence region to a model region.
Normalizers in ribotyper.processors produce Hits; the classification
pipeline consumes them.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from ribotyper.exceptions import InvalidIntervalError


class Strand(Enum):
    """Strand of a hit on the target sequence"""
    PLUS = "+"
    MINUS = "-"

    @property
    def opposite(self) -> 'Strand':
        return Strand.MINUS if self is Strand.PLUS else Strand.PLUS

    @property
    def label(self) -> str:
        """Long form used in output files ('plus' or 'minus')"""
        return "plus" if self is Strand.PLUS else "minus"

    @classmethod
    def from_coords(cls, seq_from: int, seq_to: int) -> 'Strand':
        return cls.PLUS if seq_from <= seq_to else cls.MINUS


@dataclass(frozen=True)
class Hit:
    """One search-tool hit, normalized to backend-independent fields"""
    target: str
    model: str
    family: str
    domain: str
    seq_from: int
    seq_to: int
    strand: Strand
    score: float
    evalue: Optional[float] = None
    model_from: Optional[int] = None  # None for backends without model coordinates
    model_to: Optional[int] = None

    def __post_init__(self):
        """Check that strand agrees with coordinate ordering"""
        # single-nucleotide hits are valid on either strand
        if self.seq_from != self.seq_to and Strand.from_coords(self.seq_from, self.seq_to) is not self.strand:
            raise InvalidIntervalError(
                f"Strand {self.strand.value} disagrees with coordinates {self.seq_from}..{self.seq_to} "
                f"for hit of {self.target} to {self.model}",
                {'target': self.target, 'model': self.model}
            )
        if (self.model_from is None) != (self.model_to is None):
            raise InvalidIntervalError(
                f"Incomplete model coordinates for hit of {self.target} to {self.model}"
            )

    @property
    def length(self) -> int:
        """Number of sequence positions covered by the hit"""
        return abs(self.seq_to - self.seq_from) + 1

    @property
    def seq_region(self) -> Tuple[int, int]:
        return (self.seq_from, self.seq_to)

    @property
    def model_region(self) -> Optional[Tuple[int, int]]:
        if self.model_from is None:
            return None
        return (self.model_from, self.model_to)

    @property
    def has_model_coords(self) -> bool:
        return self.model_from is not None
