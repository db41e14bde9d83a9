#!/usr/bin/env python3
"""
Per-sequence aggregate produced by the hit aggregator.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ribotyper.models.hit import Hit, Strand

Region = Tuple[int, int]
ModelStrand = Tuple[str, Strand]


@dataclass(frozen=True)
class FamilyRanking:
    """Best hit of a family and best competing hit of the same family"""
    one: Hit
    two: Optional[Hit] = None


@dataclass(frozen=True)
class SequenceAggregate:
    """Finalized statistics for one target sequence

    All maps are keyed by (model, strand). Hit counts and region lists
    only reflect hits at or above the score threshold; nucleotide
    counts include every hit.
    """
    target: str
    hit_counts: Dict[ModelStrand, int] = field(default_factory=dict)
    nt_counts: Dict[ModelStrand, int] = field(default_factory=dict)
    hits_above_threshold: int = 0
    model_regions: Dict[ModelStrand, Tuple[Optional[Region], ...]] = field(default_factory=dict)
    seq_regions: Dict[ModelStrand, Tuple[Region, ...]] = field(default_factory=dict)
    families: Dict[str, FamilyRanking] = field(default_factory=dict)

    @property
    def is_hitless(self) -> bool:
        return not self.families

    @property
    def family_names(self) -> List[str]:
        """Families with a best hit, in name order"""
        return sorted(self.families)

    def hit_count(self, model: str, strand: Strand) -> int:
        return self.hit_counts.get((model, strand), 0)

    def nt_count(self, model: str, strand: Strand) -> int:
        return self.nt_counts.get((model, strand), 0)

    def model_regions_for(self, model: str, strand: Strand) -> Tuple[Optional[Region], ...]:
        return self.model_regions.get((model, strand), ())

    def seq_regions_for(self, model: str, strand: Strand) -> Tuple[Region, ...]:
        return self.seq_regions.get((model, strand), ())
