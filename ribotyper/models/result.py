#!/usr/bin/env python3
"""
Classification result for a single sequence.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, List, Optional, Tuple

from ribotyper.models.hit import Strand


class Verdict(Enum):
    """Overall outcome for a sequence"""
    PASS = "PASS"
    FAIL = "FAIL"


@dataclass(frozen=True)
class Feature:
    """One unexpected feature, rendered as a tag in the output"""
    tag: str
    fails: bool = False

    def render(self) -> str:
        return f"*{self.tag}" if self.fails else self.tag


@dataclass(frozen=True)
class ClassificationResult:
    """Outcome of classifying one sequence

    Fields describing the best hit are None for sequences without hits.
    E-value fields are only populated when ranking by E-value.
    """
    target: str
    index: int
    length: int
    verdict: Verdict
    features: Tuple[Feature, ...] = field(default_factory=tuple)
    n_families: int = 0
    family: Optional[str] = None
    domain: Optional[str] = None
    model: Optional[str] = None
    strand: Optional[Strand] = None
    score: Optional[float] = None
    evalue: Optional[float] = None
    bits_per_nt: Optional[float] = None
    n_hits: int = 0
    total_coverage: Optional[float] = None
    best_coverage: Optional[float] = None
    best_start: Optional[int] = None
    best_stop: Optional[int] = None
    second_model: Optional[str] = None
    second_score: Optional[float] = None
    second_evalue: Optional[float] = None
    score_diff: Optional[float] = None

    @property
    def passed(self) -> bool:
        return self.verdict is Verdict.PASS

    @property
    def has_hits(self) -> bool:
        return self.family is not None

    @property
    def classification(self) -> str:
        """'family.domain' of the winning model, '-' without hits"""
        if not self.has_hits:
            return "-"
        return f"{self.family}.{self.domain}"

    @property
    def unexpected_features(self) -> str:
        """Semicolon-joined feature tags, '-' if there are none"""
        if not self.features:
            return "-"
        return ";".join(feature.render() for feature in self.features)

    def feature_tags(self) -> List[str]:
        return [feature.tag for feature in self.features]

    def to_dict(self) -> Dict[str, Any]:
        """Flat dictionary, suitable for building a DataFrame"""
        return {
            'index': self.index,
            'target': self.target,
            'length': self.length,
            'verdict': self.verdict.value,
            'classification': self.classification,
            'n_families': self.n_families,
            'family': self.family,
            'domain': self.domain,
            'model': self.model,
            'strand': self.strand.label if self.strand else None,
            'score': self.score,
            'evalue': self.evalue,
            'bits_per_nt': self.bits_per_nt,
            'n_hits': self.n_hits,
            'total_coverage': self.total_coverage,
            'best_coverage': self.best_coverage,
            'best_start': self.best_start,
            'best_stop': self.best_stop,
            'second_model': self.second_model,
            'second_score': self.second_score,
            'second_evalue': self.second_evalue,
            'score_diff': self.score_diff,
            'unexpected_features': self.unexpected_features,
        }
