# ribotyper/pipelines/classification/aggregator.py
"""
Streaming per-sequence hit aggregation.
"""

import logging
from collections import defaultdict
from typing import Dict, List, Optional

from ribotyper.exceptions import ValidationError
from ribotyper.models.hit import Hit
from ribotyper.models.aggregate import FamilyRanking, SequenceAggregate
from ribotyper.pipelines.classification.ranking import HitRanker


class SequenceAggregator:
    """Accumulates hits for one target sequence

    One aggregator is created per sequence. Hits are fed with observe()
    in input order and finalize() returns an immutable snapshot, after
    which the aggregator must not be used again.
    """

    def __init__(self, target: str, ranker: HitRanker):
        self.target = target
        self.ranker = ranker
        self.logger = logging.getLogger("ribotyper.pipelines.classification.aggregator")

        self._hit_counts: Dict[tuple, int] = defaultdict(int)
        self._nt_counts: Dict[tuple, int] = defaultdict(int)
        self._model_regions: Dict[tuple, List] = defaultdict(list)
        self._seq_regions: Dict[tuple, List] = defaultdict(list)
        self._hits_above_threshold = 0

        self._one: Dict[str, Hit] = {}
        self._two: Dict[str, Hit] = {}
        self._finalized = False

    @property
    def hits_above_threshold(self) -> int:
        return self._hits_above_threshold

    def observe(self, hit: Hit, min_score: Optional[float] = None) -> bool:
        """Add one hit to the running statistics

        Args:
            hit: Hit for this aggregator's target
            min_score: Hits scoring below this are only counted in
                nucleotide totals; None disables the threshold

        Returns:
            True if the hit was above threshold
        """
        if self._finalized:
            raise ValidationError(f"Aggregator for {self.target} already finalized")
        if hit.target != self.target:
            raise ValidationError(
                f"Hit for {hit.target} passed to aggregator for {self.target}",
                {'expected': self.target, 'found': hit.target}
            )

        key = (hit.model, hit.strand)

        # all hits count towards coverage, threshold or not
        self._nt_counts[key] += hit.length

        if min_score is not None and hit.score < min_score:
            return False

        self._hits_above_threshold += 1
        self._hit_counts[key] += 1
        self._model_regions[key].append(hit.model_region)
        self._seq_regions[key].append(hit.seq_region)

        self._rank(hit)
        return True

    def _rank(self, hit: Hit) -> None:
        """Update best and second-best hits for the hit's family"""
        family = hit.family
        one = self._one.get(family)
        disc = self.ranker.discriminator(hit)

        if self.ranker.is_better(hit, one):
            if one is not None and self.ranker.discriminator(one) != disc:
                self._two[family] = one
            self._one[family] = hit
        elif disc != self.ranker.discriminator(one):
            if self.ranker.is_better(hit, self._two.get(family)):
                self._two[family] = hit

    def finalize(self) -> SequenceAggregate:
        """Freeze the statistics into a SequenceAggregate"""
        self._finalized = True

        families = {
            family: FamilyRanking(one=one, two=self._two.get(family))
            for family, one in self._one.items()
        }

        aggregate = SequenceAggregate(
            target=self.target,
            hit_counts=dict(self._hit_counts),
            nt_counts=dict(self._nt_counts),
            hits_above_threshold=self._hits_above_threshold,
            model_regions={k: tuple(v) for k, v in self._model_regions.items()},
            seq_regions={k: tuple(v) for k, v in self._seq_regions.items()},
            families=families,
        )

        self.logger.debug(
            f"Finalized {self.target}: {self._hits_above_threshold} hits above threshold "
            f"in {len(families)} families"
        )
        return aggregate
