# ribotyper/pipelines/classification/ranking.py
"""
Hit comparison shared by family ranking and winner selection.
"""

from typing import Optional

from ribotyper.models.hit import Hit


class HitRanker:
    """Decides whether one hit outranks another

    With E-value ranking a lower E-value wins and equal E-values are
    broken by the higher score. Without it, the higher score wins.
    Equal rank never counts as better, so the incumbent is kept.
    """

    def __init__(self, use_evalues: bool = False, same_model: bool = False):
        self.use_evalues = use_evalues
        self.same_model = same_model

    def is_better(self, candidate: Hit, incumbent: Optional[Hit]) -> bool:
        if incumbent is None:
            return True

        if self.use_evalues and candidate.evalue is not None and incumbent.evalue is not None:
            if candidate.evalue < incumbent.evalue:
                return True
            return candidate.evalue == incumbent.evalue and candidate.score > incumbent.score

        return candidate.score > incumbent.score

    def discriminator(self, hit: Hit) -> str:
        """Value that must differ between a family's best and second-best hits"""
        return hit.model if self.same_model else hit.domain

    @property
    def competitor_label(self) -> str:
        """Plural noun for what the second-best hit competes on"""
        return "models" if self.same_model else "domains"
