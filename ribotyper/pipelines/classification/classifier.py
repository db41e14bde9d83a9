# ribotyper/pipelines/classification/classifier.py
"""
Rule-based classification of finalized sequence aggregates.

Rules are applied in a fixed order and each one that fires adds a
Feature. Strict rules always fail the sequence; optional rules fail it
only when the matching option is enabled.
"""

import logging
from typing import List, Optional

from ribotyper.models.aggregate import SequenceAggregate
from ribotyper.models.hit import Hit, Strand
from ribotyper.models.options import ClassificationOptions
from ribotyper.models.result import ClassificationResult, Feature, Verdict
from ribotyper.models.search import SearchMethod
from ribotyper.pipelines.classification.ranking import HitRanker
from ribotyper.utils.range_utils import get_overlap, sort_regions, format_region, format_span


class SequenceClassifier:
    """Turns a SequenceAggregate into a ClassificationResult"""

    def __init__(self, options: ClassificationOptions, model_info,
                 method: SearchMethod, ranker: Optional[HitRanker] = None):
        """Initialize classifier

        Args:
            options: Thresholds and failure toggles
            model_info: ModelInfo providing model acceptability
            method: Search backend, determines which checks are possible
            ranker: Hit comparator, built from options if not given
        """
        self.options = options
        self.model_info = model_info
        self.method = method
        self.ranker = ranker or HitRanker(options.use_evalues, options.same_model)
        self.logger = logging.getLogger("ribotyper.pipelines.classification.classifier")

    def select_winner(self, aggregate: SequenceAggregate) -> str:
        """Family whose best hit ranks highest, ties going to the first name"""
        winner = None
        for family in aggregate.family_names:
            if winner is None or self.ranker.is_better(aggregate.families[family].one,
                                                       aggregate.families[winner].one):
                winner = family
        return winner

    def classify_hitless(self, target: str, index: int, length: int) -> ClassificationResult:
        """Result for a sequence with no hits above threshold"""
        self.logger.debug(f"{target}: no hits")
        return ClassificationResult(
            target=target,
            index=index,
            length=length,
            verdict=Verdict.FAIL,
            features=(Feature("no_hits", fails=True),),
        )

    def classify(self, aggregate: SequenceAggregate, index: int, length: int) -> ClassificationResult:
        """Apply every rule to one sequence

        Args:
            aggregate: Finalized aggregate for the sequence
            index: 1-based index of the sequence in the input
            length: Sequence length in nucleotides

        Returns:
            ClassificationResult
        """
        if aggregate.is_hitless:
            return self.classify_hitless(aggregate.target, index, length)

        opts = self.options
        family = self.select_winner(aggregate)
        ranking = aggregate.families[family]
        one, two = ranking.one, ranking.two

        same_strand_hits = aggregate.hit_count(one.model, one.strand)
        other_strand_hits = aggregate.hit_count(one.model, one.strand.opposite)
        n_hits = same_strand_hits + other_strand_hits

        best_coverage = one.length / length
        total_coverage = aggregate.nt_count(one.model, one.strand) / length
        bits_per_nt = one.score / length

        features: List[Feature] = []

        # strict failures
        if len(aggregate.families) > 1:
            features.append(Feature(self._multiple_families_tag(aggregate, family), fails=True))

        if other_strand_hits > 0:
            features.append(Feature(self._both_strands_tag(aggregate, one), fails=True))

        if self.method.reports_model_coords:
            mdl_regions = aggregate.model_regions_for(one.model, one.strand)
            seq_regions = aggregate.seq_regions_for(one.model, one.strand)
            if all(region is not None for region in mdl_regions):
                tag = self._duplicate_region_tag(mdl_regions)
                if tag:
                    features.append(Feature(tag, fails=True))
                if len(mdl_regions) > 1:
                    tag = self._hit_order_tag(seq_regions, mdl_regions, one.strand)
                    if tag:
                        features.append(Feature(tag, fails=True))

        # optional failures
        if not self.model_info.is_acceptable(one.model):
            features.append(Feature("unacceptable_model", fails=True))

        if one.strand is Strand.MINUS:
            features.append(Feature("opposite_strand", fails=opts.minus_fail))

        if bits_per_nt < opts.low_ppos_score:
            features.append(Feature(
                "low_score_per_posn(%.2f/%.2f)" % (bits_per_nt, opts.low_ppos_score),
                fails=opts.score_fail))

        if total_coverage < opts.total_coverage:
            features.append(Feature(
                "low_total_coverage(%.3f/%.3f)" % (total_coverage, opts.total_coverage),
                fails=opts.cov_fail))

        score_diff = None
        if two is not None:
            score_diff = one.score - two.score
            feature = self._score_difference_feature(one, score_diff)
            if feature:
                features.append(feature)

        if n_hits > 1:
            features.append(Feature(f"multiple_hits_to_best_model({n_hits})", fails=opts.mult_fail))

        verdict = Verdict.FAIL if any(f.fails for f in features) else Verdict.PASS

        result = ClassificationResult(
            target=aggregate.target,
            index=index,
            length=length,
            verdict=verdict,
            features=tuple(features),
            n_families=len(aggregate.families),
            family=family,
            domain=one.domain,
            model=one.model,
            strand=one.strand,
            score=one.score,
            evalue=one.evalue if opts.use_evalues else None,
            bits_per_nt=bits_per_nt,
            n_hits=n_hits,
            total_coverage=total_coverage,
            best_coverage=best_coverage,
            best_start=one.seq_from,
            best_stop=one.seq_to,
            second_model=two.model if two else None,
            second_score=two.score if two else None,
            second_evalue=two.evalue if (two and opts.use_evalues) else None,
            score_diff=score_diff,
        )

        self.logger.debug(f"{aggregate.target}: {result.classification} {verdict.value} {result.unexpected_features}")
        return result

    def _render_other_family(self, family: str, hit: Hit) -> str:
        if self.options.use_evalues and hit.evalue is not None:
            return "%s:%s:%g:%.1f/%d-%d:%s" % (family, hit.model, hit.evalue, hit.score,
                                               hit.seq_from, hit.seq_to, hit.strand.value)
        return "%s:%s:%.1f/%d-%d:%s" % (family, hit.model, hit.score,
                                        hit.seq_from, hit.seq_to, hit.strand.value)

    def _multiple_families_tag(self, aggregate: SequenceAggregate, winner: str) -> str:
        others = [f for f in aggregate.family_names if f != winner]
        rendered = [self._render_other_family(f, aggregate.families[f].one) for f in others]
        return "hits_to_more_than_one_family({});other_family_hits:{}".format(
            "+".join([winner] + others), ",".join(rendered))

    def _both_strands_tag(self, aggregate: SequenceAggregate, one: Hit) -> str:
        parts = []
        for strand in (one.strand, one.strand.opposite):
            part = f"{strand.value}:{aggregate.hit_count(one.model, strand)}_hit(s)"
            if self.method.reports_accurate_coverage:
                part += f"[{aggregate.nt_count(one.model, strand)}_nt]"
            parts.append(part)
        return "hits_on_both_strands({})".format(";".join(parts))

    def _duplicate_region_tag(self, regions) -> Optional[str]:
        """Pairs of hits sharing more than max_overlap model positions"""
        pieces = []
        for i in range(len(regions)):
            for j in range(i + 1, len(regions)):
                noverlap, span = get_overlap(regions[i], regions[j])
                if noverlap > self.options.max_overlap:
                    pieces.append(f"({format_span(span)})_hits_{i + 1}_and_{j + 1}"
                                  f"({format_region(regions[i])},{format_region(regions[j])})")
        if not pieces:
            return None
        return "duplicate_model_region:" + ",".join(pieces)

    def _hit_order_tag(self, seq_regions, mdl_regions, strand: Strand) -> Optional[str]:
        """Hits whose order along the sequence disagrees with the model"""
        seq_order, seq_order_str = sort_regions(seq_regions, allow_duplicates=False, strand=strand.value)
        mdl_order, mdl_order_str = sort_regions(mdl_regions, allow_duplicates=True)

        # a swapped pair is fine if the two model regions are identical
        out_of_order = any(
            x != y and mdl_regions[x - 1] != mdl_regions[y - 1]
            for x, y in zip(mdl_order, seq_order)
        )
        if not out_of_order:
            return None

        return "inconsistent_hit_order:seq_order({}[{}]),mdl_order({}[{}])".format(
            seq_order_str, ",".join(format_region(r) for r in seq_regions),
            mdl_order_str, ",".join(format_region(r) for r in mdl_regions))

    def _score_difference_feature(self, one: Hit, score_diff: float) -> Optional[Feature]:
        opts = self.options
        if opts.absolute_diff:
            diff = score_diff
            units = "total_bits"
        else:
            diff = score_diff / (abs(one.seq_to - one.seq_from) or 1)
            units = "bits_per_posn"

        if diff < opts.vlow_diff_threshold:
            level, threshold = "very_low", opts.vlow_diff_threshold
        elif diff < opts.low_diff_threshold:
            level, threshold = "low", opts.low_diff_threshold
        else:
            return None

        tag = "%s_score_difference_between_top_two_%s(%.3f/%.3f_%s)" % (
            level, self.ranker.competitor_label, diff, threshold, units)
        return Feature(tag, fails=opts.diff_fail)
