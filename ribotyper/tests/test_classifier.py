#!/usr/bin/env python3
"""
Tests for rule-based sequence classification
"""

import pytest

from ribotyper.models.hit import Strand
from ribotyper.models.options import ClassificationOptions
from ribotyper.models.result import Verdict
from ribotyper.models.search import SearchMethod
from ribotyper.pipelines.classification.aggregator import SequenceAggregator
from ribotyper.pipelines.classification.classifier import SequenceClassifier
from ribotyper.pipelines.classification.ranking import HitRanker


@pytest.fixture
def classify(model_info):
    """Aggregate hits for one target and classify them"""
    def _classify(hits, length=100, options=None, method=SearchMethod.CMSEARCH_FAST, index=1):
        options = options or ClassificationOptions()
        ranker = HitRanker(options.use_evalues, options.same_model)
        aggregator = SequenceAggregator(hits[0].target if hits else "seq1", ranker)
        for hit in hits:
            aggregator.observe(hit, options.min_score)
        classifier = SequenceClassifier(options, model_info, method, ranker)
        return classifier.classify(aggregator.finalize(), index, length)
    return _classify


class TestBasicClassification:
    """Winner selection and result fields"""

    def test_clean_pass(self, classify, make_hit):
        result = classify([make_hit(seq_from=1, seq_to=100, score=80.0)])

        assert result.verdict is Verdict.PASS
        assert result.classification == "SSU.Bacteria"
        assert result.unexpected_features == "-"
        assert result.strand is Strand.PLUS
        assert result.n_hits == 1
        assert result.n_families == 1
        assert result.bits_per_nt == pytest.approx(0.8)
        assert result.total_coverage == pytest.approx(1.0)
        assert result.best_coverage == pytest.approx(1.0)
        assert result.second_model is None
        assert result.score_diff is None

    def test_hitless(self, classify):
        result = classify([])

        assert result.verdict is Verdict.FAIL
        assert result.unexpected_features == "*no_hits"
        assert result.classification == "-"
        assert not result.has_hits

    def test_hits_below_threshold_are_hitless(self, classify, make_hit):
        result = classify([make_hit(score=5.0)])
        assert result.unexpected_features == "*no_hits"

    def test_family_tie_goes_to_first_name(self, classify, make_hit):
        result = classify([
            make_hit(model="SSU_rRNA_bacteria", score=60.0),
            make_hit(model="LSU_rRNA_bacteria", score=60.0),
        ])
        assert result.family == "LSU"

    def test_classification_is_deterministic(self, classify, make_hit):
        hits = [
            make_hit(model="SSU_rRNA_bacteria", score=60.0),
            make_hit(model="SSU_rRNA_archaea", seq_from=3, seq_to=98, score=57.0),
        ]
        assert classify(hits) == classify(hits)

    def test_evalues_reported_only_when_ranking_by_them(self, classify, make_hit):
        hits = [make_hit(score=80.0, evalue=1e-30, model_from=1, model_to=100)]
        plain = classify(hits, method=SearchMethod.CMSEARCH_SLOW)
        ranked = classify(hits, method=SearchMethod.CMSEARCH_SLOW,
                          options=ClassificationOptions(use_evalues=True))

        assert plain.evalue is None
        assert ranked.evalue == pytest.approx(1e-30)


class TestStrictFailures:
    """Features that always fail a sequence"""

    def test_multiple_families(self, classify, make_hit):
        result = classify([
            make_hit(model="SSU_rRNA_bacteria", score=80.0),
            make_hit(model="LSU_rRNA_bacteria", score=60.0),
        ])

        assert result.verdict is Verdict.FAIL
        assert result.family == "SSU"
        assert result.unexpected_features == (
            "*hits_to_more_than_one_family(SSU+LSU);"
            "other_family_hits:LSU:LSU_rRNA_bacteria:60.0/1-100:+"
        )

    def test_multiple_families_with_evalues(self, classify, make_hit):
        result = classify([
            make_hit(model="SSU_rRNA_bacteria", score=80.0, evalue=1e-20, model_from=1, model_to=100),
            make_hit(model="LSU_rRNA_bacteria", score=60.0, evalue=1e-10, model_from=1, model_to=100),
        ], method=SearchMethod.CMSEARCH_SLOW, options=ClassificationOptions(use_evalues=True))

        assert result.features[0].tag == (
            "hits_to_more_than_one_family(SSU+LSU);"
            "other_family_hits:LSU:LSU_rRNA_bacteria:1e-10:60.0/1-100:+"
        )

    def test_both_strands_with_coverage(self, classify, make_hit):
        result = classify([
            make_hit(seq_from=1, seq_to=60, score=60.0),
            make_hit(seq_from=100, seq_to=70, score=30.0),
        ], method=SearchMethod.CMSEARCH_SLOW)

        assert result.verdict is Verdict.FAIL
        assert "hits_on_both_strands(+:1_hit(s)[60_nt];-:1_hit(s)[31_nt])" in result.feature_tags()
        assert result.n_hits == 2
        assert "multiple_hits_to_best_model(2)" in result.feature_tags()

    def test_both_strands_fast_mode(self, classify, make_hit):
        result = classify([
            make_hit(seq_from=1, seq_to=60, score=60.0),
            make_hit(seq_from=100, seq_to=70, score=30.0),
        ])
        assert "hits_on_both_strands(+:1_hit(s);-:1_hit(s))" in result.feature_tags()

    def test_duplicate_model_region(self, classify, make_hit):
        hits = [
            make_hit(seq_from=1, seq_to=41, model_from=10, model_to=50, score=40.0),
            make_hit(seq_from=50, seq_to=85, model_from=45, model_to=80, score=36.0),
        ]
        result = classify(hits, method=SearchMethod.CMSEARCH_SLOW,
                          options=ClassificationOptions(max_overlap=2))

        assert result.verdict is Verdict.FAIL
        assert result.features[0].render() == \
            "*duplicate_model_region:(45-50)_hits_1_and_2(10.50,45.80)"

    def test_overlap_within_tolerance(self, classify, make_hit):
        hits = [
            make_hit(seq_from=1, seq_to=41, model_from=10, model_to=50, score=40.0),
            make_hit(seq_from=50, seq_to=85, model_from=45, model_to=80, score=36.0),
        ]
        result = classify(hits, method=SearchMethod.CMSEARCH_SLOW)
        assert not any(tag.startswith("duplicate_model_region") for tag in result.feature_tags())

    def test_model_checks_skipped_in_fast_mode(self, classify, make_hit):
        hits = [
            make_hit(seq_from=1, seq_to=41, model_from=10, model_to=50, score=40.0),
            make_hit(seq_from=50, seq_to=85, model_from=45, model_to=80, score=36.0),
        ]
        result = classify(hits, options=ClassificationOptions(max_overlap=2))
        assert not any(tag.startswith("duplicate_model_region") for tag in result.feature_tags())

    def test_inconsistent_hit_order(self, classify, make_hit):
        hits = [
            make_hit(seq_from=1, seq_to=40, model_from=60, model_to=99, score=40.0),
            make_hit(seq_from=50, seq_to=90, model_from=1, model_to=41, score=35.0),
        ]
        result = classify(hits, method=SearchMethod.CMSEARCH_SLOW)

        assert result.verdict is Verdict.FAIL
        assert ("inconsistent_hit_order:seq_order(1,2[1.40,50.90]),"
                "mdl_order(2,1[60.99,1.41])") in result.feature_tags()

    def test_consistent_hit_order(self, classify, make_hit):
        hits = [
            make_hit(seq_from=1, seq_to=40, model_from=1, model_to=40, score=40.0),
            make_hit(seq_from=50, seq_to=90, model_from=50, model_to=90, score=35.0),
        ]
        result = classify(hits, method=SearchMethod.CMSEARCH_SLOW)
        assert not any(tag.startswith("inconsistent_hit_order") for tag in result.feature_tags())

    def test_swapped_identical_model_regions_not_out_of_order(self, classify, make_hit):
        hits = [
            make_hit(seq_from=50, seq_to=90, model_from=1, model_to=40, score=40.0),
            make_hit(seq_from=1, seq_to=40, model_from=1, model_to=40, score=35.0),
        ]
        result = classify(hits, method=SearchMethod.CMSEARCH_SLOW, options=ClassificationOptions(max_overlap=100))
        assert not any(tag.startswith("inconsistent_hit_order") for tag in result.feature_tags())

    def test_single_position_hit_on_minus_strand(self, classify, make_hit):
        hits = [
            make_hit(seq_from=90, seq_to=30, model_from=1, model_to=60, score=80.0),
            make_hit(seq_from=20, seq_to=20, model_from=70, model_to=70, score=25.0,
                     strand=Strand.MINUS),
        ]
        result = classify(hits, method=SearchMethod.CMSEARCH_SLOW)

        assert result.strand is Strand.MINUS
        assert result.n_hits == 2
        assert not any(tag.startswith("inconsistent_hit_order") for tag in result.feature_tags())
        assert not any(tag.startswith("hits_on_both_strands") for tag in result.feature_tags())

    def test_single_position_hit_out_of_order_on_minus_strand(self, classify, make_hit):
        hits = [
            make_hit(seq_from=90, seq_to=30, model_from=10, model_to=70, score=80.0),
            make_hit(seq_from=20, seq_to=20, model_from=1, model_to=1, score=25.0,
                     strand=Strand.MINUS),
        ]
        result = classify(hits, method=SearchMethod.CMSEARCH_SLOW)

        assert ("inconsistent_hit_order:seq_order(1,2[90.30,20.20]),"
                "mdl_order(2,1[10.70,1.1])") in result.feature_tags()

    def test_unacceptable_model(self, classify, make_hit, model_info):
        model_info.set_acceptable(["SSU_rRNA_archaea"])
        result = classify([make_hit(score=80.0)])

        assert result.verdict is Verdict.FAIL
        assert result.unexpected_features == "*unacceptable_model"


class TestOptionalFailures:
    """Features that fail a sequence only when enabled"""

    def test_opposite_strand(self, classify, make_hit):
        hit = make_hit(seq_from=100, seq_to=1, score=80.0)
        assert classify([hit]).unexpected_features == "opposite_strand"
        assert classify([hit]).verdict is Verdict.PASS

        failing = classify([hit], options=ClassificationOptions(minus_fail=True))
        assert failing.unexpected_features == "*opposite_strand"
        assert failing.verdict is Verdict.FAIL

    def test_low_score_per_position(self, classify, make_hit):
        result = classify([make_hit(score=30.0)])
        assert result.unexpected_features == "low_score_per_posn(0.30/0.50)"
        assert result.verdict is Verdict.PASS

        result = classify([make_hit(score=30.0)], options=ClassificationOptions(score_fail=True))
        assert result.verdict is Verdict.FAIL

    def test_low_total_coverage(self, classify, make_hit):
        result = classify([make_hit(seq_from=1, seq_to=50, score=50.0)])

        assert result.unexpected_features == "low_total_coverage(0.500/0.880)"
        assert result.verdict is Verdict.PASS

    def test_total_coverage_counts_sub_threshold_hits(self, classify, make_hit):
        result = classify([
            make_hit(seq_from=1, seq_to=50, score=50.0),
            make_hit(seq_from=51, seq_to=100, score=10.0),
        ])
        assert result.total_coverage == pytest.approx(1.0)
        assert result.best_coverage == pytest.approx(0.5)
        assert result.n_hits == 1

    def test_low_score_difference(self, classify, make_hit):
        result = classify([
            make_hit(model="SSU_rRNA_bacteria", seq_from=1, seq_to=101, score=100.0),
            make_hit(model="SSU_rRNA_archaea", seq_from=1, seq_to=101, score=95.0),
        ], length=101)

        assert result.unexpected_features == \
            "low_score_difference_between_top_two_domains(0.050/0.100_bits_per_posn)"
        assert result.second_model == "SSU_rRNA_archaea"
        assert result.score_diff == pytest.approx(5.0)
        assert result.verdict is Verdict.PASS

    def test_very_low_score_difference(self, classify, make_hit):
        result = classify([
            make_hit(model="SSU_rRNA_bacteria", seq_from=1, seq_to=101, score=100.0),
            make_hit(model="SSU_rRNA_archaea", seq_from=1, seq_to=101, score=98.0),
        ], length=101, options=ClassificationOptions(diff_fail=True))

        assert result.unexpected_features == \
            "*very_low_score_difference_between_top_two_domains(0.020/0.040_bits_per_posn)"
        assert result.verdict is Verdict.FAIL

    def test_absolute_score_difference(self, classify, make_hit):
        result = classify([
            make_hit(model="SSU_rRNA_bacteria", seq_from=1, seq_to=101, score=100.0),
            make_hit(model="SSU_rRNA_archaea", seq_from=1, seq_to=101, score=95.0),
        ], length=101, options=ClassificationOptions(absolute_diff=True))

        assert result.unexpected_features == \
            "very_low_score_difference_between_top_two_domains(5.000/40.000_total_bits)"

    def test_same_model_label(self, classify, make_hit):
        result = classify([
            make_hit(model="SSU_rRNA_bacteria", seq_from=1, seq_to=101, score=100.0),
            make_hit(model="SSU_rRNA_cyanobacteria", seq_from=1, seq_to=101, score=95.0),
        ], length=101, options=ClassificationOptions(same_model=True))

        assert result.unexpected_features == \
            "low_score_difference_between_top_two_models(0.050/0.100_bits_per_posn)"

    def test_large_score_difference_not_reported(self, classify, make_hit):
        result = classify([
            make_hit(model="SSU_rRNA_bacteria", seq_from=1, seq_to=101, score=100.0),
            make_hit(model="SSU_rRNA_archaea", seq_from=1, seq_to=101, score=60.0),
        ], length=101)

        assert result.unexpected_features == "-"
        assert result.score_diff == pytest.approx(40.0)

    def test_multiple_hits_to_best_model(self, classify, make_hit):
        hits = [
            make_hit(seq_from=1, seq_to=50, score=50.0),
            make_hit(seq_from=51, seq_to=100, score=45.0),
        ]
        result = classify(hits)
        assert result.unexpected_features == "multiple_hits_to_best_model(2)"
        assert result.verdict is Verdict.PASS

        result = classify(hits, options=ClassificationOptions(mult_fail=True))
        assert result.unexpected_features == "*multiple_hits_to_best_model(2)"
        assert result.verdict is Verdict.FAIL

    def test_feature_order(self, classify, make_hit):
        result = classify([
            make_hit(seq_from=40, seq_to=1, score=30.0),
            make_hit(seq_from=100, seq_to=70, score=25.0),
        ])
        assert [tag.split("(")[0] for tag in result.feature_tags()] == [
            "opposite_strand",
            "low_score_per_posn",
            "low_total_coverage",
            "multiple_hits_to_best_model",
        ]
