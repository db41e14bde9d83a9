# ribotyper/pipelines/classification/pipeline.py
"""
Streaming driver: sorted hits in, one ClassificationResult per sequence out.
"""

import logging
from typing import Iterable, Iterator, List, Optional, Set

from ribotyper.error_handlers import log_exception
from ribotyper.exceptions import ConfigurationError, OutOfOrderSequenceError, ValidationError
from ribotyper.models.hit import Hit
from ribotyper.models.options import ClassificationOptions
from ribotyper.models.result import ClassificationResult
from ribotyper.models.search import SearchMethod
from ribotyper.pipelines.classification.aggregator import SequenceAggregator
from ribotyper.pipelines.classification.classifier import SequenceClassifier
from ribotyper.pipelines.classification.ranking import HitRanker


class ClassificationPipeline:
    """Aggregates a target-sorted hit stream and classifies every sequence"""

    def __init__(self, options: ClassificationOptions, model_info,
                 method: SearchMethod = SearchMethod.CMSEARCH_FAST):
        """Initialize pipeline

        Args:
            options: Classification thresholds and toggles
            model_info: ModelInfo lookup table
            method: Search backend that produced the hits

        Raises:
            ConfigurationError: If the options are invalid or E-value
                ranking is requested for a backend without E-values
        """
        self.logger = logging.getLogger("ribotyper.pipelines.classification")

        options.validate()
        if options.use_evalues and not method.reports_evalues:
            raise ConfigurationError(
                f"E-value ranking requested but {method.value} output has no E-values",
                {'method': method.value}
            )

        self.options = options
        self.model_info = model_info
        self.method = method
        self.ranker = HitRanker(options.use_evalues, options.same_model)
        self.classifier = SequenceClassifier(options, model_info, method, self.ranker)

    def iter_results(self, hits: Iterable[Hit], universe) -> Iterator[ClassificationResult]:
        """Classify sequences as their hits are consumed

        Results for sequences with hits are yielded in stream order, then
        results for sequences without any hits in universe order.

        Args:
            hits: Hits with all records of a target contiguous
            universe: SequenceUniverse with index and length of every sequence

        Yields:
            ClassificationResult per sequence in the universe

        Raises:
            OutOfOrderSequenceError: If a target reappears after its hits ended
            ValidationError: If a hit's target is not in the universe
        """
        finalized: Set[str] = set()
        current: Optional[SequenceAggregator] = None
        n_hits = 0

        for hit in hits:
            n_hits += 1
            if current is None or hit.target != current.target:
                if current is not None:
                    finalized.add(current.target)
                    yield self._classify(current, universe)

                if hit.target in finalized:
                    error = OutOfOrderSequenceError(
                        f"Found hit for {hit.target} after its hits were processed, "
                        f"is the input sorted by sequence name?",
                        {'target': hit.target}
                    )
                    log_exception(self.logger, error, context={'hits_read': n_hits})
                    raise error
                if hit.target not in universe:
                    error = ValidationError(
                        f"Found sequence {hit.target} with no length information",
                        {'target': hit.target}
                    )
                    log_exception(self.logger, error)
                    raise error
                current = SequenceAggregator(hit.target, self.ranker)

            current.observe(hit, self.options.min_score)

        if current is not None:
            finalized.add(current.target)
            yield self._classify(current, universe)

        self.logger.info(f"Processed {n_hits} hits for {len(finalized)} sequences")

        for name, index, length in universe:
            if name not in finalized:
                yield self.classifier.classify_hitless(name, index, length)

    def run(self, hits: Iterable[Hit], universe) -> List[ClassificationResult]:
        """Classify every sequence, returning results in input sequence order"""
        results = sorted(self.iter_results(hits, universe), key=lambda r: r.index)
        n_pass = sum(1 for r in results if r.passed)
        self.logger.info(f"Classified {len(results)} sequences: {n_pass} PASS, {len(results) - n_pass} FAIL")
        return results

    def _classify(self, aggregator: SequenceAggregator, universe) -> ClassificationResult:
        aggregate = aggregator.finalize()
        return self.classifier.classify(
            aggregate,
            universe.index_of(aggregate.target),
            universe.length_of(aggregate.target),
        )
