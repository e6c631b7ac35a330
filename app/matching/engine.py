"""Matching engine facade for scoring a property catalog against one brand.

This module implements the matching flow that:
1. Drops unavailable properties
2. Scores every remaining property (optionally across worker threads)
3. Skips and counts malformed records instead of scoring them as 0
4. Aggregates, filters by threshold and ranks deterministically
5. Attaches explanation strings to every surviving result
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional, Union

from app.config.models import MatchingConfig
from app.domain.exceptions import InvalidRecordError, ValidationError
from app.domain.models import BrandRequirement, MatchResult, PropertyRecord, SkippedRecord
from app.logging import get_logger
from app.logging.context import bind_log_context

from .models import MatchReport
from .ranking import DEFAULT_MIN_SCORE_THRESHOLD, Ranker, ScoredProperty, validate_threshold
from .reasons import ReasonGenerator
from .scoring import ScoreCalculator

logger = get_logger(__name__, component="matching")


class MatchingService:
    """Scores, ranks and explains properties for a brand requirement.

    Responsibilities:
    - Validate the score threshold
    - Run the ScoreCalculator per available property
    - Log and count records that fail scoring
    - Rank through the Ranker and explain through the ReasonGenerator

    The service keeps no state between calls; one instance can be reused for
    any number of requirements.
    """

    def __init__(
        self,
        settings: Optional[MatchingConfig] = None,
        max_workers: Optional[int] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize MatchingService.

        Args:
            settings: Matching settings (defaults to MatchingConfig())
            max_workers: Override for settings.max_workers
            logger_instance: Logger instance (defaults to module logger)
        """
        self.settings = settings or MatchingConfig()
        self.max_workers = max_workers or self.settings.max_workers
        self.logger = logger_instance or logger

        self.calculator = ScoreCalculator(self.settings.secondary_location_score)
        self.reasons = ReasonGenerator(
            strong_match_score=self.settings.strong_match_score,
            moderate_match_score=self.settings.moderate_match_score,
            max_reasons=self.settings.max_reasons,
        )

    def evaluate(
        self,
        requirement: BrandRequirement,
        properties: Iterable[PropertyRecord],
        min_score_threshold: Optional[float] = None,
    ) -> MatchReport:
        """Evaluate a catalog against one requirement.

        Args:
            requirement: Normalized brand requirement
            properties: Normalized property records, in any order
            min_score_threshold: Minimum overall score (defaults to configuration)

        Returns:
            MatchReport with ranked results and skip counts

        Raises:
            ValidationError: If the requirement or threshold is malformed
        """
        if not isinstance(requirement, BrandRequirement):
            raise ValidationError(
                "Invalid brand requirement",
                [f"expected a BrandRequirement, got {type(requirement).__name__}"],
            )
        if min_score_threshold is None:
            min_score_threshold = self.settings.min_score_threshold
        ranker = Ranker(validate_threshold(min_score_threshold))

        available, unavailable = ranker.split_available(list(properties or []))

        scored: List[ScoredProperty] = []
        skipped: List[SkippedRecord] = []
        for outcome in self._score_all(requirement, available):
            if isinstance(outcome, SkippedRecord):
                skipped.append(outcome)
            else:
                scored.append(outcome)

        kept, below = ranker.rank(scored)
        results = [
            MatchResult(
                property_id=item.property_id,
                overall_score=item.overall_score,
                breakdown=item.breakdown,
                reasons=self.reasons.generate(requirement, item.record, item.breakdown),
            )
            for item in kept
        ]

        report = MatchReport(
            results=results,
            evaluated=len(scored),
            skipped_unavailable=unavailable,
            skipped_invalid=skipped,
            below_threshold=below,
            min_score_threshold=ranker.min_score_threshold,
        )

        self.logger.info(
            f"Matched {report.matched} properties for {requirement.id}",
            extra={
                "event": "matching.run.completed",
                "requirement_id": requirement.id,
                "evaluated": report.evaluated,
                "matched": report.matched,
                "below_threshold": report.below_threshold,
                "skipped_unavailable": report.skipped_unavailable,
                "skipped_invalid": len(report.skipped_invalid),
                "min_score_threshold": report.min_score_threshold,
            },
        )

        return report

    def match_properties_for_requirement(
        self,
        requirement: BrandRequirement,
        properties: Iterable[PropertyRecord],
        min_score_threshold: Optional[float] = None,
    ) -> List[MatchResult]:
        """Return the ranked, explained results for one requirement.

        An empty list means no property qualified; malformed input raises.
        """
        return self.evaluate(requirement, properties, min_score_threshold).results

    def _score_all(
        self, requirement: BrandRequirement, properties: List[PropertyRecord]
    ) -> List[Union[ScoredProperty, SkippedRecord]]:
        """Score properties, fanning out to threads for large catalogs.

        Results come back in input order on both paths.
        """
        def score_one(prop: PropertyRecord) -> Union[ScoredProperty, SkippedRecord]:
            return self._score_one(requirement, prop)

        if self.max_workers > 1 and len(properties) >= self.settings.parallel_threshold:
            self.logger.debug(
                "Scoring catalog in parallel",
                extra={
                    "event": "matching.scoring.parallel",
                    "workers": self.max_workers,
                    "properties": len(properties),
                },
            )
            with ThreadPoolExecutor(
                max_workers=self.max_workers, thread_name_prefix="bfi-score"
            ) as executor:
                return list(executor.map(bind_log_context(score_one), properties))

        return [score_one(prop) for prop in properties]

    def _score_one(
        self, requirement: BrandRequirement, prop: PropertyRecord
    ) -> Union[ScoredProperty, SkippedRecord]:
        try:
            breakdown = self.calculator.score(requirement, prop)
        except InvalidRecordError as e:
            record_id = e.record_id or getattr(prop, "id", None)
            self.logger.warning(
                f"Skipping invalid property: {e}",
                extra={"event": "matching.record.skipped", "record_id": record_id},
            )
            return SkippedRecord(record_id=record_id, reason=str(e))
        return Ranker.aggregate(requirement, prop, breakdown)


def match_properties_for_requirement(
    requirement: BrandRequirement,
    properties: Iterable[PropertyRecord],
    min_score_threshold: float = DEFAULT_MIN_SCORE_THRESHOLD,
) -> List[MatchResult]:
    """Rank properties for a requirement using default settings.

    Args:
        requirement: Normalized brand requirement
        properties: Normalized property records
        min_score_threshold: Minimum overall score, in [0, 100]

    Returns:
        Results with overall_score >= min_score_threshold, best first

    Raises:
        ValidationError: If the requirement or threshold is malformed

    Example:
        >>> results = match_properties_for_requirement(requirement, catalog, 60)
        >>> [r.property_id for r in results]
        ['prop-101', 'prop-204']
    """
    return MatchingService().match_properties_for_requirement(
        requirement, properties, min_score_threshold
    )
