"""Brand-Fit-Index matching engine.

This module provides:
- ScoreCalculator: per-dimension sub-scores for a (requirement, property) pair
- Ranker: weighted aggregation, threshold filtering and deterministic ordering
- ReasonGenerator: templated explanation strings
- MatchingService: facade running the whole flow and reporting skip counts
"""

from .engine import MatchingService, match_properties_for_requirement
from .models import MatchReport
from .ranking import DEFAULT_MIN_SCORE_THRESHOLD, Ranker, ScoredProperty, overall_score
from .reasons import ReasonGenerator, ReasonTemplateError
from .scoring import ScoreCalculator, score_property

__all__ = [
    "MatchingService",
    "match_properties_for_requirement",
    "MatchReport",
    "DEFAULT_MIN_SCORE_THRESHOLD",
    "Ranker",
    "ScoredProperty",
    "overall_score",
    "ReasonGenerator",
    "ReasonTemplateError",
    "ScoreCalculator",
    "score_property",
]
