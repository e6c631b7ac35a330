"""Data models for pipeline execution tracking and reporting."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List

from app.domain.models import MatchResult, SkippedRecord
from app.utils.timestamps import format_utc


@dataclass
class MatchRunResult:
    """
    Results of matching one brand against the catalog.

    Attributes:
        run_id: Unique identifier of the run, also stamped on its log lines
        brand_id: Brand the run was for
        run_started_at: UTC timestamp when the run began
        run_finished_at: UTC timestamp when the run completed
        duration_seconds: Total time for the run
        total_candidates: Raw listings returned by the catalog provider
        normalized: Listings that normalized successfully
        skipped_invalid: Listings rejected during normalization or scoring
        skipped_unavailable: Listings dropped because they are not available
        below_threshold: Scored listings under the minimum score
        min_score_threshold: Threshold applied to this run
        results: Ranked match results
    """

    run_id: str
    brand_id: str
    run_started_at: datetime
    run_finished_at: datetime
    duration_seconds: float = 0.0
    total_candidates: int = 0
    normalized: int = 0
    skipped_invalid: List[SkippedRecord] = field(default_factory=list)
    skipped_unavailable: int = 0
    below_threshold: int = 0
    min_score_threshold: float = 60.0
    results: List[MatchResult] = field(default_factory=list)

    def __post_init__(self):
        """Compute duration if not set."""
        if self.duration_seconds == 0.0:
            delta = self.run_finished_at - self.run_started_at
            self.duration_seconds = delta.total_seconds()

    @property
    def matched(self) -> int:
        return len(self.results)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped_invalid) + self.skipped_unavailable

    def to_dict(self) -> Dict[str, Any]:
        """JSON-serializable view of the run."""
        return {
            "run_id": self.run_id,
            "brand_id": self.brand_id,
            "run_started_at": format_utc(self.run_started_at),
            "run_finished_at": format_utc(self.run_finished_at),
            "duration_ms": int(self.duration_seconds * 1000),
            "min_score_threshold": self.min_score_threshold,
            "counts": {
                "total_candidates": self.total_candidates,
                "normalized": self.normalized,
                "skipped_invalid": len(self.skipped_invalid),
                "skipped_unavailable": self.skipped_unavailable,
                "below_threshold": self.below_threshold,
                "matched": self.matched,
            },
            "skipped": [s.model_dump() for s in self.skipped_invalid],
            "results": [r.model_dump(mode="json") for r in self.results],
        }
