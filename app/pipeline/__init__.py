"""Pipeline orchestration for loading, normalizing and matching one brand."""

from .models import MatchRunResult
from .runner import MatchPipeline

__all__ = [
    "MatchPipeline",
    "MatchRunResult",
]
