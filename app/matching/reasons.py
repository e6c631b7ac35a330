"""Explanation strings for match results, rendered with Jinja2.

Dimensions are examined in a fixed priority order. Each dimension scoring at
or above the moderate threshold contributes one sentence: strong phrasing at
or above the strong threshold, moderate phrasing below it. The list is capped
while preserving priority order.
"""

from typing import Dict, List, Optional, Tuple

from jinja2 import DictLoader, Environment, StrictUndefined, TemplateError

from app.domain.exceptions import MatchingError
from app.domain.models import MAX_REASONS, BrandRequirement, PropertyRecord, ScoreBreakdown
from app.logging import get_logger
from app.utils.text import humanize_tag

from .ranking import round_half_up

logger = get_logger(__name__, component="matching")

REASON_PRIORITY = ("location", "budget", "size", "category", "amenity")

REASON_TEMPLATES: Dict[str, str] = {
    "location/strong": "Prime location - {{ city }} is one of your preferred areas",
    "location/moderate": "Good location - {{ city }} is close to your preferred areas",
    "budget/strong": "Great value - {{ rent }}/month fits your budget",
    "budget/moderate": "Near your budget - {{ rent }}/month is slightly outside your range",
    "size/strong": "Ideal size - {{ size }} sqft suits {{ business }}",
    "size/moderate": "Workable size - {{ size }} sqft is close to your size range",
    "category/strong": "Perfect property type - {{ category }} space for {{ business }}",
    "category/moderate": "Compatible property type - {{ category }} space can work for {{ business }}",
    "amenity/strong": "Has your must-have amenities: {{ amenities }}",
    "amenity/moderate": "Offers most of your must-have amenities: {{ amenities }}",
}


class ReasonTemplateError(MatchingError):
    """A reason template failed to render."""

    pass


class ReasonGenerator:
    """Turns a ScoreBreakdown into an ordered list of explanation sentences."""

    def __init__(
        self,
        strong_match_score: float = 80,
        moderate_match_score: float = 60,
        max_reasons: int = MAX_REASONS,
        templates: Optional[Dict[str, str]] = None,
    ):
        """Initialize ReasonGenerator.

        Args:
            strong_match_score: Sub-score at or above which strong phrasing is used
            moderate_match_score: Sub-score at or above which a reason is emitted
            max_reasons: Maximum number of reasons per result (at most 5)
            templates: Template overrides keyed "<dimension>/<strong|moderate>"
        """
        self.strong_match_score = strong_match_score
        self.moderate_match_score = moderate_match_score
        self.max_reasons = min(max_reasons, MAX_REASONS)

        self.env = Environment(
            loader=DictLoader({**REASON_TEMPLATES, **(templates or {})}),
            autoescape=False,  # plain-text sentences
            undefined=StrictUndefined,
        )

    def tier(self, score: float) -> Optional[str]:
        """Return "strong", "moderate" or None for a sub-score."""
        if score >= self.strong_match_score:
            return "strong"
        if score >= self.moderate_match_score:
            return "moderate"
        return None

    def generate(
        self,
        requirement: BrandRequirement,
        prop: PropertyRecord,
        breakdown: ScoreBreakdown,
    ) -> Tuple[str, ...]:
        """Build the reasons for one result.

        Args:
            requirement: Requirement the property was scored against
            prop: Scored property
            breakdown: Its sub-scores

        Returns:
            Tuple of at most max_reasons sentences, in priority order

        Raises:
            ReasonTemplateError: If a template fails to render
        """
        context = self._build_context(requirement, prop)
        reasons: List[str] = []

        for dimension in REASON_PRIORITY:
            if len(reasons) >= self.max_reasons:
                break
            score = getattr(breakdown, dimension)
            tier = self.tier(score)
            if tier is None:
                continue
            # Claiming every must-have needs full coverage
            if dimension == "amenity" and score < 100:
                tier = "moderate"
            reasons.append(self._render(f"{dimension}/{tier}", context))

        return tuple(reasons)

    def _render(self, template_name: str, context: Dict) -> str:
        try:
            return self.env.get_template(template_name).render(context).strip()
        except TemplateError as e:
            logger.error(
                f"Reason template rendering failed: {template_name}",
                extra={"event": "matching.reason.render_failed", "template": template_name},
                exc_info=True,
            )
            raise ReasonTemplateError(f"Failed to render reason '{template_name}': {e}") from e

    @staticmethod
    def _build_context(requirement: BrandRequirement, prop: PropertyRecord) -> Dict:
        matched = sorted(requirement.must_have_amenities & prop.amenities)
        return {
            "city": prop.city,
            "rent": round_half_up(prop.monthly_rent),
            "size": prop.size,
            "category": prop.category.value,
            "business": requirement.industry or "your business",
            "amenities": ", ".join(humanize_tag(tag) for tag in matched),
        }
