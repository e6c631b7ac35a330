"""Pipeline orchestration: provider -> normalization -> matching."""

import time
from typing import Optional
from uuid import uuid4

from app.config.models import AppConfig
from app.domain.exceptions import BrandProfileNotFoundError, MatchingError, ValidationError
from app.logging import get_logger
from app.logging.context import log_context
from app.matching.engine import MatchingService
from app.normalization import PropertyNormalizer, RequirementNormalizer
from app.providers.base import PROFILE_NOT_FOUND, BrandProfileProvider, PropertyCatalogProvider
from app.utils.timestamps import utc_now

from .models import MatchRunResult

logger = get_logger(__name__, component="pipeline")


class MatchPipeline:
    """
    Orchestrates a single match run for one brand.

    The pipeline fetches the raw brand profile and the raw catalog through the
    providers, normalizes both, and hands the canonical records to the
    MatchingService. It is the calling layer of the engine: it owns every I/O
    step and the translation of a missing profile into an error.
    """

    def __init__(
        self,
        app_config: AppConfig,
        profile_provider: BrandProfileProvider,
        catalog_provider: PropertyCatalogProvider,
        service: Optional[MatchingService] = None,
        max_workers: Optional[int] = None,
    ):
        """
        Initialize the match pipeline.

        Args:
            app_config: Application configuration
            profile_provider: Source of raw brand profiles
            catalog_provider: Source of raw property listings
            service: Matching service (built from app_config.matching if omitted)
            max_workers: Worker thread override for the default service
        """
        self.app_config = app_config
        self.profile_provider = profile_provider
        self.catalog_provider = catalog_provider
        self.service = service or MatchingService(app_config.matching, max_workers=max_workers)
        self.requirement_normalizer = RequirementNormalizer(app_config.matching)
        self.property_normalizer = PropertyNormalizer(app_config.matching)

    def run(self, brand_id: str, min_score_threshold: Optional[float] = None) -> MatchRunResult:
        """
        Match the catalog against one brand's requirement.

        This method:
        1. Loads the raw brand profile (missing -> BrandProfileNotFoundError)
        2. Normalizes it into a BrandRequirement (malformed -> ValidationError)
        3. Loads and normalizes the catalog, skipping invalid listings
        4. Scores, ranks and explains through the MatchingService

        Args:
            brand_id: Brand to match for
            min_score_threshold: Threshold override (defaults to configuration)

        Returns:
            MatchRunResult with counts, timing and ranked results

        Raises:
            ValidationError: If brand_id, the profile or the threshold is malformed
            BrandProfileNotFoundError: If no profile exists for brand_id
            ProviderError: If a provider cannot read its source
        """
        if not isinstance(brand_id, str) or not brand_id.strip():
            raise ValidationError("Invalid brand id", ["brand_id must be a non-empty string"])
        brand_id = brand_id.strip()

        run_started_at = utc_now()
        run_id = uuid4().hex
        start = time.monotonic()

        # Every log line in this run carries run_id and brand_id
        with log_context(run_id=run_id, brand_id=brand_id):
            logger.info("Pipeline run started", extra={"event": "pipeline.run.started"})

            try:
                raw_profile = self.profile_provider.get_brand_profile(brand_id)
                if raw_profile is PROFILE_NOT_FOUND:
                    logger.warning(
                        f"Brand profile not found: {brand_id}",
                        extra={"event": "pipeline.profile.not_found"},
                    )
                    raise BrandProfileNotFoundError(brand_id)

                requirement = self.requirement_normalizer.normalize(raw_profile)

                raw_listings = list(self.catalog_provider.list_properties())
                batch = self.property_normalizer.normalize_batch(raw_listings)

                report = self.service.evaluate(requirement, batch.records, min_score_threshold)

            except BrandProfileNotFoundError:
                raise
            except MatchingError as e:
                logger.error(
                    f"Pipeline run failed: {e}",
                    extra={"event": "pipeline.run.failed", "error_type": type(e).__name__},
                )
                raise

            result = MatchRunResult(
                run_id=run_id,
                brand_id=brand_id,
                run_started_at=run_started_at,
                run_finished_at=utc_now(),
                duration_seconds=time.monotonic() - start,
                total_candidates=batch.total,
                normalized=len(batch.records),
                skipped_invalid=batch.skipped + report.skipped_invalid,
                skipped_unavailable=report.skipped_unavailable,
                below_threshold=report.below_threshold,
                min_score_threshold=report.min_score_threshold,
                results=report.results,
            )

            logger.info(
                "Pipeline run completed",
                extra={
                    "event": "pipeline.run.completed",
                    "duration_ms": int(result.duration_seconds * 1000),
                    "total_candidates": result.total_candidates,
                    "normalized": result.normalized,
                    "skipped_invalid": len(result.skipped_invalid),
                    "skipped_unavailable": result.skipped_unavailable,
                    "below_threshold": result.below_threshold,
                    "matched": result.matched,
                },
            )

            return result
