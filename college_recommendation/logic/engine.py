"""
Recommendation Engine

Main orchestrator that combines all scoring components into a single pipeline.
This is the primary entry point for generating recommendations.
"""

import logging
import threading
import time
from concurrent.futures import FIRST_COMPLETED, ThreadPoolExecutor, wait
from typing import Dict, List, Optional, Tuple, Union

from pydantic import ValidationError

from ..config import EngineSettings
from .aggregator import batch_aggregate
from .candidate_generator import generate_candidates
from .catalog import InstitutionCatalog
from .constants import NO_ELIGIBLE_REASON
from .contracts import (
    CandidatePreferences,
    CatalogFilter,
    RecommendationOutput,
    ReviewSummary,
    ScoredInstitution,
)
from .errors import PreferenceValidationError, RecommendationTimeoutError
from .output_assembler import assemble_output
from .ranker import rank_candidates, rank_recommendations, select_top

logger = logging.getLogger(__name__)

# how often the review wait loop checks an external cancel signal
CANCEL_POLL_SECONDS = 0.1


def parse_preferences(preferences: Union[CandidatePreferences, dict]) -> CandidatePreferences:
    """Validate raw preferences; never guesses defaults for invalid input."""
    if isinstance(preferences, CandidatePreferences):
        return preferences
    try:
        return CandidatePreferences(**preferences)
    except ValidationError as e:
        raise PreferenceValidationError(
            f"Invalid candidate preferences: {e.error_count()} error(s)",
            errors=[
                {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
                for err in e.errors()
            ],
        ) from e
    except TypeError as e:
        raise PreferenceValidationError(f"Invalid candidate preferences: {e}") from e


class RecommendationEngine:
    """
    Main recommendation engine that orchestrates the pipeline.

    Pipeline flow:
    1. Catalog query - Read institutions (optionally pre-filtered)
    2. Eligibility - Keep institutions within the cutoff floor
    3. Scoring - Match score and admission chance per institution
    4. Ranking - Order and cut to max_results
    5. Reviews - Fetch/classify/aggregate posts concurrently for the top results
    6. Output Assembly - Reasons, pros/cons and the final RecommendationOutput

    The engine holds no cache and no per-request state.
    """

    def __init__(
        self,
        catalog: InstitutionCatalog,
        review_pipeline=None,
        settings: Optional[EngineSettings] = None
    ):
        """
        Args:
            catalog: Read-only institution catalog
            review_pipeline: Anything with summarize(institution_id, name, cancel_event=...);
                None disables review loading
            settings: Engine settings; defaults are used when omitted
        """
        self.catalog = catalog
        self.review_pipeline = review_pipeline
        self.settings = settings or EngineSettings()

    def recommend(
        self,
        preferences: Union[CandidatePreferences, dict],
        max_results: Optional[int] = None,
        deadline_seconds: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None
    ) -> RecommendationOutput:
        """
        Generate ranked, explained recommendations.

        Args:
            preferences: CandidatePreferences or a dict with its fields
            max_results: Maximum recommendations to return
            deadline_seconds: Budget for review loading; defaults to settings
            cancel_event: Setting it stops review loading early

        Returns:
            RecommendationOutput

        Raises:
            PreferenceValidationError: malformed preferences or max_results
            CatalogUnavailableError: the catalog could not be read
            RecommendationTimeoutError: reviews timed out and partial results are disabled
        """
        start_time = time.perf_counter()
        preferences = parse_preferences(preferences)

        max_results = self.settings.default_max_results if max_results is None else max_results
        if max_results < 1:
            raise PreferenceValidationError(f"max_results must be at least 1, got {max_results}")

        logger.info(
            f"🚀 Recommending for {preferences.student_id or 'anonymous'}: "
            f"{preferences.exam_type} score={preferences.score} branches={preferences.branch_preferences}"
        )

        # Step 1: Catalog
        catalog_filter = None
        if self.settings.prefilter_catalog:
            catalog_filter = CatalogFilter(
                regions=preferences.location_preferences,
                institution_types=preferences.institution_type_preferences,
            )
        institutions = self.catalog.query(catalog_filter)

        # Step 2: Eligibility
        candidates = generate_candidates(institutions, preferences)
        logger.info(f"✅ {len(candidates)} of {len(institutions)} institutions passed the cutoff floor")

        if not candidates:
            return assemble_output(
                preferences=preferences,
                recommendations=[],
                total_evaluated=len(institutions),
                total_eligible=0,
                processing_time_ms=self._elapsed_ms(start_time),
                empty_reason=NO_ELIGIBLE_REASON,
            )

        # Step 3: Scoring
        scored = batch_aggregate(preferences, candidates)
        warnings: List[str] = []
        without_cutoff = [s for s in scored if s.admission_chance is None]
        if without_cutoff:
            warnings.append(
                f"{len(without_cutoff)} eligible institution(s) have no {preferences.exam_type} cutoff "
                f"for {preferences.primary_branch} and were not ranked."
            )

        # Step 4: Ranking
        top = select_top(rank_candidates(scored), max_results, self.settings.min_admission_chance)
        empty_reason = None
        if not top:
            empty_reason = "No eligible institution has a cutoff for your primary branch"
            if self.settings.min_admission_chance > 0:
                empty_reason = f"No institution offers an admission chance above {self.settings.min_admission_chance}%"

        # Step 5: Reviews
        summaries, partial, review_warnings = self._load_reviews(top, deadline_seconds, cancel_event)
        warnings.extend(review_warnings)

        # Step 6: Output
        recommendations = rank_recommendations(top, preferences, summaries)
        output = assemble_output(
            preferences=preferences,
            recommendations=recommendations,
            total_evaluated=len(institutions),
            total_eligible=len(candidates),
            processing_time_ms=self._elapsed_ms(start_time),
            warnings=warnings,
            empty_reason=empty_reason,
            partial=partial,
        )
        logger.info(f"🏁 Returned {output.total_recommended} recommendations in {output.processing_time_ms}ms")
        return output

    def _load_reviews(
        self,
        top: List[ScoredInstitution],
        deadline_seconds: Optional[float],
        cancel_event: Optional[threading.Event]
    ) -> Tuple[Dict[str, ReviewSummary], bool, List[str]]:
        """
        Run one review pipeline per institution on a bounded pool.

        Returns summaries by institution id, whether loading was cut short,
        and warnings for the output.

        On deadline or caller cancel the shared stop event is set and the call
        returns without joining the workers. A worker blocked in an HTTP query
        exits once that query's per-source timeout elapses; it starts no
        further queries.
        """
        if self.review_pipeline is None or not self.settings.fetch_reviews or not top:
            return {}, False, []

        deadline = self.settings.request_deadline_seconds if deadline_seconds is None else deadline_seconds
        stop = threading.Event()
        summaries: Dict[str, ReviewSummary] = {}
        warnings: List[str] = []

        executor = ThreadPoolExecutor(
            max_workers=min(self.settings.max_concurrent_fetches, len(top)),
            thread_name_prefix="reviews",
        )
        futures = {
            executor.submit(
                self.review_pipeline.summarize,
                s.institution.id,
                s.institution.name,
                cancel_event=stop,
            ): s.institution
            for s in top
        }

        pending = set(futures)
        ends_at = time.monotonic() + deadline
        try:
            while pending:
                if cancel_event is not None and cancel_event.is_set():
                    logger.warning("⚠️ Review loading cancelled by caller")
                    break
                remaining = ends_at - time.monotonic()
                if remaining <= 0:
                    logger.warning(f"⚠️ Review loading hit the {deadline}s deadline")
                    break
                done, pending = wait(
                    pending, timeout=min(remaining, CANCEL_POLL_SECONDS), return_when=FIRST_COMPLETED
                )
                for future in done:
                    institution = futures[future]
                    try:
                        summaries[institution.id] = future.result()
                    except Exception as e:
                        logger.warning(f"⚠️ Reviews failed for {institution.name}: {e}")
                        warnings.append(f"Reviews unavailable for {institution.name}.")
        finally:
            if pending:
                stop.set()
            executor.shutdown(wait=False, cancel_futures=True)

        if not pending:
            logger.info(f"📊 Loaded reviews for {len(summaries)} of {len(top)} institutions")
            return summaries, False, warnings

        unfinished = sorted(futures[f].name for f in pending)
        if not self.settings.partial_results_on_timeout:
            raise RecommendationTimeoutError(
                f"Review loading did not finish for {len(unfinished)} institution(s): {', '.join(unfinished)}"
            )

        warnings.append(
            f"Reviews timed out for {len(unfinished)} institution(s); their review summaries are empty."
        )
        return summaries, True, warnings

    @staticmethod
    def _elapsed_ms(start_time: float) -> float:
        return round((time.perf_counter() - start_time) * 1000, 2)


def get_recommendations(
    preferences: Union[CandidatePreferences, dict],
    catalog: InstitutionCatalog,
    review_pipeline=None,
    max_results: Optional[int] = None
) -> RecommendationOutput:
    """Convenience function to get recommendations."""
    engine = RecommendationEngine(catalog, review_pipeline=review_pipeline)
    return engine.recommend(preferences, max_results=max_results)
