"""
Output Assembler

Transforms scored institutions and review summaries into the final
Recommendation / RecommendationOutput contracts. Generates reasons,
pros and cons from fixed thresholds, in a fixed order.
"""

import logging
import uuid
from typing import List, Optional

from .constants import (
    InstitutionType,
    Sentiment,
    EXCELLENT_MATCH_SCORE,
    REASON_MAX_RANK,
    HIGH_PLACEMENT_PERCENTAGE,
    LOW_RANK_CUTOFF,
    MIN_FACILITIES,
    MAX_BRANCHES_IN_REASON,
    MAX_FACILITIES_IN_PRO,
    MAX_REVIEW_PROS,
    MAX_REVIEW_CONS,
    MAX_PROS,
    MAX_CONS,
    ENGINE_VERSION,
)
from .contracts import (
    CandidatePreferences,
    Institution,
    Recommendation,
    RecommendationOutput,
    ReviewSummary,
    ScoredInstitution,
    TopicRating,
)
from .review_aggregator import is_highly_rated, is_trending, recent_feedback

logger = logging.getLogger(__name__)


def generate_reasons(
    institution: Institution,
    preferences: CandidatePreferences,
    match_score: int
) -> List[str]:
    """Reasons are appended in a fixed order so identical input yields identical output."""
    reasons: List[str] = []

    if match_score >= EXCELLENT_MATCH_SCORE:
        reasons.append("Excellent match for your preferences")

    if preferences.prefers_region(institution.region):
        reasons.append(f"Located in your preferred region: {institution.region}")

    if institution.rank is not None and institution.rank <= REASON_MAX_RANK:
        reasons.append(f"Nationally ranked #{institution.rank}")

    stats = institution.placement_stats
    if stats and stats.placement_percentage is not None and stats.placement_percentage >= HIGH_PLACEMENT_PERCENTAGE:
        reasons.append(f"High placement rate: {stats.placement_percentage:g}%")

    if institution.institution_type == InstitutionType.GOVERNMENT:
        reasons.append("Government institution with lower fees")

    if institution.is_autonomous:
        reasons.append("Autonomous institution with flexible curriculum")

    offered = [
        b for b in preferences.branch_preferences
        if institution.offers_branch(b, preferences.exam_type)
    ]
    if offered:
        reasons.append(f"Offers your preferred branches: {', '.join(offered[:MAX_BRANCHES_IN_REASON])}")

    return reasons


def generate_pros(institution: Institution) -> List[str]:
    pros: List[str] = []
    stats = institution.placement_stats

    if stats and stats.placement_percentage is not None and stats.placement_percentage >= HIGH_PLACEMENT_PERCENTAGE:
        pros.append(f"Strong placement record ({stats.placement_percentage:g}% placed)")

    if stats and stats.average_package is not None:
        pros.append(f"Average package: ₹{stats.average_package:g} LPA")

    if institution.rank is not None and institution.rank <= REASON_MAX_RANK:
        pros.append(f"National rank: {institution.rank}")

    if institution.institution_type == InstitutionType.GOVERNMENT:
        pros.append("Affordable government fees")

    if institution.is_autonomous:
        pros.append("Autonomous status")

    if institution.facilities:
        pros.append(f"Facilities: {', '.join(institution.facilities[:MAX_FACILITIES_IN_PRO])}")

    return pros


def generate_cons(
    institution: Institution,
    preferences: Optional[CandidatePreferences] = None
) -> List[str]:
    cons: List[str] = []
    stats = institution.placement_stats

    if institution.institution_type == InstitutionType.PRIVATE and not (stats and stats.placement_percentage):
        cons.append("Limited placement data available")

    if institution.rank is None or institution.rank > LOW_RANK_CUTOFF:
        cons.append("Lower national ranking")

    if not institution.is_autonomous:
        cons.append("Not autonomous - fixed curriculum")

    if len(institution.facilities) < MIN_FACILITIES:
        cons.append("Limited campus facilities")

    if (
        preferences is not None
        and preferences.max_fees is not None
        and institution.annual_fees is not None
        and institution.annual_fees > preferences.max_fees
    ):
        cons.append("Fees above your budget")

    return cons


def _topics_by_mentions(summary: ReviewSummary, sentiment: Sentiment) -> List[TopicRating]:
    rated = [r for r in summary.topic_ratings.values() if r.sentiment == sentiment]
    return sorted(rated, key=lambda r: (-r.mention_count, r.topic))


def merge_review_feedback(
    pros: List[str],
    cons: List[str],
    summary: ReviewSummary
) -> tuple:
    """Prepend review-backed topic strengths and concerns to the static pros/cons."""
    review_pros = [
        f"Good {r.topic.lower()} ({r.mention_count} reviews)"
        for r in _topics_by_mentions(summary, Sentiment.POSITIVE)
    ]
    review_cons = [
        f"Concerns about {r.topic.lower()} ({r.mention_count} reviews)"
        for r in _topics_by_mentions(summary, Sentiment.NEGATIVE)
    ]

    if review_pros:
        pros = (review_pros[:MAX_REVIEW_PROS] + pros)[:MAX_PROS]
    if review_cons:
        cons = (review_cons[:MAX_REVIEW_CONS] + cons)[:MAX_CONS]
    return pros, cons


def assemble_recommendation(
    scored: ScoredInstitution,
    preferences: CandidatePreferences,
    summary: ReviewSummary,
    rank: int
) -> Recommendation:
    """
    Convert a ScoredInstitution into a Recommendation.

    Args:
        scored: Eligible institution with match score and admission chance
        preferences: Candidate preferences used for reasons
        summary: ReviewSummary for the institution
        rank: 1-based position in the ranked list
    """
    institution = scored.institution
    pros, cons = merge_review_feedback(
        generate_pros(institution),
        generate_cons(institution, preferences),
        summary,
    )

    return Recommendation(
        rank=rank,
        institution=institution,
        match_score=scored.match_score,
        admission_chance=scored.admission_chance or 0,
        reasons=generate_reasons(institution, preferences, scored.match_score),
        pros=pros,
        cons=cons,
        review_summary=summary,
        dimension_scores=list(scored.dimension_scores.values()),
        highly_rated=is_highly_rated(summary),
        trending=is_trending(summary),
        recent_feedback=recent_feedback(summary),
    )


def assemble_output(
    preferences: CandidatePreferences,
    recommendations: List[Recommendation],
    total_evaluated: int,
    total_eligible: int,
    processing_time_ms: Optional[float] = None,
    warnings: Optional[List[str]] = None,
    empty_reason: Optional[str] = None,
    partial: bool = False
) -> RecommendationOutput:
    warnings = list(warnings or [])

    if total_evaluated == 0:
        warnings.append("No institutions found in the catalog for your criteria.")

    if recommendations and all(r.review_summary.total_reviews == 0 for r in recommendations):
        logger.warning("⚠️ No community reviews loaded for any recommendation")
        warnings.append("No community reviews were available; review summaries are empty.")

    return RecommendationOutput(
        request_id=str(uuid.uuid4()),
        student_id=preferences.student_id,
        recommendations=recommendations,
        total_candidates_evaluated=total_evaluated,
        total_eligible=total_eligible,
        total_recommended=len(recommendations),
        processing_time_ms=processing_time_ms,
        engine_version=ENGINE_VERSION,
        warnings=warnings,
        empty_reason=empty_reason,
        partial=partial,
    )
