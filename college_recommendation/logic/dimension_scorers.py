"""
Dimension Scorers

Individual scoring functions for each match dimension.
Each scorer earns points out of its own budget in DIMENSION_POINTS.
All logic is deterministic - no AI/ML components.
"""

from .contracts import CandidatePreferences, Institution, DimensionScore
from .constants import (
    DIMENSION_POINTS,
    NO_LOCATION_PREFERENCE_POINTS,
    NO_TYPE_PREFERENCE_POINTS,
    RANK_TIERS,
    RANK_TIER_FALLBACK_POINTS,
    FACILITIES_FOR_FULL_CREDIT,
)


def _dimension(name: str, points: float, explanation: str) -> DimensionScore:
    max_points = DIMENSION_POINTS[name]
    return DimensionScore(
        dimension=name,
        points=max(0.0, min(max_points, points)),
        max_points=max_points,
        explanation=explanation,
    )


def score_location_match(
    preferences: CandidatePreferences,
    institution: Institution
) -> DimensionScore:
    """
    Full credit when the institution's region is preferred.
    No stated preference earns partial credit rather than zero or full.
    """
    if not preferences.location_preferences:
        return _dimension(
            "location_match", NO_LOCATION_PREFERENCE_POINTS, "No location preference"
        )
    if preferences.prefers_region(institution.region):
        return _dimension(
            "location_match",
            DIMENSION_POINTS["location_match"],
            f"Located in preferred region {institution.region}",
        )
    return _dimension("location_match", 0.0, f"{institution.region or 'Unknown region'} not preferred")


def score_type_match(
    preferences: CandidatePreferences,
    institution: Institution
) -> DimensionScore:
    if not preferences.institution_type_preferences:
        return _dimension("type_match", NO_TYPE_PREFERENCE_POINTS, "No institution type preference")
    if institution.institution_type in preferences.institution_type_preferences:
        return _dimension(
            "type_match",
            DIMENSION_POINTS["type_match"],
            f"{institution.institution_type} matches preference",
        )
    return _dimension("type_match", 0.0, f"{institution.institution_type} not preferred")


def score_branch_availability(
    preferences: CandidatePreferences,
    institution: Institution
) -> DimensionScore:
    requested = preferences.branch_preferences
    offered = [b for b in requested if institution.offers_branch(b, preferences.exam_type)]
    points = DIMENSION_POINTS["branch_availability"] * len(offered) / len(requested)
    return _dimension(
        "branch_availability",
        points,
        f"{len(offered)} of {len(requested)} preferred branches offered",
    )


def score_placement_strength(
    preferences: CandidatePreferences,
    institution: Institution
) -> DimensionScore:
    stats = institution.placement_stats
    if stats is None or stats.placement_percentage is None:
        return _dimension("placement_strength", 0.0, "No placement data")
    percentage = min(stats.placement_percentage, 100.0)
    return _dimension(
        "placement_strength",
        DIMENSION_POINTS["placement_strength"] * percentage / 100.0,
        f"{percentage:g}% placed",
    )


def score_rank_tier(
    preferences: CandidatePreferences,
    institution: Institution
) -> DimensionScore:
    rank = institution.rank
    if rank is None:
        return _dimension("rank_tier", 0.0, "Unranked")
    for max_rank, points in RANK_TIERS:
        if rank <= max_rank:
            return _dimension("rank_tier", points, f"Rank {rank} within top {max_rank}")
    return _dimension("rank_tier", RANK_TIER_FALLBACK_POINTS, f"Rank {rank}")


def score_autonomy(
    preferences: CandidatePreferences,
    institution: Institution
) -> DimensionScore:
    if institution.is_autonomous:
        return _dimension("autonomy", DIMENSION_POINTS["autonomy"], "Autonomous")
    return _dimension("autonomy", 0.0, "Not autonomous")


def score_facilities(
    preferences: CandidatePreferences,
    institution: Institution
) -> DimensionScore:
    count = len(institution.facilities)
    points = min(count / FACILITIES_FOR_FULL_CREDIT * DIMENSION_POINTS["facilities"], DIMENSION_POINTS["facilities"])
    return _dimension("facilities", points, f"{count} facilities listed")


SCORERS = [
    score_location_match,
    score_type_match,
    score_branch_availability,
    score_placement_strength,
    score_rank_tier,
    score_autonomy,
    score_facilities,
]
