"""
Score Aggregator

Combines individual dimension scores into the 0-100 match score
and attaches the admission chance for the primary branch.
"""

import math
from typing import Dict, Iterable, List

from .admission import admission_chance_for
from .constants import MAX_MATCH_POINTS
from .contracts import (
    CandidatePreferences,
    Institution,
    DimensionScore,
    ScoredInstitution,
)
from .dimension_scorers import SCORERS


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def match_score_from(dimension_scores: Iterable[DimensionScore]) -> int:
    """round(100 * earned / max), clamped to [0, 100]."""
    earned = sum(d.points for d in dimension_scores)
    score = round_half_up(100.0 * earned / MAX_MATCH_POINTS)
    return max(0, min(100, score))


def aggregate_scores(
    preferences: CandidatePreferences,
    institution: Institution
) -> ScoredInstitution:
    """
    Compute all dimension scores and aggregate into the match score.

    Args:
        preferences: Candidate's preferences
        institution: Eligible institution to score

    Returns:
        ScoredInstitution; admission_chance is None when the primary
        branch has no cutoff for the exam
    """
    dimension_scores: Dict[str, DimensionScore] = {}
    for scorer in SCORERS:
        score = scorer(preferences, institution)
        dimension_scores[score.dimension] = score

    return ScoredInstitution(
        institution=institution,
        dimension_scores=dimension_scores,
        match_score=match_score_from(dimension_scores.values()),
        admission_chance=admission_chance_for(institution, preferences),
    )


def batch_aggregate(
    preferences: CandidatePreferences,
    institutions: List[Institution]
) -> List[ScoredInstitution]:
    return [aggregate_scores(preferences, i) for i in institutions]
