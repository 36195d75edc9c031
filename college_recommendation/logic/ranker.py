"""
Ranker

Orders scored institutions and assembles the explained recommendation list.
Ordering: match score desc, admission chance desc, name asc, id asc.
"""

from typing import Dict, List, Mapping, Optional

from .contracts import (
    CandidatePreferences,
    Institution,
    Recommendation,
    ReviewSummary,
    ScoredInstitution,
)
from .output_assembler import assemble_recommendation


def ranking_key(scored: ScoredInstitution):
    return (
        -scored.match_score,
        -(scored.admission_chance or 0),
        scored.institution.name.lower(),
        scored.institution.id,
    )


def rank_candidates(
    scored_institutions: List[ScoredInstitution]
) -> List[ScoredInstitution]:
    """Sort by ranking_key; candidates without an admission chance are dropped."""
    rankable = [s for s in scored_institutions if s.admission_chance is not None]
    return sorted(rankable, key=ranking_key)


def select_top(
    ranked: List[ScoredInstitution],
    max_results: int,
    min_admission_chance: int = 0
) -> List[ScoredInstitution]:
    if min_admission_chance > 0:
        ranked = [s for s in ranked if (s.admission_chance or 0) > min_admission_chance]
    return ranked[:max_results]


def rank_recommendations(
    scored_institutions: List[ScoredInstitution],
    preferences: CandidatePreferences,
    review_summaries: Mapping[str, ReviewSummary]
) -> List[Recommendation]:
    """
    Rank scored institutions and build explained recommendations.

    Args:
        scored_institutions: Output of the match scorer (admission chance attached)
        preferences: Candidate preferences, used for reasons and cons
        review_summaries: ReviewSummary per institution id; missing ids get an empty summary

    Returns:
        Recommendations sorted descending by match score, each institution once
    """
    recommendations: List[Recommendation] = []
    seen_ids = set()

    for scored in rank_candidates(scored_institutions):
        institution_id = scored.institution.id
        if institution_id in seen_ids:
            continue
        seen_ids.add(institution_id)

        summary = review_summaries.get(institution_id) or ReviewSummary(institution_id=institution_id)
        recommendations.append(
            assemble_recommendation(scored, preferences, summary, rank=len(recommendations) + 1)
        )

    return recommendations


def compare_institutions(institutions: List[Institution]) -> Dict:
    """Side-by-side metrics and the winning institution id per metric."""
    metrics = {
        "ranks": [i.rank for i in institutions],
        "average_packages": [
            i.placement_stats.average_package if i.placement_stats else None
            for i in institutions
        ],
        "placement_percentages": [
            i.placement_stats.placement_percentage if i.placement_stats else None
            for i in institutions
        ],
        "annual_fees": [i.annual_fees for i in institutions],
    }

    def _winner(values: List[Optional[float]], lowest: bool) -> Optional[str]:
        known = [(v, i.id) for v, i in zip(values, institutions) if v is not None]
        if not known:
            return None
        best = min(known) if lowest else min(known, key=lambda pair: (-pair[0], pair[1]))
        return best[1]

    return {
        "institutions": [i.id for i in institutions],
        "comparison_metrics": metrics,
        "winner_by_metric": {
            "rank": _winner(metrics["ranks"], lowest=True),
            "average_package": _winner(metrics["average_packages"], lowest=False),
            "placement_percentage": _winner(metrics["placement_percentages"], lowest=False),
            "annual_fees": _winner(metrics["annual_fees"], lowest=True),
        },
    }
