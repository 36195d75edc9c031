"""
Admission Probability Estimator

Maps the distance between a candidate's score and a cutoff onto a fixed
piecewise curve. The bands are tunable policy, see constants.ADMISSION_BANDS.
"""

from typing import Optional

from .constants import ADMISSION_BANDS, ADMISSION_FLOOR_CHANCE
from .contracts import CandidatePreferences, Institution


def percent_above_cutoff(candidate_score: float, cutoff: float) -> float:
    if cutoff <= 0:
        raise ValueError(f"cutoff must be positive, got {cutoff}")
    return 100.0 * (candidate_score - cutoff) / cutoff


def chance_for_percent(percent: float) -> int:
    """First band whose lower bound the percentage reaches wins."""
    for lower_bound, chance in ADMISSION_BANDS:
        if percent >= lower_bound:
            return chance
    return ADMISSION_FLOOR_CHANCE


def estimate(candidate_score: float, cutoff: float) -> int:
    return chance_for_percent(percent_above_cutoff(candidate_score, cutoff))


def admission_chance_for(
    institution: Institution,
    preferences: CandidatePreferences
) -> Optional[int]:
    """Chance for the primary branch, or None when it has no recorded cutoff."""
    cutoff = institution.cutoff_for(preferences.exam_type, preferences.primary_branch)
    if cutoff is None:
        return None
    return estimate(preferences.score, cutoff)
