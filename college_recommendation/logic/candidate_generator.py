"""
Candidate Generator

Applies the eligibility gate to catalog institutions before scoring:
an institution is a candidate only if some preferred branch has a cutoff
for the candidate's exam that the score reaches within the 80% floor.
"""

import logging
from typing import Iterable, List, Optional

from .constants import ELIGIBILITY_CUTOFF_FLOOR
from .contracts import CandidatePreferences, Institution

logger = logging.getLogger(__name__)


def qualifying_branches(
    institution: Institution,
    preferences: CandidatePreferences,
    floor: float = ELIGIBILITY_CUTOFF_FLOOR
) -> List[str]:
    """Preferred branches whose cutoff the candidate's score reaches within the floor."""
    branches = []
    for branch in preferences.branch_preferences:
        cutoff = institution.cutoff_for(preferences.exam_type, branch)
        if cutoff is not None and preferences.score >= floor * cutoff:
            branches.append(branch)
    return branches


def is_eligible(
    institution: Institution,
    preferences: CandidatePreferences,
    floor: float = ELIGIBILITY_CUTOFF_FLOOR
) -> bool:
    return bool(qualifying_branches(institution, preferences, floor))


def generate_candidates(
    institutions: Iterable[Institution],
    preferences: CandidatePreferences,
    floor: Optional[float] = None
) -> List[Institution]:
    """
    Filter institutions down to eligible, de-duplicated candidates.

    Args:
        institutions: Catalog institutions, in catalog order
        preferences: Candidate's exam, score and branch preferences
        floor: Override for the eligibility floor

    Returns:
        Eligible institutions, each id at most once, in input order
    """
    floor = ELIGIBILITY_CUTOFF_FLOOR if floor is None else floor
    seen_ids = set()
    candidates: List[Institution] = []

    for institution in institutions:
        if institution.id in seen_ids:
            logger.debug(f"Skipping duplicate institution {institution.id}")
            continue
        seen_ids.add(institution.id)
        if is_eligible(institution, preferences, floor):
            candidates.append(institution)

    return candidates
