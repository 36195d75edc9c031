"""
Data Adapter for Recommendation Engine

Reads rows from the rec_colleges table and transforms their JSON-based
attributes into Institution contracts.

This is a pure READ + TRANSFORM layer:
- NO scoring logic
- NO ranking
- NO DB writes
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from .constants import InstitutionType
from .contracts import Institution, PlacementStats

logger = logging.getLogger(__name__)


INSTITUTION_TYPE_ALIASES = {
    "government": InstitutionType.GOVERNMENT,
    "govt": InstitutionType.GOVERNMENT,
    "public": InstitutionType.GOVERNMENT,
    "private": InstitutionType.PRIVATE,
    "autonomous": InstitutionType.AUTONOMOUS,
    "deemed": InstitutionType.DEEMED,
    "deemed university": InstitutionType.DEEMED,
    "deemed-to-be university": InstitutionType.DEEMED,
}


def normalize_institution_type(raw_type: Optional[str]) -> Optional[InstitutionType]:
    """
    Normalize inconsistent type labels to InstitutionType.

    Returns None when the label is unknown.
    """
    if not raw_type:
        return None
    return INSTITUTION_TYPE_ALIASES.get(raw_type.lower().strip())


def _safe_get(data: Optional[Dict], *keys, default=None):
    """Safely traverse nested dicts."""
    if data is None:
        return default
    result = data
    for key in keys:
        if isinstance(result, dict):
            result = result.get(key)
        else:
            return default
        if result is None:
            return default
    return result


def _as_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (ValueError, TypeError):
        return None


def _as_int(value: Any) -> Optional[int]:
    number = _as_float(value)
    return int(number) if number is not None else None


def _string_list(value: Any) -> List[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return [str(item) for item in value if item]


def _normalize_cutoffs(raw: Any) -> Dict[str, Dict[str, float]]:
    """Keep positive numeric cutoffs; exam keys are upper-cased."""
    cutoffs: Dict[str, Dict[str, float]] = {}
    if not isinstance(raw, dict):
        return cutoffs
    for exam, branches in raw.items():
        if not isinstance(branches, dict):
            continue
        parsed = {}
        for branch, value in branches.items():
            number = _as_float(value)
            if number is not None and number > 0:
                parsed[branch] = number
        if parsed:
            cutoffs[str(exam).upper()] = parsed
    return cutoffs


def _placement_stats(raw: Any) -> Optional[PlacementStats]:
    if not isinstance(raw, dict) or not raw:
        return None
    return PlacementStats(
        highest_package=_as_float(_safe_get(raw, "highest_package")),
        average_package=_as_float(_safe_get(raw, "average_package")),
        median_package=_as_float(_safe_get(raw, "median_package")),
        placement_percentage=_as_float(_safe_get(raw, "placement_percentage")),
        top_recruiters=_string_list(_safe_get(raw, "top_recruiters")),
        year=_as_int(_safe_get(raw, "year")),
    )


def transform_college(row) -> Optional[Institution]:
    """
    Transform a single RecCollege row into an Institution.

    Args:
        row: RecCollege ORM object (or any object with the same attributes)

    Returns:
        Institution, or None when the row cannot be represented
    """
    institution_type = normalize_institution_type(row.institution_type)
    if institution_type is None:
        logger.debug("Skipping college %s: unknown type %r", row.id, row.institution_type)
        return None

    rank = _as_int(row.nirf_rank)
    try:
        return Institution(
            id=str(row.id),
            name=row.name,
            city=row.city or "",
            region=row.state or "",
            institution_type=institution_type,
            established_year=row.established_year,
            courses=_string_list(row.courses),
            cutoffs=_normalize_cutoffs(row.cutoffs),
            rank=rank if rank and rank > 0 else None,
            placement_stats=_placement_stats(row.placement_stats),
            facilities=_string_list(row.facilities),
            autonomous=bool(row.autonomous),
            annual_fees=_as_float(row.annual_fees),
            website=row.website,
        )
    except ValidationError as e:
        logger.debug("Skipping college %s: %s", row.id, e)
        return None


def transform_colleges(rows) -> List[Institution]:
    institutions = []
    for row in rows:
        institution = transform_college(row)
        if institution is not None:
            institutions.append(institution)
    return institutions
