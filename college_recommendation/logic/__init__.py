"""
Recommendation Logic Module

Deterministic college matching and rule-based community review analysis.
"""

from .contracts import (
    CandidatePreferences,
    Institution,
    PlacementStats,
    CommunityPost,
    ClassifiedPost,
    ReviewFilters,
    ReviewSummary,
    DimensionScore,
    ScoredInstitution,
    Recommendation,
    RecommendationOutput,
)
from .engine import RecommendationEngine, get_recommendations
from .errors import (
    RecommendationError,
    PreferenceValidationError,
    CatalogUnavailableError,
    SourceUnavailableError,
    RecommendationTimeoutError,
)
from .constants import ExamType, InstitutionType, Sentiment, Trend

__all__ = [
    # Main engine
    "RecommendationEngine",
    "get_recommendations",

    # Contracts
    "CandidatePreferences",
    "Institution",
    "PlacementStats",
    "CommunityPost",
    "ClassifiedPost",
    "ReviewFilters",
    "ReviewSummary",
    "DimensionScore",
    "ScoredInstitution",
    "Recommendation",
    "RecommendationOutput",

    # Errors
    "RecommendationError",
    "PreferenceValidationError",
    "CatalogUnavailableError",
    "SourceUnavailableError",
    "RecommendationTimeoutError",

    # Enums
    "ExamType",
    "InstitutionType",
    "Sentiment",
    "Trend",
]
