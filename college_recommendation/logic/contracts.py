"""
Data Contracts for the Recommendation Engine

Defines Pydantic models for CandidatePreferences (input), Institution and
CommunityPost (collaborator data) and RecommendationOutput (output).
These contracts are the API boundary for the engine.
"""

from typing import List, Optional, Dict

from pydantic import BaseModel, Field, field_validator, model_validator

from .constants import (
    ExamType,
    InstitutionType,
    Sentiment,
    Trend,
    RecentFeedback,
    ENGINE_VERSION,
)


def _dedupe(values: List[str]) -> List[str]:
    seen = set()
    out: List[str] = []
    for value in values:
        value = value.strip()
        if value and value not in seen:
            seen.add(value)
            out.append(value)
    return out


# =============================================================================
# REFERENCE DATA (owned by the Institution Catalog Store)
# =============================================================================

class PlacementStats(BaseModel):
    """Placement outcomes. Packages are in LPA (lakhs per annum)."""
    highest_package: Optional[float] = Field(default=None, ge=0)
    average_package: Optional[float] = Field(default=None, ge=0)
    median_package: Optional[float] = Field(default=None, ge=0)
    placement_percentage: Optional[float] = Field(default=None, ge=0)
    top_recruiters: List[str] = Field(default_factory=list)
    year: Optional[int] = None

    class Config:
        frozen = True


class Institution(BaseModel):
    """
    Immutable institution record.
    cutoffs maps exam type -> branch name -> minimum historical score.
    """
    id: str
    name: str
    city: str = ""
    region: str = ""
    institution_type: InstitutionType
    established_year: Optional[int] = None
    courses: List[str] = Field(default_factory=list)
    cutoffs: Dict[str, Dict[str, float]] = Field(default_factory=dict)
    rank: Optional[int] = Field(default=None, ge=1)
    placement_stats: Optional[PlacementStats] = None
    facilities: List[str] = Field(default_factory=list)
    autonomous: bool = False
    annual_fees: Optional[float] = Field(default=None, ge=0)
    website: Optional[str] = None

    class Config:
        use_enum_values = True
        frozen = True

    @field_validator("courses", "facilities")
    @classmethod
    def _unique_entries(cls, value: List[str]) -> List[str]:
        return _dedupe(value)

    @field_validator("cutoffs")
    @classmethod
    def _positive_cutoffs(cls, value: Dict[str, Dict[str, float]]) -> Dict[str, Dict[str, float]]:
        for exam, branches in value.items():
            for branch, cutoff in branches.items():
                if cutoff <= 0:
                    raise ValueError(f"cutoff for {exam}/{branch} must be positive, got {cutoff}")
        return value

    @property
    def is_autonomous(self) -> bool:
        return self.autonomous or self.institution_type == InstitutionType.AUTONOMOUS

    def cutoff_for(self, exam_type: str, branch: str) -> Optional[float]:
        return self.cutoffs.get(exam_type, {}).get(branch)

    def offers_branch(self, branch: str, exam_type: str) -> bool:
        """A branch is offered if a course names it or exam_type records a cutoff for it."""
        needle = branch.lower()
        if any(needle in course.lower() for course in self.courses):
            return True
        return self.cutoff_for(exam_type, branch) is not None


class CatalogFilter(BaseModel):
    """Catalog query filter. Empty lists mean no constraint."""
    regions: List[str] = Field(default_factory=list)
    institution_types: List[str] = Field(default_factory=list)


# =============================================================================
# INPUT CONTRACTS
# =============================================================================

class CandidatePreferences(BaseModel):
    """
    Input contract for the engine.
    score is on the same scale as the cutoffs recorded for exam_type.
    """
    student_id: Optional[str] = None
    exam_type: ExamType
    score: float = Field(gt=0)
    branch_preferences: List[str] = Field(min_length=1)  # first entry is primary
    location_preferences: List[str] = Field(default_factory=list)
    institution_type_preferences: List[InstitutionType] = Field(default_factory=list)
    max_fees: Optional[float] = Field(default=None, ge=0)

    class Config:
        use_enum_values = True

    @field_validator("branch_preferences")
    @classmethod
    def _clean_branches(cls, value: List[str]) -> List[str]:
        cleaned = _dedupe(value)
        if not cleaned:
            raise ValueError("at least one branch preference is required")
        return cleaned

    @field_validator("location_preferences")
    @classmethod
    def _clean_locations(cls, value: List[str]) -> List[str]:
        return _dedupe(value)

    @property
    def primary_branch(self) -> str:
        return self.branch_preferences[0]

    def prefers_region(self, region: str) -> bool:
        wanted = {loc.lower() for loc in self.location_preferences}
        return bool(region) and region.lower() in wanted


class ReviewFilters(BaseModel):
    """Optional review filters; every provided filter must pass."""
    batch_years: List[int] = Field(default_factory=list)
    courses: List[str] = Field(default_factory=list)
    topics: List[str] = Field(default_factory=list)
    sentiments: List[Sentiment] = Field(default_factory=list)
    min_score: Optional[int] = None
    verified_only: bool = False

    class Config:
        use_enum_values = True


# =============================================================================
# COMMUNITY POSTS
# =============================================================================

class CommunityPost(BaseModel):
    """A post fetched from a community source. created_at is unix time in seconds."""
    id: str
    source: str
    title: str = ""
    body: str = ""
    url: Optional[str] = None
    author: Optional[str] = None
    flair: Optional[str] = None
    score: int = 0
    num_comments: int = 0
    created_at: float = 0.0

    @property
    def text(self) -> str:
        if self.body:
            return f"{self.title} {self.body}"
        return self.title

    def mentions(self, name: str) -> bool:
        return name.lower() in self.text.lower()


class ClassifiedPost(CommunityPost):
    sentiment: Sentiment
    topics: List[str] = Field(min_length=1)
    batch_year: Optional[int] = None
    course: Optional[str] = None
    verified: bool = False

    class Config:
        use_enum_values = True


class Classification(BaseModel):
    sentiment: Sentiment
    topics: List[str]

    class Config:
        use_enum_values = True
        frozen = True


# =============================================================================
# REVIEW SUMMARY
# =============================================================================

class TopicRating(BaseModel):
    topic: str
    average_rating: float = Field(ge=0.0, le=5.0)
    mention_count: int = Field(ge=0)
    recent_mentions: int = Field(default=0, ge=0)
    sentiment: Sentiment

    class Config:
        use_enum_values = True


class SentimentDistribution(BaseModel):
    positive: int = 0
    neutral: int = 0
    negative: int = 0
    mixed: int = 0

    @property
    def total(self) -> int:
        return self.positive + self.neutral + self.negative + self.mixed


class ReviewSummary(BaseModel):
    """Per-institution digest, rebuilt on every request."""
    institution_id: str
    total_reviews: int = Field(default=0, ge=0)
    average_sentiment: float = Field(default=0.0, ge=-1.0, le=1.0)
    sentiment_distribution: SentimentDistribution = Field(default_factory=SentimentDistribution)
    topic_ratings: Dict[str, TopicRating] = Field(default_factory=dict)
    recent_trend: Trend = Trend.STABLE
    recent_reviews: int = Field(default=0, ge=0)
    recent_sentiment: float = Field(default=0.0, ge=-1.0, le=1.0)
    generated_at: float = 0.0

    class Config:
        use_enum_values = True

    @model_validator(mode="after")
    def _distribution_matches_total(self):
        if self.sentiment_distribution.total != self.total_reviews:
            raise ValueError(
                f"sentiment distribution sums to {self.sentiment_distribution.total}, "
                f"expected {self.total_reviews}"
            )
        return self


# =============================================================================
# SCORING & OUTPUT
# =============================================================================

class DimensionScore(BaseModel):
    """One match sub-score, earned out of its own point budget."""
    dimension: str
    points: float = Field(ge=0.0)
    max_points: float = Field(gt=0.0)
    explanation: str = ""

    @property
    def score(self) -> float:
        return self.points / self.max_points


class ScoredInstitution(BaseModel):
    """
    An eligible institution with computed scores.
    Used between scoring and ranking stages.
    """
    institution: Institution
    dimension_scores: Dict[str, DimensionScore] = Field(default_factory=dict)
    match_score: int = Field(default=0, ge=0, le=100)
    admission_chance: Optional[int] = Field(default=None, ge=0, le=100)


class Recommendation(BaseModel):
    """Single ranked, explained recommendation."""
    rank: int = 0
    institution: Institution
    match_score: int = Field(ge=0, le=100)
    admission_chance: int = Field(ge=0, le=100)
    reasons: List[str] = Field(default_factory=list)
    pros: List[str] = Field(default_factory=list)
    cons: List[str] = Field(default_factory=list)
    review_summary: ReviewSummary
    dimension_scores: List[DimensionScore] = Field(default_factory=list)
    highly_rated: bool = False
    trending: bool = False
    recent_feedback: RecentFeedback = RecentFeedback.NONE

    class Config:
        use_enum_values = True


class RecommendationOutput(BaseModel):
    """
    Output contract for the engine.
    Contains ranked recommendations with summary statistics.
    """
    request_id: Optional[str] = None
    student_id: Optional[str] = None

    recommendations: List[Recommendation] = Field(default_factory=list)

    total_candidates_evaluated: int = 0
    total_eligible: int = 0
    total_recommended: int = 0

    processing_time_ms: Optional[float] = None
    engine_version: str = ENGINE_VERSION

    warnings: List[str] = Field(default_factory=list)
    empty_reason: Optional[str] = None
    partial: bool = False
