"""
Recommendation Engine Constants

Defines lexicons, topic buckets, point budgets, rank tiers and admission bands
used by the engine. All values are deterministic with no AI/ML components.

The eligibility floor and the admission bands are tunable policy carried over
for behavioral parity; they have no derivation beyond historical use.
"""

from enum import Enum
from typing import Dict, List, Tuple


# =============================================================================
# ENUMS
# =============================================================================

class ExamType(str, Enum):
    """Entrance exams with recorded cutoffs."""
    JEE = "JEE"
    KCET = "KCET"
    COMEDK = "COMEDK"
    NEET = "NEET"
    CET = "CET"
    GATE = "GATE"
    CAT = "CAT"


class InstitutionType(str, Enum):
    GOVERNMENT = "Government"
    PRIVATE = "Private"
    AUTONOMOUS = "Autonomous"
    DEEMED = "Deemed"


class Sentiment(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"
    MIXED = "mixed"


class Trend(str, Enum):
    IMPROVING = "improving"
    STABLE = "stable"
    DECLINING = "declining"


class RecentFeedback(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    MIXED = "mixed"
    NONE = "none"


# =============================================================================
# SENTIMENT LEXICONS
# =============================================================================

POSITIVE_KEYWORDS: List[str] = [
    "great", "excellent", "amazing", "good", "best", "love", "awesome",
    "fantastic", "wonderful", "outstanding", "impressive", "highly recommend",
    "satisfied", "happy", "proud", "beautiful campus", "good placement",
]

NEGATIVE_KEYWORDS: List[str] = [
    "bad", "poor", "worst", "terrible", "awful", "horrible", "hate",
    "disappointed", "regret", "waste", "not worth", "avoid", "pathetic",
    "unprofessional", "overrated", "useless",
]

# =============================================================================
# TOPIC BUCKETS
# =============================================================================

GENERAL_TOPIC = "General"

# Insertion order is the order topics are reported in
TOPIC_KEYWORDS: Dict[str, List[str]] = {
    "Placements": ["placement", "placed", "package", "salary", "job", "recruit", "internship"],
    "Faculty": ["faculty", "professor", "teacher", "teaching", "instructor", "staff"],
    "Infrastructure": ["infrastructure", "building", "campus", "facility", "lab", "library", "hostel"],
    "Curriculum": ["curriculum", "syllabus", "course", "subject", "semester", "exam"],
    "Fees": ["fees", "fee structure", "cost", "expensive", "affordable", "scholarship"],
    "Campus Life": ["campus", "fest", "event", "club", "activity", "social", "friends"],
    "Location": ["location", "city", "connectivity", "transport", "area"],
    "Administration": ["management", "administration", "admin", "office", "staff"],
}

# Whole-word course mentions, checked in order
COURSE_KEYWORDS: List[str] = [
    "computer science", "cse", "cs",
    "information technology", "it",
    "electronics", "ece",
    "mechanical", "mech",
    "civil",
    "electrical", "eee",
    "medicine", "mbbs",
    "btech", "mtech", "mba",
]

BATCH_YEAR_RANGE: Tuple[int, int] = (2015, 2030)
VERIFIED_FLAIR_MARKER = "Verified"

# =============================================================================
# MATCH SCORE POINT BUDGETS (sum to 100)
# =============================================================================

DIMENSION_POINTS: Dict[str, float] = {
    "location_match": 25.0,
    "type_match": 15.0,
    "branch_availability": 20.0,
    "placement_strength": 20.0,
    "rank_tier": 10.0,
    "autonomy": 5.0,
    "facilities": 5.0,
}

MAX_MATCH_POINTS = sum(DIMENSION_POINTS.values())

# Partial credit when the candidate expressed no preference
NO_LOCATION_PREFERENCE_POINTS = 15.0
NO_TYPE_PREFERENCE_POINTS = 10.0

# (max rank inclusive, points); anything ranked beyond the last tier earns the fallback
RANK_TIERS: List[Tuple[int, float]] = [
    (50, 10.0),
    (100, 8.0),
    (200, 5.0),
]
RANK_TIER_FALLBACK_POINTS = 2.0

FACILITIES_FOR_FULL_CREDIT = 10

# =============================================================================
# ELIGIBILITY & ADMISSION
# =============================================================================

# A candidate is eligible when score >= floor * cutoff for some preferred branch
ELIGIBILITY_CUTOFF_FLOOR = 0.8

# (minimum percent above cutoff, admission chance), evaluated top-down
ADMISSION_BANDS: List[Tuple[float, int]] = [
    (20.0, 95),
    (10.0, 85),
    (5.0, 75),
    (0.0, 60),
    (-5.0, 45),
    (-10.0, 30),
    (-20.0, 15),
]
ADMISSION_FLOOR_CHANCE = 5

# =============================================================================
# REVIEW AGGREGATION
# =============================================================================

NEUTRAL_TOPIC_RATING = 2.5
MAX_TOPIC_RATING = 5.0
TOPIC_SENTIMENT_THRESHOLD = 0.2
TREND_THRESHOLD = 0.2
RECENT_WINDOW_DAYS = 180

HIGHLY_RATED_POSITIVE_SHARE = 0.6
TRENDING_MIN_RECENT_POSTS = 3
TRENDING_MIN_RECENT_SENTIMENT = 0.5
RECENT_FEEDBACK_MIN_POSTS = 5
RECENT_FEEDBACK_THRESHOLD = 0.3

# =============================================================================
# EXPLANATION THRESHOLDS
# =============================================================================

EXCELLENT_MATCH_SCORE = 80
REASON_MAX_RANK = 100
HIGH_PLACEMENT_PERCENTAGE = 80.0
LOW_RANK_CUTOFF = 200
MIN_FACILITIES = 5
MAX_BRANCHES_IN_REASON = 2
MAX_FACILITIES_IN_PRO = 3

MAX_REVIEW_PROS = 3
MAX_REVIEW_CONS = 2
MAX_PROS = 5
MAX_CONS = 4

# =============================================================================
# DEFAULTS
# =============================================================================

DEFAULT_MAX_RESULTS = 20
ENGINE_VERSION = "1.0.0"
NO_ELIGIBLE_REASON = "No institutions met the 80%-of-cutoff floor"
