"""
Runtime settings for the recommendation engine, read from the environment.
"""

import os
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()

DEFAULT_SUBREDDITS = [
    "Indian_Academia",
    "IndianStudents",
    "EngineeringStudents",
    "india",
    "bangalore",
    "mumbai",
    "delhi",
    "hyderabad",
    "pune",
    "Chennai",
    "kolkata",
]


class EngineSettings(BaseModel):
    database_url: str = "sqlite:///./colleges.db"

    # community post sources
    community_subreddits: List[str] = Field(default_factory=lambda: list(DEFAULT_SUBREDDITS))
    reddit_base_url: str = "https://www.reddit.com"
    reddit_user_agent: str = "CollegeRecommender/1.0"
    reddit_search_limit: int = Field(default=25, ge=1, le=100)
    source_timeout_seconds: float = Field(default=5.0, gt=0)
    source_delay_seconds: float = Field(default=0.05, ge=0)

    # request scheduling
    max_concurrent_fetches: int = Field(default=8, ge=1)
    request_deadline_seconds: float = Field(default=20.0, gt=0)
    partial_results_on_timeout: bool = True

    # reviews
    fetch_reviews: bool = True
    review_cache_ttl_seconds: float = Field(default=300.0, ge=0)
    max_posts_per_institution: int = Field(default=50, ge=1)
    recent_window_days: int = Field(default=180, ge=1)

    # ranking
    prefilter_catalog: bool = False
    min_admission_chance: int = Field(default=0, ge=0, le=100)
    default_max_results: int = Field(default=20, ge=1)


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: List[str]) -> List[str]:
    value = os.getenv(name)
    if not value:
        return list(default)
    return [item.strip() for item in value.split(",") if item.strip()]


def load_settings() -> EngineSettings:
    """Build EngineSettings from environment variables, falling back to defaults."""
    defaults = EngineSettings()
    return EngineSettings(
        database_url=os.getenv("DATABASE_URL", defaults.database_url),
        community_subreddits=_env_list("COMMUNITY_SUBREDDITS", defaults.community_subreddits),
        reddit_base_url=os.getenv("REDDIT_BASE_URL", defaults.reddit_base_url),
        reddit_user_agent=os.getenv("REDDIT_USER_AGENT", defaults.reddit_user_agent),
        reddit_search_limit=int(os.getenv("REDDIT_SEARCH_LIMIT", defaults.reddit_search_limit)),
        source_timeout_seconds=float(os.getenv("SOURCE_TIMEOUT_SECONDS", defaults.source_timeout_seconds)),
        source_delay_seconds=float(os.getenv("SOURCE_DELAY_SECONDS", defaults.source_delay_seconds)),
        max_concurrent_fetches=int(os.getenv("MAX_CONCURRENT_FETCHES", defaults.max_concurrent_fetches)),
        request_deadline_seconds=float(os.getenv("REQUEST_DEADLINE_SECONDS", defaults.request_deadline_seconds)),
        partial_results_on_timeout=_env_bool("PARTIAL_RESULTS_ON_TIMEOUT", defaults.partial_results_on_timeout),
        fetch_reviews=_env_bool("FETCH_REVIEWS", defaults.fetch_reviews),
        review_cache_ttl_seconds=float(os.getenv("REVIEW_CACHE_TTL_SECONDS", defaults.review_cache_ttl_seconds)),
        max_posts_per_institution=int(os.getenv("MAX_POSTS_PER_INSTITUTION", defaults.max_posts_per_institution)),
        recent_window_days=int(os.getenv("RECENT_WINDOW_DAYS", defaults.recent_window_days)),
        prefilter_catalog=_env_bool("PREFILTER_CATALOG", defaults.prefilter_catalog),
        min_admission_chance=int(os.getenv("MIN_ADMISSION_CHANCE", defaults.min_admission_chance)),
        default_max_results=int(os.getenv("DEFAULT_MAX_RESULTS", defaults.default_max_results)),
    )
