"""
Engine Runner

Wires production collaborators into the engine:
1. SQL-backed institution catalog
2. Reddit community sources behind the post fetcher
3. Review pipeline with a process-wide TTL cache
4. RecommendationEngine

This is a pure orchestration layer - NO scoring, NO business logic.
"""

import logging
import re
from typing import Any, Dict, Optional, Union

from sqlalchemy.orm import Session

from ..config import EngineSettings, load_settings
from .cache import InMemoryTTLCache, ReviewCache
from .catalog import SqlInstitutionCatalog
from .contracts import CandidatePreferences, RecommendationOutput, ReviewFilters
from .engine import RecommendationEngine
from .post_fetcher import PostFetcher
from .post_sources import build_reddit_sources
from .review_insights import (
    analyze_placement_reviews,
    build_review_digest,
    extract_key_quotes,
    top_topics,
)
from .review_pipeline import CachedReviewPipeline, ReviewPipeline

logger = logging.getLogger(__name__)

_review_cache: Optional[InMemoryTTLCache] = None


def get_review_cache(settings: EngineSettings) -> InMemoryTTLCache:
    """Process-wide review cache, created on first use."""
    global _review_cache
    if _review_cache is None:
        _review_cache = InMemoryTTLCache(ttl_seconds=settings.review_cache_ttl_seconds)
    return _review_cache


def build_review_pipeline(
    settings: EngineSettings,
    cache: Optional[ReviewCache] = None
) -> CachedReviewPipeline:
    sources = build_reddit_sources(
        settings.community_subreddits,
        base_url=settings.reddit_base_url,
        user_agent=settings.reddit_user_agent,
        limit=settings.reddit_search_limit,
        timeout=settings.source_timeout_seconds,
    )
    pipeline = ReviewPipeline(
        PostFetcher(sources, delay_seconds=settings.source_delay_seconds),
        max_posts=settings.max_posts_per_institution,
        recent_window_days=settings.recent_window_days,
    )
    return CachedReviewPipeline(pipeline, cache if cache is not None else get_review_cache(settings))


def build_engine(
    db: Session,
    settings: Optional[EngineSettings] = None
) -> RecommendationEngine:
    settings = settings or load_settings()
    review_pipeline = build_review_pipeline(settings) if settings.fetch_reviews else None
    return RecommendationEngine(
        SqlInstitutionCatalog(db),
        review_pipeline=review_pipeline,
        settings=settings,
    )


def run_recommendations(
    db: Session,
    preferences: Union[CandidatePreferences, Dict[str, Any]],
    max_results: Optional[int] = None,
    settings: Optional[EngineSettings] = None
) -> RecommendationOutput:
    """
    Main entry point: run full recommendation pipeline.

    Args:
        db: Database session
        preferences: Candidate preferences (model or dict)
        max_results: Max recommendations to return

    Returns:
        RecommendationOutput with ranked recommendations
    """
    engine = build_engine(db, settings)
    return engine.recommend(preferences, max_results=max_results)


def _slug(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


def run_review_report(
    institution_name: str,
    filters: Optional[ReviewFilters] = None,
    pipeline=None,
    settings: Optional[EngineSettings] = None
) -> Dict[str, Any]:
    """
    Review summary plus insights for a single institution name.

    Args:
        institution_name: Name searched in community sources
        filters: Optional review filters
        pipeline: Review pipeline; built from settings when omitted

    Returns:
        Dict with summary, top topics, key quotes, placement insights and a digest
    """
    if pipeline is None:
        pipeline = build_review_pipeline(settings or load_settings())

    logger.info(f"🔍 Building review report for {institution_name}")
    posts = pipeline.collect(institution_name, filters=filters)
    summary = pipeline.summarize_posts(_slug(institution_name), posts)

    return {
        "institution_name": institution_name,
        "summary": summary,
        "top_topics": top_topics(posts),
        "key_quotes": extract_key_quotes(posts),
        "placement_insights": analyze_placement_reviews(posts),
        "digest": build_review_digest(institution_name, posts),
    }
