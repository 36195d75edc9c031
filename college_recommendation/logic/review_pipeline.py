"""
Review Pipeline

fetch -> classify -> filter -> order/cap -> aggregate, for one institution.
The pipeline is stateless; CachedReviewPipeline adds caching at the boundary.
"""

import logging
import threading
from typing import List, Optional

from .cache import ReviewCache
from .constants import RECENT_WINDOW_DAYS
from .contracts import ClassifiedPost, ReviewFilters, ReviewSummary
from .post_fetcher import PostFetcher
from .review_aggregator import aggregate, apply_filters
from .text_classifier import LexiconTextClassifier, TextClassifier, classify_all

logger = logging.getLogger(__name__)


class ReviewPipeline:
    def __init__(
        self,
        fetcher: PostFetcher,
        classifier: Optional[TextClassifier] = None,
        max_posts: int = 50,
        recent_window_days: int = RECENT_WINDOW_DAYS,
    ):
        self.fetcher = fetcher
        self.classifier = classifier or LexiconTextClassifier()
        self.max_posts = max_posts
        self.recent_window_days = recent_window_days

    def collect(
        self,
        institution_name: str,
        cancel_event: Optional[threading.Event] = None,
        filters: Optional[ReviewFilters] = None
    ) -> List[ClassifiedPost]:
        """Fetch, classify and filter posts; most popular first, capped at max_posts."""
        posts = self.fetcher.fetch(institution_name, cancel_event=cancel_event)
        classified = classify_all(posts, self.classifier)
        if filters is not None:
            classified = apply_filters(classified, filters)
        classified.sort(key=lambda p: (-p.score, -p.created_at, p.source, p.id))
        return classified[: self.max_posts]

    def summarize(
        self,
        institution_id: str,
        institution_name: str,
        cancel_event: Optional[threading.Event] = None,
        filters: Optional[ReviewFilters] = None,
        now: Optional[float] = None
    ) -> ReviewSummary:
        posts = self.collect(institution_name, cancel_event=cancel_event, filters=filters)
        summary = self.summarize_posts(institution_id, posts, now=now)
        logger.info(f"📊 Found {summary.total_reviews} reviews for {institution_name}")
        return summary

    def summarize_posts(
        self,
        institution_id: str,
        posts: List[ClassifiedPost],
        now: Optional[float] = None
    ) -> ReviewSummary:
        return aggregate(institution_id, posts, now=now, recent_window_days=self.recent_window_days)


class CachedReviewPipeline:
    """
    Caches unfiltered summaries by lower-cased institution name.
    Summaries built from a cancelled fetch are never stored.
    """

    def __init__(self, pipeline: ReviewPipeline, cache: ReviewCache):
        self.pipeline = pipeline
        self.cache = cache

    def collect(self, institution_name, cancel_event=None, filters=None) -> List[ClassifiedPost]:
        return self.pipeline.collect(institution_name, cancel_event=cancel_event, filters=filters)

    def summarize_posts(self, institution_id, posts, now=None) -> ReviewSummary:
        return self.pipeline.summarize_posts(institution_id, posts, now=now)

    def summarize(
        self,
        institution_id: str,
        institution_name: str,
        cancel_event: Optional[threading.Event] = None,
        filters: Optional[ReviewFilters] = None,
        now: Optional[float] = None
    ) -> ReviewSummary:
        if filters is not None:
            return self.pipeline.summarize(
                institution_id, institution_name, cancel_event=cancel_event, filters=filters, now=now
            )

        key = institution_name.lower()
        cached = self.cache.get(key)
        if cached is not None:
            logger.info(f"✅ Cache hit for: {institution_name}")
            return cached.model_copy(update={"institution_id": institution_id})

        summary = self.pipeline.summarize(
            institution_id, institution_name, cancel_event=cancel_event, now=now
        )
        if cancel_event is None or not cancel_event.is_set():
            self.cache.put(key, summary)
        return summary
