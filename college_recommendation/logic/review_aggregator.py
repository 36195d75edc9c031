"""
Review Aggregator

Groups classified posts for one institution into a ReviewSummary:
sentiment distribution, per-topic ratings and a recency trend.

Aggregation only sums and counts, so the result does not depend on post order.
"""

import time
from typing import Dict, List, Optional, Sequence

from .constants import (
    Sentiment,
    Trend,
    RecentFeedback,
    NEUTRAL_TOPIC_RATING,
    MAX_TOPIC_RATING,
    TOPIC_SENTIMENT_THRESHOLD,
    TREND_THRESHOLD,
    RECENT_WINDOW_DAYS,
    HIGHLY_RATED_POSITIVE_SHARE,
    TRENDING_MIN_RECENT_POSTS,
    TRENDING_MIN_RECENT_SENTIMENT,
    RECENT_FEEDBACK_MIN_POSTS,
    RECENT_FEEDBACK_THRESHOLD,
)
from .contracts import (
    ClassifiedPost,
    ReviewFilters,
    ReviewSummary,
    SentimentDistribution,
    TopicRating,
)

SECONDS_PER_DAY = 24 * 60 * 60


def net_sentiment(posts: Sequence[ClassifiedPost]) -> float:
    """(positive - negative) / total, in [-1, 1]; 0 for no posts."""
    if not posts:
        return 0.0
    positive = sum(1 for p in posts if p.sentiment == Sentiment.POSITIVE)
    negative = sum(1 for p in posts if p.sentiment == Sentiment.NEGATIVE)
    return (positive - negative) / len(posts)


def _topic_sentiment(score: float) -> Sentiment:
    if score > TOPIC_SENTIMENT_THRESHOLD:
        return Sentiment.POSITIVE
    if score < -TOPIC_SENTIMENT_THRESHOLD:
        return Sentiment.NEGATIVE
    return Sentiment.NEUTRAL


def rate_topics(
    posts: Sequence[ClassifiedPost],
    recent_horizon: Optional[float] = None
) -> Dict[str, TopicRating]:
    """
    Rate every topic bucket seen across posts.

    average_rating = clamp(2.5 + sentimentScore * 2.5, 0, 5), so a neutral
    bucket sits at 2.5 and skews symmetrically toward 0 or 5.
    Posts created after recent_horizon also count toward recent_mentions.
    """
    tallies: Dict[str, Dict[str, int]] = {}

    for post in posts:
        for topic in post.topics:
            tally = tallies.setdefault(
                topic, {"mentions": 0, "positive": 0, "negative": 0, "recent": 0}
            )
            tally["mentions"] += 1
            if post.sentiment == Sentiment.POSITIVE:
                tally["positive"] += 1
            elif post.sentiment == Sentiment.NEGATIVE:
                tally["negative"] += 1
            if recent_horizon is not None and post.created_at > recent_horizon:
                tally["recent"] += 1

    ratings: Dict[str, TopicRating] = {}
    for topic in sorted(tallies):
        tally = tallies[topic]
        sentiment_score = (tally["positive"] - tally["negative"]) / tally["mentions"]
        rating = NEUTRAL_TOPIC_RATING + sentiment_score * NEUTRAL_TOPIC_RATING
        ratings[topic] = TopicRating(
            topic=topic,
            average_rating=max(0.0, min(MAX_TOPIC_RATING, rating)),
            mention_count=tally["mentions"],
            recent_mentions=tally["recent"],
            sentiment=_topic_sentiment(sentiment_score),
        )
    return ratings


def detect_trend(recent_sentiment: float, average_sentiment: float, recent_count: int) -> Trend:
    if recent_count == 0:
        return Trend.STABLE
    if recent_sentiment > average_sentiment + TREND_THRESHOLD:
        return Trend.IMPROVING
    if recent_sentiment < average_sentiment - TREND_THRESHOLD:
        return Trend.DECLINING
    return Trend.STABLE


def aggregate(
    institution_id: str,
    posts: Sequence[ClassifiedPost],
    now: Optional[float] = None,
    recent_window_days: int = RECENT_WINDOW_DAYS
) -> ReviewSummary:
    """
    Build the ReviewSummary for one institution.

    Args:
        institution_id: Institution the posts belong to
        posts: Classified posts (any order)
        now: Aggregation time as unix seconds; defaults to the current time
        recent_window_days: Posts newer than this count as recent for the trend

    Returns:
        ReviewSummary; an empty one (stable trend, zero counts) for no posts
    """
    now = time.time() if now is None else now

    if not posts:
        return ReviewSummary(institution_id=institution_id, generated_at=now)

    distribution = SentimentDistribution()
    for post in posts:
        setattr(distribution, post.sentiment, getattr(distribution, post.sentiment) + 1)

    horizon = now - recent_window_days * SECONDS_PER_DAY
    recent = [p for p in posts if p.created_at > horizon]

    average_sentiment = net_sentiment(posts)
    recent_sentiment = net_sentiment(recent)

    return ReviewSummary(
        institution_id=institution_id,
        total_reviews=len(posts),
        average_sentiment=average_sentiment,
        sentiment_distribution=distribution,
        topic_ratings=rate_topics(posts, horizon),
        recent_trend=detect_trend(recent_sentiment, average_sentiment, len(recent)),
        recent_reviews=len(recent),
        recent_sentiment=recent_sentiment,
        generated_at=now,
    )


# =============================================================================
# SUMMARY-DERIVED SIGNALS
# =============================================================================

def is_highly_rated(summary: ReviewSummary) -> bool:
    if summary.total_reviews == 0:
        return False
    return summary.sentiment_distribution.positive > summary.total_reviews * HIGHLY_RATED_POSITIVE_SHARE


def is_trending(summary: ReviewSummary) -> bool:
    return (
        summary.recent_reviews > TRENDING_MIN_RECENT_POSTS
        and summary.recent_sentiment > TRENDING_MIN_RECENT_SENTIMENT
    )


def recent_feedback(summary: ReviewSummary) -> RecentFeedback:
    if summary.recent_reviews <= RECENT_FEEDBACK_MIN_POSTS:
        return RecentFeedback.NONE
    if summary.recent_sentiment > RECENT_FEEDBACK_THRESHOLD:
        return RecentFeedback.POSITIVE
    if summary.recent_sentiment < -RECENT_FEEDBACK_THRESHOLD:
        return RecentFeedback.NEGATIVE
    return RecentFeedback.MIXED


# =============================================================================
# FILTERS
# =============================================================================

def apply_filters(posts: Sequence[ClassifiedPost], filters: ReviewFilters) -> List[ClassifiedPost]:
    filtered = list(posts)

    if filters.batch_years:
        filtered = [p for p in filtered if p.batch_year in filters.batch_years]

    if filters.courses:
        wanted = [c.lower() for c in filters.courses]
        filtered = [
            p for p in filtered
            if p.course and any(w in p.course.lower() for w in wanted)
        ]

    if filters.topics:
        filtered = [p for p in filtered if any(t in filters.topics for t in p.topics)]

    if filters.sentiments:
        filtered = [p for p in filtered if p.sentiment in filters.sentiments]

    if filters.min_score is not None:
        filtered = [p for p in filtered if p.score >= filters.min_score]

    if filters.verified_only:
        filtered = [p for p in filtered if p.verified]

    return filtered
