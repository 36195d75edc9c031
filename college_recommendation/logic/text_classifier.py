"""
Text Classifier

Assigns a sentiment label and topic tags to community posts using fixed
keyword lexicons. Pure and deterministic: identical text yields identical output.

The classifier is injected into the review pipeline through the TextClassifier
protocol so a statistical implementation can replace the lexicon one.
"""

import re
from typing import Dict, List, Optional, Protocol, Sequence

from .constants import (
    Sentiment,
    POSITIVE_KEYWORDS,
    NEGATIVE_KEYWORDS,
    TOPIC_KEYWORDS,
    GENERAL_TOPIC,
    COURSE_KEYWORDS,
    BATCH_YEAR_RANGE,
    VERIFIED_FLAIR_MARKER,
)
from .contracts import Classification, CommunityPost, ClassifiedPost


_YEAR_PATTERN = re.compile(r"\b(20\d{2})\b")


class TextClassifier(Protocol):
    def classify(self, text: str) -> Classification:
        ...


def count_keyword_hits(text: str, keywords: Sequence[str]) -> int:
    """Number of lexicon entries present in the lower-cased text."""
    lowered = text.lower()
    return sum(1 for keyword in keywords if keyword in lowered)


def decide_sentiment(positive_count: int, negative_count: int) -> Sentiment:
    """
    Map lexicon hit counts to a label.

    A clear 2:1 majority wins outright; near-equal counts are reported as
    mixed before falling back to the larger side.
    """
    if positive_count + negative_count == 0:
        return Sentiment.NEUTRAL
    if positive_count > 2 * negative_count:
        return Sentiment.POSITIVE
    if negative_count > 2 * positive_count:
        return Sentiment.NEGATIVE
    if abs(positive_count - negative_count) <= 1:
        return Sentiment.MIXED
    return Sentiment.POSITIVE if positive_count > negative_count else Sentiment.NEGATIVE


def extract_batch_year(text: str) -> Optional[int]:
    low, high = BATCH_YEAR_RANGE
    match = _YEAR_PATTERN.search(text)
    if match:
        year = int(match.group(1))
        if low <= year <= high:
            return year
    return None


def extract_course(text: str) -> Optional[str]:
    lowered = text.lower()
    for course in COURSE_KEYWORDS:
        if re.search(rf"\b{re.escape(course)}\b", lowered):
            return course.upper()
    return None


class LexiconTextClassifier:
    """Keyword-count sentiment plus bucket-membership topics."""

    def __init__(
        self,
        positive_keywords: Sequence[str] = POSITIVE_KEYWORDS,
        negative_keywords: Sequence[str] = NEGATIVE_KEYWORDS,
        topic_keywords: Dict[str, List[str]] = TOPIC_KEYWORDS,
    ):
        self.positive_keywords = tuple(k.lower() for k in positive_keywords)
        self.negative_keywords = tuple(k.lower() for k in negative_keywords)
        self.topic_keywords = {
            topic: tuple(k.lower() for k in keywords)
            for topic, keywords in topic_keywords.items()
        }

    def sentiment(self, text: str) -> Sentiment:
        return decide_sentiment(
            count_keyword_hits(text, self.positive_keywords),
            count_keyword_hits(text, self.negative_keywords),
        )

    def topics(self, text: str) -> List[str]:
        lowered = text.lower()
        found = [
            topic
            for topic, keywords in self.topic_keywords.items()
            if any(keyword in lowered for keyword in keywords)
        ]
        return found or [GENERAL_TOPIC]

    def classify(self, text: str) -> Classification:
        text = text or ""
        return Classification(sentiment=self.sentiment(text), topics=self.topics(text))


def classify_post(post: CommunityPost, classifier: TextClassifier) -> ClassifiedPost:
    """Attach sentiment, topics and extracted metadata to a fetched post."""
    text = post.text
    result = classifier.classify(text)
    return ClassifiedPost(
        **post.model_dump(),
        sentiment=result.sentiment,
        topics=list(result.topics) or [GENERAL_TOPIC],
        batch_year=extract_batch_year(text),
        course=extract_course(text),
        verified=bool(post.flair and VERIFIED_FLAIR_MARKER in post.flair),
    )


def classify_all(
    posts: Sequence[CommunityPost],
    classifier: TextClassifier
) -> List[ClassifiedPost]:
    return [classify_post(post, classifier) for post in posts]
