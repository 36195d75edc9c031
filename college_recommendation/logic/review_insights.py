"""
Review Insights

Pure helpers over classified posts: most discussed topics, quotable posts,
placement figures mentioned by students and a plain markdown digest.
"""

import re
from collections import Counter
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel, Field

from .constants import Sentiment
from .contracts import ClassifiedPost

MAX_TOP_TOPICS = 5
MIN_QUOTE_LENGTH = 100
MAX_QUOTE_LENGTH = 200
MAX_PACKAGE_LPA = 100
MAX_RECRUITERS = 10
MAX_RECRUITERS_IN_INSIGHT = 5

PACKAGE_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*(?:lpa|lakhs|lakh)", re.IGNORECASE)
PLACEMENT_PERCENT_PATTERN = re.compile(r"(\d+)%?\s*(?:placed|placement)", re.IGNORECASE)
RECRUITER_PATTERNS = [
    re.compile(r"placed at (\w+)", re.IGNORECASE),
    re.compile(r"recruited by (\w+)", re.IGNORECASE),
    re.compile(r"offer from (\w+)", re.IGNORECASE),
    re.compile(r"joined (\w+)", re.IGNORECASE),
]


class TopicCount(BaseModel):
    topic: str
    count: int


class KeyQuote(BaseModel):
    text: str
    author: Optional[str] = None
    sentiment: str
    score: int
    url: Optional[str] = None


class PlacementInsights(BaseModel):
    average_package_mentioned: Optional[float] = None
    top_recruiters: List[str] = Field(default_factory=list)
    placement_percentage: Optional[int] = None
    key_insights: List[str] = Field(default_factory=list)


def top_topics(posts: Sequence[ClassifiedPost], limit: int = MAX_TOP_TOPICS) -> List[TopicCount]:
    """Most mentioned topics, ties broken by topic name."""
    counts = Counter(topic for post in posts for topic in post.topics)
    ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [TopicCount(topic=topic, count=count) for topic, count in ordered[:limit]]


def _truncate(text: str, max_length: int = MAX_QUOTE_LENGTH) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


def extract_key_quotes(posts: Sequence[ClassifiedPost], max_quotes: int = 5) -> List[KeyQuote]:
    """
    Pick substantial, upvoted posts as quotes.

    Highest score first; among the top 2 * max_quotes candidates the first
    positive and first negative post are always taken before the rest fill
    the remaining slots.
    """
    substantial = [p for p in posts if len(p.text) > MIN_QUOTE_LENGTH and p.score > 0]
    candidates = sorted(substantial, key=lambda p: (-p.score, p.id))[:max_quotes * 2]

    picked: List[ClassifiedPost] = []
    for sentiment in (Sentiment.POSITIVE, Sentiment.NEGATIVE):
        first = next((p for p in candidates if p.sentiment == sentiment), None)
        if first is not None:
            picked.append(first)
    for post in candidates:
        if len(picked) >= max_quotes:
            break
        if all(post.id != p.id for p in picked):
            picked.append(post)

    picked.sort(key=lambda p: (-p.score, p.id))
    return [
        KeyQuote(
            text=_truncate(p.text),
            author=p.author,
            sentiment=p.sentiment,
            score=p.score,
            url=p.url,
        )
        for p in picked[:max_quotes]
    ]


def _is_placement_post(post: ClassifiedPost) -> bool:
    lowered = post.text.lower()
    return "Placements" in post.topics or "placement" in lowered or "package" in lowered


def analyze_placement_reviews(posts: Sequence[ClassifiedPost]) -> PlacementInsights:
    placement_posts = [p for p in posts if _is_placement_post(p)]

    packages: List[float] = []
    recruiters: Dict[str, None] = {}
    placement_percentage: Optional[int] = None

    for post in placement_posts:
        for match in PACKAGE_PATTERN.finditer(post.text):
            value = float(match.group(1))
            if 0 < value < MAX_PACKAGE_LPA:
                packages.append(value)

        for pattern in RECRUITER_PATTERNS:
            for match in pattern.finditer(post.text):
                recruiters.setdefault(match.group(1), None)

        match = PLACEMENT_PERCENT_PATTERN.search(post.text)
        if match:
            percent = int(match.group(1))
            if 0 < percent <= 100:
                placement_percentage = percent

    average_package = round(sum(packages) / len(packages), 2) if packages else None
    recruiter_names = list(recruiters)

    insights: List[str] = []
    if average_package:
        insights.append(f"Average package mentioned: ₹{average_package:.1f} LPA")
    if placement_percentage:
        insights.append(f"Placement rate: {placement_percentage}%")
    if recruiter_names:
        insights.append(f"Top recruiters: {', '.join(recruiter_names[:MAX_RECRUITERS_IN_INSIGHT])}")

    positive = sum(1 for p in placement_posts if p.sentiment == Sentiment.POSITIVE)
    negative = sum(1 for p in placement_posts if p.sentiment == Sentiment.NEGATIVE)
    if positive > negative * 2:
        insights.append("Students generally satisfied with placement outcomes")
    elif negative > positive:
        insights.append("Some concerns raised about placement support")

    return PlacementInsights(
        average_package_mentioned=average_package,
        top_recruiters=recruiter_names[:MAX_RECRUITERS],
        placement_percentage=placement_percentage,
        key_insights=insights,
    )


def build_review_digest(institution_name: str, posts: Sequence[ClassifiedPost]) -> str:
    """Deterministic markdown digest of the classified posts."""
    if not posts:
        return f"No community reviews found for {institution_name}."

    total = len(posts)
    positive = sum(1 for p in posts if p.sentiment == Sentiment.POSITIVE)
    negative = sum(1 for p in posts if p.sentiment == Sentiment.NEGATIVE)
    positive_percent = int(100.0 * positive / total + 0.5)
    tone = "generally positive" if positive > negative else "mixed"

    lines = [
        f"**Overall Sentiment:** Based on {total} reviews, {positive_percent}% of students "
        f"have positive experiences at {institution_name}.",
        "",
        "**Top Discussion Topics:**",
    ]
    lines.extend(f"- **{t.topic}**: Mentioned in {t.count} reviews" for t in top_topics(posts))
    lines.extend([
        "",
        "**Key Points:**",
        f"- Recent reviews show {tone} sentiment",
    ])
    lines.extend(f"- {insight}" for insight in analyze_placement_reviews(posts).key_insights)
    lines.extend([
        "",
        "**Note:** This is an automated summary. Please read detailed reviews for complete context.",
    ])
    return "\n".join(lines)
