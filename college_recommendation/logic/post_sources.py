"""
Community Post Sources

Each source answers a free-text search with a bounded page of posts.
Sources are idempotent reads; any failure is raised as SourceUnavailableError
and recovered by the PostFetcher.
"""

import logging
import threading
from typing import Any, Dict, Iterable, List, Optional, Protocol

import requests

from .contracts import CommunityPost
from .errors import SourceUnavailableError

logger = logging.getLogger(__name__)

_thread_state = threading.local()


def thread_session() -> requests.Session:
    """HTTP session owned by the calling thread; sessions are not shared across workers."""
    session = getattr(_thread_state, "session", None)
    if session is None:
        session = requests.Session()
        _thread_state.session = session
    return session


class CommunityPostSource(Protocol):
    name: str

    def search(self, query: str) -> List[CommunityPost]:
        ...


class RedditSubredditSource:
    """
    Searches one subreddit through the public JSON search endpoint.

    A 404 (missing or private subreddit) yields no posts; every other failure
    raises SourceUnavailableError.
    """

    def __init__(
        self,
        subreddit: str,
        base_url: str = "https://www.reddit.com",
        user_agent: str = "CollegeRecommender/1.0",
        limit: int = 25,
        timeout: float = 5.0,
        session: Optional[requests.Session] = None,
    ):
        self.subreddit = subreddit
        self.name = f"reddit:r/{subreddit}"
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self.limit = limit
        self.timeout = timeout
        self._session = session

    @property
    def session(self) -> requests.Session:
        return self._session if self._session is not None else thread_session()

    def search(self, query: str) -> List[CommunityPost]:
        url = f"{self.base_url}/r/{self.subreddit}/search.json"
        params = {
            "q": query,
            "restrict_sr": 1,
            "sort": "relevance",
            "limit": self.limit,
        }
        try:
            response = self.session.get(
                url,
                params=params,
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            raise SourceUnavailableError(self.name, f"timed out after {self.timeout}s") from e
        except requests.exceptions.RequestException as e:
            raise SourceUnavailableError(self.name, f"request failed: {e}") from e

        if response.status_code == 404:
            logger.warning("Subreddit r/%s not found or is private (404)", self.subreddit)
            return []
        if response.status_code != 200:
            raise SourceUnavailableError(self.name, f"HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            raise SourceUnavailableError(self.name, "malformed JSON payload") from e

        return self._parse_listing(payload)

    def _parse_listing(self, payload: Any) -> List[CommunityPost]:
        if not isinstance(payload, dict):
            raise SourceUnavailableError(self.name, "unexpected payload shape")
        children = (payload.get("data") or {}).get("children")
        if children is None:
            raise SourceUnavailableError(self.name, "payload has no listing")

        posts: List[CommunityPost] = []
        for child in children:
            data = child.get("data") if isinstance(child, dict) else None
            if not data or not data.get("id"):
                logger.debug(f"Skipping malformed listing entry from {self.name}")
                continue
            posts.append(self._to_post(data))
        return posts

    def _to_post(self, data: Dict[str, Any]) -> CommunityPost:
        permalink = data.get("permalink")
        return CommunityPost(
            id=str(data["id"]),
            source=f"reddit:r/{data.get('subreddit') or self.subreddit}",
            title=data.get("title") or "",
            body=data.get("selftext") or "",
            url=f"https://reddit.com{permalink}" if permalink else None,
            author=data.get("author"),
            flair=data.get("link_flair_text"),
            score=int(data.get("score") or 0),
            num_comments=int(data.get("num_comments") or 0),
            created_at=float(data.get("created_utc") or 0.0),
        )


class StaticPostSource:
    """In-memory source returning posts whose text matches the query."""

    def __init__(self, name: str, posts: Iterable[CommunityPost], limit: int = 25):
        self.name = name
        self.posts = list(posts)
        self.limit = limit

    def search(self, query: str) -> List[CommunityPost]:
        return [p for p in self.posts if p.mentions(query)][: self.limit]


def build_reddit_sources(
    subreddits: Iterable[str],
    base_url: str,
    user_agent: str,
    limit: int,
    timeout: float,
) -> List[RedditSubredditSource]:
    """One source per subreddit; each worker thread queries through its own session."""
    return [
        RedditSubredditSource(
            subreddit,
            base_url=base_url,
            user_agent=user_agent,
            limit=limit,
            timeout=timeout,
        )
        for subreddit in subreddits
    ]
