"""
Post Fetcher

Queries every community source for an institution name and returns the
concatenation of posts that actually mention it. A failing source contributes
zero posts; it is logged and never retried within the request.

Cancellation is cooperative: it is checked before every source query, so a
query already in flight runs until its own per-source timeout.
"""

import logging
import threading
import time
from typing import List, Optional, Sequence

from .contracts import CommunityPost
from .errors import SourceUnavailableError
from .post_sources import CommunityPostSource

logger = logging.getLogger(__name__)


def _cancelled(cancel_event: Optional[threading.Event]) -> bool:
    return cancel_event is not None and cancel_event.is_set()


class PostFetcher:
    def __init__(
        self,
        sources: Sequence[CommunityPostSource],
        delay_seconds: float = 0.05,
        sleep=time.sleep,
    ):
        """
        Args:
            sources: Community post sources, queried in order
            delay_seconds: Pause between source queries (rate-limit politeness)
            sleep: Sleep function, injectable for tests
        """
        self.sources = list(sources)
        self.delay_seconds = delay_seconds
        self._sleep = sleep

    def fetch(
        self,
        institution_name: str,
        cancel_event: Optional[threading.Event] = None
    ) -> List[CommunityPost]:
        posts: List[CommunityPost] = []

        for index, source in enumerate(self.sources):
            if index > 0 and self.delay_seconds > 0 and not _cancelled(cancel_event):
                self._sleep(self.delay_seconds)

            # checked after the delay so a cancel during the pause skips the next query
            if _cancelled(cancel_event):
                logger.info(
                    "Fetch for %s cancelled after %d of %d sources",
                    institution_name, index, len(self.sources),
                )
                break

            try:
                found = source.search(institution_name)
            except SourceUnavailableError as e:
                logger.warning("Source unavailable for %s: %s", institution_name, e)
                continue
            except Exception as e:
                logger.warning(
                    "Source %s failed for %s: %s",
                    getattr(source, "name", source), institution_name, e,
                )
                continue

            posts.extend(p for p in found if p.mentions(institution_name))

        logger.debug(f"Fetched {len(posts)} posts mentioning {institution_name}")
        return posts
