"""Personalized recommendation entry point."""

import asyncio
import random
import re
from collections.abc import Awaitable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TypeVar
from uuid import UUID

import structlog

from app.services.recommendation.aggregator import dedupe_and_rank
from app.services.recommendation.ports import DiscoverStore
from app.services.recommendation.profile import ProfileBuilder
from app.services.recommendation.sources import (
    CandidateSource,
    CategorySource,
    FriendSource,
    SerendipitySource,
    SimilaritySource,
    TrendingSource,
)
from app.services.recommendation.types import Candidate, ReasonType, UserProfile

if TYPE_CHECKING:
    from app.services.book_service import BookService

logger = structlog.get_logger(__name__)

T = TypeVar("T")

DEFAULT_LIMIT = 20

# Percent of the requested limit each source may fill, in merge order.
# Unused share (e.g. no favorite books) is not redistributed.
SOURCE_SHARES: dict[ReasonType, int] = {
    ReasonType.SIMILAR: 40,
    ReasonType.FRIEND: 25,
    ReasonType.CATEGORY: 20,
    ReasonType.TRENDING: 10,
    ReasonType.SERENDIPITY: 5,
}

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def coerce_limit(raw: Any, default: int = DEFAULT_LIMIT) -> int:
    """Parse a client-supplied limit; anything non-positive or unparsable is ``default``.

    Strings are read like a leading ``%d`` scan, so ``"15abc"`` is 15.
    """
    if isinstance(raw, bool):
        return default
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, str):
        match = _LEADING_INT_RE.match(raw)
        if not match:
            return default
        value = int(match.group(1))
    else:
        return default
    return value if value > 0 else default


def source_quota(limit: int, share_percent: int) -> int:
    """Integer share of ``limit`` (truncating)."""
    return limit * share_percent // 100


@dataclass
class RecommendationFeed:
    """Ranked recommendations for one request."""

    recommendations: list[Candidate] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.recommendations)


class RecommendationService:
    """Blends the candidate sources into one ranked feed.

    Identified users get profile-driven recommendations from all five
    sources; anonymous callers get trending books only. Every collaborator
    call shares one deadline, and a source that fails or runs out of time
    contributes nothing instead of failing the request.
    """

    def __init__(
        self,
        store: DiscoverStore,
        books: "BookService",
        request_timeout: float = 10.0,
        default_limit: int = DEFAULT_LIMIT,
        rng: random.Random | None = None,
    ):
        self.store = store
        self.books = books
        self.request_timeout = request_timeout
        self.default_limit = default_limit
        self._rng = rng

    async def get_recommendations(
        self,
        user_id: UUID | None,
        limit: Any = None,
    ) -> RecommendationFeed:
        limit = coerce_limit(limit, self.default_limit)
        # Per-request generator: no shared seeding across concurrent requests
        rng = self._rng or random.Random()
        deadline = asyncio.get_running_loop().time() + self.request_timeout

        if user_id is None:
            candidates = await self._run_source(TrendingSource(self.store), None, None, limit, deadline)
            feed = RecommendationFeed(candidates[:limit])
            logger.info("recommendations_generated", user_id=None, count=feed.count, limit=limit)
            return feed

        # Loaded before any source so a slow source cannot starve the filter
        logged = await self._bounded(
            self.store.logged_book_ids(user_id),
            deadline,
            default=set(),
            what="logged_books",
        )

        profile = await self._bounded(
            ProfileBuilder(self.store).build(user_id),
            deadline,
            default=UserProfile(),
            what="profile",
        )

        candidates: list[Candidate] = []
        source_counts: dict[str, int] = {}
        for source in self._build_sources(rng):
            quota = source_quota(limit, SOURCE_SHARES[source.reason_type])
            produced = await self._run_source(source, profile, user_id, quota, deadline)
            source_counts[source.name] = len(produced)
            candidates.extend(produced)

        feed = RecommendationFeed(dedupe_and_rank(candidates, logged, limit, rng))
        logger.info(
            "recommendations_generated",
            user_id=str(user_id),
            count=feed.count,
            limit=limit,
            profile_empty=profile.is_empty,
            sources=source_counts,
        )
        return feed

    def _build_sources(self, rng: random.Random) -> list[CandidateSource]:
        return [
            SimilaritySource(self.books),
            FriendSource(self.store, self.books),
            CategorySource(self.books, rng),
            TrendingSource(self.store),
            SerendipitySource(self.store),
        ]

    async def _run_source(
        self,
        source: CandidateSource,
        profile: UserProfile | None,
        user_id: UUID | None,
        quota: int,
        deadline: float,
    ) -> list[Candidate]:
        if quota <= 0:
            return []
        return await self._bounded(
            source.generate(profile, user_id, quota),
            deadline,
            default=[],
            what=source.name,
        )

    @staticmethod
    async def _bounded(awaitable: Awaitable[T], deadline: float, default: T, what: str) -> T:
        """Await within the request deadline; failures and timeouts yield ``default``."""
        remaining = deadline - asyncio.get_running_loop().time()
        if remaining <= 0:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            logger.warning("recommendation_step_skipped", step=what, reason="deadline exceeded")
            return default

        try:
            return await asyncio.wait_for(awaitable, timeout=remaining)
        except asyncio.TimeoutError:
            logger.warning("recommendation_step_timeout", step=what)
        except Exception as e:
            logger.warning("recommendation_step_failed", step=what, error=str(e))
        return default
