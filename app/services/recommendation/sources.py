"""Candidate sources: one strategy each for proposing books.

Every source returns a list of ``Candidate`` and returns an empty list when
its required input is missing. Errors propagate to the caller, which treats
a failed source as empty.
"""

import random
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING
from uuid import UUID

import structlog

from app.services.recommendation.ports import DiscoverStore
from app.services.recommendation.types import (
    Book,
    Candidate,
    ReasonType,
    RecommendationReason,
    UserProfile,
)

if TYPE_CHECKING:
    from app.services.book_service import BookService

logger = structlog.get_logger(__name__)

MIN_FRIEND_RATING = 4
MIN_SERENDIPITY_RATING = 3.5


class CandidateSource(ABC):
    """Base class for recommendation strategies."""

    reason_type: ReasonType

    @property
    def name(self) -> str:
        return self.reason_type.value

    @abstractmethod
    async def generate(
        self,
        profile: UserProfile | None,
        user_id: UUID | None,
        quota: int,
    ) -> list[Candidate]:
        """Produce up to roughly ``quota`` candidates."""


class SimilaritySource(CandidateSource):
    """Books sharing a category (or else an author) with a favorite book."""

    reason_type = ReasonType.SIMILAR

    def __init__(self, books: "BookService"):
        self.books = books

    async def generate(self, profile, user_id, quota):
        if quota <= 0 or profile is None or not profile.favorite_book_ids:
            return []

        favorites = profile.favorite_book_ids
        per_book = quota // len(favorites) + 1

        candidates: list[Candidate] = []
        for favorite_id in favorites:
            try:
                similar = await self._find_similar(favorite_id, per_book)
            except Exception as e:
                logger.warning("similar_lookup_failed", book_id=favorite_id, error=str(e))
                continue

            reason = RecommendationReason.similar(favorite_id)
            candidates.extend(Candidate.for_reason(book, reason) for book in similar)

        return candidates

    async def _find_similar(self, book_id: str, limit: int) -> list[Book]:
        book = await self.books.get_book(book_id)
        if book is None:
            return []

        if book.categories:
            query = f"subject:{book.categories[0]}"
        elif book.authors:
            query = f"inauthor:{book.authors[0]}"
        else:
            return []

        return await self.books.search_catalog(query, limit)


class FriendSource(CandidateSource):
    """Books highly rated by people the user follows."""

    reason_type = ReasonType.FRIEND

    def __init__(self, store: DiscoverStore, books: "BookService"):
        self.store = store
        self.books = books

    async def generate(self, profile, user_id, quota):
        if quota <= 0 or user_id is None:
            return []

        rows = await self.store.friend_logs(user_id, MIN_FRIEND_RATING, quota)

        candidates: list[Candidate] = []
        for book_id, friend_count in rows[:quota]:
            try:
                book = await self.books.get_book(book_id)
            except Exception as e:
                logger.warning("friend_book_lookup_failed", book_id=book_id, error=str(e))
                continue
            if book is not None:
                candidates.append(Candidate.for_reason(book, RecommendationReason.friend(friend_count)))

        return candidates


class CategorySource(CandidateSource):
    """Catalog books in one randomly chosen favorite category."""

    reason_type = ReasonType.CATEGORY

    def __init__(self, books: "BookService", rng: random.Random):
        self.books = books
        self.rng = rng

    async def generate(self, profile, user_id, quota):
        if quota <= 0 or profile is None or not profile.favorite_categories:
            return []

        # One category per call
        category = self.rng.choice(profile.favorite_categories)
        books = await self.books.search_catalog(f"subject:{category}", quota)

        reason = RecommendationReason.category(category)
        return [Candidate.for_reason(book, reason) for book in books]


class TrendingSource(CandidateSource):
    """Most-read books on the platform; random books when nothing is read yet."""

    reason_type = ReasonType.TRENDING

    def __init__(self, store: DiscoverStore):
        self.store = store

    async def generate(self, profile, user_id, quota):
        if quota <= 0:
            return []

        try:
            books = await self.store.trending_books(quota)
        except Exception as e:
            logger.warning("trending_query_failed", error=str(e))
            books = []

        if not books:
            books = await self.store.random_books(quota)

        reason = RecommendationReason.trending()
        return [Candidate.for_reason(book, reason) for book in books[:quota]]


class SerendipitySource(CandidateSource):
    """Random well-rated books, for novelty."""

    reason_type = ReasonType.SERENDIPITY

    def __init__(self, store: DiscoverStore):
        self.store = store

    async def generate(self, profile, user_id, quota):
        if quota <= 0:
            return []

        books = await self.store.random_quality_books(MIN_SERENDIPITY_RATING, quota)

        reason = RecommendationReason.serendipity()
        return [Candidate.for_reason(book, reason) for book in books[:quota]]
