"""Data-access capabilities the recommendation pipeline depends on.

The pipeline never talks to SQLAlchemy directly; the request wiring hands it
an implementation of ``DiscoverStore`` (see ``app.repositories.discover_repo``).
"""

from abc import ABC, abstractmethod
from uuid import UUID

from app.services.recommendation.types import Book


class DiscoverStore(ABC):
    """Read-only queries over the reading log, social graph and book cache."""

    @abstractmethod
    async def logged_book_ids(self, user_id: UUID) -> set[str]:
        """IDs of every book the user has a log entry for, any status."""

    @abstractmethod
    async def favorite_categories(
        self,
        user_id: UUID,
        min_rating: int,
        limit: int,
    ) -> list[tuple[str, int, float]]:
        """(category, count, avg_rating) over books rated >= min_rating.

        Ordered by count desc, then avg_rating desc.
        """

    @abstractmethod
    async def favorite_authors(
        self,
        user_id: UUID,
        min_rating: int,
        limit: int,
    ) -> list[tuple[str, int, float]]:
        """(author, count, avg_rating), same ordering as categories."""

    @abstractmethod
    async def favorite_books(
        self,
        user_id: UUID,
        min_rating: int,
        limit: int,
    ) -> list[tuple[str, int]]:
        """(book_id, rating) ordered by rating desc, then most recent first."""

    @abstractmethod
    async def reviews(self, user_id: UUID, max_count: int) -> list[str]:
        """Non-empty review texts written by the user."""

    @abstractmethod
    async def friend_logs(
        self,
        user_id: UUID,
        min_rating: int,
        limit: int,
    ) -> list[tuple[str, int]]:
        """(book_id, friend_count) for books followees rated >= min_rating.

        Excludes books the user has logged; ordered by friend_count desc.
        """

    @abstractmethod
    async def trending_books(self, limit: int) -> list[Book]:
        """Books with at least one read log, by log count then avg rating."""

    @abstractmethod
    async def random_books(self, limit: int) -> list[Book]:
        """Any cached books in random order."""

    @abstractmethod
    async def random_quality_books(self, min_rating: float, limit: int) -> list[Book]:
        """Random books with >= 1 read log and average rating >= min_rating."""

    @abstractmethod
    async def lookup_book(self, book_id: str) -> Book | None:
        """A cached book by ID, or None."""

