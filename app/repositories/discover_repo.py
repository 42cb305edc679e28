"""Discover queries over logs, followers, books and lists."""

from collections.abc import Sequence
from typing import Any
from uuid import UUID

from sqlalchemy import Select, and_, func, select
from sqlalchemy.engine import Result
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from app.models.book import Book
from app.models.reading_list import ReadingList
from app.models.reading_log import ReadingLog
from app.models.social import Follow
from app.models.user import User
from app.repositories.book_repo import BookRepository, book_to_info
from app.services.recommendation.ports import DiscoverStore
from app.services.recommendation.types import Book as BookInfo


class DiscoverRepository(DiscoverStore):
    """SQL implementation of the discover store.

    Every read runs in a SAVEPOINT: a failed query is rolled back on its own
    and the request session stays usable for the remaining sources.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.books = BookRepository(db)

    async def _execute(self, stmt: Select) -> Result[Any]:
        async with self.db.begin_nested():
            return await self.db.execute(stmt)

    async def logged_book_ids(self, user_id: UUID) -> set[str]:
        stmt = select(ReadingLog.book_id).where(ReadingLog.user_id == user_id)
        result = await self._execute(stmt)
        return set(result.scalars().all())

    async def favorite_categories(self, user_id, min_rating, limit):
        return await self._favorite_labels(Book.categories, user_id, min_rating, limit)

    async def favorite_authors(self, user_id, min_rating, limit):
        return await self._favorite_labels(Book.authors, user_id, min_rating, limit)

    async def _favorite_labels(
        self,
        array_column: Any,
        user_id: UUID,
        min_rating: int,
        limit: int,
    ) -> list[tuple[str, int, float]]:
        # unnest() is not allowed in GROUP BY
        exploded = (
            select(
                func.unnest(array_column).label("label"),
                ReadingLog.rating.label("rating"),
            )
            .select_from(ReadingLog)
            .join(Book, Book.id == ReadingLog.book_id)
            .where(
                ReadingLog.user_id == user_id,
                ReadingLog.rating >= min_rating,
                array_column.is_not(None),
            )
            .subquery()
        )
        book_count = func.count().label("book_count")
        avg_rating = func.avg(exploded.c.rating).label("avg_rating")

        stmt = (
            select(exploded.c.label, book_count, avg_rating)
            .group_by(exploded.c.label)
            .order_by(book_count.desc(), avg_rating.desc())
            .limit(limit)
        )
        result = await self._execute(stmt)
        return [(label, count, float(avg)) for label, count, avg in result.all()]

    async def favorite_books(self, user_id, min_rating, limit):
        stmt = (
            select(ReadingLog.book_id, ReadingLog.rating)
            .where(ReadingLog.user_id == user_id, ReadingLog.rating >= min_rating)
            .order_by(ReadingLog.rating.desc(), ReadingLog.created_at.desc())
            .limit(limit)
        )
        result = await self._execute(stmt)
        return [(book_id, rating) for book_id, rating in result.all()]

    async def reviews(self, user_id, max_count):
        stmt = (
            select(ReadingLog.review)
            .where(
                ReadingLog.user_id == user_id,
                ReadingLog.review.is_not(None),
                ReadingLog.review != "",
            )
            .order_by(ReadingLog.updated_at.desc())
            .limit(max_count)
        )
        result = await self._execute(stmt)
        return list(result.scalars().all())

    async def friend_logs(self, user_id, min_rating, limit):
        own_logs = aliased(ReadingLog)
        already_logged = select(own_logs.book_id).where(own_logs.user_id == user_id)
        friend_count = func.count(func.distinct(ReadingLog.user_id)).label("friend_count")

        stmt = (
            select(ReadingLog.book_id, friend_count)
            .join(Follow, Follow.following_id == ReadingLog.user_id)
            .where(
                Follow.follower_id == user_id,
                ReadingLog.rating >= min_rating,
                ReadingLog.book_id.not_in(already_logged),
            )
            .group_by(ReadingLog.book_id)
            .order_by(friend_count.desc(), ReadingLog.book_id)
            .limit(limit)
        )
        result = await self._execute(stmt)
        return [(book_id, count) for book_id, count in result.all()]

    async def trending_books(self, limit):
        log_count = func.count(ReadingLog.id).label("log_count")
        avg_rating = func.avg(ReadingLog.rating).label("avg_rating")

        stmt = (
            select(Book, log_count, avg_rating)
            .join(ReadingLog, and_(ReadingLog.book_id == Book.id, ReadingLog.status == "read"))
            .group_by(Book.id)
            .order_by(log_count.desc(), avg_rating.desc().nulls_last())
            .limit(limit)
        )
        result = await self._execute(stmt)
        return self._with_aggregates(result.all())

    async def random_books(self, limit):
        stmt = select(Book).order_by(func.random()).limit(limit)
        result = await self._execute(stmt)
        return [book_to_info(book) for book in result.scalars().all()]

    async def random_quality_books(self, min_rating, limit):
        log_count = func.count(ReadingLog.id).label("log_count")
        avg_rating = func.avg(ReadingLog.rating).label("avg_rating")

        stmt = (
            select(Book, log_count, avg_rating)
            .join(ReadingLog, and_(ReadingLog.book_id == Book.id, ReadingLog.status == "read"))
            .group_by(Book.id)
            .having(func.avg(ReadingLog.rating) >= min_rating)
            .order_by(func.random())
            .limit(limit)
        )
        result = await self._execute(stmt)
        return self._with_aggregates(result.all())

    async def lookup_book(self, book_id):
        async with self.db.begin_nested():
            book = await self.books.get_by_id(book_id)
        return book_to_info(book) if book is not None else None

    async def trending_lists(self, limit: int) -> Sequence[tuple[ReadingList, User]]:
        """Public, non-empty lists with their owners, biggest first."""
        stmt = (
            select(ReadingList, User)
            .join(User, User.id == ReadingList.user_id)
            .where(ReadingList.is_public.is_(True), ReadingList.items_count > 0)
            .order_by(ReadingList.items_count.desc(), ReadingList.created_at.desc())
            .limit(limit)
        )
        result = await self._execute(stmt)
        return [(row[0], row[1]) for row in result.all()]

    @staticmethod
    def _with_aggregates(rows: Sequence[Any]) -> list[BookInfo]:
        return [
            book_to_info(book, rating=avg if avg is not None else 0.0, log_count=count)
            for book, count, avg in rows
        ]
