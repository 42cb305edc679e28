"""Book cache repository."""

from sqlalchemy import func
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.book import Book
from app.services.recommendation.types import Book as BookInfo


def book_to_info(
    book: Book,
    rating: float | None = None,
    log_count: int | None = None,
) -> BookInfo:
    """Convert a cached row to the pipeline's book shape.

    ``rating`` and ``log_count`` override the catalog rating when the caller
    has platform aggregates for the book.
    """
    return BookInfo(
        id=book.id,
        title=book.title,
        authors=list(book.authors or []),
        description=book.description,
        cover_url=book.cover_url,
        categories=list(book.categories or []),
        published_date=book.published_date,
        page_count=book.page_count,
        rating=float(rating) if rating is not None else book.rating,
        ratings_count=book.ratings_count,
        log_count=log_count,
    )


class BookRepository:
    """Repository for the local book cache."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, book_id: str) -> Book | None:
        """Get a cached book by catalog ID."""
        return await self.db.get(Book, book_id)

    async def upsert_many(self, books: list[BookInfo], api_source: str = "google") -> int:
        """Insert unseen books; existing rows only get ``updated_at`` touched.

        Returns:
            Number of distinct books written
        """
        rows: dict[str, dict] = {}
        for book in books:
            if not book.id or book.id in rows:
                continue
            rows[book.id] = {
                "id": book.id,
                "title": (book.title or "Untitled")[:500],
                "authors": list(book.authors),
                "description": book.description,
                "cover_url": book.cover_url,
                "published_date": book.published_date[:20] if book.published_date else None,
                "page_count": book.page_count,
                "categories": list(book.categories),
                "rating": book.rating,
                "ratings_count": book.ratings_count,
                "api_source": api_source,
            }

        if not rows:
            return 0

        # One statement cannot touch the same id twice, hence the dict above
        stmt = insert(Book).values(list(rows.values()))
        stmt = stmt.on_conflict_do_update(
            index_elements=[Book.id],
            set_={"updated_at": func.now()},
        )
        await self.db.execute(stmt)
        return len(rows)

