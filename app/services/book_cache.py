"""Fire-and-forget persistence of catalog results into the local book cache."""

import asyncio

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.repositories.book_repo import BookRepository
from app.services.recommendation.types import Book

logger = structlog.get_logger(__name__)


class BookCacheWriter:
    """Writes newly seen books in background tasks.

    ``schedule`` never blocks the caller and never raises; the write uses its
    own session because the request session may be closed by the time the
    task runs.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory
        self._tasks: set[asyncio.Task] = set()

    def schedule(self, books: list[Book]) -> None:
        if not books:
            return
        task = asyncio.create_task(self._write(list(books)))
        # The event loop only keeps weak references to tasks
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def drain(self) -> None:
        """Wait for pending writes (used on shutdown)."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    async def _write(self, books: list[Book]) -> None:
        try:
            async with self.session_factory() as session:
                await BookRepository(session).upsert_many(books)
                await session.commit()
            logger.debug("book_cache_written", count=len(books))
        except Exception as e:
            logger.warning("book_cache_write_failed", count=len(books), error=str(e))
