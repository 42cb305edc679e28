"""Book lookup and catalog search."""

from typing import Protocol

import structlog

from app.catalog.base import BookCatalog
from app.services.recommendation.ports import DiscoverStore
from app.services.recommendation.types import Book

logger = structlog.get_logger(__name__)


class CacheScheduler(Protocol):
    def schedule(self, books: list[Book]) -> None: ...


class BookService:
    """Local-first book access backed by the external catalog.

    Anything fetched from the catalog is handed to the cache writer so later
    lookups are served locally. Persistence is never awaited here.
    """

    def __init__(self, store: DiscoverStore, catalog: BookCatalog, cache_writer: CacheScheduler):
        self.store = store
        self.catalog = catalog
        self.cache_writer = cache_writer

    async def get_book(self, book_id: str) -> Book | None:
        """Cached book if present, else the catalog's copy (or None).

        Raises:
            CatalogError: If the book is not cached and the catalog fails
        """
        book = await self.store.lookup_book(book_id)
        if book is not None:
            return book

        book = await self.catalog.fetch(book_id)
        if book is not None:
            logger.debug("book_fetched_from_catalog", book_id=book_id)
            self.cache_writer.schedule([book])
        return book

    async def search_catalog(self, query: str, max_results: int = 20) -> list[Book]:
        """Search the catalog and cache whatever comes back.

        Raises:
            CatalogError: If the catalog fails
        """
        books = await self.catalog.search(query, max_results)
        self.cache_writer.schedule(books)
        return books
