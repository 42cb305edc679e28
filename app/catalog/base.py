"""External book catalog abstraction."""

from abc import ABC, abstractmethod

from app.services.recommendation.types import Book


class CatalogError(Exception):
    """The catalog could not be reached or returned an unusable response."""

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class BookCatalog(ABC):
    """Third-party book metadata service.

    Implementations normalize their payloads to ``Book`` so that catalog
    results and locally cached rows are interchangeable downstream.
    """

    @abstractmethod
    async def search(self, query: str, max_results: int = 20) -> list[Book]:
        """Free-text search (supports ``subject:`` and ``inauthor:`` prefixes).

        Raises:
            CatalogError: On transport failure or a non-2xx response
        """

    @abstractmethod
    async def fetch(self, book_id: str) -> Book | None:
        """Look up a single volume; None when the catalog does not know it.

        Raises:
            CatalogError: On transport failure or an unexpected response
        """
