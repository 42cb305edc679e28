"""Repository package for data access."""

from app.repositories.book_repo import BookRepository, book_to_info
from app.repositories.discover_repo import DiscoverRepository

__all__ = [
    "BookRepository",
    "DiscoverRepository",
    "book_to_info",
]
