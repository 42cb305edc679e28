"""External book catalog package."""

from app.catalog.base import BookCatalog, CatalogError
from app.catalog.google_books import GoogleBooksCatalog, volume_to_book

__all__ = ["BookCatalog", "CatalogError", "GoogleBooksCatalog", "volume_to_book"]
