"""Google Books catalog client.

API Documentation: https://developers.google.com/books/docs/v1/using
"""

from typing import Any

import httpx
import structlog

from app.cache.decorators import cached
from app.catalog.base import BookCatalog, CatalogError
from app.config import settings
from app.services.recommendation.types import Book

logger = structlog.get_logger(__name__)

# Google Books rejects maxResults outside this range
MAX_RESULTS_LIMIT = 40


def volume_to_book(item: dict[str, Any]) -> Book:
    """Normalize a Google Books volume resource to a ``Book``."""
    info = item.get("volumeInfo") or {}
    image_links = info.get("imageLinks") or {}

    cover_url = image_links.get("thumbnail") or image_links.get("smallThumbnail")
    if cover_url:
        # Upgrade to larger image
        cover_url = cover_url.replace("zoom=1", "zoom=2", 1)

    return Book(
        id=item["id"],
        title=info.get("title") or "",
        authors=list(info.get("authors") or []),
        description=info.get("description"),
        cover_url=cover_url,
        categories=list(info.get("categories") or []),
        published_date=info.get("publishedDate"),
        page_count=info.get("pageCount"),
        rating=info.get("averageRating"),
        ratings_count=info.get("ratingsCount"),
    )


def _search_cache_key(self: "GoogleBooksCatalog", query: str, max_results: int) -> str:
    return f"catalog:search:{query.lower()}:{max_results}"


class GoogleBooksCatalog(BookCatalog):
    """Google Books volumes API."""

    def __init__(
        self,
        base_url: str = "https://www.googleapis.com/books/v1",
        api_key: str | None = None,
        timeout: float = 5.0,
        use_cache: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            base_url: API root, without trailing slash
            api_key: Optional API key (raises the anonymous quota)
            timeout: Per-request timeout in seconds
            use_cache: Cache search results in Redis
            transport: Custom httpx transport (tests use ``httpx.MockTransport``)
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.use_cache = use_cache
        self._transport = transport

    async def search(self, query: str, max_results: int = 20) -> list[Book]:
        if max_results <= 0 or not query.strip():
            return []
        max_results = min(max_results, MAX_RESULTS_LIMIT)

        if self.use_cache:
            items = await self._cached_search_volumes(query, max_results)
        else:
            items = await self._search_volumes(query, max_results)

        books = []
        for item in items:
            try:
                books.append(volume_to_book(item))
            except KeyError:
                logger.debug("catalog_volume_skipped", reason="missing id")
        return books

    async def fetch(self, book_id: str) -> Book | None:
        response = await self._get(f"/volumes/{book_id}", params={})
        if response.status_code == 404:
            return None
        self._raise_for_status(response)
        return volume_to_book(self._json(response))

    @cached(ttl=settings.catalog_cache_ttl, key_builder=_search_cache_key)
    async def _cached_search_volumes(self, query: str, max_results: int) -> list[dict[str, Any]]:
        return await self._search_volumes(query, max_results)

    async def _search_volumes(self, query: str, max_results: int) -> list[dict[str, Any]]:
        params = {
            "q": query,
            "maxResults": str(max_results),
            "orderBy": "relevance",
        }
        response = await self._get("/volumes", params=params)
        self._raise_for_status(response)
        return self._json(response).get("items") or []

    async def _get(self, path: str, params: dict[str, str]) -> httpx.Response:
        if self.api_key:
            params = {**params, "key": self.api_key}

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                return await client.get(path, params=params)
        except httpx.TimeoutException:
            raise CatalogError("Catalog request timed out")
        except httpx.HTTPError as e:
            raise CatalogError(f"Catalog request failed: {e}")

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        if response.status_code != 200:
            logger.warning(
                "catalog_error_response",
                status_code=response.status_code,
                url=str(response.request.url.copy_remove_param("key")),
            )
            raise CatalogError(
                f"Catalog returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

    @staticmethod
    def _json(response: httpx.Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError:
            raise CatalogError("Catalog returned malformed JSON")
        if not isinstance(data, dict):
            raise CatalogError("Catalog returned an unexpected payload")
        return data
