"""Unit tests for book lookup, search and background caching."""

import pytest

from app.catalog import CatalogError
from app.repositories.book_repo import BookRepository
from app.services.book_cache import BookCacheWriter


class FakeSession:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.statements = []
        self.committed = False

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    async def execute(self, stmt):
        if self.fail:
            raise RuntimeError("database unavailable")
        self.statements.append(stmt)

    async def commit(self):
        self.committed = True


class TestBookService:
    """Test local-first lookups with catalog fallback."""

    @pytest.mark.asyncio
    async def test_local_book_skips_catalog(self, book_service, store, catalog, cache_writer, book_factory):
        """Test that a cached book is served without a catalog call."""
        store.books["b1"] = book_factory("b1")

        book = await book_service.get_book("b1")

        assert book.id == "b1"
        assert catalog.fetches == []
        assert cache_writer.scheduled == []

    @pytest.mark.asyncio
    async def test_catalog_fallback_is_cached(self, book_service, catalog, cache_writer, book_factory):
        """Test that a catalog hit is handed to the cache writer."""
        catalog.volumes["remote"] = book_factory("remote")

        book = await book_service.get_book("remote")

        assert book.id == "remote"
        assert cache_writer.scheduled_ids == ["remote"]

    @pytest.mark.asyncio
    async def test_unknown_everywhere(self, book_service, cache_writer):
        """Test that a book missing everywhere returns None."""
        assert await book_service.get_book("nowhere") is None
        assert cache_writer.scheduled == []

    @pytest.mark.asyncio
    async def test_catalog_error_propagates(self, book_service, catalog):
        """Test that catalog failures reach the caller."""
        catalog.fail = True

        with pytest.raises(CatalogError):
            await book_service.get_book("remote")

    @pytest.mark.asyncio
    async def test_search_results_are_cached(self, book_service, catalog, cache_writer, book_factory):
        """Test that every search hit is scheduled for caching."""
        catalog.results["dune"] = [book_factory("d1"), book_factory("d2")]

        books = await book_service.search_catalog("dune", 10)

        assert [b.id for b in books] == ["d1", "d2"]
        assert catalog.searches == [("dune", 10)]
        assert cache_writer.scheduled_ids == ["d1", "d2"]


class TestBookRepositoryUpsert:
    """Test cache upsert statement building."""

    @pytest.mark.asyncio
    async def test_dedupes_ids(self, book_factory):
        """Test that repeated ids are written once."""
        session = FakeSession()
        books = [book_factory("a"), book_factory("b"), book_factory("a")]

        written = await BookRepository(session).upsert_many(books)

        assert written == 2
        assert len(session.statements) == 1

    @pytest.mark.asyncio
    async def test_nothing_to_write(self, book_factory):
        """Test that an empty batch issues no statement."""
        session = FakeSession()

        assert await BookRepository(session).upsert_many([]) == 0
        assert await BookRepository(session).upsert_many([book_factory("")]) == 0
        assert session.statements == []


class TestBookCacheWriter:
    """Test fire-and-forget persistence."""

    @pytest.mark.asyncio
    async def test_writes_in_background(self, book_factory):
        """Test that scheduled books are upserted and committed."""
        session = FakeSession()
        writer = BookCacheWriter(lambda: session)

        writer.schedule([book_factory("a")])
        await writer.drain()

        assert len(session.statements) == 1
        assert session.committed

    @pytest.mark.asyncio
    async def test_failure_is_swallowed(self, book_factory):
        """Test that a failed write is logged and rolled back."""
        session = FakeSession(fail=True)
        writer = BookCacheWriter(lambda: session)

        writer.schedule([book_factory("a")])
        await writer.drain()

        assert not session.committed

    @pytest.mark.asyncio
    async def test_empty_batch_not_scheduled(self):
        """Test that an empty batch starts no task."""
        writer = BookCacheWriter(lambda: FakeSession())

        writer.schedule([])

        assert writer._tasks == set()
