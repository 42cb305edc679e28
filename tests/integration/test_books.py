"""Book search and lookup endpoint tests."""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_search(client: AsyncClient, catalog, cache_writer, book_factory):
    """Search returns catalog results."""
    catalog.results["dune"] = [book_factory("d1", title="Dune"), book_factory("d2", title="Dune Messiah")]

    response = await client.get("/v1/search", params={"q": "dune"})

    assert response.status_code == 200
    data = response.json()
    assert data["count"] == 2
    assert [r["title"] for r in data["results"]] == ["Dune", "Dune Messiah"]
    assert cache_writer.scheduled_ids == ["d1", "d2"]


@pytest.mark.asyncio
async def test_search_requires_query(client: AsyncClient, catalog):
    """A blank query is rejected."""
    response = await client.get("/v1/search", params={"q": "  "})

    assert response.status_code == 422
    assert response.json()["detail"]["error"]["code"] == "VALIDATION_ERROR"
    assert catalog.searches == []


@pytest.mark.asyncio
async def test_search_catalog_down(client: AsyncClient, catalog):
    """A catalog outage maps to 502."""
    catalog.fail = True

    response = await client.get("/v1/search", params={"q": "dune"})

    assert response.status_code == 502
    assert response.json()["detail"]["error"]["code"] == "CATALOG_UNAVAILABLE"


@pytest.mark.asyncio
async def test_get_local_book(client: AsyncClient, store, catalog, book_factory):
    """Cached books are served locally."""
    store.books["b1"] = book_factory("b1", title="The Dispossessed", page_count=387)

    response = await client.get("/v1/books/b1")

    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "The Dispossessed"
    assert data["page_count"] == 387
    assert catalog.fetches == []


@pytest.mark.asyncio
async def test_get_book_from_catalog(client: AsyncClient, catalog, cache_writer, book_factory):
    """Unknown books are fetched from the catalog."""
    catalog.volumes["remote"] = book_factory("remote", title="Kindred")

    response = await client.get("/v1/books/remote")

    assert response.status_code == 200
    assert response.json()["title"] == "Kindred"
    assert cache_writer.scheduled_ids == ["remote"]


@pytest.mark.asyncio
async def test_get_unknown_book(client: AsyncClient):
    """A book missing everywhere is 404."""
    response = await client.get("/v1/books/nowhere")

    assert response.status_code == 404
    assert response.json()["detail"]["error"]["code"] == "NOT_FOUND"
