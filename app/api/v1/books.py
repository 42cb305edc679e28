"""Book search and lookup endpoints."""

from fastapi import APIRouter, Query

from app.api.v1.deps import Books
from app.catalog import CatalogError
from app.core.exceptions import CatalogUnavailableError, NotFoundError, ValidationError
from app.schemas.book import BookResponse, BookSearchResponse

router = APIRouter()


@router.get(
    "/search",
    response_model=BookSearchResponse,
    summary="Search books",
    description="""
Search the external book catalog.

Supports the catalog's field prefixes, e.g. `subject:Fantasy`,
`inauthor:Le Guin`, `isbn:9780441478125`. Results are cached locally.
    """,
    responses={502: {"description": "Book catalog unavailable"}},
)
async def search_books(
    books: Books,
    q: str = Query("", max_length=300, description="Search query"),
    limit: int = Query(20, ge=1, le=40, description="Maximum results"),
) -> BookSearchResponse:
    """Search the catalog."""
    if not q.strip():
        raise ValidationError("Query parameter 'q' is required")

    try:
        results = await books.search_catalog(q.strip(), limit)
    except CatalogError as e:
        raise CatalogUnavailableError() from e

    return BookSearchResponse(
        results=[BookResponse(**book.to_dict()) for book in results],
        count=len(results),
    )


@router.get(
    "/books/{book_id}",
    response_model=BookResponse,
    summary="Get book details",
    description="Book from the local cache, falling back to the catalog.",
    responses={
        404: {"description": "Book not found"},
        502: {"description": "Book catalog unavailable"},
    },
)
async def get_book(book_id: str, books: Books) -> BookResponse:
    """Get book details by catalog ID."""
    try:
        book = await books.get_book(book_id)
    except CatalogError as e:
        raise CatalogUnavailableError() from e

    if book is None:
        raise NotFoundError("Book", book_id)

    return BookResponse(**book.to_dict())
