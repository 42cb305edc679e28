"""Book schemas."""

from pydantic import BaseModel, ConfigDict, Field


class BookResponse(BaseModel):
    """Book metadata as served by the API."""

    id: str
    title: str
    authors: list[str] = Field(default_factory=list)
    description: str | None = None
    cover_url: str | None = None
    categories: list[str] = Field(default_factory=list)
    published_date: str | None = None
    page_count: int | None = None
    rating: float | None = None
    ratings_count: int | None = None
    log_count: int | None = None

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "zyTCAlFPjgYC",
                "title": "The Google Story",
                "authors": ["David A. Vise", "Mark Malseed"],
                "description": "Here is the story behind one of the most remarkable Internet successes...",
                "cover_url": "http://books.google.com/books/content?id=zyTCAlFPjgYC&printsec=frontcover&img=1&zoom=2",
                "categories": ["Business & Economics"],
                "published_date": "2005-11-15",
                "page_count": 207,
                "rating": 3.5,
                "ratings_count": 136,
                "log_count": None,
            }
        },
    )


class BookSearchResponse(BaseModel):
    """Catalog search results."""

    results: list[BookResponse]
    count: int
