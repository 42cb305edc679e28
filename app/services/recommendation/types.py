"""Value types shared by the recommendation pipeline.

Everything here is built, scored and discarded within one request.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


@dataclass
class Book:
    """Book metadata normalized from either the local store or the catalog."""

    id: str
    title: str
    authors: list[str] = field(default_factory=list)
    description: str | None = None
    cover_url: str | None = None
    categories: list[str] = field(default_factory=list)
    published_date: str | None = None
    page_count: int | None = None
    rating: float | None = None  # platform average or catalog average
    ratings_count: int | None = None
    log_count: int | None = None  # only set by platform aggregates

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "authors": list(self.authors),
            "description": self.description,
            "cover_url": self.cover_url,
            "categories": list(self.categories),
            "published_date": self.published_date,
            "page_count": self.page_count,
            "rating": self.rating,
            "ratings_count": self.ratings_count,
            "log_count": self.log_count,
        }


class ReasonType(str, Enum):
    """Which strategy produced a candidate."""

    SIMILAR = "similar"
    FRIEND = "friend"
    CATEGORY = "category"
    TRENDING = "trending"
    SERENDIPITY = "serendipity"


# (confidence 1-100, score) per strategy
REASON_WEIGHTS: dict[ReasonType, tuple[int, float]] = {
    ReasonType.SIMILAR: (85, 0.9),
    ReasonType.FRIEND: (75, 0.8),
    ReasonType.CATEGORY: (70, 0.7),
    ReasonType.TRENDING: (60, 0.6),
    ReasonType.SERENDIPITY: (50, 0.5),
}

PLATFORM_NAME = "Folio"


@dataclass(frozen=True)
class RecommendationReason:
    """Why a book was recommended, with a human-readable description."""

    type: ReasonType
    value: str
    description: str

    @property
    def confidence(self) -> int:
        return REASON_WEIGHTS[self.type][0]

    @property
    def score(self) -> float:
        return REASON_WEIGHTS[self.type][1]

    @classmethod
    def similar(cls, source_book_id: str) -> "RecommendationReason":
        return cls(ReasonType.SIMILAR, source_book_id, "Similar to a book you loved")

    @classmethod
    def friend(cls, friend_count: int) -> "RecommendationReason":
        return cls(
            ReasonType.FRIEND,
            f"{friend_count} friends",
            f"Loved by {friend_count} of your friends",
        )

    @classmethod
    def category(cls, label: str) -> "RecommendationReason":
        return cls(ReasonType.CATEGORY, label, f"In {label}, a genre you love")

    @classmethod
    def trending(cls) -> "RecommendationReason":
        return cls(ReasonType.TRENDING, "popular", f"Trending on {PLATFORM_NAME}")

    @classmethod
    def serendipity(cls) -> "RecommendationReason":
        return cls(ReasonType.SERENDIPITY, "discovery", "Something different you might love")


@dataclass
class Candidate:
    """A scored (book, reason) pair produced by one source."""

    book: Book
    reason: RecommendationReason
    score: float

    @classmethod
    def for_reason(cls, book: Book, reason: RecommendationReason) -> "Candidate":
        return cls(book=book, reason=reason, score=reason.score)


@dataclass
class UserProfile:
    """Reading preferences derived from a user's ratings and reviews."""

    favorite_categories: list[str] = field(default_factory=list)
    favorite_authors: list[str] = field(default_factory=list)
    favorite_book_ids: list[str] = field(default_factory=list)
    review_keywords: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (
            self.favorite_categories
            or self.favorite_authors
            or self.favorite_book_ids
            or self.review_keywords
        )
