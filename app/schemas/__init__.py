"""Pydantic schemas package."""

from app.schemas.book import BookResponse, BookSearchResponse
from app.schemas.recommendation import (
    ReasonResponse,
    RecommendationListResponse,
    RecommendationResponse,
    SwipeRequest,
    SwipeResponse,
    TrendingListResponse,
    TrendingListsResponse,
    UserBrief,
)

__all__ = [
    # Book
    "BookResponse",
    "BookSearchResponse",
    # Discover
    "ReasonResponse",
    "RecommendationResponse",
    "RecommendationListResponse",
    "UserBrief",
    "TrendingListResponse",
    "TrendingListsResponse",
    "SwipeRequest",
    "SwipeResponse",
]
