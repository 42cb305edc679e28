"""Discover schemas."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.book import BookResponse


class ReasonResponse(BaseModel):
    """Why a book was recommended."""

    type: Literal["similar", "friend", "category", "trending", "serendipity"]
    value: str
    confidence: int = Field(ge=1, le=100)
    description: str


class RecommendationResponse(BaseModel):
    """One recommended book."""

    book: BookResponse
    reason: ReasonResponse
    score: float


class RecommendationListResponse(BaseModel):
    """Ranked recommendation feed."""

    recommendations: list[RecommendationResponse]
    count: int

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "recommendations": [
                    {
                        "book": {"id": "zyTCAlFPjgYC", "title": "The Google Story", "authors": ["David A. Vise"]},
                        "reason": {
                            "type": "friend",
                            "value": "2 friends",
                            "confidence": 75,
                            "description": "Loved by 2 of your friends",
                        },
                        "score": 0.8,
                    }
                ],
                "count": 1,
            }
        }
    )


class UserBrief(BaseModel):
    """Brief user information for embedding in responses."""

    id: UUID
    username: str
    name: str
    picture: str | None = None

    model_config = ConfigDict(from_attributes=True)


class TrendingListResponse(BaseModel):
    """A popular public list with its owner."""

    id: UUID
    name: str
    description: str | None = None
    header_image_url: str | None = None
    theme_color: str | None = None
    items_count: int
    created_at: datetime
    user: UserBrief

    model_config = ConfigDict(from_attributes=True)


class TrendingListsResponse(BaseModel):
    """Popular public lists."""

    lists: list[TrendingListResponse]
    count: int


class SwipeRequest(BaseModel):
    """Quick like/pass feedback on a recommended book."""

    book_id: str = Field(min_length=1, max_length=64)
    action: Literal["like", "pass"]


class SwipeResponse(BaseModel):
    """Swipe acknowledgement."""

    success: bool = True
    action: Literal["like", "pass"]
