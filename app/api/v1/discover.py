"""Discover API endpoints."""

import structlog
from fastapi import APIRouter, Query, Request

from app.api.v1.deps import CurrentUserId, DiscoverRepo, OptionalUserId, Recommendations
from app.config import settings
from app.rate_limiter import limiter
from app.schemas.book import BookResponse
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
from app.services.recommendation import Candidate, coerce_limit

logger = structlog.get_logger(__name__)

router = APIRouter()


def _candidate_response(candidate: Candidate) -> RecommendationResponse:
    reason = candidate.reason
    return RecommendationResponse(
        book=BookResponse(**candidate.book.to_dict()),
        reason=ReasonResponse(
            type=reason.type.value,
            value=reason.value,
            confidence=reason.confidence,
            description=reason.description,
        ),
        score=candidate.score,
    )


@router.get(
    "",
    response_model=RecommendationListResponse,
    summary="Get recommendations",
    description="""
Personalized book recommendations blended from five strategies.

**Signed in:** books similar to your favorites (40%), loved by people you
follow (25%), in your favorite categories (20%), trending (10%) and
serendipitous picks (5%). Books you have already logged are never included.

**Anonymous:** trending books only.

`limit` defaults to 20; zero, negative or unparsable values use the default.
    """,
)
@limiter.limit(settings.rate_limit_discover)
async def get_recommendations(
    request: Request,
    service: Recommendations,
    user_id: OptionalUserId,
    limit: str | None = Query(None, description="Number of recommendations (default 20)"),
) -> RecommendationListResponse:
    """Get the recommendation feed for the caller."""
    feed = await service.get_recommendations(user_id, limit)
    return RecommendationListResponse(
        recommendations=[_candidate_response(c) for c in feed.recommendations],
        count=feed.count,
    )


@router.get(
    "/lists",
    response_model=TrendingListsResponse,
    summary="Get trending lists",
    description="Popular public lists, largest first. `limit` defaults to 10.",
)
async def get_trending_lists(
    repo: DiscoverRepo,
    limit: str | None = Query(None, description="Number of lists (default 10)"),
) -> TrendingListsResponse:
    """Get popular public lists with their owners."""
    rows = await repo.trending_lists(coerce_limit(limit, settings.trending_lists_default_limit))

    lists = [
        TrendingListResponse(
            id=reading_list.id,
            name=reading_list.name,
            description=reading_list.description,
            header_image_url=reading_list.header_image_url,
            theme_color=reading_list.theme_color,
            items_count=reading_list.items_count,
            created_at=reading_list.created_at,
            user=UserBrief.model_validate(owner),
        )
        for reading_list, owner in rows
    ]
    return TrendingListsResponse(lists=lists, count=len(lists))


@router.post(
    "/swipe",
    response_model=SwipeResponse,
    summary="Record a swipe",
    description=(
        "Like or pass on a recommended book. Requires authentication. "
        "Swipes are acknowledged and logged but not persisted."
    ),
)
async def record_swipe(data: SwipeRequest, user_id: CurrentUserId) -> SwipeResponse:
    """Acknowledge a like/pass."""
    logger.info("swipe_recorded", user_id=str(user_id), book_id=data.book_id, action=data.action)
    return SwipeResponse(success=True, action=data.action)
