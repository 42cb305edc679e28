"""Personalized book recommendations (the discover feed).

Usage:
    service = RecommendationService(store, books)
    feed = await service.get_recommendations(user_id, limit=20)
"""

from app.services.recommendation.aggregator import dedupe_and_rank
from app.services.recommendation.ports import DiscoverStore
from app.services.recommendation.profile import ProfileBuilder, extract_review_keywords
from app.services.recommendation.service import (
    RecommendationFeed,
    RecommendationService,
    coerce_limit,
)
from app.services.recommendation.types import (
    Book,
    Candidate,
    ReasonType,
    RecommendationReason,
    UserProfile,
)

__all__ = [
    "Book",
    "Candidate",
    "DiscoverStore",
    "ProfileBuilder",
    "ReasonType",
    "RecommendationFeed",
    "RecommendationReason",
    "RecommendationService",
    "UserProfile",
    "coerce_limit",
    "dedupe_and_rank",
    "extract_review_keywords",
]
