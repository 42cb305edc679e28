"""Reading-preference profile derived from a user's history."""

import re
from uuid import UUID

import structlog

from app.services.recommendation.ports import DiscoverStore
from app.services.recommendation.types import UserProfile

logger = structlog.get_logger(__name__)

MIN_FAVORITE_RATING = 4
MAX_CATEGORIES = 10
MAX_AUTHORS = 5
MAX_FAVORITE_BOOKS = 5
MAX_REVIEWS = 20
MAX_KEYWORDS_PER_REVIEW = 10

STOP_WORDS = frozenset(
    {
        "the", "a", "an", "and", "or", "but",
        "in", "on", "at", "to", "for", "of",
        "with", "by", "is", "are", "was", "were",
        "be", "been", "have", "has", "had", "do",
        "does", "did", "will", "would", "could", "should",
        "this", "that", "these", "those", "i", "you",
        "he", "she", "it", "we", "they", "me",
        "him", "her", "us", "them", "my", "your",
        "his", "its", "our", "their",
    }
)

_WORD_RE = re.compile(r"\b\w+\b")


def extract_review_keywords(review: str, limit: int = MAX_KEYWORDS_PER_REVIEW) -> list[str]:
    """Distinct meaningful words from a review, in order of first appearance.

    Words of three characters or fewer and stop words are dropped.
    """
    keywords: list[str] = []
    seen: set[str] = set()
    for word in _WORD_RE.findall(review.lower()):
        if len(word) <= 3 or word in STOP_WORDS or word in seen:
            continue
        seen.add(word)
        keywords.append(word)
        if len(keywords) >= limit:
            break
    return keywords


class ProfileBuilder:
    """Builds a ``UserProfile`` from ratings and reviews.

    Each section is loaded independently; a failing query leaves that
    section empty instead of failing the profile.
    """

    def __init__(self, store: DiscoverStore):
        self.store = store

    async def build(self, user_id: UUID) -> UserProfile:
        profile = UserProfile()

        try:
            rows = await self.store.favorite_categories(user_id, MIN_FAVORITE_RATING, MAX_CATEGORIES)
            profile.favorite_categories = [category for category, _, _ in rows][:MAX_CATEGORIES]
        except Exception as e:
            logger.warning("profile_section_failed", section="categories", error=str(e))

        try:
            rows = await self.store.favorite_authors(user_id, MIN_FAVORITE_RATING, MAX_AUTHORS)
            profile.favorite_authors = [author for author, _, _ in rows][:MAX_AUTHORS]
        except Exception as e:
            logger.warning("profile_section_failed", section="authors", error=str(e))

        try:
            rows = await self.store.favorite_books(user_id, MIN_FAVORITE_RATING, MAX_FAVORITE_BOOKS)
            profile.favorite_book_ids = [book_id for book_id, _ in rows][:MAX_FAVORITE_BOOKS]
        except Exception as e:
            logger.warning("profile_section_failed", section="books", error=str(e))

        try:
            reviews = await self.store.reviews(user_id, MAX_REVIEWS)
            for review in reviews[:MAX_REVIEWS]:
                if review and review.strip():
                    profile.review_keywords.extend(extract_review_keywords(review))
        except Exception as e:
            logger.warning("profile_section_failed", section="reviews", error=str(e))

        logger.debug(
            "profile_built",
            user_id=str(user_id),
            categories=len(profile.favorite_categories),
            authors=len(profile.favorite_authors),
            books=len(profile.favorite_book_ids),
            keywords=len(profile.review_keywords),
        )
        return profile
