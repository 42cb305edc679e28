"""Shared API dependencies for authentication and service wiring."""

from functools import lru_cache
from typing import Annotated
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.catalog import BookCatalog, GoogleBooksCatalog
from app.config import settings
from app.core.exceptions import UnauthorizedError
from app.core.security import JWTConfig, verify_access_token
from app.db.session import get_db, get_session_factory
from app.repositories.discover_repo import DiscoverRepository
from app.services.book_cache import BookCacheWriter
from app.services.book_service import BookService
from app.services.recommendation import RecommendationService

# Security schemes
bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache
def get_jwt_config() -> JWTConfig:
    return JWTConfig.from_settings(settings)


async def get_current_user_id_optional(
    bearer: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    jwt_config: JWTConfig = Depends(get_jwt_config),
) -> UUID | None:
    """
    User ID from a valid bearer token, otherwise None.

    A missing, expired or malformed token is treated as an anonymous caller.
    """
    if bearer is None:
        return None

    payload = verify_access_token(jwt_config, bearer.credentials)
    if not payload:
        return None

    try:
        return UUID(str(payload.get("sub")))
    except ValueError:
        return None


async def get_current_user_id(
    user_id: UUID | None = Depends(get_current_user_id_optional),
) -> UUID:
    """User ID from the bearer token; 401 when absent or invalid."""
    if user_id is None:
        raise UnauthorizedError("Invalid or missing authentication credentials")
    return user_id


@lru_cache
def get_catalog() -> BookCatalog:
    return GoogleBooksCatalog(
        base_url=settings.google_books_base_url,
        api_key=settings.google_books_api_key,
        timeout=settings.catalog_timeout_seconds,
    )


@lru_cache
def get_cache_writer() -> BookCacheWriter:
    """Process-wide writer so pending tasks can be drained on shutdown."""
    return BookCacheWriter(get_session_factory())


def get_discover_repository(db: AsyncSession = Depends(get_db)) -> DiscoverRepository:
    return DiscoverRepository(db)


def get_book_service(
    repo: DiscoverRepository = Depends(get_discover_repository),
    catalog: BookCatalog = Depends(get_catalog),
    cache_writer: BookCacheWriter = Depends(get_cache_writer),
) -> BookService:
    return BookService(repo, catalog, cache_writer)


def get_recommendation_service(
    repo: DiscoverRepository = Depends(get_discover_repository),
    books: BookService = Depends(get_book_service),
) -> RecommendationService:
    return RecommendationService(
        repo,
        books,
        request_timeout=settings.discover_request_timeout_seconds,
        default_limit=settings.discover_default_limit,
    )


# Type aliases for cleaner dependency injection
CurrentUserId = Annotated[UUID, Depends(get_current_user_id)]
OptionalUserId = Annotated[UUID | None, Depends(get_current_user_id_optional)]
DiscoverRepo = Annotated[DiscoverRepository, Depends(get_discover_repository)]
Books = Annotated[BookService, Depends(get_book_service)]
Recommendations = Annotated[RecommendationService, Depends(get_recommendation_service)]
