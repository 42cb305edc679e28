"""Core utilities package."""

from app.core.exceptions import (
    APIError,
    CatalogUnavailableError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from app.core.security import JWTConfig, create_access_token, verify_access_token

__all__ = [
    "JWTConfig",
    "create_access_token",
    "verify_access_token",
    "APIError",
    "CatalogUnavailableError",
    "NotFoundError",
    "UnauthorizedError",
    "ValidationError",
]
