"""Main API v1 router combining all endpoint routers."""

from fastapi import APIRouter

from app.api.v1 import books, discover, health

api_router = APIRouter()

# Health check (no auth required)
api_router.include_router(health.router, tags=["Health"])

# Catalog search and book details
api_router.include_router(books.router, tags=["Books"])

# Recommendations, trending lists and swipes
api_router.include_router(discover.router, prefix="/discover", tags=["Discover"])
