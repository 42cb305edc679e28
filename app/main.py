"""FastAPI application entry point."""

import uuid
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app.api.v1.deps import get_cache_writer
from app.api.v1.router import api_router
from app.cache.redis_client import RedisCache, RedisUnavailableError
from app.config import settings
from app.db.session import close_db, init_db
from app.rate_limiter import limiter

# Configure structured logging
structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer() if settings.is_production else structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger(__name__)

# OpenAPI tag descriptions
OPENAPI_TAGS = [
    {
        "name": "Health",
        "description": """
**System Health & Monitoring**

Check API availability and database connectivity.
        """,
    },
    {
        "name": "Books",
        "description": """
**Book Search & Details**

Search the external catalog and fetch book details. Every book the
catalog returns is cached locally in the background.
        """,
    },
    {
        "name": "Discover",
        "description": """
**Personalized Recommendations**

| Strategy | Share | Confidence |
|----------|-------|------------|
| Similar to books you rated 4+ | 40% | 85 |
| Loved by people you follow | 25% | 75 |
| In your favorite categories | 20% | 70 |
| Trending on Folio | 10% | 60 |
| Serendipity | 5% | 50 |

Books you already logged are filtered out. Anonymous callers get trending
books only.

**Example:**
```bash
curl /v1/discover?limit=10 \\
  -H "Authorization: Bearer <token>"
```
        """,
    },
]

API_DESCRIPTION = """
# Folio API

**Track what you read, discover what to read next**

---

## Authentication

| Method | Header | Use Case |
|--------|--------|----------|
| **JWT Token** | `Authorization: Bearer <token>` | Web/mobile apps |

`GET /v1/discover` works without a token and returns trending books.

---

## Error Responses

```json
{
  "detail": {
    "error": {
      "code": "NOT_FOUND",
      "message": "Human-readable description",
      "details": null
    }
  }
}
```

| Status | Code | Description |
|--------|------|-------------|
| 401 | UNAUTHORIZED | Missing or invalid token |
| 404 | NOT_FOUND | Resource doesn't exist |
| 422 | VALIDATION_ERROR | Invalid input data |
| 429 | RATE_LIMITED | Too many requests |
| 502 | CATALOG_UNAVAILABLE | Book catalog failed |
| 500 | INTERNAL_ERROR | Server error |
"""


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    logger.info("Starting Folio API", version=settings.app_version, env=settings.environment)
    await init_db()

    # Redis is optional: catalog searches go uncached without it
    try:
        await RedisCache.get_client()
    except RedisUnavailableError as e:
        logger.warning("Redis unavailable, caching disabled", error=str(e))

    yield

    logger.info("Shutting down Folio API")

    # Let in-flight book cache writes finish before the engine goes away
    await get_cache_writer().drain()
    await RedisCache.close()
    await close_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description=API_DESCRIPTION,
        debug=settings.debug,
        openapi_tags=OPENAPI_TAGS,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Rate limiter state and exception handler
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def add_request_id(request: Request, call_next) -> Response:
        """Add unique request ID to each request for tracing."""
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    @app.middleware("http")
    async def log_requests(request: Request, call_next) -> Response:
        """Log all incoming requests."""
        logger.info(
            "Request started",
            method=request.method,
            path=request.url.path,
            client_ip=request.client.host if request.client else None,
        )

        response = await call_next(request)

        logger.info(
            "Request completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
        )
        return response

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle uncaught exceptions."""
        logger.exception("Unhandled exception", exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "requestId": request.headers.get("X-Request-ID"),
                }
            },
        )

    app.include_router(api_router, prefix="/v1")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.host, port=settings.port, reload=settings.debug)
