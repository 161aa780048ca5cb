"""
FastAPI Application Entry Point

This module creates and configures the FastAPI application.

Key Concepts:
=============

1. Application Factory Pattern
   - create_app() returns a configured app
   - Tests pass their own JsonFileStore pointing at a temporary directory

2. Lifespan Events
   - startup: create the data files, recompute every book's rating fields
   - shutdown: close the Redis connection

3. Middleware Stack
   - Rate limiting (slowapi)
   - CORS for the web frontend

4. Exception Handlers
   - Every error body is {"message": ...}
   - Request validation errors answer 400 with an extra "errors" list
   - Data file errors are logged and answer 500
"""

import json
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from bookreview import __version__
from bookreview.config import get_settings
from bookreview.database import JsonFileStore
from bookreview.models import BookModel, ReviewModel
from bookreview.routers import auth, books, recommendations, reviews, users
from bookreview.services.cache import close_redis_connection, get_cache_stats
from bookreview.services.rate_limiter import limiter, rate_limit_exceeded_handler
from bookreview.services.ratings import recalculate_all_book_ratings

# =============================================================================
# Logging Configuration
# =============================================================================
settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# =============================================================================
# Lifespan Events
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Code before yield runs on startup, code after yield on shutdown.
    """
    # ----- STARTUP -----
    logger.info(f"Starting {settings.app_name} ({settings.environment})...")

    store: JsonFileStore = app.state.store
    store.initialize()
    logger.info(f"Data directory: {store.data_dir}")

    report = recalculate_all_book_ratings(BookModel(store), ReviewModel(store))
    if report.success:
        logger.info(f"Recalculated ratings for {report.updated} books")
    else:
        logger.warning(
            f"Recalculated ratings for {report.updated} books, "
            f"failed for {len(report.failed)}: {report.failed}"
        )

    yield  # Application runs here

    # ----- SHUTDOWN -----
    logger.info(f"Shutting down {settings.app_name}...")
    close_redis_connection()


# =============================================================================
# Error Body Helpers
# =============================================================================
def _validation_message(error: dict) -> str:
    message = error.get("msg", "Invalid value")
    return message.removeprefix("Value error, ")


def _validation_errors(exc: RequestValidationError) -> list[dict]:
    return [
        {
            "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
            "message": _validation_message(error),
        }
        for error in exc.errors()
    ]


# =============================================================================
# Application Factory
# =============================================================================
def create_app(store: JsonFileStore | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        store: Data store to serve; defaults to one at settings.data_dir

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title=settings.app_name,
        description="""
## Book Review API

Browse books, write reviews and keep a list of favorites.

### Features
- **Books**: Sorted, paginated listing and search with filters
- **Reviews**: One review per user per book, ratings kept in sync
- **Users**: Profiles, review history and favorites
- **Recommendations**: Suggestions based on your reviews and favorites

### Authentication
Register or log in to receive a JWT, then send it as
`Authorization: Bearer <token>`.
        """,
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.store = store if store is not None else JsonFileStore(settings.data_dir)

    # -------------------------------------------------------------------------
    # Rate Limiting
    # -------------------------------------------------------------------------
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # -------------------------------------------------------------------------
    # CORS Middleware
    # -------------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -------------------------------------------------------------------------
    # Exception Handlers
    # -------------------------------------------------------------------------
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request,
        exc: StarletteHTTPException,
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """
        Answer 400 for invalid bodies or query parameters.

        The first error becomes the message; all of them are listed.
        """
        errors = _validation_errors(exc)
        message = errors[0]["message"] if errors else "Validation error"
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": message, "errors": errors},
        )

    @app.exception_handler(OSError)
    @app.exception_handler(json.JSONDecodeError)
    async def data_store_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """
        Handle unreadable or unwritable data files.

        Logs the actual error while hiding details from users.
        """
        logger.error(f"Data store error: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "A data storage error occurred. Please try again later."},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """
        Catch-all exception handler.

        In production, hide internal errors from users.
        In debug mode, show more details.
        """
        logger.error(f"Unhandled error: {exc}", exc_info=True)

        if settings.debug:
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"message": str(exc)},
            )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "An internal error occurred."},
        )

    # -------------------------------------------------------------------------
    # Register Routers
    # -------------------------------------------------------------------------
    api_prefix = settings.api_prefix

    app.include_router(auth.router, prefix=api_prefix)
    app.include_router(books.router, prefix=api_prefix)
    app.include_router(reviews.router, prefix=api_prefix)
    # /users/favorites is declared before /users/{user_id} inside the router
    app.include_router(users.router, prefix=api_prefix)
    app.include_router(recommendations.router, prefix=api_prefix)

    # -------------------------------------------------------------------------
    # Health Check Endpoint
    # -------------------------------------------------------------------------
    @app.get(
        f"{api_prefix}/health",
        tags=["Health"],
        summary="Health check",
        description="Check if the API is running and healthy.",
    )
    async def health_check() -> dict:
        """Used by load balancers and monitoring to check the instance."""
        return {
            "status": "ok",
            "message": "Server is running",
            "environment": settings.environment,
            "cache": get_cache_stats(),
            "rate_limiting": {
                "enabled": settings.rate_limit_enabled,
                "default_limit": settings.rate_limit_default,
            },
        }

    @app.get(
        "/",
        tags=["Root"],
        summary="API root",
        description="Welcome message and API information.",
    )
    async def root() -> dict:
        """Root endpoint with API information."""
        return {
            "message": f"Welcome to {settings.app_name}",
            "version": __version__,
            "docs": "/docs",
            "health": f"{api_prefix}/health",
        }

    return app


# =============================================================================
# Application Instance
# =============================================================================
# This is what uvicorn imports: uvicorn bookreview.main:app

app = create_app()


# =============================================================================
# Development Server
# =============================================================================
# Run directly with: python -m bookreview.main
# In production, use: uvicorn bookreview.main:app --host 0.0.0.0 --port 5000

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "bookreview.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
