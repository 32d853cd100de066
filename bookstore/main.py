"""
FastAPI Application Entry Point

This module creates and configures the FastAPI application.

Key Concepts:
=============

1. Application Factory Pattern
   - create_app() returns a configured app
   - Tests pass their own Settings (e.g. a SQLite database URL)

2. Lifespan Events
   - startup: open the catalog store and create missing tables
   - shutdown: close the store (dispose the connection pool)

3. Middleware Stack
   - CORS: Allow cross-origin requests
   - Request logging: method, path, status and duration per request

4. Exception Handlers
   - Registered by bookstore.errors.register_error_handlers
"""

import logging
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from bookstore import __version__
from bookstore.config import Settings, get_settings
from bookstore.database import CatalogStore
from bookstore.errors import register_error_handlers
from bookstore.routers import books_router

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


# =============================================================================
# Application Factory
# =============================================================================
def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Configuration to use; defaults to the cached environment settings

    Returns:
        Configured FastAPI application instance
    """
    settings = settings or get_settings()
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """
        Code before yield runs on startup, code after yield on shutdown.
        """
        # ----- STARTUP -----
        logger.info(f"Starting {settings.app_name}...")
        logger.info(f"Environment: {settings.environment}, debug: {settings.debug}")

        store = CatalogStore.from_settings(settings)
        store.open()
        if settings.db_create_tables:
            try:
                store.create_tables()
            except SQLAlchemyError as exc:
                # Requests will report the store as unavailable until it recovers
                logger.error(f"Could not prepare catalog tables: {exc}")
        app.state.store = store

        yield  # Application runs here

        # ----- SHUTDOWN -----
        logger.info(f"Shutting down {settings.app_name}...")
        store.close()

    app = FastAPI(
        title=settings.app_name,
        description="""
## Bookstore Catalog API

Create, read, update, delete and search the books of a catalog.

- Every response uses the `{success, message, data}` envelope
- List endpoints add `count` and are never paginated
- ISBNs are unique; a second book with the same ISBN gets **409**
        """,
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    # -------------------------------------------------------------------------
    # CORS Middleware
    # -------------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials="*" not in settings.allowed_origins_list,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    # -------------------------------------------------------------------------
    # Request Logging
    # -------------------------------------------------------------------------
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} "
            f"({elapsed_ms:.1f} ms)"
        )
        return response

    register_error_handlers(app, settings)

    # -------------------------------------------------------------------------
    # Register Routers
    # -------------------------------------------------------------------------
    app.include_router(books_router, prefix=settings.api_prefix)

    # -------------------------------------------------------------------------
    # Service Endpoints
    # -------------------------------------------------------------------------
    @app.get(
        "/health",
        tags=["Health"],
        summary="Health check",
        description="Check if the API is running and the store answers.",
    )
    def health_check(request: Request) -> dict:
        """
        Used by load balancers and container probes.

        Always 200 while the process is up; ``database`` tells whether the
        store responded.
        """
        store: CatalogStore = request.app.state.store
        database_ok = store.ping()
        return {
            "success": True,
            "message": "Server is running",
            "status": "healthy" if database_ok else "degraded",
            "database": "connected" if database_ok else "unavailable",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @app.get(
        "/api",
        tags=["Root"],
        summary="API root",
        description="Welcome message and API information.",
    )
    def api_root() -> dict:
        return {
            "success": True,
            "message": f"Welcome to the {settings.app_name}",
            "version": __version__,
            "endpoints": {
                "books": f"{settings.api_prefix}/books",
                "health": "/health",
                "docs": "/docs",
            },
        }

    return app


# =============================================================================
# Application Instance
# =============================================================================
# This is what uvicorn imports: uvicorn bookstore.main:app
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "bookstore.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
