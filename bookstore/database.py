"""
Database Configuration Module

SQLAlchemy 2.0 setup for the catalog store.

Store Handle
============
There is no module-level engine. ``CatalogStore`` owns the engine and the
session factory, and has an explicit lifecycle:

1. ``open()`` once at process start (FastAPI lifespan)
2. ``session()`` per unit of work (one per request via ``get_db``)
3. ``close()`` on shutdown, which disposes the connection pool

The store is kept on ``app.state.store`` so routes reach it through
dependency injection instead of ambient global state.

Session Management Pattern
==========================
We use the "session per request" pattern:
1. Request arrives → create a new session
2. Repository commits on success, rolls back on failure
3. Close session when request ends
"""

import logging
from collections.abc import Generator
from typing import Any

from fastapi import Request
from sqlalchemy import Engine, create_engine, event, make_url, text
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from bookstore.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


class StoreNotOpenError(RuntimeError):
    """Raised when a session is requested from a store that is not open."""


def _unicode_lower(value: str | None) -> str | None:
    return value.lower() if value is not None else None


def _register_sqlite_functions(dbapi_connection, connection_record) -> None:
    """
    Replace SQLite's ASCII-only lower() with Python's str.lower.

    Case-insensitive search lowercases columns in SQL and the query in
    Python; both sides must fold the same way.
    """
    dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)


class CatalogStore:
    """
    Explicit handle to the catalog database.

    Example:
        store = CatalogStore("sqlite:///catalog.db")
        store.open()
        with store.session() as db:
            ...
        store.close()
    """

    def __init__(
        self,
        database_url: str,
        *,
        pool_size: int = 5,
        max_overflow: int = 10,
        connect_timeout: int = 10,
        echo: bool = False,
    ) -> None:
        self.database_url = database_url
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.connect_timeout = connect_timeout
        self.echo = echo
        self._engine: Engine | None = None
        self._session_factory: sessionmaker[Session] | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "CatalogStore":
        """Build a store from application settings."""
        return cls(
            settings.database_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            connect_timeout=settings.db_connect_timeout,
            echo=settings.debug,
        )

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise StoreNotOpenError("Catalog store is not open")
        return self._engine

    def _engine_options(self) -> dict[str, Any]:
        """
        Engine keyword arguments for the configured backend.

        SQLite has no server-side pool, so pool sizing only applies to
        client/server databases. In-memory SQLite must share one connection
        or every session would see a different empty database.
        """
        url = make_url(self.database_url)
        options: dict[str, Any] = {"echo": self.echo}

        if url.get_backend_name() == "sqlite":
            options["connect_args"] = {
                "check_same_thread": False,
                "timeout": self.connect_timeout,
            }
            if url.database in (None, "", ":memory:"):
                options["poolclass"] = StaticPool
        else:
            options["connect_args"] = {"connect_timeout": self.connect_timeout}
            options["pool_size"] = self.pool_size
            options["max_overflow"] = self.max_overflow
            # Verify connections are alive before using
            options["pool_pre_ping"] = True

        return options

    def open(self) -> None:
        """Create the engine and session factory. Idempotent."""
        if self.is_open:
            return

        self._engine = create_engine(self.database_url, **self._engine_options())
        if self._engine.dialect.name == "sqlite":
            event.listen(self._engine, "connect", _register_sqlite_functions)
        self._session_factory = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self._engine,
        )
        logger.info(f"Catalog store opened ({self._engine.url.render_as_string()})")

    def close(self) -> None:
        """Dispose the connection pool. Safe to call on a closed store."""
        if not self.is_open:
            return

        self._engine.dispose()
        self._engine = None
        self._session_factory = None
        logger.info("Catalog store closed")

    def session(self) -> Session:
        """Create a new session bound to this store."""
        if self._session_factory is None:
            raise StoreNotOpenError("Catalog store is not open")
        return self._session_factory()

    def create_tables(self) -> None:
        """
        Create all catalog tables that do not exist yet.

        There is no migration tooling; this only adds missing tables.
        """
        # Register models with Base.metadata
        import bookstore.models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def drop_tables(self) -> None:
        """
        Drop all catalog tables.

        DANGER: This deletes all data! Only use in development and tests.
        """
        import bookstore.models  # noqa: F401

        Base.metadata.drop_all(bind=self.engine)

    def ping(self) -> bool:
        """Return True if the database answers a trivial query."""
        try:
            with self.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except Exception as exc:
            logger.warning(f"Catalog store ping failed: {exc}")
            return False
        return True


# =============================================================================
# Dependency Injection
# =============================================================================
def get_store(request: Request) -> CatalogStore:
    """Return the store opened by the application lifespan."""
    return request.app.state.store


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI.

    Creates a session from the application's store, yields it to the
    route handler and closes it when the request ends.

    Yields:
        SQLAlchemy Session instance
    """
    db = get_store(request).session()
    try:
        yield db
    finally:
        db.close()
