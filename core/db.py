"""
Issue store engine and sessions.

One process-wide DatabaseManager owns the engine. The gateway opens a
session per request through get_db; tests reset the manager between cases
and point it at a fresh in-memory SQLite database.
"""

import time
from collections.abc import Generator
from contextlib import contextmanager
from typing import Optional

from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from .config import get_settings


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all models."""

    pass


def _engine_options(url: str, settings) -> dict:
    # In-memory SQLite lives inside one connection, so every session must share it
    if url.startswith("sqlite"):
        return {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
    return {
        "poolclass": QueuePool,
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_pre_ping": settings.db_pool_pre_ping,
    }


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class DatabaseManager:
    """
    Singleton database manager.

    The engine and session factory are created once by initialize(); every
    request or CLI command then works inside session(), which commits on
    success and rolls back on any exception.
    """

    _instance: Optional["DatabaseManager"] = None
    _initialized: bool = False

    def __new__(cls) -> "DatabaseManager":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        pass  # Prevent re-initialization

    def initialize(self, database_url: str | None = None) -> None:
        """
        Initialize database connection. Call once at app startup.

        Args:
            database_url: Optional override. Uses settings.database_url if not provided.
        """
        if self._initialized:
            return

        settings = get_settings()
        url = database_url or settings.database_url
        self.engine = create_engine(url, echo=settings.debug, **_engine_options(url, settings))
        if url.startswith("sqlite"):
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)

        self.SessionLocal = sessionmaker(
            bind=self.engine,
            autoflush=False,
            autocommit=False,
            expire_on_commit=False,
        )

        self._initialized = True

    def create_all_tables(self) -> None:
        """Create all tables defined by models."""
        self._ensure_initialized()
        # Models register themselves on Base.metadata when imported
        import core.models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def drop_all_tables(self) -> None:
        """Drop all tables. USE WITH CAUTION."""
        self._ensure_initialized()
        Base.metadata.drop_all(bind=self.engine)

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """Unit of work: commit when the block exits cleanly, roll back on any exception."""
        self._ensure_initialized()
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def health_check(self) -> dict:
        """Round-trip a SELECT 1; reports healthy, latency_ms and error for /health."""
        if not self._initialized:
            return {"healthy": False, "latency_ms": 0, "error": "Database not initialized"}

        start = time.perf_counter()
        error = None
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except Exception as e:
            error = str(e)
        latency_ms = round((time.perf_counter() - start) * 1000, 2)
        return {"healthy": error is None, "latency_ms": latency_ms, "error": error}

    def reset(self) -> None:
        """Reset database manager. Disposes engine and clears singleton state."""
        if getattr(self, "engine", None) is not None:
            self.engine.dispose()
        self._initialized = False

    def _ensure_initialized(self) -> None:
        """Raise error if not initialized."""
        if not self._initialized:
            raise RuntimeError("DatabaseManager not initialized. Call initialize() first.")


# Global singleton
db = DatabaseManager()


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency: one unit of work per request."""
    with db.session() as session:
        yield session


__all__ = ["Base", "DatabaseManager", "db", "get_db"]
