"""
Database Connection Management

Async SQLAlchemy 2.0 engine and session factory wrapped in an explicit
``Database`` handle. The application owns one handle for its lifetime and
hands it to resolvers; each resolver acquires a session scoped to its call.
"""

import time
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

import structlog
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from marketplace.errors import DataAccessError

logger = structlog.get_logger(__name__)


class Database:
    """
    Owner of the async engine and session factory.

    Example:
        db = Database.from_url(settings.database.async_url)
        await db.connect()
        async with db.session() as session:
            result = await session.execute(query)
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self._session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
            bind=engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @classmethod
    def from_url(cls, url: str, echo: bool = False, **engine_kwargs: Any) -> "Database":
        """
        Build a handle from a database URL.

        asyncpg pools its own connections, so network databases default to
        ``NullPool``; callers may override the pool via ``engine_kwargs``.
        """
        engine_config: Dict[str, Any] = {
            "echo": echo,
            "pool_pre_ping": True,
        }
        if "poolclass" not in engine_kwargs and not url.startswith("sqlite"):
            engine_config["poolclass"] = NullPool
        engine_config.update(engine_kwargs)

        return cls(create_async_engine(url, **engine_config))

    async def connect(self) -> None:
        """Verify the store is reachable."""
        try:
            async with self.engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.error("Failed to connect to database", error=str(e))
            raise DataAccessError(f"Database unreachable: {e}") from e
        logger.info("Database connection established", url=self.engine.url.render_as_string(hide_password=True))

    async def dispose(self) -> None:
        """Close all pooled connections."""
        await self.engine.dispose()
        logger.info("Database connection pool closed")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Provide a session for one unit of work.

        Commits on success and rolls back on error. Store failures are
        re-raised as ``DataAccessError``; no retry is attempted.
        """
        session = self._session_factory()
        try:
            yield session
            await session.commit()
        except SQLAlchemyError as e:
            logger.error("Database session error, rolling back", error=str(e), error_type=type(e).__name__)
            await session.rollback()
            raise DataAccessError(str(e)) from e
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def health(self) -> Dict[str, Any]:
        """
        Check database health status.

        Returns:
            dict: Health status with latency information
        """
        try:
            start = time.perf_counter()
            async with self.session() as session:
                await session.execute(text("SELECT 1"))
            latency_ms = (time.perf_counter() - start) * 1000

            return {
                "status": "healthy",
                "latency_ms": round(latency_ms, 2),
            }
        except DataAccessError as e:
            return {
                "status": "unhealthy",
                "error": str(e),
            }


def create_database(url: Optional[str] = None) -> Database:
    """Create a ``Database`` from application settings."""
    from marketplace.config import get_settings

    settings = get_settings()
    return Database.from_url(url or settings.database.async_url, echo=settings.database.echo)
