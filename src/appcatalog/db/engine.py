"""Async SQLAlchemy engine creation and the catalog's persistence handle."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from appcatalog.config import settings
from appcatalog.errors.exceptions import PersistenceError

logger = logging.getLogger(__name__)


def create_db_engine(url: str | None = None, isolation_level: str | None = None) -> AsyncEngine:
    """Create an async SQLAlchemy engine."""
    url = url or settings.effective_database_url
    engine_kwargs: dict = {"echo": False}

    # SQLite supports neither pool sizing nor REPEATABLE READ
    if "sqlite" not in url:
        engine_kwargs.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            isolation_level=isolation_level or settings.isolation_level,
        )
    elif url.rstrip("/").endswith("sqlite+aiosqlite:") or ":memory:" in url:
        # In-memory databases live on one connection
        engine_kwargs.update(poolclass=StaticPool, connect_args={"check_same_thread": False})

    return create_async_engine(url, **engine_kwargs)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create an async session factory."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


class Database:
    """Explicitly constructed persistence handle passed to every component.

    ``session()`` is one unit of work: the caller commits, anything left
    uncommitted is rolled back when the block exits.
    """

    def __init__(self, url: str | None = None, isolation_level: str | None = None):
        self.url = url or settings.effective_database_url
        self.isolation_level = isolation_level
        self.engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def is_open(self) -> bool:
        return self.engine is not None

    async def open(self, create_schema: bool = False) -> "Database":
        if self.engine is None:
            self.engine = create_db_engine(self.url, self.isolation_level)
            self._session_factory = create_session_factory(self.engine)
            logger.info("Database opened (db=%s)", "sqlite" if "sqlite" in self.url else "postgresql")
        if create_schema:
            await self.create_schema()
        return self

    async def create_schema(self) -> int:
        """Create tables and seed platforms. Returns platforms created."""
        from appcatalog.db.base import Base
        from appcatalog.db.seed import seed_platforms
        import appcatalog.db.models  # noqa: F401 register all ORM models

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        async with self.session() as session:
            created = await seed_platforms(session)
            await session.commit()
        if created:
            logger.info("Seeded %d platforms", created)
        return created

    async def close(self) -> None:
        if self.engine is not None:
            await self.engine.dispose()
            logger.info("Database closed")
        self.engine = None
        self._session_factory = None

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        if self._session_factory is None:
            raise PersistenceError("Database handle is not open")
        async with self._session_factory() as session:
            try:
                yield session
            except SQLAlchemyError as exc:
                await session.rollback()
                logger.error("Unit of work rolled back: %s", exc)
                raise PersistenceError(f"Storage failure: {exc.__class__.__name__}") from exc
