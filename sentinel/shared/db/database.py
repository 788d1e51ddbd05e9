"""Async connection to the managed database using SQLAlchemy."""

from typing import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    AsyncEngine,
    create_async_engine,
    async_sessionmaker,
)
from sqlalchemy.pool import NullPool

from ..exceptions import ConfigurationError


def normalize_url(url: str) -> str:
    """Convert postgres:// and postgresql:// to the asyncpg driver URL."""
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+asyncpg://", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


class Database:
    """
    Handle to the managed database.

    One instance is created per process by the application lifespan and
    stored on ``app.state.db``; request handlers receive sessions from it
    through ``get_db_session``.
    """

    def __init__(self, url: str, echo: bool = False, timeout: float = 10.0):
        self.url = normalize_url(url)
        connect_args = {}
        if self.url.startswith("postgresql+asyncpg://"):
            connect_args = {"timeout": timeout, "command_timeout": timeout}
        elif self.url.startswith("sqlite"):
            connect_args = {"timeout": timeout}

        self.engine: AsyncEngine = create_async_engine(
            self.url,
            echo=echo,
            poolclass=NullPool,  # For serverless compatibility
            connect_args=connect_args,
        )
        self.session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @classmethod
    def from_config(cls, config) -> "Database":
        """Create the database handle, failing fast when unconfigured."""
        if not config.DATABASE_URL:
            raise ConfigurationError("Missing required configuration: DATABASE_URL")
        return cls(
            config.DATABASE_URL,
            echo=config.SQL_ECHO,
            timeout=config.DB_TIMEOUT_SECONDS,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Get an async database session.

        Usage:
            async with db.session() as session:
                result = await session.execute(select(Anomaly))
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def close(self) -> None:
        """Close database connections."""
        await self.engine.dispose()


def get_database(request: Request) -> Database:
    """Return the process-wide database handle."""
    return request.app.state.db


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency for getting database session.

    Usage:
        @router.get("/anomalies")
        async def list_anomalies(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    async with get_database(request).session() as session:
        yield session
