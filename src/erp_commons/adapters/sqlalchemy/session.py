"""SQLAlchemy adapter – SqlAlchemySessionFactory."""
from __future__ import annotations

from typing import Any

from sqlalchemy import MetaData
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from erp_commons.adapters.sqlalchemy.models import Base
from erp_commons.config.settings import DatabaseSettings


class SqlAlchemySessionFactory:
    """Creates async SQLAlchemy sessions from an engine URL."""

    def __init__(self, database_url: str, **engine_kwargs: Any) -> None:
        self._engine = create_async_engine(database_url, **engine_kwargs)
        self._session_factory = async_sessionmaker(self._engine, class_=AsyncSession, expire_on_commit=False)

    @classmethod
    def from_settings(cls, settings: DatabaseSettings, **engine_kwargs: Any) -> SqlAlchemySessionFactory:
        engine_kwargs.setdefault("echo", settings.echo)
        engine_kwargs.setdefault("pool_pre_ping", settings.pool_pre_ping)
        return cls(settings.url, **engine_kwargs)

    @property
    def engine(self) -> Any:
        return self._engine

    def __call__(self) -> AsyncSession:
        return self._session_factory()

    async def create_schema(self, metadata: MetaData | None = None) -> None:
        """Create all tables (tests and local development; production uses migrations)."""
        async with self._engine.begin() as conn:
            await conn.run_sync((metadata or Base.metadata).create_all)

    async def dispose(self) -> None:
        await self._engine.dispose()


__all__ = ["SqlAlchemySessionFactory"]
