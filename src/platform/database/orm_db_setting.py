"""
SQLAlchemy async engine and session management

Database owns one AsyncEngine and its session maker. Production runs on
PostgreSQL through asyncpg; tests point DATABASE_URL at a sqlite file
through aiosqlite.

Every inventory change is a conditional UPDATE whose row count decides
the outcome, so the engine needs no extra locking configuration:
- PostgreSQL READ COMMITTED re-evaluates the WHERE clause after waiting on a row lock
- sqlite serializes writers, `timeout` makes a blocked writer wait instead of failing
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from sqlalchemy import MetaData
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger


# =============================================================================
# Base Model
# =============================================================================

NAMING_CONVENTION = {
    'ix': 'ix_%(column_0_label)s',
    'uq': 'uq_%(table_name)s_%(column_0_name)s',
    'ck': 'ck_%(table_name)s_%(constraint_name)s',
    'fk': 'fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s',
    'pk': 'pk_%(table_name)s',
}


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


def register_models() -> None:
    """Populate Base.metadata; the model modules import Base, so they load lazily"""
    import src.service.inventory.driven_adapter.model  # noqa: F401


# =============================================================================
# Database Class
# =============================================================================


def _engine_kwargs(url: str) -> dict[str, Any]:
    if url.startswith('sqlite'):
        return {'connect_args': {'timeout': 30}}
    return {
        'pool_size': settings.DB_POOL_SIZE,
        'max_overflow': settings.DB_MAX_OVERFLOW,
        'pool_timeout': settings.DB_POOL_TIMEOUT,
        'pool_recycle': settings.DB_POOL_RECYCLE,
        'pool_pre_ping': settings.DB_POOL_PRE_PING,
    }


class Database:
    """
    Engine + session factory, injected as a Singleton by the DI container.

    Usage:
        async with database.session() as session:
            ...
    """

    def __init__(self, *, url: str | None = None, echo: bool | None = None) -> None:
        self.url = url or settings.DATABASE_URL
        self._engine: AsyncEngine = create_async_engine(
            self.url,
            echo=settings.DB_ECHO if echo is None else echo,
            **_engine_kwargs(self.url),
        )
        self._session_maker = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Session context manager, rolls back on exception and closes on exit"""
        async with self._session_maker() as session:
            yield session

    async def create_all(self) -> None:
        """Create tables if they don't exist (dev and tests, production uses alembic)"""
        register_models()
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all, checkfirst=True)
        Logger.base.info(f'🗄️  [DB] Tables ensured on {self._engine.url.render_as_string()}')

    async def drop_all(self) -> None:
        register_models()
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def dispose(self) -> None:
        await self._engine.dispose()
        Logger.base.info('🔌 [DB] Engine disposed')
