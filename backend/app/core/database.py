"""
SAP Technologies API - Database

The engine and session factory are built on first use so that tests (and
tools that only import models) can swap DATABASE_URL before anything connects.
"""
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker, AsyncEngine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool
from sqlalchemy import text
from typing import Any, AsyncGenerator, Dict, Optional

from app.core.config import settings
from app.core.logging_config import logger

Base = declarative_base()

_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None

POOL_RECYCLE_SECONDS = 1800


def get_database_url() -> str:
    """DATABASE_URL with plain postgres schemes mapped to the asyncpg driver"""
    url = settings.DATABASE_URL
    for prefix in ("postgresql://", "postgres://"):
        if url.startswith(prefix):
            return "postgresql+asyncpg://" + url[len(prefix):]
    return url


def _engine_options(url: str) -> Dict[str, Any]:
    options: Dict[str, Any] = {"echo": settings.DB_ECHO}
    if url.startswith("sqlite"):
        options.update(poolclass=NullPool, connect_args={"check_same_thread": False})
    elif settings.is_dev_mode():
        options["poolclass"] = NullPool
    else:
        options.update(
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_recycle=POOL_RECYCLE_SECONDS,
            pool_pre_ping=True,
        )
    return options


def get_engine() -> AsyncEngine:
    global _engine
    if _engine is None:
        url = get_database_url()
        _engine = create_async_engine(url, **_engine_options(url))
        logger.debug("Database engine created", extra={"database_dialect": url.split(":", 1)[0]})
    return _engine


def get_session_local() -> async_sessionmaker[AsyncSession]:
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(
            get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
    return _session_factory


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Request-scoped session.

    Anything the endpoint left pending (added, modified or deleted objects)
    is committed after the response is produced; any error rolls back.
    """
    async with get_session_local()() as session:
        try:
            yield session
            if session.new or session.dirty or session.deleted:
                await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Create missing tables for every registered model"""
    import app.models  # noqa: F401  (registers the mappers on Base.metadata)

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured", extra={"table_count": len(Base.metadata.tables)})


async def check_db_connection() -> bool:
    try:
        async with get_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return False


async def close_db() -> None:
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
        logger.info("Database engine disposed")
    _engine = None
    _session_factory = None
