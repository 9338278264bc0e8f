from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base

from config.settings import settings

# Async engine; the pool is the only state shared between requests
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=settings.DB_MAX_OVERFLOW,
    pool_timeout=settings.DB_POOL_TIMEOUT,
    pool_recycle=settings.DB_POOL_RECYCLE,
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

Base = declarative_base()

@asynccontextmanager
async def session_scope(
    factory: Optional[async_sessionmaker] = None
) -> AsyncGenerator[AsyncSession, None]:
    """One transaction: committed when the block exits cleanly, rolled back otherwise"""
    session = (factory or async_session_factory)()
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()

async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session; a friendship check and the write it guards share one transaction"""
    async with session_scope() as session:
        yield session
