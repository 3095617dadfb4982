from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from app.core.config import settings

# postgresql+asyncpg://... in deployment, sqlite+aiosqlite://... for local runs and tests.
# pool_pre_ping: check connection is alive before use (the ledger store reports a dead
# database as StorageUnavailable, not a stale pooled connection).
engine = create_async_engine(
    settings.database_url,
    echo=False,
    pool_pre_ping=True,
    pool_recycle=300,
)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

Base = declarative_base()


async def get_db() -> AsyncIterator[AsyncSession]:
    """One session, and so one unit of work, per request."""
    async with AsyncSessionLocal() as session:
        yield session
