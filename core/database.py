"""
Database session management with SQLAlchemy async
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool
from models import Base
import logging

logger = logging.getLogger(__name__)


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create the async engine for a database URL"""
    return create_async_engine(
        database_url,
        echo=echo,
        poolclass=NullPool,  # one shared session per run, no pooling needed
        future=True
    )


def build_session_maker(engine: AsyncEngine) -> async_sessionmaker:
    """Create the session factory bound to an engine"""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False
    )


async def create_tables(engine: AsyncEngine):
    """Create every table known to the ORM metadata"""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created")
