from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool
from typing import Optional, Tuple

from knowledge_ingest.config import Settings, settings as default_settings
from knowledge_ingest.models import Base


def create_engine(settings: Optional[Settings] = None) -> AsyncEngine:
    """Create the async engine for the configured database."""
    settings = settings or default_settings
    url = settings.DATABASE_URL
    if not url:
        raise ValueError(
            "DATABASE_URL not configured. "
            "Please set DATABASE_URL environment variable"
        )

    kwargs = {"echo": settings.DATABASE_ECHO, "future": True}
    if url.startswith("postgresql+asyncpg"):
        kwargs["poolclass"] = NullPool
        kwargs["connect_args"] = {"server_settings": {"application_name": "knowledge-ingest"}}

    return create_async_engine(url, **kwargs)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create async session factory bound to an engine"""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


def create_database(settings: Optional[Settings] = None) -> Tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
    engine = create_engine(settings)
    return engine, create_session_factory(engine)


async def init_db(engine: AsyncEngine) -> None:
    """Initialize database tables"""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


__all__ = ["create_engine", "create_session_factory", "create_database", "init_db"]
