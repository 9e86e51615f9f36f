from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from go_dutch.config import settings


def create_engine() -> AsyncEngine:
    return create_async_engine(
        settings.database_url,
        echo=settings.sql_echo,
        pool_pre_ping=True,
    )


engine = create_engine()
# One session per update, opened by DbSessionMiddleware.
SessionMaker = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
