# idea2prompt/data/database.py
import logging
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from idea2prompt.core.config import Settings

logger = logging.getLogger(__name__)

Base = declarative_base()


class Database:
    """Async engine with a bounded connection pool plus its session factory."""

    def __init__(self, settings: Settings):
        url = settings.async_database_url
        engine_options = {}
        if not url.startswith("sqlite"):
            # Requests wait up to DB_POOL_TIMEOUT seconds for a free connection.
            engine_options.update(
                pool_size=settings.DB_POOL_SIZE,
                max_overflow=0,
                pool_timeout=settings.DB_POOL_TIMEOUT,
                pool_pre_ping=True,
            )
        self.engine = create_async_engine(url, echo=settings.DB_ECHO, **engine_options)
        self.session_factory = async_sessionmaker(
            bind=self.engine, class_=AsyncSession, autoflush=False, expire_on_commit=False
        )

    async def ping(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Database connection failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    db = request.app.state.database.session_factory()
    try:
        yield db
    finally:
        await db.close()
