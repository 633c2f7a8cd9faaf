# idea2prompt/core/dependencies.py
from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from idea2prompt.core.config import Settings


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_session_factory(request: Request) -> async_sessionmaker[AsyncSession]:
    """Session factory for work that outlives the request, such as background tasks."""
    return request.app.state.database.session_factory


def get_prompt_generator(request: Request):
    return request.app.state.generator
