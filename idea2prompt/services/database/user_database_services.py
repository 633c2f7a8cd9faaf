# idea2prompt/services/database/user_database_services.py
import asyncio
import logging
from typing import Optional, Set

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from idea2prompt.core.errors import DuplicateIdentity
from idea2prompt.models.database_models.login_history import LoginHistory
from idea2prompt.models.database_models.user import User

logger = logging.getLogger(__name__)

# Strong references keep in-flight audit writes alive until they finish.
pending_audit_writes: Set[asyncio.Task] = set()


async def get_user_by_email_or_username(db: AsyncSession, email: str, username: str) -> Optional[User]:
    result = await db.execute(select(User).filter(or_(User.email == email, User.username == username)))
    return result.scalars().first()


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).filter(User.email == email))
    return result.scalars().first()


async def create_user(db: AsyncSession, username: str, email: str, password_hash: str) -> User:
    # The pre-check gives the friendly error; the unique constraints are what
    # actually guard against two concurrent registrations.
    if await get_user_by_email_or_username(db, email, username) is not None:
        raise DuplicateIdentity()

    db_user = User(username=username, email=email, password_hash=password_hash)
    db.add(db_user)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise DuplicateIdentity()
    await db.refresh(db_user)
    return db_user


async def record_login_attempt(db: AsyncSession, user_id: int, success: bool) -> LoginHistory:
    entry = LoginHistory(user_id=user_id, success=success)
    db.add(entry)
    await db.commit()
    return entry


async def log_login_attempt(session_factory: async_sessionmaker, user_id: int, success: bool) -> None:
    """Audit write run off the request path. Failures are logged and never reach the client."""
    try:
        async with session_factory() as db:
            await record_login_attempt(db, user_id, success)
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"Failed to log login attempt for user {user_id}: {e}")


def schedule_login_attempt(session_factory: async_sessionmaker, user_id: int, success: bool) -> asyncio.Task:
    task = asyncio.create_task(log_login_attempt(session_factory, user_id, success))
    pending_audit_writes.add(task)
    task.add_done_callback(pending_audit_writes.discard)
    return task
