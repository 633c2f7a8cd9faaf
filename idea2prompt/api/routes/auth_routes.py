# idea2prompt/api/routes/auth_routes.py
import logging

from email_validator import EmailNotValidError, validate_email
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from starlette.concurrency import run_in_threadpool

from idea2prompt.core.config import Settings
from idea2prompt.core.dependencies import get_session_factory, get_settings
from idea2prompt.core.errors import AuthError, DuplicateIdentity, ValidationError
from idea2prompt.data.database import get_db
from idea2prompt.models.auth_models import AuthResponse, LoginRequest, UserCreate, UserOut
from idea2prompt.models.database_models.user import EMAIL_MAX_LENGTH, USERNAME_MAX_LENGTH
from idea2prompt.services.auth_services import (
    BCRYPT_MAX_PASSWORD_BYTES,
    hash_password,
    issue_user_token,
    verify_password,
)
from idea2prompt.services.database.user_database_services import (
    create_user,
    get_user_by_email,
    get_user_by_email_or_username,
    schedule_login_attempt,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Authentication"])


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=AuthResponse)
async def register(
    user_data: UserCreate,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Register a new user and log them straight in."""
    if not user_data.username or not user_data.email or not user_data.password:
        raise ValidationError("All fields are required")

    try:
        validate_email(user_data.email, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValidationError("Invalid email address", str(e))

    if len(user_data.username) > USERNAME_MAX_LENGTH:
        raise ValidationError(f"Username must be at most {USERNAME_MAX_LENGTH} characters")
    if len(user_data.email) > EMAIL_MAX_LENGTH:
        raise ValidationError(f"Email must be at most {EMAIL_MAX_LENGTH} characters")
    if len(user_data.password.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes")

    # Checked before hashing so a duplicate never pays for a bcrypt round.
    if await get_user_by_email_or_username(db, user_data.email, user_data.username) is not None:
        raise DuplicateIdentity()

    password_hash = await run_in_threadpool(hash_password, user_data.password)
    user = await create_user(db, user_data.username, user_data.email, password_hash)
    logger.info(f"Registered user {user.id}")

    return AuthResponse(
        message="User registered successfully",
        token=issue_user_token(user.id, user.username, settings),
        user=UserOut(id=user.id, username=user.username, email=user.email),
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    login_data: LoginRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    session_factory: async_sessionmaker = Depends(get_session_factory),
):
    """Check email and password and hand out a bearer token."""
    if not login_data.email or not login_data.password:
        raise ValidationError("Email and password are required")

    user = await get_user_by_email(db, login_data.email)
    if not user:
        raise AuthError("Invalid credentials")

    valid_password = await run_in_threadpool(verify_password, login_data.password, user.password_hash)

    # Not awaited: the audit write never delays or fails the login.
    schedule_login_attempt(session_factory, user.id, valid_password)

    if not valid_password:
        raise AuthError("Invalid credentials")

    return AuthResponse(
        message="Login successful",
        token=issue_user_token(user.id, user.username, settings),
        user=UserOut(id=user.id, username=user.username, email=user.email),
    )
