# idea2prompt/services/auth_services.py
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from idea2prompt.core.config import Settings
from idea2prompt.core.dependencies import get_settings
from idea2prompt.core.errors import AuthError, InvalidToken
from idea2prompt.models.auth_models import TokenData

BCRYPT_ROUNDS = 10
# bcrypt only looks at the first 72 bytes of a password.
BCRYPT_MAX_PASSWORD_BYTES = 72

bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS))
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password) -> bool:
    if isinstance(hashed_password, str):
        hashed_password = hashed_password.encode("utf-8")
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password)
    except ValueError:
        # Over-long password or a hash bcrypt cannot parse.
        return False


def create_access_token(data: dict, settings: Settings, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": datetime.now(timezone.utc) + expires_delta})
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def issue_user_token(user_id: int, username: str, settings: Settings, expires_delta: Optional[timedelta] = None) -> str:
    return create_access_token({"sub": str(user_id), "username": username}, settings, expires_delta)


def decode_access_token(token: str, settings: Settings) -> TokenData:
    """
    Verify signature and expiry and return the identity claims.

    Every failure raises the same InvalidToken so callers cannot tell a forged
    token from an expired one.
    """
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
        user_id = payload.get("sub")
        username = payload.get("username")
        if user_id is None or username is None:
            raise JWTError("Invalid token payload")
        return TokenData(user_id=int(user_id), username=username)
    except (JWTError, ValueError, TypeError):
        raise InvalidToken()


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> TokenData:
    if credentials is None or not credentials.credentials:
        raise AuthError("Access token required")
    return decode_access_token(credentials.credentials, settings)
