# idea2prompt/models/auth_models.py
from typing import Optional

from pydantic import BaseModel


class UserCreate(BaseModel):
    # Optional so that missing fields reach the handler and become a 400.
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class TokenData(BaseModel):
    user_id: int
    username: str


class UserOut(BaseModel):
    id: int
    username: str
    email: str


class AuthResponse(BaseModel):
    message: str
    token: str
    user: UserOut
