# idea2prompt/models/database_models/user.py
from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from idea2prompt.data.database import Base
from idea2prompt.models.database_models.login_history import LoginHistory
from idea2prompt.models.database_models.prompt import Prompt

USERNAME_MAX_LENGTH = 255
EMAIL_MAX_LENGTH = 255


class User(Base):
    __tablename__ = "registered_users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(USERNAME_MAX_LENGTH), unique=True, index=True, nullable=False)
    email = Column(String(EMAIL_MAX_LENGTH), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)

    prompts = relationship("Prompt", back_populates="user")
    login_history = relationship("LoginHistory", back_populates="user")
