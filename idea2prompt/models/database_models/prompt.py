# idea2prompt/models/database_models/prompt.py
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from idea2prompt.data.database import Base

CATEGORY_MAX_LENGTH = 100


class Prompt(Base):
    __tablename__ = "prompts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("registered_users.id"), nullable=False, index=True)
    category = Column(String(CATEGORY_MAX_LENGTH), nullable=False, default="General", server_default="General")
    idea = Column(Text, nullable=False)
    generated_prompt = Column(Text, nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    user = relationship("User", back_populates="prompts")
