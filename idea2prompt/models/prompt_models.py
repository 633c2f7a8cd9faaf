# idea2prompt/models/prompt_models.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

DEFAULT_CATEGORY = "General"


class GeneratePromptRequest(BaseModel):
    idea: Optional[str] = None
    category: Optional[str] = None


class GeneratePromptResponse(BaseModel):
    success: bool = True
    id: int
    prompt: str


class PromptOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    category: str
    idea: str
    generated_prompt: str
    created_at: datetime


class MessageResponse(BaseModel):
    message: str
