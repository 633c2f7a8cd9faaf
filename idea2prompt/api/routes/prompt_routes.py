# idea2prompt/api/routes/prompt_routes.py
import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from idea2prompt.core.dependencies import get_prompt_generator
from idea2prompt.core.errors import NotFoundOrForbidden, ValidationError
from idea2prompt.data.database import get_db
from idea2prompt.models.auth_models import TokenData
from idea2prompt.models.database_models.prompt import CATEGORY_MAX_LENGTH
from idea2prompt.models.prompt_models import (
    DEFAULT_CATEGORY,
    GeneratePromptRequest,
    GeneratePromptResponse,
    MessageResponse,
    PromptOut,
)
from idea2prompt.services.auth_services import get_current_user
from idea2prompt.services.database.prompt_database_services import (
    create_prompt,
    delete_user_prompt,
    get_user_prompts,
)
from idea2prompt.services.llm.llm_services import PromptGenerator

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Prompts"])

# Prompt ids are a 32-bit SERIAL column.
MAX_PROMPT_ID = 2**31 - 1


@router.post("/generate-prompt", response_model=GeneratePromptResponse)
async def generate_prompt(
    request: GeneratePromptRequest,
    user: TokenData = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    generator: PromptGenerator = Depends(get_prompt_generator),
):
    """
    Expand the user's idea into a full prompt and store it.

    The idea is validated before Gemini is called, so a blank idea or an over-long
    category never costs an upstream request.
    """
    idea = (request.idea or "").strip()
    if not idea:
        raise ValidationError("Idea is required and cannot be empty")
    category = request.category or DEFAULT_CATEGORY
    if len(category) > CATEGORY_MAX_LENGTH:
        raise ValidationError(f"Category must be at most {CATEGORY_MAX_LENGTH} characters")

    generated_prompt = await generator.generate_prompt(idea, category)
    prompt = await create_prompt(db, user.user_id, category, idea, generated_prompt)
    logger.info(f"Stored prompt {prompt.id} for user {user.user_id}")

    return GeneratePromptResponse(id=prompt.id, prompt=generated_prompt)


@router.get("/prompts", response_model=List[PromptOut])
async def list_prompts(user: TokenData = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    """Fetch the user's prompts, newest first."""
    return await get_user_prompts(db, user.user_id)


@router.delete("/prompts/{prompt_id}", response_model=MessageResponse)
async def delete_prompt(
    prompt_id: int,
    user: TokenData = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if not 1 <= prompt_id <= MAX_PROMPT_ID:
        raise NotFoundOrForbidden("Prompt not found or user not authorized")
    if not await delete_user_prompt(db, prompt_id, user.user_id):
        raise NotFoundOrForbidden("Prompt not found or user not authorized")
    return MessageResponse(message="Prompt deleted successfully")
