# idea2prompt/services/database/prompt_database_services.py
from typing import List

from sqlalchemy import delete, desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from idea2prompt.models.database_models.prompt import Prompt


async def create_prompt(db: AsyncSession, user_id: int, category: str, idea: str, generated_prompt: str) -> Prompt:
    prompt = Prompt(user_id=user_id, category=category, idea=idea, generated_prompt=generated_prompt)
    db.add(prompt)
    await db.commit()
    await db.refresh(prompt)
    return prompt


async def get_user_prompts(db: AsyncSession, user_id: int) -> List[Prompt]:
    """Newest first. Ids break ties between rows created within the same clock tick."""
    result = await db.execute(
        select(Prompt).filter(Prompt.user_id == user_id).order_by(desc(Prompt.created_at), desc(Prompt.id))
    )
    return result.scalars().all()


async def delete_user_prompt(db: AsyncSession, prompt_id: int, user_id: int) -> bool:
    # Ownership is part of the predicate, so a foreign prompt looks exactly like a missing one.
    result = await db.execute(delete(Prompt).where(Prompt.id == prompt_id, Prompt.user_id == user_id))
    await db.commit()
    return result.rowcount > 0
