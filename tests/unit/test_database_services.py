"""
Unit tests for the credential and prompt stores.
"""

from datetime import datetime
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from idea2prompt.core.errors import DuplicateIdentity
from idea2prompt.models.database_models.login_history import LoginHistory
from idea2prompt.models.database_models.prompt import Prompt
from idea2prompt.services.database import user_database_services
from idea2prompt.services.database.prompt_database_services import (
    create_prompt,
    delete_user_prompt,
    get_user_prompts,
)
from idea2prompt.services.database.user_database_services import (
    create_user,
    get_user_by_email,
    get_user_by_email_or_username,
    log_login_attempt,
    pending_audit_writes,
    record_login_attempt,
    schedule_login_attempt,
)


class TestCredentialStore:
    async def test_create_and_find_user(self, db_session):
        created = await create_user(db_session, "ann", "a@x.com", "hash")

        assert created.id is not None
        found = await get_user_by_email(db_session, "a@x.com")
        assert found.id == created.id
        assert found.password_hash == "hash"

    async def test_find_by_email_or_username(self, db_session, user):
        assert (await get_user_by_email_or_username(db_session, "other@x.com", "ann")).id == user.id
        assert (await get_user_by_email_or_username(db_session, "a@x.com", "other")).id == user.id
        assert await get_user_by_email_or_username(db_session, "b@x.com", "bob") is None

    async def test_unknown_email(self, db_session):
        assert await get_user_by_email(db_session, "nobody@x.com") is None

    async def test_duplicate_email_rejected(self, db_session, user):
        with pytest.raises(DuplicateIdentity):
            await create_user(db_session, "someone-else", "a@x.com", "hash")

    async def test_duplicate_username_rejected(self, db_session, user):
        with pytest.raises(DuplicateIdentity):
            await create_user(db_session, "ann", "new@x.com", "hash")

    async def test_unique_constraint_catches_race(self, db_session, user, monkeypatch):
        user_id = user.id
        # Simulate a concurrent insert that happened after the pre-check.
        monkeypatch.setattr(
            user_database_services, "get_user_by_email_or_username", AsyncMock(return_value=None)
        )

        with pytest.raises(DuplicateIdentity):
            await create_user(db_session, "ann", "a@x.com", "hash")

        # The session is still usable after the rollback.
        assert (await get_user_by_email(db_session, "a@x.com")).id == user_id


class TestLoginHistory:
    async def test_record_login_attempt(self, db_session, user):
        await record_login_attempt(db_session, user.id, True)
        await record_login_attempt(db_session, user.id, False)

        result = await db_session.execute(select(LoginHistory).order_by(LoginHistory.id))
        rows = result.scalars().all()
        assert [(row.user_id, row.success) for row in rows] == [(user.id, True), (user.id, False)]
        assert all(row.created_at is not None for row in rows)

    async def test_scheduled_write_completes(self, database, db_session, user):
        task = schedule_login_attempt(database.session_factory, user.id, True)
        assert task in pending_audit_writes

        await task

        result = await db_session.execute(select(LoginHistory))
        assert len(result.scalars().all()) == 1

    async def test_storage_failure_is_logged_not_raised(self, user, caplog):
        def broken_factory():
            raise OperationalError("INSERT", {}, Exception("database is gone"))

        await log_login_attempt(broken_factory, user.id, False)

        assert "Failed to log login attempt" in caplog.text


class TestPromptStore:
    async def test_create_prompt(self, db_session, user):
        prompt = await create_prompt(db_session, user.id, "Writing", "a travel blog", "Generated text")

        assert prompt.id is not None
        assert prompt.category == "Writing"
        assert prompt.created_at is not None

    async def test_list_newest_first(self, db_session, user):
        ids = []
        for i in range(3):
            prompt = await create_prompt(db_session, user.id, "General", f"idea {i}", f"prompt {i}")
            ids.append(prompt.id)

        prompts = await get_user_prompts(db_session, user.id)

        assert [p.id for p in prompts] == list(reversed(ids))

    async def test_list_orders_by_creation_time_not_id(self, db_session, user):
        newer = await create_prompt(db_session, user.id, "General", "newer", "text")
        older = Prompt(
            user_id=user.id, idea="older", generated_prompt="text", created_at=datetime(2020, 1, 1)
        )
        db_session.add(older)
        await db_session.commit()
        assert older.id > newer.id

        prompts = await get_user_prompts(db_session, user.id)

        assert [p.idea for p in prompts] == ["newer", "older"]

    async def test_list_only_own_prompts(self, db_session, user):
        other = await create_user(db_session, "bob", "b@x.com", "hash")
        await create_prompt(db_session, user.id, "General", "mine", "mine")
        await create_prompt(db_session, other.id, "General", "theirs", "theirs")

        prompts = await get_user_prompts(db_session, user.id)

        assert [p.idea for p in prompts] == ["mine"]

    async def test_delete_own_prompt(self, db_session, user):
        prompt = await create_prompt(db_session, user.id, "General", "idea", "text")

        assert await delete_user_prompt(db_session, prompt.id, user.id) is True
        assert await get_user_prompts(db_session, user.id) == []

    async def test_delete_other_users_prompt_is_noop(self, db_session, user):
        other = await create_user(db_session, "bob", "b@x.com", "hash")
        prompt = await create_prompt(db_session, user.id, "General", "idea", "text")

        assert await delete_user_prompt(db_session, prompt.id, other.id) is False
        assert [p.id for p in await get_user_prompts(db_session, user.id)] == [prompt.id]

    async def test_delete_missing_prompt(self, db_session, user):
        assert await delete_user_prompt(db_session, 9999, user.id) is False

    async def test_default_category_column(self, db_session, user):
        db_session.add(Prompt(user_id=user.id, idea="idea", generated_prompt="text"))
        await db_session.commit()

        prompts = await get_user_prompts(db_session, user.id)

        assert prompts[0].category == "General"
