"""
Pytest configuration and fixtures for idea2prompt tests.
"""

from types import SimpleNamespace
from typing import AsyncGenerator, Dict, List, Optional

import pytest
import pytest_asyncio
from google.genai import types
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from idea2prompt.core.config import Settings
from idea2prompt.data.database import Base, Database
from idea2prompt.main import create_app
from idea2prompt.models.database_models.user import User
from idea2prompt.services.llm.llm_services import PromptGenerator


# =============================================================================
# Fake Gemini client
# =============================================================================

def make_genai_response(text: Optional[str]) -> types.GenerateContentResponse:
    """Build a response envelope the way the Gemini API returns it."""
    if text is None:
        return types.GenerateContentResponse(candidates=[])
    return types.GenerateContentResponse(
        candidates=[
            types.Candidate(content=types.Content(role="model", parts=[types.Part(text=text)]))
        ],
        usage_metadata=types.GenerateContentResponseUsageMetadata(
            prompt_token_count=12,
            candidates_token_count=30,
            total_token_count=42,
        ),
    )


class FakeModels:
    def __init__(self):
        self.calls: List[Dict] = []
        self.response = make_genai_response("  Write a travel blog post about...  ")
        self.error: Optional[Exception] = None

    async def generate_content(self, *, model, contents, config):
        self.calls.append({"model": model, "contents": contents, "config": config})
        if self.error is not None:
            raise self.error
        return self.response


class FakeGenaiClient:
    """Stands in for genai.Client; only the async models API is used."""

    def __init__(self):
        self.models = FakeModels()
        self.aio = SimpleNamespace(models=self.models)


# =============================================================================
# Settings and database
# =============================================================================

@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        JWT_SECRET="test-secret",
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        GEMINI_API_KEY="test-key",
        GEMINI_MODEL="gemini-test",
        DEBUG=False,
        LOG_LEVEL="DEBUG",
    )


@pytest_asyncio.fixture
async def database(settings) -> AsyncGenerator[Database, None]:
    db = Database(settings)
    async with db.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def db_session(database) -> AsyncGenerator[AsyncSession, None]:
    async with database.session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def user(db_session) -> User:
    db_user = User(username="ann", email="a@x.com", password_hash="not-a-real-hash")
    db_session.add(db_user)
    await db_session.commit()
    await db_session.refresh(db_user)
    return db_user


# =============================================================================
# Application
# =============================================================================

@pytest.fixture
def genai_client() -> FakeGenaiClient:
    return FakeGenaiClient()


@pytest.fixture
def generator(genai_client) -> PromptGenerator:
    return PromptGenerator(genai_client, "gemini-test")


@pytest.fixture
def app(settings, database, generator):
    return create_app(settings, generator=generator, database=database)


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def register_user(client):
    """Register through the API and return the response body."""

    async def _register(username: str, email: str, password: str = "pw12345") -> Dict:
        response = await client.post(
            "/api/register",
            json={"username": username, "email": email, "password": password},
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _register


@pytest_asyncio.fixture
async def auth_headers(register_user) -> Dict[str, str]:
    data = await register_user("ann", "a@x.com")
    return {"Authorization": f"Bearer {data['token']}"}


@pytest.fixture
def genai_response():
    """Factory for fake Gemini response envelopes."""
    return make_genai_response
