# idea2prompt/core/config.py
import logging
from typing import List, Optional

from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    HOST: str = "0.0.0.0"
    PORT: int = 5000

    JWT_SECRET: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 24 * 60

    DATABASE_URL: Optional[str] = None
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "postgres"
    DB_PASSWORD: str = ""
    DB_DATABASE: str = "idea2prompt"
    DB_POOL_SIZE: int = 10
    DB_POOL_TIMEOUT: int = 30
    DB_ECHO: bool = False

    GEMINI_API_KEY: str
    GEMINI_MODEL: str = "gemini-1.5-flash-latest"
    GEMINI_BASE_URL: Optional[str] = None

    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def sync_database_url(self) -> str:
        """URL without an async driver, as used by Alembic."""
        if self.DATABASE_URL:
            return self.DATABASE_URL.replace("postgresql+asyncpg://", "postgresql://", 1)
        return URL.create(
            "postgresql",
            username=self.DB_USER,
            password=self.DB_PASSWORD or None,
            host=self.DB_HOST,
            port=self.DB_PORT,
            database=self.DB_DATABASE,
        ).render_as_string(hide_password=False)

    @property
    def async_database_url(self) -> str:
        url = self.DATABASE_URL or self.sync_database_url
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
            if self.DATABASE_URL:
                logger.warning("Adapted DATABASE_URL to the asyncpg driver. Please update your configuration.")
        return url
