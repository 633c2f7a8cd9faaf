# idea2prompt/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from idea2prompt.api.routes import auth_routes, prompt_routes, root_routes
from idea2prompt.core.config import Settings
from idea2prompt.core.errors import register_exception_handlers
from idea2prompt.data.database import Database
from idea2prompt.services.database.user_database_services import pending_audit_writes
from idea2prompt.services.llm.llm_services import PromptGenerator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    database: Database = app.state.database
    if await database.ping():
        logger.info("Database connection successful.")
    yield
    for task in list(pending_audit_writes):
        await task
    await database.dispose()


def create_app(
    settings: Optional[Settings] = None,
    generator: Optional[PromptGenerator] = None,
    database: Optional[Database] = None,
) -> FastAPI:
    """
    Build the application. Every component gets its configuration from the
    one Settings instance passed in here.
    """
    if settings is None:
        settings = Settings()

    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="idea2prompt", lifespan=lifespan)
    app.state.settings = settings
    app.state.database = database or Database(settings)
    app.state.generator = generator or PromptGenerator.from_settings(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials="*" not in settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info(f"{request.method} {request.url.path}")
        return await call_next(request)

    register_exception_handlers(app)

    app.include_router(root_routes.router)
    app.include_router(auth_routes.router, prefix="/api")
    app.include_router(prompt_routes.router, prefix="/api")

    return app


def run():
    settings = Settings()
    app = create_app(settings)
    logger.info(f"Server running on http://localhost:{settings.PORT}")
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
