# idea2prompt/api/routes/root_routes.py
from datetime import datetime, timezone
from pathlib import Path

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse, JSONResponse

from idea2prompt.core.dependencies import get_prompt_generator
from idea2prompt.core.errors import UpstreamError
from idea2prompt.services.llm.llm_services import PromptGenerator

STATIC_DIR = Path(__file__).resolve().parents[2] / "static"

SERVER_NAME = "idea2prompt"

router = APIRouter()


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/", include_in_schema=False)
async def index_page():
    return FileResponse(STATIC_DIR / "index.html")


@router.get("/login", include_in_schema=False)
async def login_page():
    return FileResponse(STATIC_DIR / "login.html")


@router.get("/api/health", tags=["Health"])
async def health():
    return {
        "status": "OK",
        "server": SERVER_NAME,
        "timestamp": _timestamp(),
        "endpoints": {
            "auth": ["/api/register", "/api/login"],
            "prompts": ["/api/generate-prompt", "/api/prompts", "/api/prompts/:id"],
            "test": ["/api/test-gemini", "/api/health"],
        },
    }


@router.get("/api/test-gemini", tags=["Health"])
async def test_gemini(generator: PromptGenerator = Depends(get_prompt_generator)):
    """Round-trip a fixed question through Gemini to check the key and endpoint."""
    try:
        result = await generator.test_connection()
    except UpstreamError as e:
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": "Gemini API test failed",
                "details": e.detail,
                "timestamp": _timestamp(),
            },
        )

    return {
        "success": True,
        "message": "Gemini API connection successful",
        **result,
        "timestamp": _timestamp(),
    }
