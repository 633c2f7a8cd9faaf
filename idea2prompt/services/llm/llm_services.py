# idea2prompt/services/llm/llm_services.py
import asyncio
import logging
from typing import Any, Optional, Tuple

import aiohttp
import httpx
from google import genai
from google.genai import errors, types

from idea2prompt.core.config import Settings
from idea2prompt.core.errors import EmptyResponse, UpstreamError, UpstreamRejected

logger = logging.getLogger(__name__)

TEMPERATURE = 0.7
TOP_P = 0.95
TOP_K = 40
MAX_OUTPUT_TOKENS = 1024
TEST_MAX_OUTPUT_TOKENS = 512

TEST_PROMPT = "What is artificial intelligence?"


def build_meta_prompt(idea: str, category: str) -> str:
    return f"""
You are an expert prompt engineer. Your task is to generate a clear, detailed, and actionable AI prompt based on the user's input.

Category: "{category}"
User's Idea: "{idea}"

Create a comprehensive prompt that an AI assistant can use to provide the best possible response. The prompt should be specific and well-structured.

Generated Prompt:"""


def extract_text(response: types.GenerateContentResponse) -> Optional[str]:
    """First text part of the first candidate, stripped; None when there is nothing usable."""
    candidates = getattr(response, "candidates", None)
    if not candidates:
        return None
    content = candidates[0].content
    if content is None or not content.parts:
        return None
    text = content.parts[0].text
    if not text or not text.strip():
        return None
    return text.strip()


class PromptGenerator:
    """Turns an idea into a finished prompt with a single Gemini call."""

    def __init__(self, client: genai.Client, model: str):
        self.client = client
        self.model = model

    @classmethod
    def from_settings(cls, settings: Settings) -> "PromptGenerator":
        http_options = None
        if settings.GEMINI_BASE_URL:
            http_options = types.HttpOptions(base_url=settings.GEMINI_BASE_URL)
        client = genai.Client(api_key=settings.GEMINI_API_KEY, http_options=http_options)
        return cls(client, settings.GEMINI_MODEL)

    async def _generate(self, text: str, max_output_tokens: int) -> Tuple[str, Any]:
        config = types.GenerateContentConfig(
            temperature=TEMPERATURE,
            top_p=TOP_P,
            top_k=TOP_K,
            max_output_tokens=max_output_tokens,
        )
        try:
            response = await self.client.aio.models.generate_content(
                model=self.model, contents=text, config=config
            )
        except errors.APIError as e:
            logger.error(f"Gemini API error response: {e}")
            raise UpstreamRejected(f"Gemini API request failed: {e}")
        except (httpx.HTTPError, aiohttp.ClientError, asyncio.TimeoutError) as e:
            # google-genai sends async requests through aiohttp when it is installed, httpx otherwise.
            logger.error(f"Gemini API transport error: {e}")
            raise UpstreamError(f"Gemini API request failed: {e}")

        generated_text = extract_text(response)
        if not generated_text:
            logger.error(f"Empty response from Gemini: {response}")
            raise EmptyResponse("No valid response generated from Gemini API")
        return generated_text, response.usage_metadata

    async def generate_prompt(self, idea: str, category: str = "General") -> str:
        generated_text, _ = await self._generate(build_meta_prompt(idea, category), MAX_OUTPUT_TOKENS)
        return generated_text

    async def test_connection(self) -> dict:
        logger.info("Testing Gemini API connection...")
        generated_text, usage = await self._generate(TEST_PROMPT, TEST_MAX_OUTPUT_TOKENS)
        logger.info("Gemini API test successful")
        return {
            "testPrompt": TEST_PROMPT,
            "response": generated_text,
            "usage": usage.model_dump(mode="json", exclude_none=True) if usage is not None else "Usage data not available",
        }
