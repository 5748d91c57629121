"""
AI Services Module for the résumé coach
Text Generation Gateway: prompt in, generated text out, over any
OpenAI-compatible chat-completions endpoint (Gemini by default).
"""
import os
from typing import Optional
import httpx
import logging

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.0-flash"
SYSTEM_PROMPT = "You are an expert career advisor and resume specialist."


class ConfigurationError(RuntimeError):
    """Raised when the AI credential is missing."""


class GenerationError(RuntimeError):
    """Raised when the model call fails or returns an unusable reply."""


class GenerationGateway:
    """Core text generation service used by chat, analysis and cover letters"""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        self.api_key = api_key or os.getenv("GOOGLE_AI_KEY")
        self.model = model or os.getenv("DEFAULT_AI_MODEL", DEFAULT_MODEL)
        self.timeout = float(os.getenv("AI_TIMEOUT_SECONDS", "60"))
        # Route base URL depending on model vendor.
        # - Gemini: Google's OpenAI-compatible surface
        # - Anything else: OPENAI_BASE_URL (hosted or local proxy)
        if "gemini" in self.model:
            self.base_url = os.getenv(
                "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta/openai"
            )
        else:
            self.base_url = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def ensure_configured(self) -> None:
        if not self.configured:
            raise ConfigurationError("API key not configured")

    async def generate(self, prompt: str) -> str:
        """Send a single user prompt and return the model's text."""
        self.ensure_configured()

        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.base_url}/chat/completions",
                    headers=headers,
                    json=payload,
                )
        except httpx.HTTPError as e:
            logger.error(f"Generation request failed: {e}")
            raise GenerationError(f"Generation request failed: {e}") from e

        if response.status_code != 200:
            logger.error(f"Generation API returned {response.status_code}")
            raise GenerationError(f"API call failed: {response.status_code} {response.text}")

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise GenerationError(f"Malformed generation response: {e}") from e

        return content or "No text generated"


def get_generation_gateway(api_key: Optional[str] = None, model: Optional[str] = None) -> GenerationGateway:
    """Get a gateway instance with the given key or the environment default"""
    return GenerationGateway(api_key=api_key, model=model)
