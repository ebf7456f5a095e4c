"""Chat completions against OpenAI-compatible providers."""

import logging
from typing import Dict, List, NamedTuple, Optional
import httpx
from app.config.settings import Settings
from app.utils.exceptions import UpstreamFailure

logger = logging.getLogger(__name__)

DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 4000


class Provider(NamedTuple):
    name: str
    url: str
    model: str
    api_key: str


def select_provider(settings: Settings) -> Optional[Provider]:
    """Pick the first configured provider: OpenAI > Anthropic > Gemini > Groq > OpenRouter."""
    candidates = [
        ("openai", "https://api.openai.com/v1/chat/completions", "gpt-4o-mini", settings.openai_api_key),
        ("anthropic", "https://api.anthropic.com/v1/chat/completions", "claude-3-5-sonnet-20241022", settings.anthropic_api_key),
        (
            "gemini",
            "https://generativelanguage.googleapis.com/v1beta/openai/chat/completions",
            "gemini-2.0-flash",
            settings.google_api_key,
        ),
        ("groq", "https://api.groq.com/openai/v1/chat/completions", "llama-3.3-70b-versatile", settings.groq_api_key),
        ("openrouter", "https://openrouter.ai/api/v1/chat/completions", "openai/gpt-4o-mini", settings.open_router_api_key),
    ]
    for name, url, model, api_key in candidates:
        if api_key:
            return Provider(name, url, model, api_key)
    return None


class LLMClient:
    """Single-shot chat completion client."""

    def __init__(self, provider: Optional[Provider], http: httpx.AsyncClient):
        self.provider = provider
        self.http = http

    @property
    def enabled(self) -> bool:
        return self.provider is not None

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ) -> str:
        """
        Send one system + user prompt and return the assistant text.

        Raises:
            UpstreamFailure: No provider configured, HTTP failure or malformed response
        """
        if self.provider is None:
            raise UpstreamFailure("No AI provider configured")

        messages: List[Dict[str, str]] = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]
        payload = {
            "model": self.provider.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        headers = {
            "Authorization": f"Bearer {self.provider.api_key}",
            "Content-Type": "application/json",
        }

        logger.info(f"Using {self.provider.name} with model: {self.provider.model}")
        try:
            response = await self.http.post(self.provider.url, headers=headers, json=payload)
            response.raise_for_status()
            response_data = response.json()
        except httpx.HTTPStatusError as e:
            error_detail = str(e)
            try:
                error_detail = e.response.json().get("error", {}).get("message", error_detail)
            except (ValueError, AttributeError):
                pass
            logger.error(f"{self.provider.name} API HTTP error: {error_detail}")
            raise UpstreamFailure(f"{self.provider.name} API error", details=error_detail)
        except httpx.HTTPError as e:
            logger.error(f"{self.provider.name} API HTTP error: {str(e)}")
            raise UpstreamFailure(f"Failed to connect to {self.provider.name} API", details=str(e))

        try:
            text = response_data["choices"][0]["message"]["content"].strip()
        except (KeyError, IndexError, TypeError, AttributeError):
            logger.error(f"Invalid response format from {self.provider.name}: {response_data}")
            raise UpstreamFailure(f"Invalid response format from {self.provider.name} API")

        logger.info(f"LLM response received: {len(text)} characters")
        return text
