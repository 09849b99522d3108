"""OpenAI-compatible LLM client implementation."""

import logging
from typing import Any

from bedtime_stories.config import get_settings
from bedtime_stories.llm.base import LLMClient

logger = logging.getLogger(__name__)


class OpenAIClient(LLMClient):
    """OpenAI API client - works with OpenAI or compatible endpoints (e.g. LiteLLM)."""

    def __init__(
        self,
        *,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
    ) -> None:
        settings = get_settings()
        self._api_key = api_key or settings.llm_api_key
        self._base_url = base_url or settings.llm_base_url
        self._model = model or settings.llm_model
        self._timeout = timeout or settings.condensation_timeout_seconds
        self._client = None

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    def _get_client(self):
        """Lazy-init async client."""
        if self._client is None:
            from openai import AsyncOpenAI

            client_kwargs: dict[str, Any] = {
                "api_key": self._api_key,
                "timeout": self._timeout,
                "max_retries": 1,
            }
            if self._base_url:
                client_kwargs["base_url"] = self._base_url
            self._client = AsyncOpenAI(**client_kwargs)
        return self._client

    async def chat(
        self,
        messages: list[dict[str, str]],
        *,
        model: str | None = None,
        max_tokens: int = 1024,
        temperature: float | None = None,
    ) -> str:
        """Call OpenAI-compatible chat completion."""
        kwargs: dict[str, Any] = {
            "model": model or self._model,
            "messages": messages,
            "max_tokens": max_tokens,
        }
        if temperature is not None:
            kwargs["temperature"] = temperature
        response = await self._get_client().chat.completions.create(**kwargs)
        content = response.choices[0].message.content
        return content or ""
