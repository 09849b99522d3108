"""LLM abstraction - OpenAI-compatible."""

from bedtime_stories.llm.base import LLMClient
from bedtime_stories.llm.openai_client import OpenAIClient

__all__ = ["LLMClient", "OpenAIClient"]
