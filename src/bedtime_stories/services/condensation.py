"""Condensation client - shortens a full story to a target word budget via the LLM."""

import asyncio
import logging
import math

from pydantic import BaseModel, Field

from bedtime_stories.errors import CondensationConfigError, CondensationError
from bedtime_stories.llm.base import LLMClient

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an expert children's story editor specializing in creating condensed "
    "versions of bedtime stories while preserving their essence, tone, and themes."
)

CONDENSE_USER_TEMPLATE = """Create a condensed version of this bedtime story that takes approximately {target_minutes} minutes to read aloud (target: ~{target_words} words).

Requirements:
1. Preserve the main plot, characters, and story arc - a complete story, not a summary
2. Keep the calm, gentle bedtime tone throughout
3. Keep all key themes and values intact{values_context}{topics_context}
4. Preserve character development and emotional journey
5. Keep the same narrative style and voice
6. Do NOT add new content - only condense what exists
7. Keep any gender-specific framing already in the story

Title: {title}

Original story:
{source_text}

Output ONLY the condensed story text, no commentary."""


class ContextHints(BaseModel):
    """Theme and tone hints for the condensation model."""

    title: str = ""
    values_tags: list[str] = Field(default_factory=list)
    topic_tags: list[str] = Field(default_factory=list)


class CondensationRequest(BaseModel):
    source_text: str
    target_word_budget: int = Field(..., gt=0)
    context_hints: ContextHints = Field(default_factory=ContextHints)


class CondensationClient:
    """Single request/response call to the condensation capability. Stateless."""

    def __init__(
        self,
        llm: LLMClient,
        *,
        words_per_minute: int,
        timeout_seconds: float,
        temperature: float = 0.7,
    ) -> None:
        self._llm = llm
        self._words_per_minute = words_per_minute
        self._timeout = timeout_seconds
        self._temperature = temperature

    def ensure_configured(self) -> None:
        """Raise CondensationConfigError when no call could succeed."""
        if not self._llm.is_configured:
            raise CondensationConfigError(
                "LLM_API_KEY is not set. Configure it to generate story versions."
            )

    def build_messages(self, request: CondensationRequest) -> list[dict[str, str]]:
        hints = request.context_hints
        values_context = (
            f"\n   Key themes and values to preserve: {', '.join(hints.values_tags)}"
            if hints.values_tags
            else ""
        )
        topics_context = (
            f"\n   Story topics: {', '.join(hints.topic_tags)}" if hints.topic_tags else ""
        )
        user_prompt = CONDENSE_USER_TEMPLATE.format(
            target_minutes=max(1, round(request.target_word_budget / self._words_per_minute)),
            target_words=request.target_word_budget,
            values_context=values_context,
            topics_context=topics_context,
            title=hints.title or "Untitled",
            source_text=request.source_text,
        )
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": user_prompt},
        ]

    async def condense(self, request: CondensationRequest) -> str:
        """
        Return condensed prose. Raises CondensationConfigError when unconfigured,
        CondensationError on transport failure or timeout.
        """
        self.ensure_configured()
        messages = self.build_messages(request)
        # Headroom over the word budget; tokens run longer than words
        max_tokens = math.ceil(request.target_word_budget * 1.5)
        try:
            text = await asyncio.wait_for(
                self._llm.chat(messages, max_tokens=max_tokens, temperature=self._temperature),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError as e:
            raise CondensationError(f"Condensation timed out after {self._timeout:g}s") from e
        except CondensationConfigError:
            raise
        except Exception as e:
            raise CondensationError(f"Condensation request failed: {e}") from e
        return text.strip()
