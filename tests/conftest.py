"""Shared fixtures: story builders, a scripted LLM, file-backed stores on tmp_path."""

from datetime import date

import pytest

from bedtime_stories.config import ReadingRules
from bedtime_stories.llm.base import LLMClient
from bedtime_stories.models import Gender, ReadLength, Story, StoryVariant
from bedtime_stories.persistence import StoryStore, UnlockStore
from bedtime_stories.services.condensation import CondensationClient
from bedtime_stories.services.variant_generation import VariantGenerationService

TODAY = date(2026, 3, 14)

SENTENCE = "The little fox curled up under the silver moon and listened to the owls. "


def make_text(min_chars: int, marker: str = "") -> str:
    """Whole sentences, at least min_chars long, optionally tagged with a marker."""
    text = f"{marker} opens the tale. " if marker else ""
    while len(text) < min_chars:
        text += SENTENCE
    return text.strip()


def make_story(
    story_id: str = "moon-fox",
    *,
    default_chars: int = 2000,
    boy: bool = False,
    girl: bool = False,
    variants: list[StoryVariant] | None = None,
    **kwargs,
) -> Story:
    gendered = {}
    if boy:
        gendered[Gender.BOY] = make_text(2000, "BOY-SOURCE")
    if girl:
        gendered[Gender.GIRL] = make_text(2000, "GIRL-SOURCE")
    return Story(
        id=story_id,
        title=kwargs.pop("title", "The Moon Fox"),
        default_full_text=make_text(default_chars, "DEFAULT-SOURCE"),
        gendered_full_text=gendered,
        short_variants=variants or [],
        values_tags=kwargs.pop("values_tags", {"kindness", "patience"}),
        topic_tags=kwargs.pop("topic_tags", {"animals"}),
        **kwargs,
    )


def make_variant(gender: Gender, length: ReadLength, minutes: int = 5) -> StoryVariant:
    return StoryVariant(
        gender=gender,
        length=length,
        text=f"{gender.value} {length.value} variant. " + SENTENCE * 3,
        estimated_read_minutes=minutes,
    )


class ScriptedLLM(LLMClient):
    """
    Returns a plausible condensed story. Raises for prompts containing a
    marker listed in `failures`; returns `short_reply` for markers in `short`.
    """

    def __init__(
        self,
        *,
        failures: dict[str, Exception] | None = None,
        short: set[str] | None = None,
        configured: bool = True,
    ) -> None:
        self.failures = failures or {}
        self.short = short or set()
        self.configured = configured
        self.calls: list[dict] = []

    @property
    def is_configured(self) -> bool:
        return self.configured

    async def chat(self, messages, *, model=None, max_tokens=1024, temperature=None) -> str:
        prompt = messages[-1]["content"]
        self.calls.append({"prompt": prompt, "max_tokens": max_tokens, "temperature": temperature})
        for marker, exc in self.failures.items():
            if marker in prompt:
                raise exc
        if any(marker in prompt for marker in self.short):
            return "Too short."
        return "Once upon a time a sleepy fox found the moon. " * 5


@pytest.fixture
def rules() -> ReadingRules:
    return ReadingRules()


@pytest.fixture
def story_store(tmp_path) -> StoryStore:
    return StoryStore(tmp_path)


@pytest.fixture
def unlock_store(tmp_path) -> UnlockStore:
    return UnlockStore(tmp_path)


@pytest.fixture
def llm() -> ScriptedLLM:
    return ScriptedLLM()


def make_generation_service(llm, story_store, timeout: float = 5.0) -> VariantGenerationService:
    condenser = CondensationClient(llm, words_per_minute=110, timeout_seconds=timeout)
    return VariantGenerationService(condenser, story_store, words_per_minute=110, min_characters=100)


@pytest.fixture
def generation_service(llm, story_store) -> VariantGenerationService:
    return make_generation_service(llm, story_store)
