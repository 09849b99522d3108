"""Service wiring."""

from bedtime_stories.config import ReadingRules, Settings
from bedtime_stories.llm import LLMClient, OpenAIClient
from bedtime_stories.services.condensation import CondensationClient
from bedtime_stories.services.variant_generation import VariantGenerationService


def create_generation_service(
    story_store,
    settings: Settings,
    rules: ReadingRules,
    llm: LLMClient | None = None,
) -> VariantGenerationService:
    """Factory - wires condensation and generation."""
    condenser = CondensationClient(
        llm or OpenAIClient(),
        words_per_minute=rules.words_per_minute,
        timeout_seconds=settings.condensation_timeout_seconds,
        temperature=settings.llm_temperature,
    )
    return VariantGenerationService(
        condenser,
        story_store,
        words_per_minute=rules.words_per_minute,
        min_characters=rules.min_condensed_characters,
    )
