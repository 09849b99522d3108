"""Data models."""

from bedtime_stories.models.generation import BatchSummary, GenerationResult, VariantError
from bedtime_stories.models.story import (
    GENDERED,
    SHORT_LENGTHS,
    Gender,
    ReadLength,
    Story,
    StoryOfTheDay,
    StoryVariant,
    VariantKey,
    variant_label,
)
from bedtime_stories.models.unlock import UnlockRecord
from bedtime_stories.models.viewer import ViewerContext

__all__ = [
    "BatchSummary",
    "GENDERED",
    "Gender",
    "GenerationResult",
    "ReadLength",
    "SHORT_LENGTHS",
    "Story",
    "StoryOfTheDay",
    "StoryVariant",
    "UnlockRecord",
    "VariantError",
    "VariantKey",
    "ViewerContext",
    "variant_label",
]
