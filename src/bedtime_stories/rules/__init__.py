"""Pure reading rules - entitlement, variant selection, text handling."""

from bedtime_stories.rules.entitlement import AccessReason, Entitlement, resolve_entitlement
from bedtime_stories.rules.text import (
    estimate_read_minutes,
    preview_text,
    split_sentences,
    word_count,
)
from bedtime_stories.rules.variant_selector import (
    SelectedText,
    daily_gender,
    resolve_gender,
    select_text,
)

__all__ = [
    "AccessReason",
    "Entitlement",
    "SelectedText",
    "daily_gender",
    "estimate_read_minutes",
    "preview_text",
    "resolve_entitlement",
    "resolve_gender",
    "select_text",
    "split_sentences",
    "word_count",
]
