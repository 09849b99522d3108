"""Business logic services."""

from bedtime_stories.services.batch_runner import BatchRunner
from bedtime_stories.services.condensation import CondensationClient, CondensationRequest
from bedtime_stories.services.reader_service import ReaderService, StoryReading
from bedtime_stories.services.unlock_ledger import ImpressionResult, UnlockLedger
from bedtime_stories.services.variant_generation import (
    VariantGenerationService,
    parse_generation_request,
)

__all__ = [
    "BatchRunner",
    "CondensationClient",
    "CondensationRequest",
    "ImpressionResult",
    "ReaderService",
    "StoryReading",
    "UnlockLedger",
    "VariantGenerationService",
    "parse_generation_request",
]
