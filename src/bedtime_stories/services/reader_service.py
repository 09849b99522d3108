"""Reader service - what a viewer sees when opening a story."""

import logging
from datetime import date

from pydantic import BaseModel, Field

from bedtime_stories.config import ReadingRules
from bedtime_stories.errors import StoryNotFoundError
from bedtime_stories.models import Gender, ReadLength, ViewerContext
from bedtime_stories.rules import (
    AccessReason,
    preview_text,
    resolve_entitlement,
    select_text,
    split_sentences,
)
from bedtime_stories.services.unlock_ledger import UnlockLedger

logger = logging.getLogger(__name__)


class StoryReading(BaseModel):
    """Rendered story for one viewer."""

    story_id: str
    title: str
    full_access: bool
    access_reason: AccessReason
    is_preview: bool
    is_story_of_the_day: bool
    gender: Gender
    length: ReadLength
    estimated_read_minutes: int | None = None
    text: str
    sentences: list[str] = Field(default_factory=list)
    ads_required: int


class ReaderService:
    """Composes entitlement, variant selection and preview truncation."""

    def __init__(self, story_store, unlock_store, rules: ReadingRules) -> None:
        self._stories = story_store
        self._unlocks = unlock_store
        self._rules = rules

    def ledger(self, device_id: str) -> UnlockLedger:
        return UnlockLedger(self._unlocks, device_id, required_ads=self._rules.ads_to_unlock)

    def read_story(
        self,
        story_id: str,
        viewer: ViewerContext,
        device_id: str | None,
        requested_length: ReadLength = ReadLength.FULL,
        today: date | None = None,
    ) -> StoryReading:
        """Raises StoryNotFoundError for unknown or inactive stories."""
        today = today or date.today()
        story = self._stories.get(story_id)
        if story is None or not story.is_active:
            raise StoryNotFoundError(story_id)

        is_sotd = self._stories.get_story_of_the_day(today) == story.id
        unlock_record = None
        if device_id:
            unlock_record = self._unlocks.get(device_id, story.id, today)

        entitlement = resolve_entitlement(
            story,
            viewer,
            is_sotd,
            unlock_record,
            today=today,
            required_ads=self._rules.ads_to_unlock,
        )
        selected = select_text(
            story,
            viewer.gender_preference,
            requested_length,
            viewer.is_anonymous_or_free,
            today=today,
        )
        text = selected.text
        if not entitlement.full_access:
            text = preview_text(text, self._rules.preview_characters)
        logger.debug(
            "Story %s: %s (%s, %s-%s)",
            story.id,
            entitlement.reason.value,
            "full" if entitlement.full_access else "preview",
            selected.gender.value,
            selected.length.value,
        )
        return StoryReading(
            story_id=story.id,
            title=story.title,
            full_access=entitlement.full_access,
            access_reason=entitlement.reason,
            is_preview=not entitlement.full_access,
            is_story_of_the_day=is_sotd,
            gender=selected.gender,
            length=selected.length,
            estimated_read_minutes=selected.estimated_read_minutes,
            text=text,
            sentences=split_sentences(text),
            ads_required=self._rules.ads_to_unlock,
        )
