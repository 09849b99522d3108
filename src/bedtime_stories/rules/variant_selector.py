"""Variant selection - which rendering of a story a viewer reads."""

import hashlib
import logging
from dataclasses import dataclass
from datetime import date

from bedtime_stories.models import GENDERED, Gender, ReadLength, Story

logger = logging.getLogger(__name__)

# Short lengths tried for each requested length, in order, before full text
LENGTH_FALLBACKS: dict[ReadLength, tuple[ReadLength, ...]] = {
    ReadLength.FIVE_MIN: (ReadLength.FIVE_MIN, ReadLength.TEN_MIN),
    ReadLength.TEN_MIN: (ReadLength.TEN_MIN,),
    ReadLength.FULL: (),
}


@dataclass(frozen=True)
class SelectedText:
    """Concrete text chosen for a render."""

    text: str
    estimated_read_minutes: int | None
    gender: Gender
    length: ReadLength


def daily_gender(day: date) -> Gender:
    """
    Same gender for every viewer on a given day. Hash of "year-month-day":
    even -> boy, odd -> girl.
    """
    key = f"{day.year}-{day.month}-{day.day}"
    digest = hashlib.sha256(key.encode()).digest()
    return Gender.BOY if int.from_bytes(digest[:8], "big") % 2 == 0 else Gender.GIRL


def resolve_gender(
    story: Story,
    gender_preference: Gender | None,
    is_anonymous_or_free: bool,
    today: date | None = None,
) -> Gender:
    """Stated preference, else the day's gender, else default - each only if the text exists."""
    if gender_preference in GENDERED and gender_preference in story.gendered_full_text:
        return gender_preference
    if is_anonymous_or_free or gender_preference is None:
        candidate = daily_gender(today or date.today())
        if candidate in story.gendered_full_text:
            return candidate
    return Gender.DEFAULT


def select_text(
    story: Story,
    gender_preference: Gender | None,
    requested_length: ReadLength,
    is_anonymous_or_free: bool,
    *,
    today: date | None = None,
) -> SelectedText:
    """
    Pick one concrete text. Missing combinations fall back through shorter
    variants, then the gender's full text, then default_full_text, so some
    text is always returned.
    """
    gender = resolve_gender(story, gender_preference, is_anonymous_or_free, today)

    for length in LENGTH_FALLBACKS[requested_length]:
        variant = story.variant(gender, length)
        if variant is not None:
            return SelectedText(variant.text, variant.estimated_read_minutes, gender, length)

    full_text = story.full_text_for(gender)
    if full_text:
        return SelectedText(full_text, story.estimated_read_minutes, gender, ReadLength.FULL)

    logger.debug("No %s text for story %s, using default", gender.value, story.id)
    return SelectedText(
        story.default_full_text,
        story.estimated_read_minutes,
        Gender.DEFAULT,
        ReadLength.FULL,
    )
