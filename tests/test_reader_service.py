"""Reader service: entitlement + selection + preview, end to end on file stores."""

import pytest

from bedtime_stories.errors import StoryNotFoundError
from bedtime_stories.models import Gender, ReadLength, ViewerContext
from bedtime_stories.rules import AccessReason
from bedtime_stories.services import ReaderService, UnlockLedger
from conftest import TODAY, make_story, make_variant

ANONYMOUS = ViewerContext()
SUBSCRIBER = ViewerContext(subscription_active=True, is_authenticated=True)


@pytest.fixture
def reader(story_store, unlock_store, rules) -> ReaderService:
    return ReaderService(story_store, unlock_store, rules)


def test_anonymous_five_minute_request_gets_preview_of_full_text(reader, story_store) -> None:
    story = make_story(default_chars=2000)
    story_store.save(story)

    reading = reader.read_story(story.id, ANONYMOUS, None, ReadLength.FIVE_MIN, today=TODAY)

    assert reading.is_preview
    assert reading.access_reason == AccessReason.PREVIEW
    assert reading.length == ReadLength.FULL
    assert 1500 <= len(reading.text) < len(story.default_full_text)
    assert reading.text.endswith(".")
    assert story.default_full_text.startswith(reading.text)
    assert reading.sentences[-1].endswith(".")


def test_story_of_the_day_is_free(reader, story_store) -> None:
    story = make_story()
    story_store.save(story)
    story_store.set_story_of_the_day(TODAY, story.id)

    reading = reader.read_story(story.id, ANONYMOUS, None, today=TODAY)

    assert reading.full_access
    assert reading.is_story_of_the_day
    assert reading.text == story.default_full_text


def test_subscriber_reads_preferred_variant(reader, story_store) -> None:
    variant = make_variant(Gender.GIRL, ReadLength.FIVE_MIN)
    story = make_story(girl=True, variants=[variant])
    story_store.save(story)
    viewer = SUBSCRIBER.model_copy(update={"gender_preference": Gender.GIRL})

    reading = reader.read_story(story.id, viewer, None, ReadLength.FIVE_MIN, today=TODAY)

    assert reading.full_access
    assert reading.text == variant.text
    assert reading.gender == Gender.GIRL


def test_ad_unlock_grants_full_access_for_device(reader, story_store, unlock_store) -> None:
    story = make_story()
    story_store.save(story)
    ledger = UnlockLedger(unlock_store, "tablet-1", clock=lambda: TODAY)
    for _ in range(3):
        ledger.record_ad_impression(story.id)

    unlocked = reader.read_story(story.id, ANONYMOUS, "tablet-1", today=TODAY)
    other_device = reader.read_story(story.id, ANONYMOUS, "phone-2", today=TODAY)

    assert unlocked.access_reason == AccessReason.AD_UNLOCK
    assert other_device.is_preview


def test_unknown_or_inactive_story(reader, story_store) -> None:
    story_store.save(make_story("retired", is_active=False))
    with pytest.raises(StoryNotFoundError):
        reader.read_story("missing", ANONYMOUS, None, today=TODAY)
    with pytest.raises(StoryNotFoundError):
        reader.read_story("retired", ANONYMOUS, None, today=TODAY)
