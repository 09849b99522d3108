"""Entitlement rules - full text or preview. Pure, no side effects."""

from dataclasses import dataclass
from datetime import date
from enum import Enum

from bedtime_stories.config import ADS_TO_UNLOCK
from bedtime_stories.models import Story, UnlockRecord, ViewerContext


class AccessReason(str, Enum):
    """Which rule granted (or withheld) full access."""

    SUBSCRIPTION = "subscription"
    STORY_OF_THE_DAY = "story_of_the_day"
    AD_UNLOCK = "ad_unlock"
    PREVIEW = "preview"


@dataclass(frozen=True)
class Entitlement:
    """Access decision for one viewer and one story."""

    full_access: bool
    reason: AccessReason


def resolve_entitlement(
    story: Story,
    viewer: ViewerContext,
    is_story_of_the_day: bool,
    unlock_record: UnlockRecord | None,
    *,
    today: date | None = None,
    required_ads: int = ADS_TO_UNLOCK,
) -> Entitlement:
    """
    First matching rule wins: subscription, story of the day, today's ad
    unlock for this story. Anything else is a preview. A missing unlock
    record counts as zero ads.
    """
    if viewer.subscription_active:
        return Entitlement(True, AccessReason.SUBSCRIPTION)
    if is_story_of_the_day:
        return Entitlement(True, AccessReason.STORY_OF_THE_DAY)
    if _unlocked_today(story, unlock_record, today or date.today(), required_ads):
        return Entitlement(True, AccessReason.AD_UNLOCK)
    return Entitlement(False, AccessReason.PREVIEW)


def _unlocked_today(
    story: Story,
    record: UnlockRecord | None,
    today: date,
    required_ads: int,
) -> bool:
    if record is None:
        return False
    # A record for another story or another day never unlocks this one
    if record.story_id != story.id or record.day != today:
        return False
    return record.is_unlocking(required_ads)
