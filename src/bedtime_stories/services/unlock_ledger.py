"""Unlock ledger - a day of free reading for one story after N ad impressions."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date

from bedtime_stories.config import ADS_TO_UNLOCK
from bedtime_stories.models import UnlockRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImpressionResult:
    ads_completed: int
    unlocked: bool


class UnlockLedger:
    """
    Per-device counter keyed by (story, today). Best-effort gate, not a
    security control: no cross-device sync, no atomic increment. Yesterday's
    records are never looked up again, so expiry needs no cleanup.
    """

    def __init__(
        self,
        unlock_store,
        device_id: str,
        *,
        required_ads: int = ADS_TO_UNLOCK,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self._store = unlock_store
        self._device_id = device_id
        self._required = required_ads
        self._clock = clock

    @property
    def required_ads(self) -> int:
        return self._required

    def record_for(self, story_id: str) -> UnlockRecord | None:
        """Today's record for a story, if any."""
        return self._store.get(self._device_id, story_id, self._clock())

    def record_ad_impression(self, story_id: str) -> ImpressionResult:
        """Count one impression for today, capped at the required number."""
        today = self._clock()
        record = self._store.get(self._device_id, story_id, today) or UnlockRecord(
            story_id=story_id,
            day=today,
        )
        if record.ads_completed < self._required:
            record = record.model_copy(update={"ads_completed": record.ads_completed + 1})
            self._store.save(self._device_id, record)
            if record.is_unlocking(self._required):
                logger.info("Story %s unlocked for device %s on %s", story_id, self._device_id, today)
        return ImpressionResult(
            ads_completed=record.ads_completed,
            unlocked=record.is_unlocking(self._required),
        )

    def is_unlocked(self, story_id: str) -> bool:
        record = self.record_for(story_id)
        return record is not None and record.is_unlocking(self._required)
