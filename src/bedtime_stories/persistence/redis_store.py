"""Redis-backed stores for cloud deployment. Use when REDIS_URL is set."""

import json
import logging
from datetime import date

from bedtime_stories.errors import StoryNotFoundError
from bedtime_stories.models import Story, StoryVariant, UnlockRecord, VariantKey
from bedtime_stories.persistence.ids import checked_id

logger = logging.getLogger(__name__)

KEY_PREFIX = "bedtime_stories"
# Unlock keys outlive their day briefly, then Redis drops them
UNLOCK_TTL_SECONDS = 2 * 24 * 3600


class _RedisBacked:
    def __init__(self, redis_url: str) -> None:
        self._redis_url = redis_url
        self._client = None

    def _get_client(self):
        """Lazy-init Redis client."""
        if self._client is None:
            import redis
            self._client = redis.from_url(
                self._redis_url,
                decode_responses=True,
            )
        return self._client


class RedisStoryStore(_RedisBacked):
    """Redis-backed story store. Stories as JSON strings, story of the day as a hash."""

    def _key(self, story_id: str) -> str:
        return f"{KEY_PREFIX}:story:{story_id}"

    def _ids_key(self) -> str:
        return f"{KEY_PREFIX}:story_ids"

    def _sotd_key(self) -> str:
        return f"{KEY_PREFIX}:story_of_the_day"

    def get(self, story_id: str) -> Story | None:
        """Get story by id."""
        try:
            data = self._get_client().get(self._key(story_id))
            if not data:
                return None
            return Story.model_validate(json.loads(data))
        except Exception as e:
            logger.warning("Redis story get failed: %s", e)
            return None

    def save(self, story: Story) -> None:
        """Create or replace a story record."""
        try:
            r = self._get_client()
            r.set(self._key(story.id), json.dumps(story.model_dump(mode="json")))
            r.sadd(self._ids_key(), story.id)
        except Exception as e:
            logger.error("Redis story save failed: %s", e)
            raise

    def list_ids(self) -> list[str]:
        """All story ids, sorted."""
        try:
            return sorted(self._get_client().smembers(self._ids_key()))
        except Exception as e:
            logger.warning("Redis story list failed: %s", e)
            return []

    def update_variants(self, story_id: str, updates: dict[VariantKey, StoryVariant]) -> Story:
        """Merge variants into the stored story in a single write."""
        story = self.get(story_id)
        if story is None:
            raise StoryNotFoundError(story_id)
        updated = story.with_variants(updates)
        self.save(updated)
        return updated

    def get_story_of_the_day(self, day: date) -> str | None:
        """Story id featured on a date."""
        try:
            return self._get_client().hget(self._sotd_key(), day.isoformat())
        except Exception as e:
            logger.warning("Redis story of the day get failed: %s", e)
            return None

    def set_story_of_the_day(self, day: date, story_id: str) -> None:
        """Assign (or reassign) the featured story for a date."""
        try:
            self._get_client().hset(self._sotd_key(), day.isoformat(), story_id)
        except Exception as e:
            logger.error("Redis story of the day save failed: %s", e)
            raise


class RedisUnlockStore(_RedisBacked):
    """Redis-backed unlock records keyed by (device, story, day)."""

    def _key(self, device_id: str, story_id: str, day: date) -> str:
        device = checked_id(device_id, "device")
        return f"{KEY_PREFIX}:unlock:{device}:{story_id}:{day.isoformat()}"

    def get(self, device_id: str, story_id: str, day: date) -> UnlockRecord | None:
        key = self._key(device_id, story_id, day)
        try:
            count = self._get_client().get(key)
            if count is None:
                return None
            return UnlockRecord(story_id=story_id, day=day, ads_completed=int(count))
        except Exception as e:
            logger.warning("Redis unlock get failed: %s", e)
            return None

    def save(self, device_id: str, record: UnlockRecord) -> None:
        key = self._key(device_id, record.story_id, record.day)
        try:
            self._get_client().set(key, record.ads_completed, ex=UNLOCK_TTL_SECONDS)
        except Exception as e:
            logger.error("Redis unlock save failed: %s", e)
            raise
