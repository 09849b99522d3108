"""Redis-backed stores against an in-memory client."""

from datetime import timedelta

import pytest

from bedtime_stories.errors import InvalidIdentifierError
from bedtime_stories.models import Gender, ReadLength, UnlockRecord
from bedtime_stories.persistence import RedisStoryStore, RedisUnlockStore
from bedtime_stories.persistence.redis_store import UNLOCK_TTL_SECONDS
from bedtime_stories.services import UnlockLedger
from conftest import TODAY, make_story, make_variant


class MemoryRedis:
    """The handful of redis commands the stores use, decode_responses style."""

    def __init__(self) -> None:
        self.values: dict[str, str] = {}
        self.sets: dict[str, set[str]] = {}
        self.hashes: dict[str, dict[str, str]] = {}
        self.expiry: dict[str, int] = {}

    def get(self, key):
        return self.values.get(key)

    def set(self, key, value, ex=None):
        self.values[key] = str(value)
        if ex is not None:
            self.expiry[key] = ex

    def sadd(self, key, member):
        self.sets.setdefault(key, set()).add(member)

    def smembers(self, key):
        return set(self.sets.get(key, set()))

    def hget(self, key, field):
        return self.hashes.get(key, {}).get(field)

    def hset(self, key, field, value):
        self.hashes.setdefault(key, {})[field] = value


def _story_store() -> RedisStoryStore:
    store = RedisStoryStore("redis://unused")
    store._client = MemoryRedis()
    return store


def _unlock_store() -> RedisUnlockStore:
    store = RedisUnlockStore("redis://unused")
    store._client = MemoryRedis()
    return store


def test_story_round_trip_and_variant_update() -> None:
    store = _story_store()
    story = make_story(girl=True)
    store.save(story)

    variant = make_variant(Gender.GIRL, ReadLength.FIVE_MIN)
    store.update_variants(story.id, {variant.key: variant})

    loaded = store.get(story.id)
    assert loaded.variant(Gender.GIRL, ReadLength.FIVE_MIN) == variant
    assert store.list_ids() == [story.id]
    assert store.get("missing") is None


def test_story_of_the_day_overwrites() -> None:
    store = _story_store()
    store.set_story_of_the_day(TODAY, "first")
    store.set_story_of_the_day(TODAY, "second")
    assert store.get_story_of_the_day(TODAY) == "second"
    assert store.get_story_of_the_day(TODAY + timedelta(days=1)) is None


def test_unlock_records_expire_in_redis() -> None:
    store = _unlock_store()
    store.save("tablet-1", UnlockRecord(story_id="moon-fox", day=TODAY, ads_completed=2))

    record = store.get("tablet-1", "moon-fox", TODAY)

    assert record.ads_completed == 2
    assert store.get("tablet-1", "moon-fox", TODAY + timedelta(days=1)) is None
    assert set(store._client.expiry.values()) == {UNLOCK_TTL_SECONDS}


def test_ledger_over_redis_caps() -> None:
    ledger = UnlockLedger(_unlock_store(), "phone-2", clock=lambda: TODAY)
    counts = [ledger.record_ad_impression("moon-fox").ads_completed for _ in range(4)]
    assert counts == [1, 2, 3, 3]
    assert ledger.is_unlocked("moon-fox")


def test_unsafe_device_id_rejected() -> None:
    store = _unlock_store()
    record = UnlockRecord(story_id="moon-fox", day=TODAY, ads_completed=1)

    with pytest.raises(InvalidIdentifierError):
        store.save("tablet:1", record)
    with pytest.raises(InvalidIdentifierError):
        store.get("tablet:1", "moon-fox", TODAY)
    assert store._client.values == {}
