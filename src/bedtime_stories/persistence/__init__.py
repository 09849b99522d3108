"""Persistence layer."""

from bedtime_stories.persistence.factory import create_stores
from bedtime_stories.persistence.redis_store import RedisStoryStore, RedisUnlockStore
from bedtime_stories.persistence.story_store import StoryStore
from bedtime_stories.persistence.unlock_store import UnlockStore

__all__ = [
    "RedisStoryStore",
    "RedisUnlockStore",
    "StoryStore",
    "UnlockStore",
    "create_stores",
]
