"""Store factory - creates file or Redis stores based on config."""

from pathlib import Path

from bedtime_stories.config import get_settings
from bedtime_stories.persistence.redis_store import RedisStoryStore, RedisUnlockStore
from bedtime_stories.persistence.story_store import StoryStore
from bedtime_stories.persistence.unlock_store import UnlockStore


def create_stores() -> tuple:
    """
    Create story and unlock stores based on REDIS_URL.
    Returns (story_store, unlock_store).
    Uses Redis when REDIS_URL is set; otherwise file-based.
    """
    settings = get_settings()
    if settings.redis_url:
        return (
            RedisStoryStore(settings.redis_url),
            RedisUnlockStore(settings.redis_url),
        )
    data_dir = Path(settings.data_dir)
    data_dir.mkdir(parents=True, exist_ok=True)
    return (
        StoryStore(data_dir),
        UnlockStore(data_dir),
    )
