"""Story persistence - JSON file storage."""

import json
import logging
from datetime import date
from pathlib import Path

from pydantic import ValidationError

from bedtime_stories.errors import StoryNotFoundError
from bedtime_stories.models import Story, StoryVariant, VariantKey
from bedtime_stories.persistence.ids import checked_id, is_safe_id

logger = logging.getLogger(__name__)


class StoryStore:
    """File-based story store. One JSON file per story, plus a story-of-the-day index."""

    def __init__(self, data_dir: Path) -> None:
        self._dir = Path(data_dir) / "stories"
        self._dir.mkdir(parents=True, exist_ok=True)
        self._sotd_path = Path(data_dir) / "story_of_the_day.json"

    def _story_path(self, story_id: str) -> Path:
        return self._dir / f"{checked_id(story_id, 'story')}.json"

    def get(self, story_id: str) -> Story | None:
        """Get story by id. Ids that could never be stored are simply absent."""
        if not is_safe_id(story_id):
            return None
        path = self._story_path(story_id)
        if not path.exists():
            return None
        try:
            with path.open() as f:
                data = json.load(f)
            return Story.model_validate(data)
        except (json.JSONDecodeError, OSError, ValidationError) as e:
            logger.warning("Could not load story %s: %s", path, e)
            return None

    def save(self, story: Story) -> None:
        """Create or replace a story record."""
        path = self._story_path(story.id)
        try:
            with path.open("w") as f:
                json.dump(story.model_dump(mode="json"), f, indent=2)
        except OSError as e:
            logger.error("Could not save story %s: %s", path, e)
            raise

    def list_ids(self) -> list[str]:
        """All story ids, sorted."""
        return sorted(p.stem for p in self._dir.glob("*.json"))

    def update_variants(self, story_id: str, updates: dict[VariantKey, StoryVariant]) -> Story:
        """Merge variants into the stored story in a single write."""
        story = self.get(story_id)
        if story is None:
            raise StoryNotFoundError(story_id)
        updated = story.with_variants(updates)
        self.save(updated)
        return updated

    def _load_sotd(self) -> dict[str, str]:
        """ISO date -> story_id."""
        if not self._sotd_path.exists():
            return {}
        try:
            with self._sotd_path.open() as f:
                return json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Could not load story of the day index: %s", e)
            return {}

    def get_story_of_the_day(self, day: date) -> str | None:
        """Story id featured on a date."""
        return self._load_sotd().get(day.isoformat())

    def set_story_of_the_day(self, day: date, story_id: str) -> None:
        """Assign (or reassign) the featured story for a date."""
        index = self._load_sotd()
        index[day.isoformat()] = story_id
        try:
            with self._sotd_path.open("w") as f:
                json.dump(index, f, indent=2, sort_keys=True)
        except OSError as e:
            logger.error("Could not save story of the day index: %s", e)
            raise
