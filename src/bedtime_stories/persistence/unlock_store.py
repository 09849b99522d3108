"""Ad-unlock persistence - one JSON file per device."""

import json
import logging
from datetime import date
from pathlib import Path

from bedtime_stories.models import UnlockRecord
from bedtime_stories.persistence.ids import checked_id

logger = logging.getLogger(__name__)


class UnlockStore:
    """File-based unlock records keyed by (device, story, day)."""

    def __init__(self, data_dir: Path) -> None:
        self._dir = Path(data_dir) / "unlocks"
        self._dir.mkdir(parents=True, exist_ok=True)

    def _path(self, device_id: str) -> Path:
        return self._dir / f"{checked_id(device_id, 'device')}.json"

    @staticmethod
    def _key(story_id: str, day: date) -> str:
        return f"{story_id}:{day.isoformat()}"

    def _load(self, device_id: str) -> dict[str, int]:
        path = self._path(device_id)
        if not path.exists():
            return {}
        try:
            with path.open() as f:
                return json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Could not load unlocks %s: %s", path, e)
            return {}

    def get(self, device_id: str, story_id: str, day: date) -> UnlockRecord | None:
        """Record for one story on one day, if any ads were completed."""
        count = self._load(device_id).get(self._key(story_id, day))
        if count is None:
            return None
        return UnlockRecord(story_id=story_id, day=day, ads_completed=count)

    def save(self, device_id: str, record: UnlockRecord) -> None:
        """Store the ad count for the record's (story, day)."""
        records = self._load(device_id)
        records[self._key(record.story_id, record.day)] = record.ads_completed
        path = self._path(device_id)
        try:
            with path.open("w") as f:
                json.dump(records, f, indent=2)
        except OSError as e:
            logger.error("Could not save unlocks %s: %s", path, e)
            raise
