"""Ad-unlock ledger entry."""

from datetime import date

from pydantic import BaseModel, Field


class UnlockRecord(BaseModel):
    """Ads completed for one story on one calendar day, on one device."""

    story_id: str
    day: date
    ads_completed: int = Field(default=0, ge=0)

    def is_unlocking(self, required_ads: int) -> bool:
        return self.ads_completed >= required_ads
