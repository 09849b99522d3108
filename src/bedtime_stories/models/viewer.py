"""Per-request viewer context. Never persisted."""

from pydantic import BaseModel, Field

from bedtime_stories.models.story import Gender


class ViewerContext(BaseModel):
    """Viewer state supplied by the auth/billing gateway."""

    subscription_active: bool = Field(default=False)
    is_authenticated: bool = Field(default=False)
    gender_preference: Gender | None = Field(
        default=None,
        description="boy or girl; None when no preference is stated",
    )

    @property
    def is_anonymous_or_free(self) -> bool:
        return not self.is_authenticated or not self.subscription_active
