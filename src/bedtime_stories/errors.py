"""Exception types shared across services and the HTTP layer."""


class BedtimeStoriesError(Exception):
    """Base error for the application."""


class StoryNotFoundError(BedtimeStoriesError):
    """Requested story does not exist or is inactive."""

    def __init__(self, story_id: str) -> None:
        super().__init__(f"Story {story_id} not found")
        self.story_id = story_id


class CondensationConfigError(BedtimeStoriesError):
    """Condensation capability is unconfigured. Fatal to a generation run."""


class CondensationError(BedtimeStoriesError):
    """Condensation call failed for one (gender, length) pair."""


class VariantValidationError(BedtimeStoriesError):
    """Condensed text failed the plausibility check."""


class InvalidGenerationRequest(BedtimeStoriesError):
    """Generation request rejected before any work started."""


class InvalidIdentifierError(BedtimeStoriesError):
    """Story or device id contains characters that cannot be used as a storage key."""

    def __init__(self, kind: str, value: str) -> None:
        super().__init__(f"Invalid {kind} id: {value!r}")
        self.kind = kind
        self.value = value
