"""Variant generation - fills (gender, length) short variants via condensation."""

import logging
from collections.abc import Iterable

from bedtime_stories.errors import (
    CondensationConfigError,
    InvalidGenerationRequest,
    StoryNotFoundError,
    VariantValidationError,
)
from bedtime_stories.models import (
    SHORT_LENGTHS,
    Gender,
    GenerationResult,
    ReadLength,
    Story,
    StoryVariant,
    VariantError,
    VariantKey,
    variant_label,
)
from bedtime_stories.rules.text import estimate_read_minutes
from bedtime_stories.services.condensation import (
    CondensationClient,
    CondensationRequest,
    ContextHints,
)

logger = logging.getLogger(__name__)

ALL_GENDERS = (Gender.DEFAULT, Gender.BOY, Gender.GIRL)


def parse_generation_request(
    target_lengths: object,
    gender_versions: object,
) -> tuple[list[ReadLength], list[Gender]]:
    """
    Validate admin input. Anything that is not a list means all values;
    unknown values are dropped; a list emptied by filtering rejects the
    whole request.
    """
    lengths = _filter_enum(target_lengths, SHORT_LENGTHS)
    genders = _filter_enum(gender_versions, ALL_GENDERS)
    if not lengths:
        raise InvalidGenerationRequest("At least one valid target length must be specified")
    if not genders:
        raise InvalidGenerationRequest("At least one valid gender version must be specified")
    return lengths, genders


def _filter_enum(values: object, allowed: tuple) -> list:
    if not isinstance(values, list):
        return list(allowed)
    by_value = {a.value: a for a in allowed}
    picked = {by_value[v] for v in values if isinstance(v, str) and v in by_value}
    return [a for a in allowed if a in picked]


class VariantGenerationService:
    """
    Condenses each requested (gender, length) pair independently.

    A pair whose gender has no source text is skipped silently. A pair whose
    condensation or validation fails is recorded and the rest carry on. All
    successes are written in one store update; nothing is written if every
    pair failed. Existing variants for requested pairs are always regenerated.
    """

    def __init__(
        self,
        condenser: CondensationClient,
        story_store,
        *,
        words_per_minute: int,
        min_characters: int,
    ) -> None:
        self._condenser = condenser
        self._store = story_store
        self._words_per_minute = words_per_minute
        self._min_characters = min_characters

    async def generate_for_story_id(
        self,
        story_id: str,
        target_lengths: Iterable[ReadLength],
        gender_versions: Iterable[Gender],
    ) -> GenerationResult:
        story = self._store.get(story_id)
        if story is None:
            raise StoryNotFoundError(story_id)
        return await self.generate_variants(story, target_lengths, gender_versions)

    async def generate_variants(
        self,
        story: Story,
        target_lengths: Iterable[ReadLength],
        gender_versions: Iterable[Gender],
    ) -> GenerationResult:
        """Generate variants for the Cartesian product of lengths and genders."""
        self._condenser.ensure_configured()

        requested_lengths = set(target_lengths)
        requested_genders = set(gender_versions)
        lengths = [length for length in SHORT_LENGTHS if length in requested_lengths]
        genders = [g for g in ALL_GENDERS if g in requested_genders]
        result = GenerationResult(story_id=story.id)
        pending: dict[VariantKey, StoryVariant] = {}

        for length in lengths:
            for gender in genders:
                source = story.full_text_for(gender)
                if not source:
                    logger.debug("Story %s has no %s text, skipping", story.id, gender.value)
                    continue
                label = variant_label(gender, length)
                try:
                    variant = await self._generate_one(story, source, gender, length)
                except CondensationConfigError:
                    raise
                except Exception as e:
                    logger.warning("Story %s %s failed: %s", story.id, label, e)
                    result.errors.append(VariantError(gender=gender, length=length, message=str(e)))
                    continue
                pending[variant.key] = variant
                result.generated.append(variant.key)
                logger.info(
                    "Story %s %s generated (~%d min)",
                    story.id,
                    label,
                    variant.estimated_read_minutes,
                )

        if pending:
            self._store.update_variants(story.id, pending)
        return result

    async def _generate_one(
        self,
        story: Story,
        source: str,
        gender: Gender,
        length: ReadLength,
    ) -> StoryVariant:
        request = CondensationRequest(
            source_text=source,
            target_word_budget=length.minutes * self._words_per_minute,
            context_hints=ContextHints(**story.context_hints()),
        )
        text = await self._condenser.condense(request)
        self._validate(text)
        return StoryVariant(
            gender=gender,
            length=length,
            text=text,
            estimated_read_minutes=estimate_read_minutes(text, self._words_per_minute),
        )

    def _validate(self, text: str) -> None:
        if not text:
            raise VariantValidationError("Generated story version is empty")
        if len(text) < self._min_characters:
            raise VariantValidationError(
                f"Generated story version is too short ({len(text)} characters)"
            )
