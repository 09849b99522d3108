"""Story data model - full texts plus sparse (gender, length) variants."""

from datetime import date
from enum import Enum
from typing import Any

from pydantic import (
    BaseModel,
    Field,
    SerializationInfo,
    field_serializer,
    field_validator,
    model_validator,
)


class Gender(str, Enum):
    """Protagonist framing of a rendering."""

    DEFAULT = "default"
    BOY = "boy"
    GIRL = "girl"


class ReadLength(str, Enum):
    """Target read duration."""

    FULL = "full"
    TEN_MIN = "10min"
    FIVE_MIN = "5min"

    @property
    def minutes(self) -> int | None:
        """Target minutes for short lengths, None for full."""
        return {ReadLength.FIVE_MIN: 5, ReadLength.TEN_MIN: 10}.get(self)


SHORT_LENGTHS = (ReadLength.FIVE_MIN, ReadLength.TEN_MIN)
GENDERED = (Gender.BOY, Gender.GIRL)

VariantKey = tuple[Gender, ReadLength]


def variant_label(gender: Gender, length: ReadLength) -> str:
    """Human-readable key, e.g. boy-5min."""
    return f"{gender.value}-{length.value}"


class StoryVariant(BaseModel):
    """One generated short rendering."""

    gender: Gender
    length: ReadLength
    text: str = Field(..., min_length=1)
    estimated_read_minutes: int = Field(..., ge=0)

    @field_validator("length")
    @classmethod
    def _short_only(cls, value: ReadLength) -> ReadLength:
        if value not in SHORT_LENGTHS:
            raise ValueError("variants exist only for 5min and 10min")
        return value

    @property
    def key(self) -> VariantKey:
        return (self.gender, self.length)


class Story(BaseModel):
    """Unit of content. Short variants are keyed by (gender, length)."""

    id: str = Field(..., description="Opaque unique id")
    title: str = Field(default="")
    short_description: str = Field(default="")
    is_active: bool = Field(default=True)
    default_full_text: str = Field(..., min_length=1, description="Canonical full rendering")
    gendered_full_text: dict[Gender, str] = Field(
        default_factory=dict,
        description="Independent boy/girl full renderings",
    )
    short_variants: dict[VariantKey, StoryVariant] = Field(default_factory=dict)
    values_tags: set[str] = Field(default_factory=set)
    topic_tags: set[str] = Field(default_factory=set)
    estimated_read_minutes: int | None = Field(
        default=None,
        description="Authored estimate for the full-length text",
    )

    @field_validator("gendered_full_text", mode="before")
    @classmethod
    def _drop_blank_gendered(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {g: t for g, t in value.items() if t}
        return value

    @field_validator("gendered_full_text")
    @classmethod
    def _gendered_keys_only(cls, value: dict[Gender, str]) -> dict[Gender, str]:
        if Gender.DEFAULT in value:
            raise ValueError("default text belongs in default_full_text")
        return value

    @field_validator("short_variants", mode="before")
    @classmethod
    def _index_variants(cls, value: Any) -> Any:
        """Stored form is a list of variants; index it by (gender, length)."""
        if isinstance(value, list):
            indexed = {}
            for item in value:
                if isinstance(item, StoryVariant):
                    indexed[item.key] = item
                else:
                    indexed[(item["gender"], item["length"])] = item
            return indexed
        return value

    @field_serializer("short_variants")
    def _serialize_variants(
        self,
        variants: dict[VariantKey, StoryVariant],
        info: SerializationInfo,
    ) -> list[dict[str, Any]]:
        return [v.model_dump(mode=info.mode) for v in variants.values()]

    @model_validator(mode="after")
    def _variants_need_source(self) -> "Story":
        for (gender, length), variant in self.short_variants.items():
            if variant.key != (gender, length):
                raise ValueError(f"variant stored under wrong key: {variant_label(gender, length)}")
            if gender in GENDERED and gender not in self.gendered_full_text:
                raise ValueError(
                    f"{variant_label(gender, length)} exists without a {gender.value} full text"
                )
        return self

    def full_text_for(self, gender: Gender) -> str | None:
        """Full text for a gender; default maps to default_full_text."""
        if gender == Gender.DEFAULT:
            return self.default_full_text
        return self.gendered_full_text.get(gender)

    def variant(self, gender: Gender, length: ReadLength) -> StoryVariant | None:
        return self.short_variants.get((gender, length))

    def with_variants(self, updates: dict[VariantKey, StoryVariant]) -> "Story":
        """Copy with updates merged over existing variants."""
        merged = {**self.short_variants, **updates}
        return Story.model_validate({**self.model_dump(), "short_variants": merged})

    def context_hints(self) -> dict[str, Any]:
        """Context passed to condensation - theme and tone only."""
        return {
            "title": self.title,
            "values_tags": sorted(self.values_tags),
            "topic_tags": sorted(self.topic_tags),
        }


class StoryOfTheDay(BaseModel):
    """Calendar-keyed featured story assignment."""

    day: date = Field(..., description="Calendar date, unique key")
    story_id: str
