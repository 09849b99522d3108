"""Variant generation request/result models."""

from pydantic import BaseModel, Field

from bedtime_stories.models.story import Gender, ReadLength, variant_label


class VariantError(BaseModel):
    """Failure for one (gender, length) pair."""

    gender: Gender
    length: ReadLength
    message: str

    @property
    def version(self) -> str:
        return variant_label(self.gender, self.length)


class GenerationResult(BaseModel):
    """Outcome of generating variants for one story."""

    story_id: str
    generated: list[tuple[Gender, ReadLength]] = Field(default_factory=list)
    errors: list[VariantError] = Field(default_factory=list)

    @property
    def generated_labels(self) -> list[str]:
        return [variant_label(g, length) for g, length in self.generated]

    def to_response(self) -> dict:
        """Shape returned by the admin trigger endpoint."""
        body: dict = {
            "success": True,
            "generated": self.generated_labels,
        }
        if self.errors:
            body["errors"] = [{"version": e.version, "message": e.message} for e in self.errors]
            body["message"] = (
                f"Generated {len(self.generated)} versions with {len(self.errors)} errors"
            )
        else:
            body["message"] = f"Successfully generated {len(self.generated)} versions"
        return body


class BatchSummary(BaseModel):
    """Run-level counts for a batch of stories."""

    processed: int = 0
    succeeded: int = 0
    failed: int = 0
    skipped: int = 0
    stopped: bool = False
    aborted_reason: str | None = None
    results: list[GenerationResult] = Field(default_factory=list)
