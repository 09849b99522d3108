"""Batch driver - generates variants story by story with a rate-limit delay."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable

from bedtime_stories.errors import CondensationConfigError
from bedtime_stories.models import (
    GENDERED,
    BatchSummary,
    Gender,
    ReadLength,
    SHORT_LENGTHS,
    Story,
)
from bedtime_stories.services.variant_generation import VariantGenerationService

logger = logging.getLogger(__name__)


def genders_for(story: Story) -> list[Gender]:
    """Default plus every gender that has its own full text."""
    return [Gender.DEFAULT] + [g for g in GENDERED if g in story.gendered_full_text]


class BatchRunner:
    """Runs generation over many stories sequentially. Stop is honoured between stories."""

    def __init__(
        self,
        generation_service: VariantGenerationService,
        story_store,
        *,
        delay_seconds: float,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._generation = generation_service
        self._store = story_store
        self._delay = delay_seconds
        self._sleep = sleep
        self._stop = asyncio.Event()

    def request_stop(self) -> None:
        """Stop before the next story. In-flight pairs finish."""
        logger.info("Stop requested; finishing current story")
        self._stop.set()

    async def run(
        self,
        story_ids: Iterable[str],
        *,
        target_lengths: Iterable[ReadLength] = SHORT_LENGTHS,
        gender_versions: Iterable[Gender] | None = None,
        dry_run: bool = False,
    ) -> BatchSummary:
        """
        Process each story in order. A story with failed pairs counts as failed
        and the run moves on; a configuration error aborts the run.
        """
        ids = list(story_ids)
        lengths = list(target_lengths)
        summary = BatchSummary()

        for index, story_id in enumerate(ids, start=1):
            if self._stop.is_set():
                summary.stopped = True
                break
            story = self._store.get(story_id)
            if story is None or not story.is_active:
                logger.info("[%d/%d] %s missing or inactive, skipping", index, len(ids), story_id)
                summary.skipped += 1
                continue

            genders = list(gender_versions) if gender_versions is not None else genders_for(story)
            summary.processed += 1
            logger.info(
                "[%d/%d] %r versions: %s",
                index,
                len(ids),
                story.title or story.id,
                ", ".join(g.value for g in genders),
            )
            if dry_run:
                continue

            try:
                result = await self._generation.generate_variants(story, lengths, genders)
            except CondensationConfigError as e:
                logger.error("Aborting batch run: %s", e)
                summary.aborted_reason = str(e)
                break
            except Exception as e:
                logger.exception("Story %s failed: %s", story.id, e)
                summary.failed += 1
            else:
                summary.results.append(result)
                if result.errors:
                    for err in result.errors:
                        logger.warning("  %s: %s", err.version, err.message)
                    summary.failed += 1
                else:
                    summary.succeeded += 1

            if index < len(ids):
                await self._sleep(self._delay)

        logger.info(
            "Batch done: processed=%d succeeded=%d failed=%d skipped=%d",
            summary.processed,
            summary.succeeded,
            summary.failed,
            summary.skipped,
        )
        return summary
