"""
Batch generation of 5-min and 10-min story versions.

Usage:
    bedtime-stories-generate                       # all active stories
    bedtime-stories-generate --start 101 --end 110 # a slice, to stay under rate limits
    bedtime-stories-generate --dry-run             # list what would be generated
"""

import argparse
import asyncio
import logging
import signal
import sys

from bedtime_stories.config import get_reading_rules, get_settings
from bedtime_stories.models import Gender, ReadLength
from bedtime_stories.persistence import create_stores
from bedtime_stories.services import BatchRunner
from bedtime_stories.services.factory import create_generation_service

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    rules = get_reading_rules()
    parser = argparse.ArgumentParser(description="Generate short story versions")
    parser.add_argument(
        "--lengths",
        nargs="+",
        choices=["5min", "10min"],
        default=["5min", "10min"],
        help="Target lengths to generate",
    )
    parser.add_argument(
        "--genders",
        nargs="+",
        choices=["default", "boy", "girl"],
        default=None,
        help="Gender versions (default: default plus each gender with its own text)",
    )
    parser.add_argument("--start", type=int, default=1, help="First story, 1-based")
    parser.add_argument("--end", type=int, default=None, help="Last story, inclusive")
    parser.add_argument(
        "--delay",
        type=float,
        default=rules.batch_delay_seconds,
        help="Seconds to wait between stories",
    )
    parser.add_argument("--dry-run", action="store_true", help="Show work without calling the LLM")
    return parser


async def run_batch(args: argparse.Namespace) -> int:
    settings = get_settings()
    rules = get_reading_rules()
    story_store, _ = create_stores()
    runner = BatchRunner(
        create_generation_service(story_store, settings, rules),
        story_store,
        delay_seconds=args.delay,
    )

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, runner.request_stop)
        except NotImplementedError:
            # Windows event loops have no signal handlers
            pass

    story_ids = story_store.list_ids()[max(args.start - 1, 0) : args.end]
    logger.info("Processing %d stories (dry run: %s)", len(story_ids), args.dry_run)
    summary = await runner.run(
        story_ids,
        target_lengths=[ReadLength(v) for v in args.lengths],
        gender_versions=[Gender(v) for v in args.genders] if args.genders else None,
        dry_run=args.dry_run,
    )

    print("\nSummary:")
    print(f"   Processed: {summary.processed}")
    print(f"   Success:   {summary.succeeded}")
    print(f"   Errors:    {summary.failed}")
    print(f"   Skipped:   {summary.skipped}")
    if summary.stopped:
        print("   Stopped early on request")
    if summary.aborted_reason:
        print(f"   Aborted: {summary.aborted_reason}")
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    return asyncio.run(run_batch(args))


if __name__ == "__main__":
    sys.exit(main())
