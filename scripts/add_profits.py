#!/usr/bin/env python3
"""
Run one profit crediting pass from the command line.

Usage:
    python scripts/add_profits.py --mode daily
    python scripts/add_profits.py --mode monthly --no-redis

Exit status is 0 when the run completed (individual subscription
failures are logged and counted) and 1 when the active subscriptions
could not be loaded at all.
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from loguru import logger

from earnhub.models.enums import ProfitMode
from earnhub.utils.exceptions import ProfitJobFetchError
from jobs.tasks.profit_crediting import run_profit_job

logger.remove()
logger.add(sys.stderr, level="INFO", format="{time:HH:mm:ss} | {level} | {message}")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Credit offer profits for one period")
    parser.add_argument(
        "--mode",
        required=True,
        choices=[mode.value for mode in ProfitMode],
        help="Profit period to credit",
    )
    parser.add_argument(
        "--no-redis",
        action="store_true",
        help="Use a process-local lock instead of the Redis lock",
    )
    return parser.parse_args(argv)


async def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    try:
        result = await run_profit_job(args.mode, use_redis=not args.no_redis)
    except ProfitJobFetchError as e:
        logger.error(f"Profit run aborted: {e}")
        return 1

    if not result["success"]:
        logger.warning(f"Profit run skipped: {result['error']}")
        return 0

    logger.info(
        f"{args.mode} profits: {result['credited']} credited, "
        f"{result['skipped_existing']} already credited, "
        f"{result['skipped_no_profit']} without profit, "
        f"{result['failed']} failed, total {result['total_amount']}"
    )
    for error in result["errors"]:
        logger.warning(f"  {error}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
