"""
Profit crediting tasks.

Credits daily or monthly offer profit to every active subscription.
The daily run is scheduled once per day and the monthly run once per
month; a run repeated inside the same period credits nothing.
"""

import asyncio
from datetime import datetime

import dramatiq
from loguru import logger
from sqlalchemy.ext.asyncio import async_sessionmaker

import jobs.broker  # noqa: F401
from earnhub.config.settings import settings
from earnhub.models.enums import ProfitMode
from earnhub.services.profit.profit_crediting_service import ProfitCreditingService
from earnhub.utils.distributed_lock import DistributedLock
from earnhub.utils.exceptions import LockAcquisitionError
from earnhub.utils.redis_utils import get_redis_client
from jobs.utils.database import task_session_maker


@dramatiq.actor(max_retries=3, time_limit=900_000)  # 15 min, above the lock timeout
def add_daily_profits() -> None:
    """Credit today's profit to all active subscriptions."""
    _run_actor(ProfitMode.DAILY)


@dramatiq.actor(max_retries=3, time_limit=900_000)
def add_monthly_profits() -> None:
    """Credit this month's profit to all active subscriptions."""
    _run_actor(ProfitMode.MONTHLY)


def _run_actor(mode: ProfitMode) -> None:
    logger.info(f"Starting {mode.value} profit crediting...")

    result = asyncio.run(run_profit_job(mode))

    if result["success"]:
        logger.info(
            f"{mode.value.capitalize()} profit crediting complete: "
            f"{result['credited']} credited, "
            f"{result['skipped_existing']} already credited, "
            f"{result['failed']} failed, total: {result['total_amount']}"
        )
    else:
        logger.warning(
            f"{mode.value.capitalize()} profit crediting did not run: "
            f"{result.get('error')}"
        )


async def run_profit_job(
    mode: ProfitMode | str,
    now: datetime | None = None,
    session_maker: async_sessionmaker | None = None,
    use_redis: bool = True,
) -> dict:
    """
    Run one profit crediting pass under a distributed lock.

    Args:
        mode: daily or monthly
        now: Reference moment (defaults to current UTC time)
        session_maker: Session factory (defaults to the task engine)
        use_redis: Use the Redis lock; a process-local lock otherwise

    Returns:
        Run summary dict with ``success`` and the per-run counters

    Raises:
        ProfitJobFetchError: If active subscriptions cannot be loaded
    """
    mode = ProfitMode(mode)
    session_maker = session_maker or task_session_maker
    redis_client = get_redis_client() if use_redis else None
    lock = DistributedLock(redis_client=redis_client)

    try:
        async with lock.lock(
            f"profit_crediting_{mode.value}", timeout=settings.profit_lock_timeout
        ):
            async with session_maker() as session:
                result = await ProfitCreditingService(session).add_profits(mode, now)
        return {"success": True, **result.as_dict()}
    except LockAcquisitionError as e:
        return {"success": False, "mode": mode.value, "error": str(e)}
    finally:
        if redis_client is not None:
            await redis_client.aclose()
