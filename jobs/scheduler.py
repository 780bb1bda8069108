"""
Job scheduler.

Enqueues the periodic actors on their cron schedule in the configured
local timezone and serves the health endpoints. The actors themselves
run in dramatiq workers:

    dramatiq jobs.tasks.profit_crediting jobs.tasks.offer_expiry
"""

import asyncio
import signal

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from loguru import logger

from earnhub.config.logging import setup_logging
from earnhub.config.settings import settings
from jobs.health import set_scheduler, start_health_server, stop_health_server
from jobs.tasks.offer_expiry import expire_offer_joins
from jobs.tasks.profit_crediting import add_daily_profits, add_monthly_profits


def create_scheduler() -> AsyncIOScheduler:
    """
    Build the scheduler with all periodic jobs.

    Offer expiry runs shortly before the daily profit run so that
    expired subscriptions are not credited.
    """
    scheduler = AsyncIOScheduler(timezone=settings.tzinfo)
    hour = settings.daily_profit_hour

    scheduler.add_job(
        expire_offer_joins.send,
        CronTrigger(hour=(hour - 1) % 24, minute=55),
        id="expire_offer_joins",
        name="Expire offer joins",
        replace_existing=True,
    )
    scheduler.add_job(
        add_daily_profits.send,
        CronTrigger(hour=hour, minute=0),
        id="add_daily_profits",
        name="Add daily profits",
        replace_existing=True,
    )
    scheduler.add_job(
        add_monthly_profits.send,
        CronTrigger(day=settings.monthly_profit_day, hour=hour, minute=5),
        id="add_monthly_profits",
        name="Add monthly profits",
        replace_existing=True,
    )
    return scheduler


async def run() -> None:
    scheduler = create_scheduler()
    scheduler.start()
    set_scheduler(scheduler)

    runner = await start_health_server(port=settings.health_check_port)

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop_event.set)

    for job in scheduler.get_jobs():
        logger.info(f"Scheduled {job.id}, next run at {job.next_run_time}")

    await stop_event.wait()

    logger.info("Shutting down scheduler...")
    scheduler.shutdown(wait=False)
    await stop_health_server(runner)


def main() -> None:
    setup_logging("scheduler")
    asyncio.run(run())


if __name__ == "__main__":
    main()
