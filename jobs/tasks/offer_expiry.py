"""
Offer expiry task.

Deactivates offer subscriptions older than the join duration or whose
offer deadline has passed, so the profit run stops crediting them.
"""

import asyncio

import dramatiq
from loguru import logger

import jobs.broker  # noqa: F401
from earnhub.services.profit.offer_expiry_service import OfferExpiryService
from jobs.utils.database import task_session_maker


@dramatiq.actor(max_retries=3, time_limit=120_000)
def expire_offer_joins() -> None:
    """Deactivate expired offer subscriptions."""
    logger.info("Starting offer expiry...")

    success, counts, error = asyncio.run(_expire_offer_joins_async())

    if success:
        logger.info(
            f"Offer expiry complete: {counts['by_duration']} by duration, "
            f"{counts['by_deadline']} by deadline"
        )
    else:
        logger.error(f"Offer expiry failed: {error}")


async def _expire_offer_joins_async() -> tuple[bool, dict[str, int], str | None]:
    async with task_session_maker() as session:
        return await OfferExpiryService(session).expire_offer_joins()
