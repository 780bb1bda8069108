"""
Offer join expiry.

Subscriptions stop earning after a fixed number of days from joining,
or as soon as the offer's deadline passes.
"""

from datetime import datetime, timedelta

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from earnhub.config.settings import settings
from earnhub.repositories.offer_repository import UserOfferRepository
from earnhub.utils.datetime_utils import ensure_aware, utc_now


class OfferExpiryService:
    """Deactivates expired offer subscriptions."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.user_offer_repo = UserOfferRepository(session)

    async def expire_offer_joins(
        self, now: datetime | None = None
    ) -> tuple[bool, dict[str, int], str | None]:
        """
        Deactivate subscriptions past their duration or offer deadline.

        Args:
            now: Reference moment (defaults to current UTC time)

        Returns:
            Tuple of (success, counts, error_message)
        """
        now = ensure_aware(now) if now else utc_now()
        cutoff = now - timedelta(days=settings.offer_join_duration_days)

        try:
            by_duration = await self.user_offer_repo.deactivate_joined_before(cutoff, now)
            by_deadline = await self.user_offer_repo.deactivate_past_deadline(now)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.exception(
                "Failed to expire offer joins",
                extra={"error": str(e)},
            )
            return False, {}, "Database error"

        counts = {"by_duration": by_duration, "by_deadline": by_deadline}
        if by_duration or by_deadline:
            logger.info("Offer joins expired", extra=counts)
        return True, counts, None
