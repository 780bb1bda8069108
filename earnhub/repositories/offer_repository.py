"""
Offer repositories.

Data access layer for Offer and UserOffer models.
"""

from datetime import UTC, datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from earnhub.models.offer import Offer, UserOffer
from earnhub.repositories.base import BaseRepository


class OfferRepository(BaseRepository[Offer]):
    """Offer repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize offer repository."""
        super().__init__(Offer, session)


class UserOfferRepository(BaseRepository[UserOffer]):
    """UserOffer repository with subscription queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize user offer repository."""
        super().__init__(UserOffer, session)

    async def get_active(self) -> list[UserOffer]:
        """Get all active subscriptions ordered by ID."""
        return await self.find_by(active=True, order_by=UserOffer.id)

    async def get_active_offer_titles(self, user_id: int) -> list[str]:
        """
        Get titles of offers the user is actively subscribed to.

        Args:
            user_id: User ID

        Returns:
            Offer titles in join order
        """
        stmt = (
            select(Offer.title)
            .join(UserOffer, UserOffer.offer_id == Offer.id)
            .where(UserOffer.user_id == user_id, UserOffer.active.is_(True))
            .order_by(UserOffer.joined_at)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def deactivate_joined_before(
        self, cutoff: datetime, now: datetime
    ) -> int:
        """
        Deactivate active subscriptions joined before cutoff.

        Args:
            cutoff: Joins older than this expire
            now: Deactivation timestamp

        Returns:
            Number of subscriptions deactivated
        """
        stmt = (
            update(UserOffer)
            .where(
                UserOffer.active.is_(True),
                UserOffer.joined_at < cutoff.astimezone(UTC),
            )
            .values(active=False, deactivated_at=now.astimezone(UTC))
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(stmt)
        return result.rowcount or 0

    async def deactivate_past_deadline(self, now: datetime) -> int:
        """
        Deactivate active subscriptions whose offer deadline has passed.

        Args:
            now: Current time

        Returns:
            Number of subscriptions deactivated
        """
        expired_offers = select(Offer.id).where(
            Offer.deadline.is_not(None),
            Offer.deadline < now.astimezone(UTC),
        )
        stmt = (
            update(UserOffer)
            .where(
                UserOffer.active.is_(True),
                UserOffer.offer_id.in_(expired_offers),
            )
            .values(active=False, deactivated_at=now.astimezone(UTC))
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(stmt)
        return result.rowcount or 0
