"""
Referral repositories.

Data access layer for Referral edges and ReferralSettings.
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from earnhub.config.constants import DEFAULT_LEVEL_POINTS, REFERRAL_SETTINGS_ID
from earnhub.models.referral import Referral, ReferralSettings
from earnhub.repositories.base import BaseRepository


class ReferralRepository(BaseRepository[Referral]):
    """Referral repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize referral repository."""
        super().__init__(Referral, session)

    async def get_by_referrer(
        self, referrer_id: int, level: int | None = None
    ) -> list[Referral]:
        """
        Get referrals by referrer.

        Args:
            referrer_id: Referrer user ID
            level: Optional level filter (1-3)

        Returns:
            List of referrals
        """
        filters = {"referrer_id": referrer_id}
        if level:
            filters["level"] = level

        return await self.find_by(order_by=Referral.created_at, **filters)

    async def edge_exists(self, referred_id: int, level: int) -> bool:
        """Check whether the edge for (referred user, level) was created."""
        return await self.exists(referred_id=referred_id, level=level)

    async def count_by_level(self, referrer_id: int) -> dict[int, int]:
        """
        Count a referrer's edges per level.

        Args:
            referrer_id: Referrer user ID

        Returns:
            Mapping level -> count, with zeros for empty levels
        """
        stmt = (
            select(Referral.level, func.count(Referral.id))
            .where(Referral.referrer_id == referrer_id)
            .group_by(Referral.level)
        )
        result = await self.session.execute(stmt)
        counts = {level: 0 for level in DEFAULT_LEVEL_POINTS}
        for level, count in result.all():
            counts[level] = count
        return counts

    async def get_total_points(self, referrer_id: int) -> int:
        """Sum of points earned from all of a referrer's edges."""
        stmt = select(
            func.coalesce(func.sum(Referral.points_earned), 0)
        ).where(Referral.referrer_id == referrer_id)
        result = await self.session.execute(stmt)
        return int(result.scalar() or 0)


class ReferralSettingsRepository(BaseRepository[ReferralSettings]):
    """Singleton referral settings row."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize referral settings repository."""
        super().__init__(ReferralSettings, session)

    async def get_settings(self) -> ReferralSettings | None:
        """Get the settings row, None when not configured."""
        return await self.get_by_id(REFERRAL_SETTINGS_ID)

    async def upsert(
        self, level1_points: int, level2_points: int, level3_points: int
    ) -> ReferralSettings:
        """
        Create or update the settings row.

        Returns:
            The stored settings
        """
        row = await self.get_settings()
        if row is None:
            return await self.create(
                id=REFERRAL_SETTINGS_ID,
                level1_points=level1_points,
                level2_points=level2_points,
                level3_points=level3_points,
            )

        row.level1_points = level1_points
        row.level2_points = level2_points
        row.level3_points = level3_points
        await self.session.flush()
        return row
