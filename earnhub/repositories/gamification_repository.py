"""
Gamification repositories.

Data access for badges, awarded badges and levels.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from earnhub.models.gamification import Badge, Level, UserBadge
from earnhub.repositories.base import BaseRepository


class BadgeRepository(BaseRepository[Badge]):
    """Badge definitions."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize badge repository."""
        super().__init__(Badge, session)

    async def get_active(self) -> list[Badge]:
        """Get all active badges."""
        return await self.find_by(is_active=True, order_by=Badge.id)


class UserBadgeRepository(BaseRepository[UserBadge]):
    """Badges held by users."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize user badge repository."""
        super().__init__(UserBadge, session)

    async def get_badge_ids(self, user_id: int) -> set[int]:
        """Get IDs of badges the user already holds."""
        stmt = select(UserBadge.badge_id).where(UserBadge.user_id == user_id)
        result = await self.session.execute(stmt)
        return set(result.scalars().all())


class LevelRepository(BaseRepository[Level]):
    """Referral-point levels."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize level repository."""
        super().__init__(Level, session)

    async def get_highest_reached(self, points: int) -> Level | None:
        """
        Get the highest level whose requirement is met.

        Args:
            points: User's total referral points

        Returns:
            Level or None when no level is reached
        """
        stmt = (
            select(Level)
            .where(Level.requirement <= points)
            .order_by(Level.requirement.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
