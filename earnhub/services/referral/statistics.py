"""
Referral statistics.

Per-user level counts and the admin top referrers list.
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from earnhub.config.constants import TOP_REFERRERS_LIMIT
from earnhub.repositories.referral_repository import ReferralRepository
from earnhub.repositories.user_repository import UserRepository
from earnhub.utils.db_decorators import with_rollback_on_error


class ReferralStatisticsService:
    """Referral statistics for users and admins."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.referral_repo = ReferralRepository(session)
        self.user_repo = UserRepository(session)

    @with_rollback_on_error
    async def get_user_stats(self, user_id: int) -> dict[str, Any] | None:
        """
        Get referral statistics for a user.

        Args:
            user_id: User ID

        Returns:
            Dict with level_1/level_2/level_3 counts, total_referrals,
            referral_count, total_points and points_from_edges, or None
            when the user does not exist
        """
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            return None

        counts = await self.referral_repo.count_by_level(user_id)
        points_from_edges = await self.referral_repo.get_total_points(user_id)

        return {
            "referral_code": user.referral_code,
            "level_1": counts.get(1, 0),
            "level_2": counts.get(2, 0),
            "level_3": counts.get(3, 0),
            "total_referrals": sum(counts.values()),
            "referral_count": user.referral_count,
            "total_points": user.total_referral_points,
            "points_from_edges": points_from_edges,
            "level": user.level,
        }

    @with_rollback_on_error
    async def get_top_referrers(
        self, limit: int = TOP_REFERRERS_LIMIT
    ) -> list[dict[str, Any]]:
        """Get referrers with most points for the admin dashboard."""
        users = await self.user_repo.get_top_referrers(limit)
        return [
            {
                "user_id": user.id,
                "display_name": user.display_name,
                "referral_code": user.referral_code,
                "referral_count": user.referral_count,
                "total_points": user.total_referral_points,
                "level": user.level,
            }
            for user in users
        ]
