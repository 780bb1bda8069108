"""
Referral settings service.

Reads and updates the singleton points-per-level row.
"""

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from earnhub.repositories.referral_repository import ReferralSettingsRepository
from earnhub.services.referral.config import DEFAULT_LEVEL_POINTS
from earnhub.utils.db_decorators import with_auto_commit


class ReferralSettingsService:
    """Points per referral level."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.settings_repo = ReferralSettingsRepository(session)

    async def get_points(self) -> dict[str, int]:
        """
        Get configured points, falling back to defaults for display.

        Returns:
            Dict with level1_points, level2_points, level3_points
        """
        row = await self.settings_repo.get_settings()
        if row is None:
            return {
                f"level{level}_points": points
                for level, points in DEFAULT_LEVEL_POINTS.items()
            }
        return {
            "level1_points": row.level1_points,
            "level2_points": row.level2_points,
            "level3_points": row.level3_points,
        }

    @with_auto_commit
    async def update_points(
        self, level1_points: int, level2_points: int, level3_points: int
    ) -> dict[str, int]:
        """
        Create or update the settings row.

        Raises:
            ValueError: If any value is negative
        """
        values = (level1_points, level2_points, level3_points)
        if any(int(value) < 0 for value in values):
            raise ValueError("Referral points must not be negative")

        row = await self.settings_repo.upsert(*(int(value) for value in values))
        logger.info(
            "Referral settings updated",
            extra={
                "level1_points": row.level1_points,
                "level2_points": row.level2_points,
                "level3_points": row.level3_points,
            },
        )
        return {
            "level1_points": row.level1_points,
            "level2_points": row.level2_points,
            "level3_points": row.level3_points,
        }
