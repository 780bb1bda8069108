"""
Level service.

Keeps a user's level in sync with their referral points.
"""

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from earnhub.config.constants import LEVEL_AUTO_UPDATE_KEY
from earnhub.repositories.gamification_repository import LevelRepository
from earnhub.repositories.system_setting_repository import SystemSettingRepository
from earnhub.repositories.user_repository import UserRepository


class LevelService:
    """Assigns referral-point levels."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.user_repo = UserRepository(session)
        self.level_repo = LevelRepository(session)
        self.settings_repo = SystemSettingRepository(session)

    async def is_auto_update_enabled(self) -> bool:
        """Level auto update is on unless explicitly disabled."""
        value = await self.settings_repo.get_value(LEVEL_AUTO_UPDATE_KEY, True)
        return value is not False

    async def update_user_level(self, user_id: int) -> str | None:
        """
        Set the user's level to the highest one reached.

        Args:
            user_id: User ID

        Returns:
            Current level name (None if no level reached, the user is
            missing or the update failed)
        """
        try:
            if not await self.is_auto_update_enabled():
                return None

            user = await self.user_repo.get_by_id(user_id)
            if user is None:
                return None

            level = await self.level_repo.get_highest_reached(
                user.total_referral_points
            )
            if level is None or level.name == user.level:
                return user.level

            previous = user.level
            user.level = level.name
            await self.session.commit()

            logger.info(
                "User level updated",
                extra={
                    "user_id": user_id,
                    "previous_level": previous,
                    "level": level.name,
                    "points": user.total_referral_points,
                },
            )
            return level.name

        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.exception(
                "Failed to update user level",
                extra={"user_id": user_id, "error": str(e)},
            )
            return None
