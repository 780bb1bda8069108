"""
Referral cascade processor.

Runs once when a new user finishes registration with a referral code:
walks up to three referrer levels, adds points to each referrer and
records one referral edge per level.

Levels are committed one at a time. A failure at a later level is
reported in the result but never undoes levels already committed.
"""

from dataclasses import dataclass, field

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from earnhub.repositories.referral_repository import (
    ReferralRepository,
    ReferralSettingsRepository,
)
from earnhub.repositories.user_repository import UserRepository
from earnhub.services.gamification.badge_service import BadgeService
from earnhub.services.gamification.level_service import LevelService
from earnhub.services.referral.config import REFERRAL_LEVELS


@dataclass
class LevelAward:
    """Points awarded to one referrer."""

    level: int
    referrer_id: int
    points: int


@dataclass
class CascadeResult:
    """Result of a referral cascade run."""

    success: bool
    awards: list[LevelAward] = field(default_factory=list)
    error_message: str | None = None
    error_code: str | None = None
    level_errors: dict[int, str] = field(default_factory=dict)
    referred_by_error: str | None = None

    @property
    def total_points(self) -> int:
        return sum(award.points for award in self.awards)


class ReferralCascadeProcessor:
    """Awards referral points up the referrer chain."""

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize referral cascade processor.

        Args:
            session: Async database session
        """
        self.session = session
        self.user_repo = UserRepository(session)
        self.referral_repo = ReferralRepository(session)
        self.settings_repo = ReferralSettingsRepository(session)
        self.badge_service = BadgeService(session)
        self.level_service = LevelService(session)

    async def process_referral(
        self, new_user_id: int, referral_code: str
    ) -> CascadeResult:
        """
        Award referral points for a newly registered user.

        Args:
            new_user_id: Newly registered user
            referral_code: Code entered at registration

        Returns:
            CascadeResult with the awarded levels and per-level errors
        """
        try:
            referrer = await self.user_repo.get_by_referral_code(referral_code)
            if referrer is None:
                logger.error(
                    "Referrer not found for referral code",
                    extra={"new_user_id": new_user_id, "referral_code": referral_code},
                )
                return CascadeResult(
                    success=False,
                    error_message="Referral code not found",
                    error_code="REFERRER_NOT_FOUND",
                )

            settings_row = await self.settings_repo.get_settings()
            if settings_row is None:
                logger.error(
                    "Referral settings are not configured",
                    extra={"new_user_id": new_user_id},
                )
                return CascadeResult(
                    success=False,
                    error_message="Referral settings are not configured",
                    error_code="SETTINGS_MISSING",
                )
        except SQLAlchemyError as e:
            logger.exception(
                "Failed to start referral cascade",
                extra={"new_user_id": new_user_id, "error": str(e)},
            )
            return CascadeResult(
                success=False,
                error_message="Database error",
                error_code="DATABASE_ERROR",
            )

        # Points are fixed at the start of the run
        points_by_level = {
            level: settings_row.points_for_level(level) for level in REFERRAL_LEVELS
        }

        result = CascadeResult(success=False)
        visited = {new_user_id}
        current_id = referrer.id
        next_code = referrer.referred_by

        for level in REFERRAL_LEVELS:
            if level > 1:
                if not next_code:
                    break
                try:
                    ancestor = await self.user_repo.get_by_referral_code(next_code)
                except SQLAlchemyError as e:
                    result.level_errors[level] = f"Lookup failed: {e}"
                    logger.error(
                        "Failed to resolve referrer",
                        extra={"level": level, "referral_code": next_code, "error": str(e)},
                    )
                    break
                if ancestor is None:
                    result.level_errors[level] = f"Referrer with code {next_code} not found"
                    logger.warning(
                        "Referrer not found in chain",
                        extra={"level": level, "referral_code": next_code},
                    )
                    break
                current_id = ancestor.id
                next_code = ancestor.referred_by

            if current_id in visited:
                result.level_errors[level] = "Referral chain loops back"
                logger.warning(
                    "Referral chain contains a cycle",
                    extra={"new_user_id": new_user_id, "level": level, "referrer_id": current_id},
                )
                break
            visited.add(current_id)

            award = await self._award_level(
                new_user_id=new_user_id,
                referrer_id=current_id,
                level=level,
                points=points_by_level[level],
                referral_code=referral_code,
                result=result,
            )
            if award is not None:
                result.awards.append(award)
                await self._refresh_gamification(current_id)

        await self._mark_referred(new_user_id, referral_code, result)

        # Later levels are best effort; only a level 1 failure fails the run
        result.success = 1 not in result.level_errors
        if not result.success:
            result.error_code = "LEVEL_ONE_FAILED"
            result.error_message = result.level_errors[1]

        logger.info(
            "Referral cascade processed",
            extra={
                "new_user_id": new_user_id,
                "referral_code": referral_code,
                "levels_awarded": [award.level for award in result.awards],
                "total_points": result.total_points,
                "level_errors": result.level_errors,
            },
        )
        return result

    async def _award_level(
        self,
        new_user_id: int,
        referrer_id: int,
        level: int,
        points: int,
        referral_code: str,
        result: CascadeResult,
    ) -> LevelAward | None:
        """Award one level and commit it on its own."""
        try:
            if await self.referral_repo.edge_exists(new_user_id, level):
                logger.warning(
                    "Referral edge already recorded, skipping level",
                    extra={"new_user_id": new_user_id, "level": level},
                )
                return None

            updated = await self.user_repo.increment_referral_stats(referrer_id, points)
            if not updated:
                result.level_errors[level] = "Referrer vanished before award"
                await self.session.rollback()
                return None

            await self.referral_repo.create(
                referrer_id=referrer_id,
                referred_id=new_user_id,
                level=level,
                points_earned=points,
                referral_code=referral_code,
            )
            await self.session.commit()

            logger.debug(
                "Referral level awarded",
                extra={
                    "new_user_id": new_user_id,
                    "referrer_id": referrer_id,
                    "level": level,
                    "points": points,
                },
            )
            return LevelAward(level=level, referrer_id=referrer_id, points=points)

        except SQLAlchemyError as e:
            await self.session.rollback()
            result.level_errors[level] = f"Award failed: {e}"
            logger.exception(
                "Failed to award referral level",
                extra={
                    "new_user_id": new_user_id,
                    "referrer_id": referrer_id,
                    "level": level,
                    "error": str(e),
                },
            )
            return None

    async def _refresh_gamification(self, referrer_id: int) -> None:
        # Both services swallow and log their own failures
        await self.badge_service.check_and_award_badges(referrer_id)
        await self.level_service.update_user_level(referrer_id)

    async def _mark_referred(
        self, new_user_id: int, referral_code: str, result: CascadeResult
    ) -> None:
        """Store the code on the new user regardless of how many levels resolved."""
        try:
            await self.user_repo.set_referred_by(new_user_id, referral_code)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            result.referred_by_error = str(e)
            logger.exception(
                "Failed to set referred_by",
                extra={"new_user_id": new_user_id, "error": str(e)},
            )
