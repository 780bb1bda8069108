"""
Badge service.

Awards milestone badges. Each active badge is awarded at most once per
user, as soon as the measured value reaches its requirement.
"""

from decimal import Decimal

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from earnhub.models.enums import BadgeType, TransactionType
from earnhub.models.gamification import Badge
from earnhub.models.user import User
from earnhub.repositories.deposit_request_repository import DepositRequestRepository
from earnhub.repositories.gamification_repository import (
    BadgeRepository,
    UserBadgeRepository,
)
from earnhub.repositories.offer_repository import UserOfferRepository
from earnhub.repositories.transaction_repository import TransactionRepository
from earnhub.repositories.user_repository import UserRepository
from earnhub.repositories.withdrawal_request_repository import (
    WithdrawalRequestRepository,
)

# Badge types awarded on the first occurrence, regardless of requirement
FIRST_TIME_TYPES = {
    BadgeType.FIRST_DEPOSIT.value: BadgeType.DEPOSIT.value,
    BadgeType.FIRST_WITHDRAWAL.value: BadgeType.WITHDRAWAL.value,
    BadgeType.FIRST_OFFER.value: BadgeType.OFFERS_JOINED.value,
}


class BadgeService:
    """Checks and awards badges."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.user_repo = UserRepository(session)
        self.badge_repo = BadgeRepository(session)
        self.user_badge_repo = UserBadgeRepository(session)
        self.deposit_repo = DepositRequestRepository(session)
        self.withdrawal_repo = WithdrawalRequestRepository(session)
        self.user_offer_repo = UserOfferRepository(session)
        self.transaction_repo = TransactionRepository(session)

    async def collect_metrics(self, user: User) -> dict[str, Decimal]:
        """
        Measure every badge dimension for a user.

        Returns:
            Mapping badge type -> measured value
        """
        return {
            BadgeType.REFERRAL.value: Decimal(user.referral_count),
            BadgeType.DEPOSIT.value: Decimal(
                await self.deposit_repo.count_approved(user.id)
            ),
            BadgeType.WITHDRAWAL.value: Decimal(
                await self.withdrawal_repo.count_paid(user.id)
            ),
            BadgeType.PROFILE.value: Decimal(1 if user.is_verified else 0),
            BadgeType.BALANCE.value: user.total_wallet,
            BadgeType.OFFERS_JOINED.value: Decimal(
                await self.user_offer_repo.count(user_id=user.id)
            ),
            BadgeType.DAILY_PROFITS.value: Decimal(
                await self.transaction_repo.count(
                    user_id=user.id, type=TransactionType.DAILY_PROFIT.value
                )
            ),
        }

    @staticmethod
    def is_earned(badge: Badge, metrics: dict[str, Decimal]) -> bool:
        """Check a badge requirement against measured values."""
        if badge.type == BadgeType.PROFILE.value:
            return metrics[BadgeType.PROFILE.value] >= 1

        if badge.type in FIRST_TIME_TYPES:
            return metrics[FIRST_TIME_TYPES[badge.type]] >= 1

        value = metrics.get(badge.type)
        if value is None:
            logger.warning(
                "Unknown badge type",
                extra={"badge_id": badge.id, "type": badge.type},
            )
            return False
        return value >= badge.requirement

    async def check_and_award_badges(self, user_id: int) -> list[Badge]:
        """
        Award every earned badge the user does not hold yet.

        Failures are logged and rolled back; they never propagate, so a
        badge problem cannot break the operation that triggered it.

        Args:
            user_id: User ID

        Returns:
            Newly awarded badges
        """
        try:
            user = await self.user_repo.get_by_id(user_id)
            if user is None:
                return []

            badges = await self.badge_repo.get_active()
            if not badges:
                return []

            held = await self.user_badge_repo.get_badge_ids(user_id)
            metrics = await self.collect_metrics(user)

            awarded = []
            for badge in badges:
                if badge.id in held or not self.is_earned(badge, metrics):
                    continue
                await self.user_badge_repo.create(user_id=user_id, badge_id=badge.id)
                awarded.append(badge)

            if awarded:
                await self.session.commit()
                logger.info(
                    "Badges awarded",
                    extra={
                        "user_id": user_id,
                        "badges": [badge.name for badge in awarded],
                    },
                )
            return awarded

        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.exception(
                "Failed to award badges",
                extra={"user_id": user_id, "error": str(e)},
            )
            return []
