"""
Periodic profit crediting.

Credits daily or monthly offer profit to every active subscription,
at most once per (user, offer, type) and period. The guard is a ledger
lookup inside the period window, backed by a unique constraint on
(user_id, offer_id, type, period_start) that catches concurrent runs.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal

from loguru import logger
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from earnhub.config.constants import ZERO
from earnhub.config.settings import settings
from earnhub.models.enums import ProfitMode
from earnhub.repositories.offer_repository import OfferRepository, UserOfferRepository
from earnhub.repositories.transaction_repository import TransactionRepository
from earnhub.repositories.user_repository import UserRepository
from earnhub.utils.datetime_utils import day_window, ensure_aware, month_window, utc_now
from earnhub.utils.exceptions import ProfitJobFetchError

DESCRIPTIONS = {
    ProfitMode.DAILY: "Daily profit from offer",
    ProfitMode.MONTHLY: "Monthly profit from offer",
}


@dataclass
class ProfitRunResult:
    """Summary of one crediting run."""

    mode: str
    period_start: datetime
    period_end: datetime
    credited: int = 0
    skipped_existing: int = 0
    skipped_no_profit: int = 0
    failed: int = 0
    total_amount: Decimal = ZERO
    errors: list[str] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            "success": True,
            "mode": self.mode,
            "period_start": self.period_start.isoformat(),
            "credited": self.credited,
            "skipped_existing": self.skipped_existing,
            "skipped_no_profit": self.skipped_no_profit,
            "failed": self.failed,
            "total_amount": str(self.total_amount),
            "errors": list(self.errors),
        }


def period_window(
    mode: ProfitMode, now: datetime, tz=None
) -> tuple[datetime, datetime]:
    """
    Get the crediting period containing ``now``.

    Daily: [today 00:00, tomorrow 00:00); monthly: [first of month,
    first of next month), both in local server time.
    """
    tz = tz or settings.tzinfo
    if mode is ProfitMode.DAILY:
        return day_window(now, tz)
    return month_window(now, tz)


def offer_profit(offer, mode: ProfitMode) -> Decimal | None:
    """Profit the offer pays in this mode, None when it pays nothing."""
    if offer is None:
        return None
    value = offer.daily_profit if mode is ProfitMode.DAILY else offer.monthly_profit
    if value is None or value <= 0:
        return None
    return Decimal(value)


class ProfitCreditingService:
    """Credits offer profit to active subscribers."""

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize profit crediting service.

        Args:
            session: Database session
        """
        self.session = session
        self.user_repo = UserRepository(session)
        self.offer_repo = OfferRepository(session)
        self.user_offer_repo = UserOfferRepository(session)
        self.transaction_repo = TransactionRepository(session)

    async def add_profits(
        self, mode: ProfitMode | str, now: datetime | None = None
    ) -> ProfitRunResult:
        """
        Credit one period of profit to every active subscription.

        A failing subscription is logged and counted; the run continues
        with the rest.

        Args:
            mode: daily or monthly
            now: Reference moment (defaults to current UTC time)

        Returns:
            ProfitRunResult

        Raises:
            ProfitJobFetchError: If active subscriptions cannot be loaded
        """
        mode = ProfitMode(mode)
        now = ensure_aware(now) if now else utc_now()
        period_start, period_end = period_window(mode, now)
        transaction_type = mode.transaction_type.value

        result = ProfitRunResult(
            mode=mode.value, period_start=period_start, period_end=period_end
        )

        try:
            user_offers = await self.user_offer_repo.get_active()
            # Plain values only: a rollback later expires loaded rows
            pairs = [(uo.id, uo.user_id, uo.offer_id) for uo in user_offers]
            profits = await self._load_profits({offer_id for _, _, offer_id in pairs}, mode)
        except SQLAlchemyError as e:
            logger.exception(
                "Failed to load active offer subscriptions",
                extra={"mode": mode.value, "error": str(e)},
            )
            raise ProfitJobFetchError(f"Cannot load active user offers: {e}") from e

        logger.info(
            "Profit crediting started",
            extra={
                "mode": mode.value,
                "subscriptions": len(pairs),
                "period_start": period_start.isoformat(),
            },
        )

        for user_offer_id, user_id, offer_id in pairs:
            amount = profits.get(offer_id)
            if amount is None:
                result.skipped_no_profit += 1
                continue

            try:
                credited = await self._credit_one(
                    user_id, offer_id, amount, mode, transaction_type,
                    period_start, period_end, now,
                )
            except IntegrityError:
                # Another run inserted this period's entry first
                await self.session.rollback()
                result.skipped_existing += 1
                continue
            except SQLAlchemyError as e:
                await self.session.rollback()
                result.failed += 1
                result.errors.append(f"user_offer {user_offer_id}: {e}")
                logger.exception(
                    "Failed to credit profit",
                    extra={
                        "user_offer_id": user_offer_id,
                        "user_id": user_id,
                        "offer_id": offer_id,
                        "mode": mode.value,
                        "error": str(e),
                    },
                )
                continue

            if credited:
                result.credited += 1
                result.total_amount += amount
            elif credited is None:
                result.failed += 1
                result.errors.append(f"user_offer {user_offer_id}: user {user_id} not found")
            else:
                result.skipped_existing += 1

        logger.info(
            "Profit crediting finished",
            extra={
                "mode": mode.value,
                "credited": result.credited,
                "skipped_existing": result.skipped_existing,
                "skipped_no_profit": result.skipped_no_profit,
                "failed": result.failed,
                "total_amount": str(result.total_amount),
            },
        )
        return result

    async def _load_profits(
        self, offer_ids: set[int], mode: ProfitMode
    ) -> dict[int, Decimal | None]:
        profits = {}
        for offer_id in offer_ids:
            offer = await self.offer_repo.get_by_id(offer_id)
            profits[offer_id] = offer_profit(offer, mode)
        return profits

    async def _credit_one(
        self,
        user_id: int,
        offer_id: int,
        amount: Decimal,
        mode: ProfitMode,
        transaction_type: str,
        period_start: datetime,
        period_end: datetime,
        now: datetime,
    ) -> bool | None:
        """
        Credit a single subscription for the period.

        Returns:
            True if credited, False if already credited this period,
            None if the user no longer exists
        """
        if await self.transaction_repo.exists_in_period(
            user_id, offer_id, transaction_type, period_start, period_end
        ):
            return False

        if not await self.user_repo.credit(user_id, amount, field="balance"):
            await self.session.rollback()
            logger.warning(
                "User not found for profit credit",
                extra={"user_id": user_id, "offer_id": offer_id},
            )
            return None

        await self.transaction_repo.create(
            user_id=user_id,
            offer_id=offer_id,
            type=transaction_type,
            amount=amount,
            description=DESCRIPTIONS[mode],
            period_start=period_start.astimezone(UTC),
            created_at=now.astimezone(UTC),
        )
        await self.session.commit()
        return True
