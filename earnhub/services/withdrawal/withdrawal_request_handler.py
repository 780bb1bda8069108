"""
Withdrawal request handling module.

Handles submission of withdrawal requests: validation, eligibility and
creation of the pending row with a snapshot of the user's contact data
and active offers.
"""

from datetime import UTC, datetime
from decimal import Decimal

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from earnhub.models.enums import WithdrawalStatus
from earnhub.models.withdrawal_request import WithdrawalRequest
from earnhub.repositories.offer_repository import UserOfferRepository
from earnhub.repositories.user_repository import UserRepository
from earnhub.repositories.withdrawal_request_repository import (
    WithdrawalRequestRepository,
)
from earnhub.services.withdrawal.withdrawal_validator import (
    ValidationResult,
    WithdrawalValidator,
)
from earnhub.utils.datetime_utils import ensure_aware, utc_now
from earnhub.utils.exceptions import SettingsValidationError


class WithdrawalRequestHandler:
    """Handles withdrawal request creation and validation."""

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize withdrawal request handler.

        Args:
            session: Database session
        """
        self.session = session
        self.user_repo = UserRepository(session)
        self.user_offer_repo = UserOfferRepository(session)
        self.withdrawal_repo = WithdrawalRequestRepository(session)
        self.validator = WithdrawalValidator(session)

    async def submit_withdrawal(
        self,
        user_id: int,
        amount: Decimal,
        withdrawal_type: str,
        method: str,
        account_details: str,
        now: datetime | None = None,
    ) -> tuple[WithdrawalRequest | None, ValidationResult]:
        """
        Validate and create a pending withdrawal request.

        The balance is not touched here; it is deducted when an admin
        pays the request.

        Args:
            user_id: Authenticated user ID
            amount: Requested amount
            withdrawal_type: Balance bucket
            method: Payout method
            account_details: Payout destination
            now: Submission time (defaults to current UTC time)

        Returns:
            Tuple of (created request or None, validation result)
        """
        now = ensure_aware(now) if now else utc_now()

        try:
            user = await self.user_repo.get_by_id(user_id)
            if user is None:
                return None, ValidationResult.error("User not found", "USER_NOT_FOUND")

            try:
                validation = await self.validator.validate_withdrawal_request(
                    user=user,
                    amount=amount,
                    withdrawal_type=withdrawal_type,
                    method=method,
                    account_details=account_details,
                    now=now,
                )
            except SettingsValidationError as e:
                logger.error(
                    "Withdrawal settings are invalid",
                    extra={"key": e.key, "error": str(e)},
                )
                return None, ValidationResult.error(
                    "Withdrawals are temporarily unavailable", "SETTINGS_INVALID"
                )

            if not validation.is_valid:
                logger.info(
                    "Withdrawal request rejected by validation",
                    extra={
                        "user_id": user_id,
                        "amount": str(amount),
                        "error_code": validation.error_code,
                    },
                )
                return None, validation

            offer_titles = await self.user_offer_repo.get_active_offer_titles(user_id)

            withdrawal = await self.withdrawal_repo.create(
                user_id=user_id,
                type=withdrawal_type,
                amount=Decimal(str(amount)),
                method=method,
                account_details=account_details.strip(),
                status=WithdrawalStatus.PENDING.value,
                user_name=user.display_name,
                user_email=user.email,
                user_phone=user.phone,
                active_offer_titles=offer_titles,
                created_at=now.astimezone(UTC),
            )
            await self.session.commit()

            logger.info(
                "Withdrawal request created",
                extra={
                    "withdrawal_id": withdrawal.id,
                    "user_id": user_id,
                    "amount": str(withdrawal.amount),
                    "type": withdrawal_type,
                    "method": method,
                },
            )
            return withdrawal, validation

        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.exception(
                "Failed to create withdrawal request",
                extra={"user_id": user_id, "error": str(e)},
            )
            return None, ValidationResult.error(
                "Database error, please try again later", "DATABASE_ERROR"
            )
