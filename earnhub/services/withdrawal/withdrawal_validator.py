"""
Withdrawal validation core module.

Runs input checks, the package check, the balance check and the
eligibility evaluator in order and reports the first failure.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from earnhub.config.settings import settings
from earnhub.models.user import User
from earnhub.repositories.withdrawal_request_repository import (
    WithdrawalRequestRepository,
)
from earnhub.services.withdrawal.eligibility import can_withdraw
from earnhub.services.withdrawal.withdrawal_basic_checks import BasicChecksMixin
from earnhub.services.withdrawal.withdrawal_settings_service import (
    WithdrawalSettingsService,
)
from earnhub.utils.datetime_utils import day_window


@dataclass
class ValidationResult:
    """Result of withdrawal validation."""

    is_valid: bool
    error_message: str | None = None
    error_code: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def success(cls, **details: Any) -> "ValidationResult":
        """Create a successful validation result."""
        return cls(is_valid=True, details=details)

    @classmethod
    def error(
        cls, message: str, code: str | None = None, **details: Any
    ) -> "ValidationResult":
        """Create an error validation result."""
        return cls(
            is_valid=False,
            error_message=message,
            error_code=code,
            details=details,
        )


class WithdrawalValidator(BasicChecksMixin):
    """Validator for withdrawal requests."""

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize withdrawal validator.

        Args:
            session: Database session
        """
        self.session = session
        self.withdrawal_repo = WithdrawalRequestRepository(session)
        self.settings_service = WithdrawalSettingsService(session)

    async def validate_withdrawal_request(
        self,
        user: User,
        amount: Decimal,
        withdrawal_type: str,
        method: str,
        account_details: str,
        now: datetime,
    ) -> ValidationResult:
        """
        Run all validations and return result.

        Args:
            user: Requesting user
            amount: Withdrawal amount
            withdrawal_type: Balance bucket
            method: Payout method
            account_details: Payout destination
            now: Submission time

        Returns:
            ValidationResult with is_valid and optional
            error_message/error_code/details
        """
        # 1. Input checks
        is_valid, error_msg = self.check_amount(amount)
        if not is_valid:
            return ValidationResult.error(error_msg, "INVALID_AMOUNT")
        amount = Decimal(str(amount))

        is_valid, error_msg = self.check_type(withdrawal_type)
        if not is_valid:
            return ValidationResult.error(error_msg, "INVALID_TYPE")

        is_valid, error_msg = self.check_method(method)
        if not is_valid:
            return ValidationResult.error(error_msg, "INVALID_METHOD")

        is_valid, error_msg = self.check_account_details(account_details)
        if not is_valid:
            return ValidationResult.error(error_msg, "MISSING_ACCOUNT_DETAILS")

        # 2. Package against the configured limits
        withdrawal_settings = await self.settings_service.load()
        is_valid, error_msg = self.check_package(
            user, withdrawal_settings.package_limits
        )
        if not is_valid:
            return ValidationResult.error(
                error_msg, "UNKNOWN_PACKAGE", package=user.package
            )

        # 3. Balance of the chosen bucket
        is_valid, error_msg = self.check_balance(user, withdrawal_type, amount)
        if not is_valid:
            return ValidationResult.error(
                error_msg,
                "INSUFFICIENT_BALANCE",
                available=getattr(user, withdrawal_type),
                amount=amount,
            )

        # 4. Time slots, ceiling and package limits
        day_start, _ = day_window(now, settings.tzinfo)
        history = await self.withdrawal_repo.get_user_history(
            user.id, since=day_start
        )

        eligibility = can_withdraw(
            amount=amount,
            package=user.package,
            now=now,
            history=history,
            settings=withdrawal_settings,
            tz=settings.tzinfo,
            hard_ceiling=settings.hard_withdrawal_ceiling,
        )
        if not eligibility.allowed:
            return ValidationResult.error(
                eligibility.reason,
                eligibility.error_code,
                **eligibility.details,
            )

        return ValidationResult.success(**eligibility.details)
