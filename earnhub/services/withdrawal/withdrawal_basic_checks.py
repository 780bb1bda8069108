"""
Withdrawal basic checks module.

Input validation performed before any eligibility rule:
- Amount check
- Type and method check
- Account details check
- Package check against the configured limits
- Balance check against the chosen bucket
"""

from collections.abc import Iterable
from decimal import Decimal, InvalidOperation

from loguru import logger

from earnhub.models.enums import WithdrawalMethod, WithdrawalType
from earnhub.models.user import User


class BasicChecksMixin:
    """Mixin providing basic validation checks."""

    def check_amount(
        self, amount: Decimal | str | int | None
    ) -> tuple[bool, str | None]:
        """
        Check that the amount is a positive number.

        Returns:
            Tuple of (is_valid, error_message)
        """
        if amount is None or amount == "":
            return False, "Amount is required"
        try:
            value = Decimal(str(amount))
        except InvalidOperation:
            return False, f"Invalid amount: {amount}"
        if not value.is_finite() or value <= 0:
            return False, "Amount must be greater than zero"
        return True, None

    def check_type(self, withdrawal_type: str) -> tuple[bool, str | None]:
        """Check that the balance bucket is known."""
        if withdrawal_type not in {t.value for t in WithdrawalType}:
            return False, f"Unknown withdrawal type: {withdrawal_type}"
        return True, None

    def check_method(self, method: str) -> tuple[bool, str | None]:
        """Check that the payout method is known."""
        if method not in {m.value for m in WithdrawalMethod}:
            return False, f"Unknown withdrawal method: {method}"
        return True, None

    def check_account_details(
        self, account_details: str | None
    ) -> tuple[bool, str | None]:
        """Check that payout details were provided."""
        if not account_details or not account_details.strip():
            return False, "Account details are required"
        return True, None

    def check_package(
        self, user: User, configured_packages: Iterable[str]
    ) -> tuple[bool, str | None]:
        """
        Check that the user's package is one the limits know about.

        With no package limits configured every assigned package passes.
        """
        if not user.package:
            return False, "User has no package assigned"
        configured = set(configured_packages)
        if configured and user.package not in configured:
            logger.warning(
                "Withdrawal from unconfigured package refused",
                extra={"user_id": user.id, "package": user.package},
            )
            return False, f"Package '{user.package}' has no withdrawal limits"
        return True, None

    def check_balance(
        self, user: User, withdrawal_type: str, amount: Decimal
    ) -> tuple[bool, str | None]:
        """
        Check that the chosen bucket covers the amount.

        Args:
            user: Requesting user
            withdrawal_type: Balance bucket
            amount: Requested amount

        Returns:
            Tuple of (is_valid, error_message)
        """
        available = getattr(user, withdrawal_type)
        if amount > available:
            logger.warning(
                "Withdrawal exceeds available balance",
                extra={
                    "user_id": user.id,
                    "type": withdrawal_type,
                    "available": str(available),
                    "requested": str(amount),
                },
            )
            return False, (
                f"Insufficient {withdrawal_type.replace('_', ' ')}: "
                f"available {available}, requested {amount}"
            )
        return True, None
