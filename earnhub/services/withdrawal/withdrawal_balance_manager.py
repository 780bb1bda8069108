"""
Withdrawal balance manager.

Deducts paid withdrawals from the user's balance buckets with a single
conditional UPDATE, so a concurrent credit or debit can never be lost
and a bucket never goes negative.
"""

from decimal import Decimal

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from earnhub.repositories.user_repository import UserRepository


class WithdrawalBalanceManager:
    """Manages balance operations for withdrawal requests."""

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize withdrawal balance manager.

        Args:
            session: Database session
        """
        self.session = session
        self.user_repo = UserRepository(session)

    async def deduct_balance(
        self,
        user_id: int,
        withdrawal_type: str,
        amount: Decimal,
        withdrawal_id: int,
    ) -> tuple[bool, str | None]:
        """
        Deduct a paid withdrawal from its bucket.

        Does not commit; the caller owns the transaction.

        Args:
            user_id: User ID
            withdrawal_type: Bucket name (balance, bonuses, team_earnings)
            amount: Amount to deduct
            withdrawal_id: Withdrawal request ID for logging

        Returns:
            Tuple of (success, error_code) where error_code is
            USER_NOT_FOUND or INSUFFICIENT_FUNDS
        """
        deducted = await self.user_repo.debit_if_sufficient(
            user_id, amount, field=withdrawal_type
        )
        if deducted:
            logger.info(
                "Balance deducted for withdrawal",
                extra={
                    "user_id": user_id,
                    "withdrawal_id": withdrawal_id,
                    "type": withdrawal_type,
                    "amount": str(amount),
                },
            )
            return True, None

        available = await self.user_repo.get_balance(user_id, withdrawal_type)
        if available is None:
            logger.error(
                "User not found for balance deduction",
                extra={"user_id": user_id, "withdrawal_id": withdrawal_id},
            )
            return False, "USER_NOT_FOUND"

        logger.warning(
            "Insufficient balance for deduction",
            extra={
                "user_id": user_id,
                "withdrawal_id": withdrawal_id,
                "type": withdrawal_type,
                "available": str(available),
                "requested": str(amount),
            },
        )
        return False, "INSUFFICIENT_FUNDS"
