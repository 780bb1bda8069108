"""
Withdrawal lifecycle handling module.

Admin disposition of pending requests. Allowed transitions are
pending -> paid and pending -> rejected; nothing leaves paid or rejected.
"""

from dataclasses import dataclass

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from earnhub.models.enums import TransactionType, WithdrawalStatus
from earnhub.models.withdrawal_request import WithdrawalRequest
from earnhub.repositories.transaction_repository import TransactionRepository
from earnhub.repositories.withdrawal_request_repository import (
    WithdrawalRequestRepository,
)
from earnhub.services.gamification.badge_service import BadgeService
from earnhub.services.withdrawal.withdrawal_balance_manager import (
    WithdrawalBalanceManager,
)
from earnhub.utils.datetime_utils import utc_now

ERROR_MESSAGES = {
    "NOT_FOUND": "Withdrawal request not found",
    "ALREADY_PROCESSED": "Withdrawal request already processed",
    "USER_NOT_FOUND": "User not found",
    "INSUFFICIENT_FUNDS": "User balance is insufficient for this withdrawal",
    "REASON_REQUIRED": "Rejection reason is required",
    "DATABASE_ERROR": "Database error, please try again later",
}


@dataclass
class LifecycleResult:
    """Result of an admin action on a withdrawal request."""

    success: bool
    withdrawal: WithdrawalRequest | None = None
    error_message: str | None = None
    error_code: str | None = None

    @classmethod
    def error(cls, code: str) -> "LifecycleResult":
        return cls(success=False, error_message=ERROR_MESSAGES[code], error_code=code)


class WithdrawalLifecycleHandler:
    """Handles withdrawal lifecycle operations."""

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize withdrawal lifecycle handler.

        Args:
            session: Database session
        """
        self.session = session
        self.withdrawal_repo = WithdrawalRequestRepository(session)
        self.transaction_repo = TransactionRepository(session)
        self.balance_manager = WithdrawalBalanceManager(session)

    async def _pending_or_error(
        self, withdrawal_id: int
    ) -> tuple[WithdrawalRequest | None, LifecycleResult | None]:
        withdrawal = await self.withdrawal_repo.get_pending_for_update(withdrawal_id)
        if withdrawal is not None:
            return withdrawal, None

        if await self.withdrawal_repo.exists(id=withdrawal_id):
            return None, LifecycleResult.error("ALREADY_PROCESSED")
        return None, LifecycleResult.error("NOT_FOUND")

    async def pay_withdrawal(
        self,
        withdrawal_id: int,
        admin_note: str | None = None,
        proof_image_url: str | None = None,
        admin_id: int | None = None,
    ) -> LifecycleResult:
        """
        Mark a pending request as paid and deduct its amount.

        The status change and the deduction commit together. When the
        bucket cannot cover the amount, nothing changes and the request
        stays pending.

        Args:
            withdrawal_id: Withdrawal request ID
            admin_note: Note shown to the user
            proof_image_url: Payment proof in object storage
            admin_id: Admin ID (for logging)

        Returns:
            LifecycleResult
        """
        try:
            withdrawal, failure = await self._pending_or_error(withdrawal_id)
            if failure is not None:
                return failure

            deducted, error_code = await self.balance_manager.deduct_balance(
                withdrawal.user_id,
                withdrawal.type,
                withdrawal.amount,
                withdrawal.id,
            )
            if not deducted:
                await self.session.rollback()
                return LifecycleResult.error(error_code)

            now = utc_now()
            withdrawal.status = WithdrawalStatus.PAID.value
            withdrawal.admin_note = admin_note
            if proof_image_url:
                withdrawal.proof_image_url = proof_image_url
            withdrawal.paid_at = now

            await self.transaction_repo.create(
                user_id=withdrawal.user_id,
                type=TransactionType.WITHDRAWAL.value,
                amount=withdrawal.amount,
                description=f"Withdrawal #{withdrawal.id} paid from {withdrawal.type}",
                created_at=now,
            )

            await self.session.commit()

            logger.info(
                "Withdrawal paid",
                extra={
                    "withdrawal_id": withdrawal.id,
                    "user_id": withdrawal.user_id,
                    "amount": str(withdrawal.amount),
                    "type": withdrawal.type,
                    "admin_id": admin_id,
                },
            )

        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.exception(
                "Failed to pay withdrawal",
                extra={
                    "withdrawal_id": withdrawal_id,
                    "admin_id": admin_id,
                    "error": str(e),
                },
            )
            return LifecycleResult.error("DATABASE_ERROR")

        await BadgeService(self.session).check_and_award_badges(withdrawal.user_id)
        return LifecycleResult(success=True, withdrawal=withdrawal)

    async def reject_withdrawal(
        self,
        withdrawal_id: int,
        rejection_reason: str,
        admin_id: int | None = None,
    ) -> LifecycleResult:
        """
        Reject a pending request. Balances are not touched.

        Args:
            withdrawal_id: Withdrawal request ID
            rejection_reason: Reason shown to the user
            admin_id: Admin ID (for logging)

        Returns:
            LifecycleResult
        """
        if not rejection_reason or not rejection_reason.strip():
            return LifecycleResult.error("REASON_REQUIRED")

        try:
            withdrawal, failure = await self._pending_or_error(withdrawal_id)
            if failure is not None:
                return failure

            withdrawal.status = WithdrawalStatus.REJECTED.value
            withdrawal.rejection_reason = rejection_reason.strip()
            await self.session.commit()

            logger.info(
                "Withdrawal rejected",
                extra={
                    "withdrawal_id": withdrawal.id,
                    "user_id": withdrawal.user_id,
                    "reason": withdrawal.rejection_reason,
                    "admin_id": admin_id,
                },
            )
            return LifecycleResult(success=True, withdrawal=withdrawal)

        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.exception(
                "Failed to reject withdrawal",
                extra={
                    "withdrawal_id": withdrawal_id,
                    "admin_id": admin_id,
                    "error": str(e),
                },
            )
            return LifecycleResult.error("DATABASE_ERROR")
