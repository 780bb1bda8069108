"""
Deposit request service.

Admin approval credits the deposit to the user's balance in the same
transaction as the status change; rejection only records the reason.
"""

from dataclasses import dataclass
from decimal import Decimal

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from earnhub.models.deposit_request import DepositRequest
from earnhub.models.enums import DepositStatus, TransactionType
from earnhub.repositories.deposit_request_repository import DepositRequestRepository
from earnhub.repositories.transaction_repository import TransactionRepository
from earnhub.repositories.user_repository import UserRepository
from earnhub.services.gamification.badge_service import BadgeService
from earnhub.utils.datetime_utils import utc_now


@dataclass
class DepositResult:
    """Result of a deposit request operation."""

    success: bool
    deposit: DepositRequest | None = None
    error_message: str | None = None
    error_code: str | None = None


class DepositRequestService:
    """Creates and processes deposit requests."""

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize deposit request service.

        Args:
            session: Database session
        """
        self.session = session
        self.deposit_repo = DepositRequestRepository(session)
        self.user_repo = UserRepository(session)
        self.transaction_repo = TransactionRepository(session)

    async def create_request(
        self,
        user_id: int,
        amount: Decimal,
        method: str | None = None,
        reference: str | None = None,
        proof_image_url: str | None = None,
    ) -> DepositResult:
        """
        Record a user's deposit claim for admin review.

        Returns:
            DepositResult with the pending request
        """
        amount = Decimal(str(amount))
        if amount <= 0:
            return DepositResult(
                success=False,
                error_message="Amount must be greater than zero",
                error_code="INVALID_AMOUNT",
            )

        try:
            if not await self.user_repo.exists(id=user_id):
                return DepositResult(
                    success=False, error_message="User not found", error_code="USER_NOT_FOUND"
                )

            deposit = await self.deposit_repo.create(
                user_id=user_id,
                amount=amount,
                method=method,
                reference=reference,
                proof_image_url=proof_image_url,
                status=DepositStatus.PENDING.value,
            )
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.exception(
                "Failed to create deposit request",
                extra={"user_id": user_id, "error": str(e)},
            )
            return DepositResult(
                success=False, error_message="Database error", error_code="DATABASE_ERROR"
            )

        logger.info(
            "Deposit request created",
            extra={"deposit_id": deposit.id, "user_id": user_id, "amount": str(amount)},
        )
        return DepositResult(success=True, deposit=deposit)

    async def _pending_or_error(
        self, deposit_id: int
    ) -> tuple[DepositRequest | None, DepositResult | None]:
        deposit = await self.deposit_repo.get_pending_for_update(deposit_id)
        if deposit is not None:
            return deposit, None
        if await self.deposit_repo.exists(id=deposit_id):
            return None, DepositResult(
                success=False,
                error_message="Deposit request already processed",
                error_code="ALREADY_PROCESSED",
            )
        return None, DepositResult(
            success=False,
            error_message="Deposit request not found",
            error_code="NOT_FOUND",
        )

    async def approve(
        self, deposit_id: int, admin_note: str | None = None
    ) -> DepositResult:
        """
        Approve a pending deposit and credit the user's balance.

        Args:
            deposit_id: Deposit request ID
            admin_note: Optional note

        Returns:
            DepositResult
        """
        try:
            deposit, failure = await self._pending_or_error(deposit_id)
            if failure is not None:
                return failure

            if not await self.user_repo.credit(deposit.user_id, deposit.amount):
                await self.session.rollback()
                return DepositResult(
                    success=False, error_message="User not found", error_code="USER_NOT_FOUND"
                )

            now = utc_now()
            deposit.status = DepositStatus.APPROVED.value
            deposit.admin_note = admin_note
            deposit.processed_at = now

            await self.transaction_repo.create(
                user_id=deposit.user_id,
                type=TransactionType.DEPOSIT.value,
                amount=deposit.amount,
                description=f"Deposit #{deposit.id} approved",
                created_at=now,
            )
            await self.session.commit()

        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.exception(
                "Failed to approve deposit",
                extra={"deposit_id": deposit_id, "error": str(e)},
            )
            return DepositResult(
                success=False, error_message="Database error", error_code="DATABASE_ERROR"
            )

        logger.info(
            "Deposit approved",
            extra={
                "deposit_id": deposit.id,
                "user_id": deposit.user_id,
                "amount": str(deposit.amount),
            },
        )
        await BadgeService(self.session).check_and_award_badges(deposit.user_id)
        return DepositResult(success=True, deposit=deposit)

    async def reject(self, deposit_id: int, rejection_reason: str) -> DepositResult:
        """
        Reject a pending deposit.

        Args:
            deposit_id: Deposit request ID
            rejection_reason: Reason shown to the user

        Returns:
            DepositResult
        """
        if not rejection_reason or not rejection_reason.strip():
            return DepositResult(
                success=False,
                error_message="Rejection reason is required",
                error_code="REASON_REQUIRED",
            )

        try:
            deposit, failure = await self._pending_or_error(deposit_id)
            if failure is not None:
                return failure

            deposit.status = DepositStatus.REJECTED.value
            deposit.rejection_reason = rejection_reason.strip()
            deposit.processed_at = utc_now()
            await self.session.commit()

        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.exception(
                "Failed to reject deposit",
                extra={"deposit_id": deposit_id, "error": str(e)},
            )
            return DepositResult(
                success=False, error_message="Database error", error_code="DATABASE_ERROR"
            )

        logger.info(
            "Deposit rejected",
            extra={"deposit_id": deposit.id, "reason": deposit.rejection_reason},
        )
        return DepositResult(success=True, deposit=deposit)
