"""
Withdrawal request repository.

Data access layer for WithdrawalRequest model.
"""

from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from earnhub.models.enums import WithdrawalStatus
from earnhub.models.withdrawal_request import WithdrawalRequest
from earnhub.repositories.base import BaseRepository


class WithdrawalRequestRepository(BaseRepository[WithdrawalRequest]):
    """Withdrawal request repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize withdrawal request repository."""
        super().__init__(WithdrawalRequest, session)

    async def get_user_history(
        self, user_id: int, since: datetime | None = None
    ) -> list[WithdrawalRequest]:
        """
        Get a user's withdrawal requests.

        Args:
            user_id: User ID
            since: Only requests created at or after this moment

        Returns:
            Requests ordered by creation time
        """
        stmt = select(WithdrawalRequest).where(
            WithdrawalRequest.user_id == user_id
        )
        if since is not None:
            stmt = stmt.where(WithdrawalRequest.created_at >= since.astimezone(UTC))
        stmt = stmt.order_by(WithdrawalRequest.created_at)

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_pending_for_update(
        self, request_id: int
    ) -> WithdrawalRequest | None:
        """
        Lock a request if it is still pending.

        Args:
            request_id: Withdrawal request ID

        Returns:
            The locked request, or None if missing or already processed
        """
        stmt = (
            select(WithdrawalRequest)
            .where(
                WithdrawalRequest.id == request_id,
                WithdrawalRequest.status == WithdrawalStatus.PENDING.value,
            )
            .with_for_update()
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def count_paid(self, user_id: int) -> int:
        """Count a user's paid withdrawals."""
        return await self.count(
            user_id=user_id, status=WithdrawalStatus.PAID.value
        )
