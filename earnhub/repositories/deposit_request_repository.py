"""
Deposit request repository.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from earnhub.models.deposit_request import DepositRequest
from earnhub.models.enums import DepositStatus
from earnhub.repositories.base import BaseRepository


class DepositRequestRepository(BaseRepository[DepositRequest]):
    """Deposit request repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize deposit request repository."""
        super().__init__(DepositRequest, session)

    async def get_pending_for_update(
        self, request_id: int
    ) -> DepositRequest | None:
        """Lock a deposit request if it is still pending."""
        stmt = (
            select(DepositRequest)
            .where(
                DepositRequest.id == request_id,
                DepositRequest.status == DepositStatus.PENDING.value,
            )
            .with_for_update()
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def count_approved(self, user_id: int) -> int:
        """Count a user's approved deposits."""
        return await self.count(
            user_id=user_id, status=DepositStatus.APPROVED.value
        )
