"""
Transaction repository.

Data access layer for the ledger.
"""

from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from earnhub.models.transaction import Transaction
from earnhub.repositories.base import BaseRepository


class TransactionRepository(BaseRepository[Transaction]):
    """Ledger repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize transaction repository."""
        super().__init__(Transaction, session)

    async def exists_in_period(
        self,
        user_id: int,
        offer_id: int,
        type: str,
        period_start: datetime,
        period_end: datetime,
    ) -> bool:
        """
        Check for an entry of this type created inside a period.

        Args:
            user_id: User ID
            offer_id: Offer ID
            type: TransactionType value
            period_start: Inclusive window start
            period_end: Exclusive window end

        Returns:
            True if the period already has an entry
        """
        stmt = (
            select(Transaction.id)
            .where(
                Transaction.user_id == user_id,
                Transaction.offer_id == offer_id,
                Transaction.type == type,
                Transaction.created_at >= period_start.astimezone(UTC),
                Transaction.created_at < period_end.astimezone(UTC),
            )
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def get_by_user(
        self, user_id: int, type: str | None = None
    ) -> list[Transaction]:
        """Get a user's ledger entries, newest first."""
        filters = {"user_id": user_id}
        if type:
            filters["type"] = type
        return await self.find_by(
            order_by=Transaction.created_at.desc(), **filters
        )
