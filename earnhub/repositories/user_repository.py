"""
User repository.

Data access layer for User model. Balance changes are single-statement
atomic updates, never read-modify-write.
"""

from decimal import Decimal

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from earnhub.models.user import User
from earnhub.repositories.base import BaseRepository

# Balance buckets that may be credited or debited
BALANCE_FIELDS = frozenset(
    {"balance", "personal_earnings", "team_earnings", "bonuses"}
)


class UserRepository(BaseRepository[User]):
    """User repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize user repository."""
        super().__init__(User, session)

    async def get_by_email(self, email: str) -> User | None:
        """Get user by email (case-insensitive)."""
        stmt = select(User).where(func.lower(User.email) == email.lower())
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_referral_code(self, referral_code: str) -> User | None:
        """
        Get user by referral code.

        Args:
            referral_code: Referral code

        Returns:
            User or None if not found
        """
        return await self.get_by(referral_code=referral_code)

    async def increment_referral_stats(
        self, user_id: int, points: int
    ) -> bool:
        """
        Add one referral and its points to a referrer.

        Args:
            user_id: Referrer ID
            points: Points to add

        Returns:
            True if the user row was updated
        """
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(
                referral_count=User.referral_count + 1,
                total_referral_points=User.total_referral_points + points,
            )
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0

    async def credit(
        self, user_id: int, amount: Decimal, field: str = "balance"
    ) -> bool:
        """
        Atomically increment a balance bucket.

        Args:
            user_id: User ID
            amount: Amount to add
            field: Balance column name

        Returns:
            True if the user row was updated
        """
        column = self._balance_column(field)
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values({field: column + amount})
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0

    async def debit_if_sufficient(
        self, user_id: int, amount: Decimal, field: str = "balance"
    ) -> bool:
        """
        Atomically decrement a balance bucket if it holds enough.

        Args:
            user_id: User ID
            amount: Amount to subtract
            field: Balance column name

        Returns:
            True if deducted, False if the user is missing or the bucket
            is insufficient
        """
        column = self._balance_column(field)
        stmt = (
            update(User)
            .where(User.id == user_id, column >= amount)
            .values({field: column - amount})
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0

    async def get_balance(self, user_id: int, field: str) -> Decimal | None:
        """Read a single balance bucket, None if the user is missing."""
        column = self._balance_column(field)
        result = await self.session.execute(
            select(column).where(User.id == user_id)
        )
        return result.scalar_one_or_none()

    async def set_referred_by(self, user_id: int, referral_code: str) -> bool:
        """Record the code a user registered with."""
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(referred_by=referral_code)
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0

    async def get_top_referrers(self, limit: int = 10) -> list[User]:
        """
        Get users with most referral points.

        Args:
            limit: Number of users

        Returns:
            Users ordered by total_referral_points descending
        """
        stmt = (
            select(User)
            .where(User.referral_count > 0)
            .order_by(User.total_referral_points.desc(), User.id)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    def _balance_column(field: str):
        if field not in BALANCE_FIELDS:
            raise ValueError(f"Unknown balance field: {field}")
        return getattr(User, field)
