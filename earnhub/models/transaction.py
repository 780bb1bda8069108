"""
Transaction model.

Append-only ledger. Profit entries carry the start of the period they
were credited for, which makes a second credit in the same period
impossible at the database level.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from earnhub.models.base import Base
from earnhub.models.types import MoneyType
from earnhub.utils.datetime_utils import utc_now


class Transaction(Base):
    """
    Ledger entry.

    Attributes:
        id: Primary key
        user_id: Credited or debited user
        offer_id: Source offer for profit entries
        type: TransactionType value
        amount: Amount credited (positive) or debited
        description: Human readable note
        period_start: Start of the crediting period (profit entries only)
        created_at: Entry time
    """

    __tablename__ = "transactions"
    __table_args__ = (
        UniqueConstraint(
            "user_id",
            "offer_id",
            "type",
            "period_start",
            name="uq_transactions_profit_period",
        ),
        Index("idx_transactions_user_type", "user_id", "type"),
        Index("idx_transactions_created_at", "created_at"),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    offer_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("offers.id", ondelete="SET NULL"),
        nullable=True,
    )
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    amount: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    period_start: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )
