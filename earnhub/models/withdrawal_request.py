"""
WithdrawalRequest model.

A user's request to withdraw from one balance bucket. Contact data and
active offer titles are copied at submission time.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    JSON,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from earnhub.models.base import Base
from earnhub.models.enums import WithdrawalStatus
from earnhub.models.types import MoneyType
from earnhub.utils.datetime_utils import utc_now


class WithdrawalRequest(Base):
    """
    Withdrawal request entity.

    Attributes:
        id: Primary key
        user_id: Requesting user
        type: Balance bucket (balance, bonuses, team_earnings)
        amount: Requested amount
        method: Payout method (bank, wallet, crypto)
        account_details: Where to pay
        status: pending, approved (reserved), rejected, paid
        admin_note: Note left when paying
        rejection_reason: Reason left when rejecting
        proof_image_url: Payment proof stored in object storage
        user_name: Display name at submission
        user_email: Email at submission
        user_phone: Phone at submission
        active_offer_titles: Titles of offers active at submission
        created_at: Submission time
        updated_at: Last change
        paid_at: When the request was paid
    """

    __tablename__ = "withdrawal_requests"
    __table_args__ = (
        CheckConstraint(
            "amount > 0", name="check_withdrawal_amount_positive"
        ),
        Index("idx_withdrawal_requests_user_created", "user_id", "created_at"),
        Index("idx_withdrawal_requests_status", "status"),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    amount: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    method: Mapped[str] = mapped_column(String(32), nullable=False)
    account_details: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default=WithdrawalStatus.PENDING.value, nullable=False
    )
    admin_note: Mapped[str | None] = mapped_column(Text, nullable=True)
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    proof_image_url: Mapped[str | None] = mapped_column(
        String(1024), nullable=True
    )

    # Snapshot
    user_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    user_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    user_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    active_offer_titles: Mapped[list[str]] = mapped_column(
        JSON, default=list, nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
        nullable=False,
    )
    paid_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    @property
    def is_pending(self) -> bool:
        return self.status == WithdrawalStatus.PENDING.value
