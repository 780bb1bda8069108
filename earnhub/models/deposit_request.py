"""
DepositRequest model.

Manual deposit claims confirmed by an admin.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
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
from earnhub.models.enums import DepositStatus
from earnhub.models.types import MoneyType
from earnhub.utils.datetime_utils import utc_now


class DepositRequest(Base):
    """Deposit request awaiting admin approval."""

    __tablename__ = "deposit_requests"
    __table_args__ = (
        CheckConstraint("amount > 0", name="check_deposit_amount_positive"),
        Index("idx_deposit_requests_user_status", "user_id", "status"),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    amount: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    method: Mapped[str | None] = mapped_column(String(32), nullable=True)
    reference: Mapped[str | None] = mapped_column(String(255), nullable=True)
    proof_image_url: Mapped[str | None] = mapped_column(
        String(1024), nullable=True
    )
    status: Mapped[str] = mapped_column(
        String(20), default=DepositStatus.PENDING.value, nullable=False
    )
    admin_note: Mapped[str | None] = mapped_column(Text, nullable=True)
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )
    processed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
