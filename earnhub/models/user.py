"""
User model.

Represents a registered platform user. Credentials live with the
identity provider; this row holds profile, referral and balance data.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column

from earnhub.config.constants import DEFAULT_PACKAGE
from earnhub.models.base import Base
from earnhub.models.types import MoneyType
from earnhub.utils.datetime_utils import utc_now


class User(Base):
    """User model - registered platform users."""

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            'balance >= 0', name='check_user_balance_non_negative'
        ),
        CheckConstraint(
            'personal_earnings >= 0',
            name='check_user_personal_earnings_non_negative'
        ),
        CheckConstraint(
            'team_earnings >= 0',
            name='check_user_team_earnings_non_negative'
        ),
        CheckConstraint(
            'bonuses >= 0', name='check_user_bonuses_non_negative'
        ),
    )

    # Primary key
    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )

    # Profile
    display_name: Mapped[str] = mapped_column(
        String(255), nullable=False
    )
    email: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True, index=True
    )
    phone: Mapped[str | None] = mapped_column(
        String(50), nullable=True
    )

    # Referral
    referral_code: Mapped[str | None] = mapped_column(
        String(20), nullable=True, unique=True, index=True
    )
    referred_by: Mapped[str | None] = mapped_column(
        String(20),
        nullable=True,
        index=True,
        comment="Referral code of the direct referrer",
    )
    referral_count: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False
    )
    total_referral_points: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False, index=True
    )

    # Tier and gamification
    package: Mapped[str] = mapped_column(
        String(50), default=DEFAULT_PACKAGE, nullable=False
    )
    level: Mapped[str | None] = mapped_column(
        String(100), nullable=True
    )

    # Balances
    balance: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )
    personal_earnings: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )
    team_earnings: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )
    bonuses: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )

    # Status flags
    is_verified: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )
    is_admin: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
        nullable=False
    )

    @property
    def total_wallet(self) -> Decimal:
        """Balance used by the balance badge: balance + bonuses + team earnings."""
        return self.balance + self.bonuses + self.team_earnings

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email!r}, package={self.package!r})>"
