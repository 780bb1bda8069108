"""
Referral models.

Referral edges and the singleton points settings row.
"""

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from earnhub.config.constants import DEFAULT_LEVEL_POINTS
from earnhub.models.base import Base
from earnhub.utils.datetime_utils import utc_now


class Referral(Base):
    """
    Referral edge.

    One referrer benefiting from one referred user at one level.
    Immutable once created.

    Attributes:
        id: Primary key
        referrer_id: Ancestor who receives the points
        referred_id: Newly registered user
        level: Distance from the referred user (1-3)
        points_earned: Points awarded at creation time
        referral_code: Code that triggered the chain
        created_at: Creation time
    """

    __tablename__ = "referrals"
    __table_args__ = (
        UniqueConstraint(
            "referred_id", "level", name="uq_referrals_referred_level"
        ),
        CheckConstraint(
            "level >= 1 AND level <= 3", name="check_referral_level_range"
        ),
        Index("idx_referrals_referrer_level", "referrer_id", "level"),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    referrer_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    referred_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    level: Mapped[int] = mapped_column(Integer, nullable=False)
    points_earned: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False
    )
    referral_code: Mapped[str] = mapped_column(String(20), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )


class ReferralSettings(Base):
    """Singleton row (id=1) with points per referral level."""

    __tablename__ = "referral_settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    level1_points: Mapped[int] = mapped_column(
        Integer, default=DEFAULT_LEVEL_POINTS[1], nullable=False
    )
    level2_points: Mapped[int] = mapped_column(
        Integer, default=DEFAULT_LEVEL_POINTS[2], nullable=False
    )
    level3_points: Mapped[int] = mapped_column(
        Integer, default=DEFAULT_LEVEL_POINTS[3], nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
        nullable=False,
    )

    def points_for_level(self, level: int) -> int:
        """Get points configured for a referral level (1-3)."""
        return {
            1: self.level1_points,
            2: self.level2_points,
            3: self.level3_points,
        }[level]
