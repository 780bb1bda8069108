"""
Gamification models.

Badges awarded for milestones and referral-point levels.
"""

from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from earnhub.models.base import Base
from earnhub.utils.datetime_utils import utc_now


class Badge(Base):
    """
    Badge definition.

    Attributes:
        id: Primary key
        name: Display name
        description: What it is awarded for
        type: BadgeType value
        requirement: Threshold the measured value must reach
        icon: Icon reference for the UI
        is_active: Inactive badges are never awarded
    """

    __tablename__ = "badges"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    type: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    requirement: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False
    )
    icon: Mapped[str | None] = mapped_column(String(100), nullable=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )


class UserBadge(Base):
    """Badge held by a user. Each badge is awarded at most once."""

    __tablename__ = "user_badges"
    __table_args__ = (
        UniqueConstraint("user_id", "badge_id", name="uq_user_badges_user_badge"),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    badge_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("badges.id", ondelete="CASCADE"),
        nullable=False,
    )
    awarded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )


class Level(Base):
    """Referral-point level (highest requirement <= points wins)."""

    __tablename__ = "levels"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    requirement: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
