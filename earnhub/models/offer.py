"""
Offer and UserOffer models.

An offer pays recurring profit; a user-offer is one user's
subscription to it.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from earnhub.models.base import Base
from earnhub.models.types import MoneyType
from earnhub.utils.datetime_utils import utc_now


class Offer(Base):
    """
    Offer entity.

    Attributes:
        id: Primary key
        title: Display title
        description: Long description
        price: Amount needed to join
        daily_profit: Profit credited per day (nullable)
        monthly_profit: Profit credited per month (nullable)
        active: Whether new joins are accepted
        deadline: After this moment joins are expired
        created_at: Creation time
    """

    __tablename__ = "offers"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[Decimal | None] = mapped_column(MoneyType, nullable=True)
    daily_profit: Mapped[Decimal | None] = mapped_column(
        MoneyType, nullable=True
    )
    monthly_profit: Mapped[Decimal | None] = mapped_column(
        MoneyType, nullable=True
    )
    active: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False
    )
    deadline: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )


class UserOffer(Base):
    """
    UserOffer entity.

    Attributes:
        id: Primary key
        user_id: Subscribed user
        offer_id: Offer joined
        active: Whether profit is still credited
        joined_at: Join time, start of the active window
        deactivated_at: When active flipped to False
    """

    __tablename__ = "user_offers"
    __table_args__ = (
        Index("idx_user_offers_active", "active"),
        Index("idx_user_offers_user", "user_id", "active"),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    offer_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("offers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    active: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False
    )
    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )
    deactivated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
