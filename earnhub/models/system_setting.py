"""
SystemSetting model.

Key/value rows holding JSON payloads. Payload shapes are validated by
the schemas in earnhub.schemas, never trusted at the point of use.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from earnhub.models.base import Base
from earnhub.utils.datetime_utils import utc_now


class SystemSetting(Base):
    """Single global setting stored under a string key."""

    __tablename__ = "settings"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    key: Mapped[str] = mapped_column(
        String(100), unique=True, nullable=False, index=True
    )
    value: Mapped[Any] = mapped_column(JSON, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
        nullable=False,
    )
