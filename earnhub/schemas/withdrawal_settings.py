"""
Withdrawal settings schemas.

Typed shapes for the JSON payloads persisted under the
``withdrawal_time_slots`` and ``package_withdrawal_limits`` keys.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from earnhub.utils.datetime_utils import ensure_aware


class TimeSlot(BaseModel):
    """
    Weekly withdrawal window.

    Stored as ``"day:startHour:endHour"`` with day 0 = Sunday and a
    24h clock. Windows never cross midnight.
    """

    model_config = ConfigDict(frozen=True)

    day: int = Field(ge=0, le=6)
    start_hour: int = Field(ge=0, le=23)
    end_hour: int = Field(ge=1, le=24)

    @model_validator(mode="after")
    def check_range(self) -> "TimeSlot":
        if self.start_hour >= self.end_hour:
            raise ValueError(
                f"start hour {self.start_hour} must be before end hour {self.end_hour}"
            )
        return self

    @classmethod
    def parse(cls, raw: str) -> "TimeSlot":
        """
        Parse a stored slot string.

        Raises:
            ValueError: If the string is not three integers separated by ':'
        """
        parts = str(raw).strip().split(":")
        if len(parts) != 3:
            raise ValueError(f"Invalid time slot '{raw}', expected day:start:end")
        try:
            day, start, end = (int(part) for part in parts)
        except ValueError as e:
            raise ValueError(f"Invalid time slot '{raw}': {e}") from e
        return cls(day=day, start_hour=start, end_hour=end)

    def to_setting(self) -> str:
        return f"{self.day}:{self.start_hour}:{self.end_hour}"

    def contains(self, weekday: int, hour: int) -> bool:
        """Check a Sunday-based weekday and hour against the window."""
        return self.day == weekday and self.start_hour <= hour < self.end_hour


class PackageLimit(BaseModel):
    """Per-package withdrawal bounds."""

    model_config = ConfigDict(frozen=True)

    min: Decimal = Field(ge=0)
    max: Decimal = Field(gt=0)
    daily: Decimal = Field(gt=0)
    limit_activated_at: datetime | None = None

    @field_validator("limit_activated_at")
    @classmethod
    def normalize_cutover(cls, v: datetime | None) -> datetime | None:
        return ensure_aware(v) if v is not None else None

    @model_validator(mode="after")
    def check_bounds(self) -> "PackageLimit":
        if self.min > self.max:
            raise ValueError(f"min {self.min} exceeds max {self.max}")
        return self

    def to_setting(self) -> dict:
        """Serialize for storage, omitting an unset cutover."""
        payload = {
            "min": _number(self.min),
            "max": _number(self.max),
            "daily": _number(self.daily),
        }
        if self.limit_activated_at is not None:
            payload["limit_activated_at"] = self.limit_activated_at.isoformat()
        return payload


class WithdrawalSettings(BaseModel):
    """Everything the eligibility evaluator needs from settings."""

    time_slots: list[TimeSlot] = Field(default_factory=list)
    package_limits: dict[str, PackageLimit] = Field(default_factory=dict)

    @classmethod
    def from_storage(
        cls, raw_slots: list | None, raw_limits: dict | None
    ) -> "WithdrawalSettings":
        """
        Build from stored JSON payloads.

        Raises:
            ValueError: If a payload has an invalid shape
        """
        slots = [TimeSlot.parse(item) for item in (raw_slots or [])]
        limits = {
            name: PackageLimit.model_validate(value)
            for name, value in (raw_limits or {}).items()
        }
        return cls(time_slots=slots, package_limits=limits)

    def slots_to_setting(self) -> list[str]:
        return [slot.to_setting() for slot in self.time_slots]

    def limits_to_setting(self) -> dict[str, dict]:
        return {
            name: limit.to_setting()
            for name, limit in self.package_limits.items()
        }


def _number(value: Decimal) -> int | str:
    # Whole amounts stay JSON integers, fractions keep exact decimal text
    if value == value.to_integral_value():
        return int(value)
    return str(value.normalize())
