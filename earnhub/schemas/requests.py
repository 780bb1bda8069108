"""
Request body schemas for the HTTP API.
"""

from decimal import Decimal

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    """New user registration."""

    display_name: str
    email: str
    password: str
    referral_code: str | None = None
    phone: str | None = None


class WithdrawalSubmitRequest(BaseModel):
    """User withdrawal submission."""

    amount: Decimal
    type: str
    method: str
    account_details: str = ""


class PayWithdrawalRequest(BaseModel):
    admin_note: str | None = None
    proof_image_url: str | None = None


class RejectRequest(BaseModel):
    rejection_reason: str = ""


class DepositSubmitRequest(BaseModel):
    """User deposit claim."""

    amount: Decimal
    method: str | None = None
    reference: str | None = None
    proof_image_url: str | None = None


class ApproveDepositRequest(BaseModel):
    admin_note: str | None = None


class ReferralPointsUpdate(BaseModel):
    """Points per referral level."""

    level1_points: int = Field(ge=0)
    level2_points: int = Field(ge=0)
    level3_points: int = Field(ge=0)


class WithdrawalSettingsUpdate(BaseModel):
    """
    Withdrawal settings update.

    Either part may be omitted to leave it unchanged. Slots use the
    stored ``"day:startHour:endHour"`` form.
    """

    time_slots: list[str] | None = None
    package_limits: dict[str, dict] | None = None
