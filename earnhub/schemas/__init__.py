"""
Schemas.

Pydantic shapes for persisted JSON settings payloads and API request
bodies.
"""

from earnhub.schemas.requests import (
    ApproveDepositRequest,
    DepositSubmitRequest,
    PayWithdrawalRequest,
    ReferralPointsUpdate,
    RegisterRequest,
    RejectRequest,
    WithdrawalSettingsUpdate,
    WithdrawalSubmitRequest,
)
from earnhub.schemas.withdrawal_settings import (
    PackageLimit,
    TimeSlot,
    WithdrawalSettings,
)

__all__ = [
    "ApproveDepositRequest",
    "DepositSubmitRequest",
    "PackageLimit",
    "PayWithdrawalRequest",
    "ReferralPointsUpdate",
    "RegisterRequest",
    "RejectRequest",
    "TimeSlot",
    "WithdrawalSettings",
    "WithdrawalSettingsUpdate",
    "WithdrawalSubmitRequest",
]
