"""
Database models.

Exports all SQLAlchemy models for easy imports.
"""

from earnhub.models.base import Base
from earnhub.models.deposit_request import DepositRequest
from earnhub.models.enums import (
    BadgeType,
    DepositStatus,
    ProfitMode,
    TransactionType,
    WithdrawalMethod,
    WithdrawalStatus,
    WithdrawalType,
)

# Gamification
from earnhub.models.gamification import Badge, Level, UserBadge
from earnhub.models.offer import Offer, UserOffer
from earnhub.models.referral import Referral, ReferralSettings
from earnhub.models.system_setting import SystemSetting
from earnhub.models.transaction import Transaction
from earnhub.models.user import User
from earnhub.models.withdrawal_request import WithdrawalRequest

__all__ = [
    "Badge",
    "BadgeType",
    "Base",
    "DepositRequest",
    "DepositStatus",
    "Level",
    "Offer",
    "ProfitMode",
    "Referral",
    "ReferralSettings",
    "SystemSetting",
    "Transaction",
    "TransactionType",
    "User",
    "UserBadge",
    "UserOffer",
    "WithdrawalMethod",
    "WithdrawalRequest",
    "WithdrawalStatus",
    "WithdrawalType",
]
