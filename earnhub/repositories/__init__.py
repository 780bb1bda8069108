"""
Repositories.

Data access layer, one repository per model.
"""

from earnhub.repositories.base import BaseRepository
from earnhub.repositories.deposit_request_repository import DepositRequestRepository
from earnhub.repositories.gamification_repository import (
    BadgeRepository,
    LevelRepository,
    UserBadgeRepository,
)
from earnhub.repositories.offer_repository import OfferRepository, UserOfferRepository
from earnhub.repositories.referral_repository import (
    ReferralRepository,
    ReferralSettingsRepository,
)
from earnhub.repositories.system_setting_repository import SystemSettingRepository
from earnhub.repositories.transaction_repository import TransactionRepository
from earnhub.repositories.user_repository import UserRepository
from earnhub.repositories.withdrawal_request_repository import (
    WithdrawalRequestRepository,
)

__all__ = [
    "BadgeRepository",
    "BaseRepository",
    "DepositRequestRepository",
    "LevelRepository",
    "OfferRepository",
    "ReferralRepository",
    "ReferralSettingsRepository",
    "SystemSettingRepository",
    "TransactionRepository",
    "UserBadgeRepository",
    "UserOfferRepository",
    "UserRepository",
    "WithdrawalRequestRepository",
]
