"""
Referral services package.

Contains modular services for referral processing:
- config: Configuration constants (REFERRAL_DEPTH, code alphabet)
- referral_cascade_processor: Awards points up to three referrer levels
- referral_code_service: Lazy referral code generation
- referral_settings_service: Points per level
- statistics: Level counts and top referrers
"""

from earnhub.services.referral.config import REFERRAL_DEPTH, REFERRAL_LEVELS
from earnhub.services.referral.referral_cascade_processor import (
    CascadeResult,
    LevelAward,
    ReferralCascadeProcessor,
)
from earnhub.services.referral.referral_code_service import (
    ReferralCodeService,
    generate_referral_code,
)
from earnhub.services.referral.referral_settings_service import (
    ReferralSettingsService,
)
from earnhub.services.referral.statistics import ReferralStatisticsService

__all__ = [
    # Configuration
    "REFERRAL_DEPTH",
    "REFERRAL_LEVELS",
    # Cascade
    "CascadeResult",
    "LevelAward",
    "ReferralCascadeProcessor",
    # Codes, settings, statistics
    "ReferralCodeService",
    "ReferralSettingsService",
    "ReferralStatisticsService",
    "generate_referral_code",
]
