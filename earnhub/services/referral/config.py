"""
Referral system configuration.

Contains constants and configuration for the referral system.
"""

import string

from earnhub.config.constants import (
    DEFAULT_LEVEL_POINTS,
    REFERRAL_CODE_LENGTH,
    REFERRAL_CODE_MAX_ATTEMPTS,
    REFERRAL_DEPTH,
)

# 3-level referral program: points per level come from referral_settings
REFERRAL_LEVELS = tuple(range(1, REFERRAL_DEPTH + 1))

# Referral codes: 8 uppercase letters and digits
REFERRAL_CODE_ALPHABET = string.ascii_uppercase + string.digits

__all__ = [
    "DEFAULT_LEVEL_POINTS",
    "REFERRAL_CODE_ALPHABET",
    "REFERRAL_CODE_LENGTH",
    "REFERRAL_CODE_MAX_ATTEMPTS",
    "REFERRAL_DEPTH",
    "REFERRAL_LEVELS",
]
