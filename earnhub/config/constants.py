"""
Business constants.

Single place for values shared by services, jobs and migrations.
"""

from decimal import Decimal

# Referral cascade
REFERRAL_DEPTH = 3
DEFAULT_LEVEL_POINTS = {
    1: 100,
    2: 50,
    3: 25,
}
REFERRAL_SETTINGS_ID = 1
REFERRAL_CODE_LENGTH = 8
REFERRAL_CODE_MAX_ATTEMPTS = 10

# Withdrawals
DEFAULT_HARD_WITHDRAWAL_CEILING = 6000
DEFAULT_PACKAGE = "basic"

# Offers
DEFAULT_OFFER_JOIN_DURATION_DAYS = 30

# Persisted setting keys
WITHDRAWAL_TIME_SLOTS_KEY = "withdrawal_time_slots"
PACKAGE_WITHDRAWAL_LIMITS_KEY = "package_withdrawal_limits"
LEVEL_AUTO_UPDATE_KEY = "level_auto_update"

# Top referrers shown on the admin dashboard
TOP_REFERRERS_LIMIT = 10

ZERO = Decimal("0")
