"""
Profit services package.

- profit_crediting_service: Idempotent daily/monthly profit crediting
- offer_expiry_service: Deactivation of expired offer subscriptions
"""

from earnhub.services.profit.offer_expiry_service import OfferExpiryService
from earnhub.services.profit.profit_crediting_service import (
    ProfitCreditingService,
    ProfitRunResult,
    period_window,
)

__all__ = [
    "OfferExpiryService",
    "ProfitCreditingService",
    "ProfitRunResult",
    "period_window",
]
