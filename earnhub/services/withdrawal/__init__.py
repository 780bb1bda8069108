"""
Withdrawal services package.

This package provides modular withdrawal management functionality:
- eligibility: Pure time-slot and amount-limit evaluator
- withdrawal_settings_service: Typed load/save of withdrawal settings
- withdrawal_validator: Validation pipeline for submissions
  - withdrawal_basic_checks: Input and balance checks
- withdrawal_balance_manager: Atomic balance deduction
- withdrawal_request_handler: Withdrawal request submission
- withdrawal_lifecycle_handler: Pay and reject

All components are re-exported for easy importing.
"""

from earnhub.services.withdrawal.eligibility import EligibilityResult, can_withdraw
from earnhub.services.withdrawal.withdrawal_balance_manager import (
    WithdrawalBalanceManager,
)
from earnhub.services.withdrawal.withdrawal_lifecycle_handler import (
    LifecycleResult,
    WithdrawalLifecycleHandler,
)
from earnhub.services.withdrawal.withdrawal_request_handler import (
    WithdrawalRequestHandler,
)
from earnhub.services.withdrawal.withdrawal_settings_service import (
    WithdrawalSettingsService,
)
from earnhub.services.withdrawal.withdrawal_validator import (
    ValidationResult,
    WithdrawalValidator,
)

__all__ = [
    "EligibilityResult",
    "LifecycleResult",
    "ValidationResult",
    "WithdrawalBalanceManager",
    "WithdrawalLifecycleHandler",
    "WithdrawalRequestHandler",
    "WithdrawalSettingsService",
    "WithdrawalValidator",
    "can_withdraw",
]
