"""
Deposit services package.

- deposit_request_service: Deposit claims and admin approval
"""

from earnhub.services.deposit.deposit_request_service import (
    DepositRequestService,
    DepositResult,
)

__all__ = ["DepositRequestService", "DepositResult"]
