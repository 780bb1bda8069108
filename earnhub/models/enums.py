"""
Enumerations shared by models and services.

Values are stored as plain strings in the database.
"""

from enum import StrEnum


class WithdrawalStatus(StrEnum):
    """Withdrawal request status."""

    PENDING = "pending"
    # Reserved: counted by the daily cap, never produced by a transition
    APPROVED = "approved"
    REJECTED = "rejected"
    PAID = "paid"


# Statuses that count toward the daily withdrawal cap
COUNTED_WITHDRAWAL_STATUSES = frozenset(
    {
        WithdrawalStatus.PENDING.value,
        WithdrawalStatus.APPROVED.value,
        WithdrawalStatus.PAID.value,
    }
)


class WithdrawalType(StrEnum):
    """Balance bucket a withdrawal is drawn from (maps to a User column)."""

    BALANCE = "balance"
    BONUSES = "bonuses"
    TEAM_EARNINGS = "team_earnings"


class WithdrawalMethod(StrEnum):
    """Payout method."""

    BANK = "bank"
    WALLET = "wallet"
    CRYPTO = "crypto"


class TransactionType(StrEnum):
    """Ledger entry type."""

    DAILY_PROFIT = "daily_profit"
    MONTHLY_PROFIT = "monthly_profit"
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"


class ProfitMode(StrEnum):
    """Profit crediting mode."""

    DAILY = "daily"
    MONTHLY = "monthly"

    @property
    def transaction_type(self) -> TransactionType:
        if self is ProfitMode.DAILY:
            return TransactionType.DAILY_PROFIT
        return TransactionType.MONTHLY_PROFIT


class DepositStatus(StrEnum):
    """Deposit request status."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class BadgeType(StrEnum):
    """What a badge requirement is measured against."""

    REFERRAL = "referral"
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    PROFILE = "profile"
    BALANCE = "balance"
    OFFERS_JOINED = "offers_joined"
    DAILY_PROFITS = "daily_profits"
    FIRST_DEPOSIT = "first_deposit"
    FIRST_WITHDRAWAL = "first_withdrawal"
    FIRST_OFFER = "first_offer"
