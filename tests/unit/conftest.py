"""
Shared fixtures for unit tests.

- Withdrawal settings with one package and optional time slots
"""

from datetime import UTC, datetime
from decimal import Decimal

import pytest

from earnhub.schemas.withdrawal_settings import (
    PackageLimit,
    TimeSlot,
    WithdrawalSettings,
)


@pytest.fixture
def basic_limit():
    """Package limit {min: 10, max: 1000, daily: 100}."""
    return PackageLimit(min=Decimal("10"), max=Decimal("1000"), daily=Decimal("100"))


@pytest.fixture
def basic_settings(basic_limit):
    """Settings without time slots and a 'basic' package."""
    return WithdrawalSettings(package_limits={"basic": basic_limit})


@pytest.fixture
def monday_slot_settings(basic_limit):
    """Withdrawals open Monday 9:00-17:00 only."""
    return WithdrawalSettings(
        time_slots=[TimeSlot.parse("1:9:17")],
        package_limits={"basic": basic_limit},
    )


@pytest.fixture
def cutover_time():
    """Cutover at 2026-10-19 09:00 UTC."""
    return datetime(2026, 10, 19, 9, 0, tzinfo=UTC)
