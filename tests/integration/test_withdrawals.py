"""
Integration tests for withdrawal submission and admin disposition.
"""

from datetime import UTC, datetime
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from earnhub.config.constants import PACKAGE_WITHDRAWAL_LIMITS_KEY
from earnhub.models import SystemSetting, Transaction, WithdrawalRequest
from earnhub.schemas.withdrawal_settings import PackageLimit, TimeSlot
from earnhub.services.withdrawal.withdrawal_lifecycle_handler import (
    WithdrawalLifecycleHandler,
)
from earnhub.services.withdrawal.withdrawal_request_handler import WithdrawalRequestHandler
from earnhub.services.withdrawal.withdrawal_settings_service import WithdrawalSettingsService

MONDAY_10AM = datetime(2026, 10, 19, 10, 0, tzinfo=UTC)
TUESDAY_10AM = datetime(2026, 10, 20, 10, 0, tzinfo=UTC)


@pytest.fixture
def basic_limits(session):
    """Store {basic: min 10, max 1000, daily 100}."""

    async def _store(limit_activated_at=None):
        await WithdrawalSettingsService(session).save_package_limits(
            {
                "basic": PackageLimit(
                    min=Decimal("10"),
                    max=Decimal("1000"),
                    daily=Decimal("100"),
                    limit_activated_at=limit_activated_at,
                )
            }
        )

    return _store


async def _submit(session, user, amount, now=MONDAY_10AM, **overrides):
    values = {
        "withdrawal_type": "balance",
        "method": "bank",
        "account_details": "IBAN DE00 1234",
    }
    values.update(overrides)
    return await WithdrawalRequestHandler(session).submit_withdrawal(
        user_id=user.id, amount=Decimal(str(amount)), now=now, **values
    )


async def _count_withdrawals(session) -> int:
    return (
        await session.execute(select(func.count()).select_from(WithdrawalRequest))
    ).scalar()


class TestSubmission:
    """Validation and eligibility at submission."""

    @pytest.mark.asyncio
    async def test_daily_cap_across_two_submissions(self, session, make_user, basic_limits):
        """60 passes, a second 60 the same day is refused with 40 remaining."""
        await basic_limits()
        user = await make_user(balance=Decimal("1000"))

        first, first_result = await _submit(session, user, 60)
        second, second_result = await _submit(session, user, 60)

        assert first is not None
        assert first.status == "pending"
        assert first_result.is_valid is True
        assert second is None
        assert second_result.error_code == "DAILY_LIMIT_EXCEEDED"
        assert second_result.details["remaining"] == Decimal("40")
        assert await _count_withdrawals(session) == 1

    @pytest.mark.asyncio
    async def test_cutover_excludes_earlier_paid_withdrawal(
        self, session, make_user, basic_limits
    ):
        await basic_limits(limit_activated_at=datetime(2026, 10, 19, 9, 0, tzinfo=UTC))
        user = await make_user(balance=Decimal("1000"))
        session.add(
            WithdrawalRequest(
                user_id=user.id,
                type="balance",
                amount=Decimal("90"),
                method="bank",
                account_details="IBAN",
                status="paid",
                created_at=datetime(2026, 10, 19, 8, 0, tzinfo=UTC),
            )
        )
        await session.commit()

        withdrawal, result = await _submit(session, user, 50)

        assert withdrawal is not None, result.error_message

    @pytest.mark.asyncio
    async def test_time_slot_closed(self, session, make_user):
        await WithdrawalSettingsService(session).save_time_slots([TimeSlot.parse("1:9:17")])
        user = await make_user(balance=Decimal("1000"))

        allowed, _ = await _submit(session, user, 50, now=MONDAY_10AM)
        refused, result = await _submit(session, user, 50, now=TUESDAY_10AM)

        assert allowed is not None
        assert refused is None
        assert result.error_code == "TIME_SLOT_CLOSED"

    @pytest.mark.asyncio
    async def test_unconfigured_package_refused(self, session, make_user, basic_limits):
        await basic_limits()
        user = await make_user(package="unlimited", balance=Decimal("5000"))

        withdrawal, result = await _submit(session, user, 50)

        assert withdrawal is None
        assert result.error_code == "UNKNOWN_PACKAGE"
        assert result.details["package"] == "unlimited"
        assert await _count_withdrawals(session) == 0

    @pytest.mark.asyncio
    async def test_any_package_passes_without_limits(self, session, make_user):
        user = await make_user(package="unlimited", balance=Decimal("5000"))

        withdrawal, result = await _submit(session, user, 50)

        assert withdrawal is not None, result.error_message

    @pytest.mark.asyncio
    async def test_hard_ceiling(self, session, make_user):
        user = await make_user(balance=Decimal("10000"))

        withdrawal, result = await _submit(session, user, 6001)

        assert withdrawal is None
        assert result.error_code == "ABOVE_HARD_CEILING"

    @pytest.mark.asyncio
    async def test_insufficient_bucket(self, session, make_user):
        user = await make_user(balance=Decimal("1000"), bonuses=Decimal("20"))

        withdrawal, result = await _submit(session, user, 50, withdrawal_type="bonuses")

        assert withdrawal is None
        assert result.error_code == "INSUFFICIENT_BALANCE"
        assert result.details["available"] == Decimal("20")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("amount", "overrides", "code"),
        [
            (0, {}, "INVALID_AMOUNT"),
            (-5, {}, "INVALID_AMOUNT"),
            (50, {"withdrawal_type": "savings"}, "INVALID_TYPE"),
            (50, {"method": "cash"}, "INVALID_METHOD"),
            (50, {"account_details": "   "}, "MISSING_ACCOUNT_DETAILS"),
        ],
    )
    async def test_input_errors(self, session, make_user, amount, overrides, code):
        user = await make_user(balance=Decimal("1000"))

        withdrawal, result = await _submit(session, user, amount, **overrides)

        assert withdrawal is None
        assert result.error_code == code

    @pytest.mark.asyncio
    async def test_unknown_user(self, session):
        withdrawal, result = await WithdrawalRequestHandler(session).submit_withdrawal(
            user_id=404,
            amount=Decimal("10"),
            withdrawal_type="balance",
            method="bank",
            account_details="IBAN",
            now=MONDAY_10AM,
        )

        assert withdrawal is None
        assert result.error_code == "USER_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_malformed_settings(self, session, make_user):
        session.add(SystemSetting(key=PACKAGE_WITHDRAWAL_LIMITS_KEY, value=["not", "a", "dict"]))
        await session.commit()
        user = await make_user(balance=Decimal("1000"))

        withdrawal, result = await _submit(session, user, 50)

        assert withdrawal is None
        assert result.error_code == "SETTINGS_INVALID"

    @pytest.mark.asyncio
    async def test_snapshot_and_balance_untouched(
        self, session, make_user, make_offer, subscribe
    ):
        user = await make_user(
            display_name="Ada", email="ada@example.com", phone="+2348000000",
            balance=Decimal("500"),
        )
        await subscribe(user, await make_offer(title="Starter"))
        await subscribe(user, await make_offer(title="Premium"))

        withdrawal, _ = await _submit(session, user, 100)

        await session.refresh(user)
        assert withdrawal.user_name == "Ada"
        assert withdrawal.user_email == "ada@example.com"
        assert withdrawal.user_phone == "+2348000000"
        assert sorted(withdrawal.active_offer_titles) == ["Premium", "Starter"]
        assert user.balance == Decimal("500")


class TestPayAndReject:
    """Admin transitions from pending."""

    @pytest.mark.asyncio
    async def test_pay_deducts_once(self, session, make_user):
        user = await make_user(balance=Decimal("500"))
        withdrawal, _ = await _submit(session, user, 100)
        handler = WithdrawalLifecycleHandler(session)

        paid = await handler.pay_withdrawal(withdrawal.id, admin_note="sent", admin_id=1)
        again = await handler.pay_withdrawal(withdrawal.id, admin_note="twice", admin_id=1)

        await session.refresh(user)
        await session.refresh(withdrawal)
        assert paid.success is True
        assert again.error_code == "ALREADY_PROCESSED"
        assert withdrawal.status == "paid"
        assert withdrawal.admin_note == "sent"
        assert withdrawal.paid_at is not None
        assert user.balance == Decimal("400")

    @pytest.mark.asyncio
    async def test_pay_records_ledger_entry(self, session, make_user):
        user = await make_user(team_earnings=Decimal("300"))
        withdrawal, _ = await _submit(session, user, 120, withdrawal_type="team_earnings")

        await WithdrawalLifecycleHandler(session).pay_withdrawal(withdrawal.id)

        entry = (
            await session.execute(select(Transaction).where(Transaction.type == "withdrawal"))
        ).scalar_one()
        await session.refresh(user)
        assert entry.amount == Decimal("120")
        assert user.team_earnings == Decimal("180")

    @pytest.mark.asyncio
    async def test_reject_then_pay_is_refused(self, session, make_user):
        user = await make_user(balance=Decimal("500"))
        withdrawal, _ = await _submit(session, user, 100)
        handler = WithdrawalLifecycleHandler(session)

        rejected = await handler.reject_withdrawal(withdrawal.id, "Account name mismatch")
        paid = await handler.pay_withdrawal(withdrawal.id, admin_note="late")
        rejected_again = await handler.reject_withdrawal(withdrawal.id, "Another reason")

        await session.refresh(user)
        await session.refresh(withdrawal)
        assert rejected.success is True
        assert paid.error_code == "ALREADY_PROCESSED"
        assert rejected_again.error_code == "ALREADY_PROCESSED"
        assert withdrawal.status == "rejected"
        assert withdrawal.rejection_reason == "Account name mismatch"
        assert withdrawal.admin_note is None
        assert user.balance == Decimal("500")

    @pytest.mark.asyncio
    async def test_pay_with_insufficient_funds_stays_pending(self, session, make_user):
        user = await make_user(balance=Decimal("500"))
        first, _ = await _submit(session, user, 80)
        second, _ = await _submit(session, user, 450)
        handler = WithdrawalLifecycleHandler(session)

        await handler.pay_withdrawal(first.id)
        result = await handler.pay_withdrawal(second.id)

        await session.refresh(user)
        await session.refresh(second)
        assert result.error_code == "INSUFFICIENT_FUNDS"
        assert second.status == "pending"
        assert user.balance == Decimal("420")

    @pytest.mark.asyncio
    async def test_unknown_request(self, session):
        result = await WithdrawalLifecycleHandler(session).pay_withdrawal(404)

        assert result.error_code == "NOT_FOUND"
