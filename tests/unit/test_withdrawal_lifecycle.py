"""
Unit tests for withdrawal pay / reject transitions.

Repositories are mocked; the integration suite covers the same flows
against a real database.
"""

from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest

from earnhub.services.withdrawal.withdrawal_lifecycle_handler import (
    WithdrawalLifecycleHandler,
)


def _pending_withdrawal():
    return SimpleNamespace(
        id=7,
        user_id=3,
        type="balance",
        amount=Decimal("50"),
        status="pending",
        admin_note=None,
        rejection_reason=None,
        proof_image_url=None,
        paid_at=None,
    )


@pytest.fixture
def handler(mock_session):
    handler = WithdrawalLifecycleHandler(mock_session)
    handler.withdrawal_repo = AsyncMock()
    handler.transaction_repo = AsyncMock()
    handler.balance_manager = AsyncMock()
    return handler


@pytest.fixture(autouse=True)
def badge_service():
    with patch(
        "earnhub.services.withdrawal.withdrawal_lifecycle_handler.BadgeService"
    ) as badge_cls:
        badge_cls.return_value.check_and_award_badges = AsyncMock(return_value=[])
        yield badge_cls


class TestPayWithdrawal:
    """Pending -> paid."""

    @pytest.mark.asyncio
    async def test_pay_pending_request(self, handler, mock_session, badge_service):
        withdrawal = _pending_withdrawal()
        handler.withdrawal_repo.get_pending_for_update.return_value = withdrawal
        handler.balance_manager.deduct_balance.return_value = (True, None)

        result = await handler.pay_withdrawal(7, admin_note="sent", proof_image_url="s3://p.png")

        assert result.success is True
        assert withdrawal.status == "paid"
        assert withdrawal.admin_note == "sent"
        assert withdrawal.proof_image_url == "s3://p.png"
        assert withdrawal.paid_at is not None
        handler.balance_manager.deduct_balance.assert_awaited_once_with(
            3, "balance", Decimal("50"), 7
        )
        handler.transaction_repo.create.assert_awaited_once()
        mock_session.commit.assert_awaited_once()
        badge_service.return_value.check_and_award_badges.assert_awaited_once_with(3)

    @pytest.mark.asyncio
    async def test_pay_missing_request(self, handler, mock_session):
        handler.withdrawal_repo.get_pending_for_update.return_value = None
        handler.withdrawal_repo.exists.return_value = False

        result = await handler.pay_withdrawal(99)

        assert result.success is False
        assert result.error_code == "NOT_FOUND"
        mock_session.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_pay_already_processed(self, handler, mock_session):
        """A paid or rejected request is not touched again."""
        handler.withdrawal_repo.get_pending_for_update.return_value = None
        handler.withdrawal_repo.exists.return_value = True

        result = await handler.pay_withdrawal(7, admin_note="again")

        assert result.error_code == "ALREADY_PROCESSED"
        handler.balance_manager.deduct_balance.assert_not_awaited()
        handler.transaction_repo.create.assert_not_awaited()
        mock_session.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_pay_insufficient_funds_keeps_pending(self, handler, mock_session):
        withdrawal = _pending_withdrawal()
        handler.withdrawal_repo.get_pending_for_update.return_value = withdrawal
        handler.balance_manager.deduct_balance.return_value = (False, "INSUFFICIENT_FUNDS")

        result = await handler.pay_withdrawal(7, admin_note="sent")

        assert result.error_code == "INSUFFICIENT_FUNDS"
        assert withdrawal.status == "pending"
        assert withdrawal.admin_note is None
        mock_session.rollback.assert_awaited_once()
        mock_session.commit.assert_not_awaited()


class TestRejectWithdrawal:
    """Pending -> rejected."""

    @pytest.mark.asyncio
    async def test_reject_pending_request(self, handler, mock_session):
        withdrawal = _pending_withdrawal()
        handler.withdrawal_repo.get_pending_for_update.return_value = withdrawal

        result = await handler.reject_withdrawal(7, "  wrong account  ")

        assert result.success is True
        assert withdrawal.status == "rejected"
        assert withdrawal.rejection_reason == "wrong account"
        handler.balance_manager.deduct_balance.assert_not_awaited()
        mock_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("reason", ["", "   ", None])
    async def test_reason_required(self, handler, reason):
        result = await handler.reject_withdrawal(7, reason)

        assert result.error_code == "REASON_REQUIRED"
        handler.withdrawal_repo.get_pending_for_update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_reject_already_processed(self, handler, mock_session):
        handler.withdrawal_repo.get_pending_for_update.return_value = None
        handler.withdrawal_repo.exists.return_value = True

        result = await handler.reject_withdrawal(7, "duplicate")

        assert result.error_code == "ALREADY_PROCESSED"
        mock_session.commit.assert_not_awaited()
