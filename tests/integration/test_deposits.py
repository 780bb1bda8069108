"""
Integration tests for deposit requests.
"""

from decimal import Decimal

import pytest
from sqlalchemy import select

from earnhub.models import Transaction
from earnhub.services.deposit import DepositRequestService


class TestDepositRequests:
    """Create, approve and reject deposits."""

    @pytest.mark.asyncio
    async def test_create_pending(self, session, make_user):
        user = await make_user()

        result = await DepositRequestService(session).create_request(
            user.id, Decimal("250"), method="bank", reference="TRX-1"
        )

        assert result.success is True
        assert result.deposit.status == "pending"
        assert result.deposit.amount == Decimal("250")

    @pytest.mark.asyncio
    async def test_create_rejects_bad_input(self, session, make_user):
        user = await make_user()
        service = DepositRequestService(session)

        zero = await service.create_request(user.id, Decimal("0"))
        unknown = await service.create_request(404, Decimal("10"))

        assert zero.error_code == "INVALID_AMOUNT"
        assert unknown.error_code == "USER_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_approve_credits_balance_once(self, session, make_user):
        user = await make_user(balance=Decimal("40"))
        service = DepositRequestService(session)
        created = await service.create_request(user.id, Decimal("60"))

        approved = await service.approve(created.deposit.id, admin_note="matched")
        again = await service.approve(created.deposit.id)

        await session.refresh(user)
        entries = (
            await session.execute(select(Transaction).where(Transaction.type == "deposit"))
        ).scalars().all()
        assert approved.success is True
        assert approved.deposit.processed_at is not None
        assert again.error_code == "ALREADY_PROCESSED"
        assert user.balance == Decimal("100")
        assert len(entries) == 1

    @pytest.mark.asyncio
    async def test_reject(self, session, make_user):
        user = await make_user(balance=Decimal("40"))
        service = DepositRequestService(session)
        created = await service.create_request(user.id, Decimal("60"))

        missing_reason = await service.reject(created.deposit.id, " ")
        rejected = await service.reject(created.deposit.id, "No matching transfer")
        approved = await service.approve(created.deposit.id)

        await session.refresh(user)
        assert missing_reason.error_code == "REASON_REQUIRED"
        assert rejected.deposit.status == "rejected"
        assert approved.error_code == "ALREADY_PROCESSED"
        assert user.balance == Decimal("40")

    @pytest.mark.asyncio
    async def test_unknown_deposit(self, session):
        result = await DepositRequestService(session).approve(999)

        assert result.error_code == "NOT_FOUND"
