"""
Admin routes.

Withdrawal disposition, deposit review, withdrawal and referral
settings, and the top referrers board. Every handler requires the
admin header.
"""

from aiohttp import web
from loguru import logger

from earnhub.api.dependencies import open_session, path_id, read_body, require_admin
from earnhub.api.responses import error_response, ok_response
from earnhub.api.serializers import deposit_to_dict, withdrawal_to_dict
from earnhub.config.constants import TOP_REFERRERS_LIMIT
from earnhub.schemas.requests import (
    ApproveDepositRequest,
    PayWithdrawalRequest,
    ReferralPointsUpdate,
    RejectRequest,
    WithdrawalSettingsUpdate,
)
from earnhub.schemas.withdrawal_settings import PackageLimit, TimeSlot
from earnhub.services.deposit.deposit_request_service import DepositRequestService
from earnhub.services.referral.referral_settings_service import (
    ReferralSettingsService,
)
from earnhub.services.referral.statistics import ReferralStatisticsService
from earnhub.services.withdrawal.withdrawal_lifecycle_handler import (
    WithdrawalLifecycleHandler,
)
from earnhub.services.withdrawal.withdrawal_settings_service import (
    WithdrawalSettingsService,
)
from earnhub.utils.exceptions import SettingsValidationError

routes = web.RouteTableDef()

MAX_TOP_REFERRERS = 100


# Withdrawals


@routes.post("/admin/withdrawals/{id}/pay")
async def pay_withdrawal(request: web.Request) -> web.Response:
    admin_id = require_admin(request)
    withdrawal_id = path_id(request)
    body = await read_body(request, PayWithdrawalRequest)

    async with open_session(request) as session:
        result = await WithdrawalLifecycleHandler(session).pay_withdrawal(
            withdrawal_id,
            admin_note=body.admin_note,
            proof_image_url=body.proof_image_url,
            admin_id=admin_id,
        )
        if not result.success:
            return error_response(result.error_message, result.error_code)
        return ok_response({"withdrawal": withdrawal_to_dict(result.withdrawal)})


@routes.post("/admin/withdrawals/{id}/reject")
async def reject_withdrawal(request: web.Request) -> web.Response:
    admin_id = require_admin(request)
    withdrawal_id = path_id(request)
    body = await read_body(request, RejectRequest)

    async with open_session(request) as session:
        result = await WithdrawalLifecycleHandler(session).reject_withdrawal(
            withdrawal_id,
            rejection_reason=body.rejection_reason,
            admin_id=admin_id,
        )
        if not result.success:
            return error_response(result.error_message, result.error_code)
        return ok_response({"withdrawal": withdrawal_to_dict(result.withdrawal)})


# Deposits


@routes.post("/admin/deposits/{id}/approve")
async def approve_deposit(request: web.Request) -> web.Response:
    require_admin(request)
    deposit_id = path_id(request)
    body = await read_body(request, ApproveDepositRequest)

    async with open_session(request) as session:
        result = await DepositRequestService(session).approve(
            deposit_id, admin_note=body.admin_note
        )
        if not result.success:
            return error_response(result.error_message, result.error_code)
        return ok_response({"deposit": deposit_to_dict(result.deposit)})


@routes.post("/admin/deposits/{id}/reject")
async def reject_deposit(request: web.Request) -> web.Response:
    require_admin(request)
    deposit_id = path_id(request)
    body = await read_body(request, RejectRequest)

    async with open_session(request) as session:
        result = await DepositRequestService(session).reject(
            deposit_id, body.rejection_reason
        )
        if not result.success:
            return error_response(result.error_message, result.error_code)
        return ok_response({"deposit": deposit_to_dict(result.deposit)})


# Settings


@routes.get("/admin/settings/withdrawals")
async def get_withdrawal_settings(request: web.Request) -> web.Response:
    require_admin(request)

    async with open_session(request) as session:
        try:
            current = await WithdrawalSettingsService(session).load()
        except SettingsValidationError as e:
            logger.error(
                "Stored withdrawal settings are invalid",
                extra={"key": e.key, "error": str(e)},
            )
            return error_response(str(e), "SETTINGS_INVALID", {"key": e.key})

    return ok_response(
        {
            "time_slots": current.slots_to_setting(),
            "package_limits": current.limits_to_setting(),
        }
    )


@routes.put("/admin/settings/withdrawals")
async def update_withdrawal_settings(request: web.Request) -> web.Response:
    """
    Replace time slots and/or package limits.

    Omitted parts are left unchanged. Invalid slots or limits are
    rejected before anything is written.
    """
    admin_id = require_admin(request)
    body = await read_body(request, WithdrawalSettingsUpdate)

    try:
        slots = (
            [TimeSlot.parse(raw) for raw in body.time_slots]
            if body.time_slots is not None
            else None
        )
    except ValueError as e:
        return error_response(str(e), "INVALID_SETTINGS", {"key": "time_slots"})

    try:
        limits = (
            {
                name: PackageLimit.model_validate(value)
                for name, value in body.package_limits.items()
            }
            if body.package_limits is not None
            else None
        )
    except ValueError as e:
        return error_response(str(e), "INVALID_SETTINGS", {"key": "package_limits"})

    payload = {}
    async with open_session(request) as session:
        service = WithdrawalSettingsService(session)
        if slots is not None:
            payload["time_slots"] = await service.save_time_slots(slots)
        if limits is not None:
            payload["package_limits"] = await service.save_package_limits(limits)

    logger.info(
        "Withdrawal settings changed by admin",
        extra={"admin_id": admin_id, "parts": sorted(payload)},
    )
    return ok_response(payload)


@routes.get("/admin/settings/referrals")
async def get_referral_settings(request: web.Request) -> web.Response:
    require_admin(request)

    async with open_session(request) as session:
        points = await ReferralSettingsService(session).get_points()
    return ok_response({"points": points})


@routes.put("/admin/settings/referrals")
async def update_referral_settings(request: web.Request) -> web.Response:
    admin_id = require_admin(request)
    body = await read_body(request, ReferralPointsUpdate)

    async with open_session(request) as session:
        points = await ReferralSettingsService(session).update_points(
            body.level1_points, body.level2_points, body.level3_points
        )

    logger.info(
        "Referral points changed by admin",
        extra={"admin_id": admin_id, **points},
    )
    return ok_response({"points": points})


# Referrals


@routes.get("/admin/referrals/top")
async def top_referrers(request: web.Request) -> web.Response:
    require_admin(request)

    raw_limit = request.query.get("limit", str(TOP_REFERRERS_LIMIT))
    if not raw_limit.isdigit() or int(raw_limit) == 0:
        return error_response("limit must be a positive integer", "INVALID_LIMIT")
    limit = min(int(raw_limit), MAX_TOP_REFERRERS)

    async with open_session(request) as session:
        referrers = await ReferralStatisticsService(session).get_top_referrers(limit)
    return ok_response({"referrers": referrers})
