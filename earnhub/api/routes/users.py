"""
User routes.

Registration and the caller's referral data.
"""

from aiohttp import web

from earnhub.api.dependencies import (
    open_session,
    path_id,
    read_body,
    require_self_or_admin,
)
from earnhub.api.responses import error_response, ok_response
from earnhub.api.serializers import cascade_to_dict, user_to_dict
from earnhub.schemas.requests import RegisterRequest
from earnhub.services.referral.referral_code_service import ReferralCodeService
from earnhub.services.referral.statistics import ReferralStatisticsService
from earnhub.services.user.registration_service import RegistrationService

routes = web.RouteTableDef()


@routes.post("/users/register")
async def register(request: web.Request) -> web.Response:
    body = await read_body(request, RegisterRequest)

    async with open_session(request) as session:
        result = await RegistrationService(session).register_user(
            display_name=body.display_name,
            email=body.email,
            password=body.password,
            referral_code=body.referral_code,
            phone=body.phone,
        )
        if not result.success:
            return error_response(result.error_message, result.error_code)

        return ok_response(
            {
                "user": user_to_dict(result.user),
                "referral": cascade_to_dict(result.cascade),
            },
            status=201,
        )


@routes.get("/users/{id}/referral-code")
async def referral_code(request: web.Request) -> web.Response:
    """Return the user's referral code, generating it on first request."""
    user_id = path_id(request)
    require_self_or_admin(request, user_id)

    async with open_session(request) as session:
        code = await ReferralCodeService(session).get_or_create_referral_code(user_id)

    if code is None:
        return error_response("User not found", "USER_NOT_FOUND")
    return ok_response({"user_id": user_id, "referral_code": code})


@routes.get("/users/{id}/referral-stats")
async def referral_stats(request: web.Request) -> web.Response:
    user_id = path_id(request)
    require_self_or_admin(request, user_id)

    async with open_session(request) as session:
        stats = await ReferralStatisticsService(session).get_user_stats(user_id)

    if stats is None:
        return error_response("User not found", "USER_NOT_FOUND")
    return ok_response({"user_id": user_id, "stats": stats})
