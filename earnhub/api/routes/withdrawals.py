"""
User withdrawal and deposit submission routes.
"""

from aiohttp import web

from earnhub.api.dependencies import current_user_id, open_session, read_body
from earnhub.api.responses import error_response, ok_response
from earnhub.api.serializers import deposit_to_dict, withdrawal_to_dict
from earnhub.schemas.requests import DepositSubmitRequest, WithdrawalSubmitRequest
from earnhub.services.deposit.deposit_request_service import DepositRequestService
from earnhub.services.withdrawal.withdrawal_request_handler import (
    WithdrawalRequestHandler,
)

routes = web.RouteTableDef()


@routes.post("/withdrawals")
async def submit_withdrawal(request: web.Request) -> web.Response:
    """
    Submit a withdrawal request for the authenticated user.

    Denials return 400 with the limiting values (minimum, maximum,
    daily cap, remaining amount or open time slots) in ``details``.
    """
    user_id = current_user_id(request)
    body = await read_body(request, WithdrawalSubmitRequest)

    async with open_session(request) as session:
        withdrawal, validation = await WithdrawalRequestHandler(
            session
        ).submit_withdrawal(
            user_id=user_id,
            amount=body.amount,
            withdrawal_type=body.type,
            method=body.method,
            account_details=body.account_details,
        )
        if withdrawal is None:
            return error_response(
                validation.error_message,
                validation.error_code,
                validation.details,
            )
        return ok_response({"withdrawal": withdrawal_to_dict(withdrawal)}, status=201)


@routes.post("/deposits")
async def submit_deposit(request: web.Request) -> web.Response:
    user_id = current_user_id(request)
    body = await read_body(request, DepositSubmitRequest)

    async with open_session(request) as session:
        result = await DepositRequestService(session).create_request(
            user_id=user_id,
            amount=body.amount,
            method=body.method,
            reference=body.reference,
            proof_image_url=body.proof_image_url,
        )
        if not result.success:
            return error_response(result.error_message, result.error_code)
        return ok_response({"deposit": deposit_to_dict(result.deposit)}, status=201)
