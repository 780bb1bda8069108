"""
Request helpers shared by route handlers.

The identity provider sits in front of the API and forwards the
authenticated user id in ``X-User-Id``; admin sessions additionally
carry ``X-Admin: true``. Both headers are trusted as given.
"""

import json
from typing import TypeVar

from aiohttp import web
from pydantic import BaseModel, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from earnhub.api.responses import http_error

USER_ID_HEADER = "X-User-Id"
ADMIN_HEADER = "X-Admin"

SESSION_MAKER_KEY = web.AppKey("session_maker", async_sessionmaker)

BodyModel = TypeVar("BodyModel", bound=BaseModel)


def current_user_id(request: web.Request) -> int:
    """
    Authenticated caller id.

    Raises:
        web.HTTPUnauthorized: If the header is missing or not an integer
    """
    raw = request.headers.get(USER_ID_HEADER)
    if raw is None or not raw.strip().isdigit():
        raise http_error(
            web.HTTPUnauthorized, "Authentication required", "UNAUTHENTICATED"
        )
    return int(raw)


def is_admin(request: web.Request) -> bool:
    return request.headers.get(ADMIN_HEADER, "").strip().lower() == "true"


def require_admin(request: web.Request) -> int:
    """
    Authenticated admin id.

    Raises:
        web.HTTPForbidden: If the caller is not an admin
    """
    user_id = current_user_id(request)
    if not is_admin(request):
        raise http_error(web.HTTPForbidden, "Admin access required", "FORBIDDEN")
    return user_id


def require_self_or_admin(request: web.Request, user_id: int) -> int:
    """Allow a user to read their own data; admins can read anyone's."""
    caller_id = current_user_id(request)
    if caller_id != user_id and not is_admin(request):
        raise http_error(web.HTTPForbidden, "Access denied", "FORBIDDEN")
    return caller_id


def path_id(request: web.Request, name: str = "id") -> int:
    raw = request.match_info.get(name, "")
    if not raw.isdigit():
        raise http_error(web.HTTPBadRequest, f"Invalid {name}", "INVALID_ID")
    return int(raw)


async def read_body(request: web.Request, model: type[BodyModel]) -> BodyModel:
    """
    Parse and validate a JSON body. An empty body validates as ``{}``.

    Raises:
        web.HTTPBadRequest: On malformed JSON or schema errors
    """
    data = {}
    if request.can_read_body:
        try:
            data = await request.json()
        except json.JSONDecodeError as e:
            raise http_error(
                web.HTTPBadRequest, "Request body is not valid JSON", "INVALID_JSON"
            ) from e

    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise http_error(
            web.HTTPBadRequest,
            "Request body is invalid",
            "VALIDATION_ERROR",
            errors=[
                {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
                for err in e.errors()
            ],
        ) from e


def open_session(request: web.Request) -> AsyncSession:
    """New session from the application's session maker."""
    return request.app[SESSION_MAKER_KEY]()
