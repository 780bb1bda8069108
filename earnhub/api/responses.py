"""
JSON responses.

Encodes Decimal and datetime values and maps service error codes to
HTTP statuses.
"""

import json
from datetime import date, datetime
from decimal import Decimal
from functools import partial
from typing import Any

from aiohttp import web

NOT_FOUND_CODES = frozenset(
    {"NOT_FOUND", "USER_NOT_FOUND", "REFERRER_NOT_FOUND"}
)
CONFLICT_CODES = frozenset(
    {"ALREADY_PROCESSED", "EMAIL_TAKEN", "INSUFFICIENT_FUNDS"}
)
SERVER_ERROR_CODES = frozenset(
    {"DATABASE_ERROR", "SETTINGS_INVALID", "SETTINGS_MISSING", "INTERNAL_ERROR"}
)


def _default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


dumps = partial(json.dumps, default=_default)


def status_for(error_code: str | None) -> int:
    """HTTP status for a service error code."""
    if error_code in NOT_FOUND_CODES:
        return 404
    if error_code in CONFLICT_CODES:
        return 409
    if error_code in SERVER_ERROR_CODES:
        return 500
    return 400


def ok_response(payload: dict[str, Any], status: int = 200) -> web.Response:
    return web.json_response({"success": True, **payload}, status=status, dumps=dumps)


def error_response(
    message: str | None,
    error_code: str | None,
    details: dict[str, Any] | None = None,
    status: int | None = None,
) -> web.Response:
    """
    Build the error body shared by every route.

    Args:
        message: Human readable message
        error_code: Machine readable code
        details: Limiting values or validation errors
        status: Explicit status (derived from the code when omitted)
    """
    return web.json_response(
        {
            "success": False,
            "error": message,
            "error_code": error_code,
            "details": details or {},
        },
        status=status or status_for(error_code),
        dumps=dumps,
    )


def http_error(
    exc_class: type[web.HTTPError], message: str, error_code: str, **details: Any
) -> web.HTTPError:
    """Build an aiohttp HTTP exception carrying the JSON error body."""
    return exc_class(
        text=dumps(
            {
                "success": False,
                "error": message,
                "error_code": error_code,
                "details": details,
            }
        ),
        content_type="application/json",
    )
