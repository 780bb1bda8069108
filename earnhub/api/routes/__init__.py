"""
Route tables.

- users: Registration and referral data
- withdrawals: Withdrawal and deposit submission
- admin: Admin console operations
"""

from earnhub.api.routes.admin import routes as admin_routes
from earnhub.api.routes.users import routes as user_routes
from earnhub.api.routes.withdrawals import routes as withdrawal_routes

__all__ = ["admin_routes", "user_routes", "withdrawal_routes"]
