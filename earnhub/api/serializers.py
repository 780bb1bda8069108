"""Model to JSON-ready dict conversion for API responses."""

from typing import Any

from earnhub.models.deposit_request import DepositRequest
from earnhub.models.user import User
from earnhub.models.withdrawal_request import WithdrawalRequest
from earnhub.services.referral.referral_cascade_processor import CascadeResult


def user_to_dict(user: User) -> dict[str, Any]:
    return {
        "id": user.id,
        "display_name": user.display_name,
        "email": user.email,
        "phone": user.phone,
        "referral_code": user.referral_code,
        "referred_by": user.referred_by,
        "package": user.package,
        "level": user.level,
        "is_verified": user.is_verified,
        "balance": user.balance,
        "personal_earnings": user.personal_earnings,
        "team_earnings": user.team_earnings,
        "bonuses": user.bonuses,
        "created_at": user.created_at,
    }


def withdrawal_to_dict(withdrawal: WithdrawalRequest) -> dict[str, Any]:
    return {
        "id": withdrawal.id,
        "user_id": withdrawal.user_id,
        "type": withdrawal.type,
        "amount": withdrawal.amount,
        "method": withdrawal.method,
        "status": withdrawal.status,
        "admin_note": withdrawal.admin_note,
        "rejection_reason": withdrawal.rejection_reason,
        "proof_image_url": withdrawal.proof_image_url,
        "active_offer_titles": list(withdrawal.active_offer_titles or []),
        "created_at": withdrawal.created_at,
        "paid_at": withdrawal.paid_at,
    }


def deposit_to_dict(deposit: DepositRequest) -> dict[str, Any]:
    return {
        "id": deposit.id,
        "user_id": deposit.user_id,
        "amount": deposit.amount,
        "method": deposit.method,
        "reference": deposit.reference,
        "status": deposit.status,
        "admin_note": deposit.admin_note,
        "rejection_reason": deposit.rejection_reason,
        "created_at": deposit.created_at,
        "processed_at": deposit.processed_at,
    }


def cascade_to_dict(cascade: CascadeResult | None) -> dict[str, Any] | None:
    if cascade is None:
        return None
    return {
        "success": cascade.success,
        "error_code": cascade.error_code,
        "total_points": cascade.total_points,
        "awards": [
            {
                "level": award.level,
                "referrer_id": award.referrer_id,
                "points": award.points,
            }
            for award in cascade.awards
        ],
        "level_errors": cascade.level_errors,
    }
