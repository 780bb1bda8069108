"""
User services package.

- registration_service: Registration with referral processing
"""

from earnhub.services.user.registration_service import (
    RegistrationResult,
    RegistrationService,
)

__all__ = ["RegistrationResult", "RegistrationService"]
