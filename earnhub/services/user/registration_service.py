"""
User registration service.

Creates the user row and, when a referral code was entered, runs the
referral cascade exactly once for the new user. Credentials are owned
by the external identity provider; the password is only checked for
minimum strength here and never stored.
"""

from dataclasses import dataclass

from loguru import logger
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from earnhub.config.constants import DEFAULT_PACKAGE
from earnhub.models.user import User
from earnhub.repositories.user_repository import UserRepository
from earnhub.services.referral.referral_cascade_processor import (
    CascadeResult,
    ReferralCascadeProcessor,
)

MIN_PASSWORD_LENGTH = 6


@dataclass
class RegistrationResult:
    """Result of a registration attempt."""

    success: bool
    user: User | None = None
    error_message: str | None = None
    error_code: str | None = None
    cascade: CascadeResult | None = None

    @classmethod
    def error(cls, message: str, code: str) -> "RegistrationResult":
        return cls(success=False, error_message=message, error_code=code)


class RegistrationService:
    """Registers users and triggers referral processing."""

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize registration service.

        Args:
            session: Database session
        """
        self.session = session
        self.user_repo = UserRepository(session)
        self.cascade_processor = ReferralCascadeProcessor(session)

    def validate_input(
        self, display_name: str, email: str, password: str
    ) -> tuple[bool, str | None, str | None]:
        """
        Check registration fields.

        Returns:
            Tuple of (is_valid, error_message, error_code)
        """
        if not display_name or not display_name.strip():
            return False, "Display name is required", "INVALID_NAME"
        if not email or "@" not in email or email.startswith("@") or email.endswith("@"):
            return False, "A valid email is required", "INVALID_EMAIL"
        if not password or len(password) < MIN_PASSWORD_LENGTH:
            return (
                False,
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
                "WEAK_PASSWORD",
            )
        return True, None, None

    async def register_user(
        self,
        display_name: str,
        email: str,
        password: str,
        referral_code: str | None = None,
        phone: str | None = None,
    ) -> RegistrationResult:
        """
        Register a new user.

        New users always start on the default package; moving a user to
        another package is an admin action.

        Args:
            display_name: Name shown in the app
            email: Login email (unique)
            password: Forwarded to the identity provider, not stored
            referral_code: Optional code of a verified referrer
            phone: Optional phone number

        Returns:
            RegistrationResult with the created user and cascade outcome
        """
        is_valid, error_msg, error_code = self.validate_input(
            display_name, email, password
        )
        if not is_valid:
            return RegistrationResult.error(error_msg, error_code)

        email = email.strip().lower()
        code = referral_code.strip().upper() if referral_code and referral_code.strip() else None

        try:
            if await self.user_repo.get_by_email(email) is not None:
                return RegistrationResult.error("Email is already registered", "EMAIL_TAKEN")

            if code:
                referrer = await self.user_repo.get_by_referral_code(code)
                if referrer is None:
                    return RegistrationResult.error(
                        "Referral code not found", "INVALID_REFERRAL_CODE"
                    )
                if not referrer.is_verified:
                    return RegistrationResult.error(
                        "Referral code belongs to an unverified account",
                        "REFERRER_NOT_VERIFIED",
                    )

            user = await self.user_repo.create(
                display_name=display_name.strip(),
                email=email,
                phone=phone,
                package=DEFAULT_PACKAGE,
            )
            await self.session.commit()

        except IntegrityError:
            await self.session.rollback()
            return RegistrationResult.error("Email is already registered", "EMAIL_TAKEN")
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.exception(
                "Failed to register user",
                extra={"email": email, "error": str(e)},
            )
            return RegistrationResult.error(
                "Database error, please try again later", "DATABASE_ERROR"
            )

        user_id = user.id
        logger.info(
            "User registered",
            extra={"user_id": user_id, "package": DEFAULT_PACKAGE, "referral_code": code},
        )

        cascade = None
        if code:
            cascade = await self.cascade_processor.process_referral(user_id, code)
            if not cascade.success:
                logger.warning(
                    "Referral cascade incomplete for new user",
                    extra={"user_id": user_id, "error_code": cascade.error_code},
                )

        return RegistrationResult(success=True, user=user, cascade=cascade)
