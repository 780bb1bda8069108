"""
Referral code service.

Codes are generated lazily, the first time a user asks for theirs.
"""

import secrets

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from earnhub.repositories.user_repository import UserRepository
from earnhub.services.referral.config import (
    REFERRAL_CODE_ALPHABET,
    REFERRAL_CODE_LENGTH,
    REFERRAL_CODE_MAX_ATTEMPTS,
)


def generate_referral_code(length: int = REFERRAL_CODE_LENGTH) -> str:
    """Generate a random uppercase alphanumeric code."""
    return "".join(secrets.choice(REFERRAL_CODE_ALPHABET) for _ in range(length))


class ReferralCodeService:
    """Creates and returns users' referral codes."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.user_repo = UserRepository(session)

    async def get_or_create_referral_code(self, user_id: int) -> str | None:
        """
        Get the user's referral code, generating it on first use.

        Args:
            user_id: User ID

        Returns:
            Referral code, or None if the user does not exist or no
            unique code could be generated
        """
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            return None
        if user.referral_code:
            return user.referral_code

        for attempt in range(1, REFERRAL_CODE_MAX_ATTEMPTS + 1):
            code = generate_referral_code()
            if await self.user_repo.exists(referral_code=code):
                continue

            user.referral_code = code
            try:
                await self.session.commit()
            except IntegrityError:
                # Taken concurrently by another user
                await self.session.rollback()
                user = await self.user_repo.get_by_id(user_id)
                if user is None:
                    return None
                if user.referral_code:
                    return user.referral_code
                continue

            logger.info(
                "Referral code generated",
                extra={"user_id": user_id, "attempt": attempt},
            )
            return code

        logger.error(
            "Could not generate a unique referral code",
            extra={"user_id": user_id, "attempts": REFERRAL_CODE_MAX_ATTEMPTS},
        )
        return None
