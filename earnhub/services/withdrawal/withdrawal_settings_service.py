"""
Withdrawal settings service.

Loads and stores time slots and package limits through the key/value
settings table, validating every payload against its schema.
"""

from loguru import logger
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from earnhub.config.constants import (
    PACKAGE_WITHDRAWAL_LIMITS_KEY,
    WITHDRAWAL_TIME_SLOTS_KEY,
)
from earnhub.repositories.system_setting_repository import SystemSettingRepository
from earnhub.schemas.withdrawal_settings import (
    PackageLimit,
    TimeSlot,
    WithdrawalSettings,
)
from earnhub.utils.db_decorators import with_auto_commit
from earnhub.utils.exceptions import SettingsValidationError


class WithdrawalSettingsService:
    """Typed access to withdrawal settings."""

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize withdrawal settings service.

        Args:
            session: Database session
        """
        self.session = session
        self.settings_repo = SystemSettingRepository(session)

    async def load(self) -> WithdrawalSettings:
        """
        Load and validate both settings payloads.

        Returns:
            WithdrawalSettings (empty when nothing is stored)

        Raises:
            SettingsValidationError: If a stored payload is malformed
        """
        raw_slots = await self.settings_repo.get_value(WITHDRAWAL_TIME_SLOTS_KEY, [])
        raw_limits = await self.settings_repo.get_value(
            PACKAGE_WITHDRAWAL_LIMITS_KEY, {}
        )

        if not isinstance(raw_slots, list):
            raise SettingsValidationError(
                WITHDRAWAL_TIME_SLOTS_KEY, "expected a list of strings"
            )
        if not isinstance(raw_limits, dict):
            raise SettingsValidationError(
                PACKAGE_WITHDRAWAL_LIMITS_KEY, "expected an object keyed by package"
            )

        try:
            slots = [TimeSlot.parse(item) for item in raw_slots]
        except ValueError as e:
            raise SettingsValidationError(WITHDRAWAL_TIME_SLOTS_KEY, str(e)) from e

        try:
            limits = {
                name: PackageLimit.model_validate(value)
                for name, value in raw_limits.items()
            }
        except ValidationError as e:
            raise SettingsValidationError(PACKAGE_WITHDRAWAL_LIMITS_KEY, str(e)) from e

        return WithdrawalSettings(time_slots=slots, package_limits=limits)

    @with_auto_commit
    async def save_time_slots(self, time_slots: list[TimeSlot]) -> list[str]:
        """
        Replace the configured time slots.

        Returns:
            Stored slot strings
        """
        payload = [slot.to_setting() for slot in time_slots]
        await self.settings_repo.set_value(WITHDRAWAL_TIME_SLOTS_KEY, payload)
        logger.info(
            "Withdrawal time slots updated",
            extra={"time_slots": payload},
        )
        return payload

    @with_auto_commit
    async def save_package_limits(
        self, package_limits: dict[str, PackageLimit]
    ) -> dict[str, dict]:
        """
        Replace the configured package limits.

        Returns:
            Stored payload keyed by package name
        """
        payload = {
            name: limit.to_setting() for name, limit in package_limits.items()
        }
        await self.settings_repo.set_value(PACKAGE_WITHDRAWAL_LIMITS_KEY, payload)
        logger.info(
            "Package withdrawal limits updated",
            extra={"packages": sorted(payload)},
        )
        return payload

    async def save(self, settings: WithdrawalSettings) -> None:
        """Store both payloads."""
        await self.save_time_slots(settings.time_slots)
        await self.save_package_limits(settings.package_limits)
