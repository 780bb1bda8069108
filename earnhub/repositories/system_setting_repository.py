"""
System setting repository.

Upsert-by-key access to the settings table.
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from earnhub.models.system_setting import SystemSetting
from earnhub.repositories.base import BaseRepository


class SystemSettingRepository(BaseRepository[SystemSetting]):
    """Key/value settings repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize system setting repository."""
        super().__init__(SystemSetting, session)

    async def get_value(self, key: str, default: Any = None) -> Any:
        """
        Get the raw JSON value stored under a key.

        Args:
            key: Setting key
            default: Value returned when the key is missing

        Returns:
            Stored value or default
        """
        row = await self.get_by(key=key)
        if row is None or row.value is None:
            return default
        return row.value

    async def set_value(self, key: str, value: Any) -> SystemSetting:
        """
        Create or replace the value stored under a key.

        Args:
            key: Setting key
            value: JSON-serializable value

        Returns:
            Stored setting row
        """
        row = await self.get_by(key=key)
        if row is None:
            return await self.create(key=key, value=value)

        row.value = value
        await self.session.flush()
        return row
