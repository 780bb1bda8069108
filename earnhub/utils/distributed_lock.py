"""
Distributed lock on top of Redis.

Prevents two workers from running the same batch (for example the
daily profit run) at the same time. Without a Redis client the lock
degrades to a per-process asyncio lock.
"""

import asyncio
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import redis.asyncio as redis
from loguru import logger

from earnhub.utils.exceptions import LockAcquisitionError

# Release only if the token still matches (another holder may own it after expiry)
_RELEASE_SCRIPT = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("del", KEYS[1])
else
    return 0
end
"""

_local_locks: dict[str, asyncio.Lock] = {}


class DistributedLock:
    """Redis SET NX based lock with token-checked release."""

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        prefix: str = "earnhub:lock:",
    ) -> None:
        """
        Initialize distributed lock.

        Args:
            redis_client: Redis client, or None for a local fallback
            prefix: Key prefix for lock keys
        """
        self.redis_client = redis_client
        self.prefix = prefix

    @asynccontextmanager
    async def lock(self, key: str, timeout: int = 60) -> AsyncIterator[None]:
        """
        Hold the lock for the duration of the block.

        Args:
            key: Lock name
            timeout: Expiry in seconds, so a crashed holder cannot block forever

        Raises:
            LockAcquisitionError: If the lock is already held
        """
        if self.redis_client is None:
            local = _local_locks.setdefault(key, asyncio.Lock())
            if local.locked():
                raise LockAcquisitionError(key)
            async with local:
                yield
            return

        full_key = f"{self.prefix}{key}"
        token = uuid.uuid4().hex
        acquired = await self.redis_client.set(full_key, token, nx=True, ex=timeout)
        if not acquired:
            logger.warning("Lock is busy", extra={"lock_key": full_key})
            raise LockAcquisitionError(key)

        logger.debug("Lock acquired", extra={"lock_key": full_key})
        try:
            yield
        finally:
            try:
                await self.redis_client.eval(_RELEASE_SCRIPT, 1, full_key, token)
            except redis.RedisError as e:
                logger.error(
                    "Failed to release lock",
                    extra={"lock_key": full_key, "error": str(e)},
                )
