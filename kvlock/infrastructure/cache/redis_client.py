# kvlock/infrastructure/cache/redis_client.py

import logging

import redis.asyncio as redis
from redis.exceptions import RedisError

from kvlock.locking.exceptions import StorageUnavailableError

logger = logging.getLogger(__name__)

# Atomic compare-and-delete: only the writer of the current value may remove it.
COMPARE_AND_DELETE_SCRIPT = (
    "if redis.call('get', KEYS[1]) == ARGV[1] then "
    "return redis.call('del', KEYS[1]) "
    "else return 0 end"
)


class RedisClient:
    """LockStore adapter over redis.asyncio. The logical database index selects the namespace."""

    def __init__(
        self,
        url: str,
        db: int = 0,
        password: str | None = None,
        socket_timeout: float | None = None,
    ):
        self._db = db
        self.client = redis.from_url(
            url,
            db=db,
            password=password,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_timeout,
            decode_responses=True,
        )
        # A db path in the URL overrides the kwarg; the namespace index must win.
        pool_kwargs = self.client.connection_pool.connection_kwargs
        if pool_kwargs.get("db", 0) != db:
            logger.warning(
                "lock_store_url_db_overridden",
                extra={"url_db": pool_kwargs.get("db"), "db": db},
            )
        pool_kwargs["db"] = db

    async def connect(self) -> None:
        """Round-trip to the server so auth and db selection fail here, not on the first lock call."""
        try:
            await self.client.ping()
        except RedisError as e:
            logger.error("lock_store_unavailable", extra={"db": self._db, "error": str(e)})
            raise StorageUnavailableError(f"Redis unavailable: {e}") from e
        logger.info("lock_store_connected", extra={"db": self._db})

    async def close(self) -> None:
        await self.client.aclose()

    async def set_if_absent(self, key: str, value: str) -> bool:
        """SET NX. Returns True if key was written."""
        return bool(await self.client.set(key, value, nx=True))

    async def get(self, key: str) -> str | None:
        """Get value for key. Returns None if key does not exist."""
        return await self.client.get(key)

    async def set_expiry(self, key: str, seconds: int) -> None:
        """Set store-level TTL on key."""
        await self.client.expire(key, seconds)

    async def compare_and_delete(self, key: str, expected: str) -> bool:
        """Delete key only if its value equals expected (atomic). Returns True if deleted."""
        result = await self.client.eval(COMPARE_AND_DELETE_SCRIPT, 1, key, expected)
        return bool(result)
