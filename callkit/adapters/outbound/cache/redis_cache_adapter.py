"""
Redis Cache Adapter - fail-open cache and rate-limit counters.

Every operation short-circuits to a neutral value (None / False / -1)
when Redis is unreachable. A failed command marks the adapter
disconnected; once connect() has been called, the next operation after
reconnect_interval seconds retries the connection on its own.
"""

import json
import logging
from time import monotonic
from typing import Any, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from callkit.core.config import settings
from callkit.domain.ports import CachePort

logger = logging.getLogger(__name__)

RECONNECT_INTERVAL_SECONDS = 5.0

# INCR and first-hit EXPIRE in one atomic step, so a crash between the
# two can never leave a counter without a TTL.
RATE_LIMIT_SCRIPT = """
local count = redis.call('INCR', KEYS[1])
if count == 1 then
    redis.call('EXPIRE', KEYS[1], ARGV[1])
end
return count
"""


class RedisCacheAdapter(CachePort):
    """Cache + rate limiter over redis.asyncio."""

    def __init__(
        self,
        url: Optional[str] = None,
        client: Any = None,
        reconnect_interval: float = RECONNECT_INTERVAL_SECONDS,
    ):
        self.url = url or settings.REDIS_URL
        self.redis: Any = client
        self.reconnect_interval = reconnect_interval
        self._connected = False
        # None until connect() is first called, and again after close()
        self._retry_at: Optional[float] = None

    @property
    def is_connected(self) -> bool:
        return self._connected and self.redis is not None

    async def connect(self) -> bool:
        """Open (or re-check) the connection. Never raises."""
        try:
            if self.redis is None:
                self.redis = redis.from_url(
                    self.url,
                    encoding="utf-8",
                    decode_responses=True,
                    socket_connect_timeout=5,
                    socket_timeout=5,
                )
            await self.redis.ping()
            self._connected = True
            self._retry_at = None
            logger.info("✅ [REDIS-CACHE] Connected")
        except (RedisError, OSError) as e:
            logger.warning(f"⚠️ [REDIS-CACHE] Unavailable, cache disabled: {e}")
            self._connected = False
            self._schedule_retry()
        return self._connected

    def _mark_failed(self, operation: str, error: Exception) -> None:
        if self._connected:
            logger.error(f"❌ [REDIS-CACHE] {operation} failed, marking disconnected: {error}")
        self._connected = False
        self._schedule_retry()

    def _schedule_retry(self) -> None:
        self._retry_at = monotonic() + self.reconnect_interval

    async def ensure_connected(self) -> bool:
        """
        True when commands may be sent.

        A lost connection is retried at most once per reconnect_interval;
        an adapter that was never connected (or was closed) stays off.
        """
        if self.is_connected:
            return True
        if self._retry_at is None or monotonic() < self._retry_at:
            return False
        self._schedule_retry()
        logger.info("🔄 [REDIS-CACHE] Retrying connection")
        return await self.connect()

    async def get(self, key: str) -> Any | None:
        if not await self.ensure_connected():
            return None
        try:
            raw = await self.redis.get(key)
        except (RedisError, OSError) as e:
            self._mark_failed("GET", e)
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (TypeError, ValueError):
            logger.warning(f"⚠️ [REDIS-CACHE] Corrupt value for key {key}")
            return None

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        if not await self.ensure_connected():
            return False
        try:
            payload = json.dumps(value)
        except (TypeError, ValueError) as e:
            logger.error(f"❌ [REDIS-CACHE] Serialization error for key {key}: {e}")
            return False
        try:
            await self.redis.set(key, payload, ex=ttl)
            return True
        except (RedisError, OSError) as e:
            self._mark_failed("SET", e)
            return False

    async def delete(self, key_or_pattern: str) -> bool:
        if not await self.ensure_connected():
            return False
        try:
            if "*" in key_or_pattern:
                keys = await self.redis.keys(key_or_pattern)
                if keys:
                    await self.redis.delete(*keys)
                logger.debug(f"🗑️ [REDIS-CACHE] Deleted {len(keys)} keys for {key_or_pattern}")
            else:
                await self.redis.delete(key_or_pattern)
            return True
        except (RedisError, OSError) as e:
            self._mark_failed("DEL", e)
            return False

    async def rate_limit_increment(self, key: str, window_seconds: int) -> int | None:
        if not await self.ensure_connected():
            return None
        try:
            count = await self.redis.eval(RATE_LIMIT_SCRIPT, 1, key, window_seconds)
            return int(count)
        except (RedisError, OSError) as e:
            self._mark_failed("INCR", e)
            return None

    async def rate_limit_ttl(self, key: str) -> int:
        if not await self.ensure_connected():
            return -1
        try:
            return int(await self.redis.ttl(key))
        except (RedisError, OSError) as e:
            self._mark_failed("TTL", e)
            return -1

    async def close(self):
        if self.redis is None:
            return
        try:
            await self.redis.aclose()
            logger.info("✅ [REDIS-CACHE] Disconnected")
        except (RedisError, OSError) as e:
            logger.error(f"❌ [REDIS-CACHE] Error during disconnect: {e}")
        finally:
            self._connected = False
            self._retry_at = None


# Global instance
redis_cache = RedisCacheAdapter()
