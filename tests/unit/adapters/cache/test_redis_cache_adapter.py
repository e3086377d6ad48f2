"""
Tests for RedisCacheAdapter (fail-open cache + rate limiter).
"""
import pytest
from unittest.mock import AsyncMock, MagicMock

from redis.exceptions import ConnectionError as RedisConnectionError

from callkit.adapters.outbound.cache.redis_cache_adapter import RATE_LIMIT_SCRIPT, RedisCacheAdapter
from tests.mocks.fake_redis import FakeRedis


async def _connected(fake: FakeRedis) -> RedisCacheAdapter:
    cache = RedisCacheAdapter(client=fake)
    assert await cache.connect() is True
    return cache


@pytest.mark.unit
class TestRedisCacheValues:
    """get / set / delete."""

    @pytest.mark.asyncio
    async def test_set_then_get_roundtrips_json(self, fake_redis):
        cache = await _connected(fake_redis)

        assert await cache.set("intel:lead:1", {"score": 87, "tags": ["hot"]}, ttl=60) is True
        assert await cache.get("intel:lead:1") == {"score": 87, "tags": ["hot"]}

    @pytest.mark.asyncio
    async def test_get_miss_returns_none(self, fake_redis):
        cache = await _connected(fake_redis)
        assert await cache.get("missing") is None

    @pytest.mark.asyncio
    async def test_value_expires_after_ttl(self, fake_redis):
        cache = await _connected(fake_redis)
        await cache.set("k", "v", ttl=5)

        fake_redis.advance(6)

        assert await cache.get("k") is None

    @pytest.mark.asyncio
    async def test_corrupt_value_returns_none(self, fake_redis):
        cache = await _connected(fake_redis)
        await fake_redis.set("broken", "{not json")

        assert await cache.get("broken") is None
        assert cache.is_connected is True

    @pytest.mark.asyncio
    async def test_unserializable_value_returns_false(self, fake_redis):
        cache = await _connected(fake_redis)
        assert await cache.set("k", object()) is False

    @pytest.mark.asyncio
    async def test_delete_pattern_removes_all_matches_in_one_del(self, fake_redis):
        cache = await _connected(fake_redis)
        await cache.set("intel:1", 1)
        await cache.set("intel:2", 2)
        await cache.set("other:1", 3)
        fake_redis.commands.clear()

        assert await cache.delete("intel:*") is True

        assert await cache.get("intel:1") is None
        assert await cache.get("intel:2") is None
        assert await cache.get("other:1") == 3
        assert fake_redis.commands[:2] == ["KEYS", "DEL"]

    @pytest.mark.asyncio
    async def test_delete_pattern_without_matches_skips_del(self, fake_redis):
        cache = await _connected(fake_redis)
        fake_redis.commands.clear()

        assert await cache.delete("nothing:*") is True
        assert fake_redis.commands == ["KEYS"]

    @pytest.mark.asyncio
    async def test_delete_exact_key(self, fake_redis):
        cache = await _connected(fake_redis)
        await cache.set("plain", 1)

        assert await cache.delete("plain") is True
        assert await cache.get("plain") is None


@pytest.mark.unit
class TestRedisRateLimit:
    """Atomic INCR + first-hit EXPIRE."""

    @pytest.mark.asyncio
    async def test_first_increment_sets_window(self, fake_redis):
        cache = await _connected(fake_redis)

        assert await cache.rate_limit_increment("rl:ip", 10) == 1
        assert await cache.rate_limit_ttl("rl:ip") == 10

    @pytest.mark.asyncio
    async def test_second_increment_does_not_reset_ttl(self, fake_redis):
        cache = await _connected(fake_redis)
        await cache.rate_limit_increment("rl:ip", 10)

        fake_redis.advance(4)

        assert await cache.rate_limit_increment("rl:ip", 10) == 2
        assert await cache.rate_limit_ttl("rl:ip") == 6

    @pytest.mark.asyncio
    async def test_counter_restarts_after_window(self, fake_redis):
        cache = await _connected(fake_redis)
        await cache.rate_limit_increment("rl:ip", 10)
        await cache.rate_limit_increment("rl:ip", 10)

        fake_redis.advance(11)

        assert await cache.rate_limit_increment("rl:ip", 10) == 1
        assert await cache.rate_limit_ttl("rl:ip") == 10

    @pytest.mark.asyncio
    async def test_increment_uses_single_script_call(self):
        client = MagicMock()
        client.ping = AsyncMock(return_value=True)
        client.eval = AsyncMock(return_value=3)
        cache = RedisCacheAdapter(client=client)
        await cache.connect()

        assert await cache.rate_limit_increment("rl:user", 60) == 3
        client.eval.assert_awaited_once_with(RATE_LIMIT_SCRIPT, 1, "rl:user", 60)


@pytest.mark.unit
class TestRedisUnavailable:
    """Every operation degrades to a neutral value."""

    @pytest.mark.asyncio
    async def test_connect_failure_leaves_adapter_disconnected(self):
        cache = RedisCacheAdapter(client=FakeRedis(fail=True))

        assert await cache.connect() is False
        assert cache.is_connected is False

    @pytest.mark.asyncio
    async def test_operations_short_circuit_when_disconnected(self):
        fake = FakeRedis()
        cache = RedisCacheAdapter(client=fake)  # never connected

        assert await cache.get("k") is None
        assert await cache.set("k", 1) is False
        assert await cache.delete("k*") is False
        assert await cache.rate_limit_increment("k", 10) is None
        assert await cache.rate_limit_ttl("k") == -1
        assert fake.commands == []

    @pytest.mark.asyncio
    async def test_failed_command_marks_disconnected(self, fake_redis):
        cache = await _connected(fake_redis)
        fake_redis.fail = True

        assert await cache.rate_limit_increment("k", 10) is None
        assert cache.is_connected is False

        # Next call does not reach Redis at all
        fake_redis.commands.clear()
        assert await cache.get("k") is None
        assert fake_redis.commands == []

    @pytest.mark.asyncio
    async def test_reconnect_after_recovery(self, fake_redis):
        cache = await _connected(fake_redis)
        fake_redis.fail = True
        await cache.get("k")
        fake_redis.fail = False

        assert await cache.connect() is True
        assert await cache.set("k", "v") is True

    @pytest.mark.asyncio
    async def test_recovers_on_next_operation_without_explicit_connect(self, fake_redis):
        cache = RedisCacheAdapter(client=fake_redis, reconnect_interval=0)
        await cache.connect()
        fake_redis.fail = True
        assert await cache.get("k") is None
        fake_redis.fail = False

        assert await cache.set("k", 1) is True
        assert cache.is_connected is True
        assert await cache.get("k") == 1

    @pytest.mark.asyncio
    async def test_reconnect_waits_for_interval(self, fake_redis, mocker):
        clock = mocker.patch(
            "callkit.adapters.outbound.cache.redis_cache_adapter.monotonic", return_value=100.0
        )
        cache = await _connected(fake_redis)
        fake_redis.fail = True
        await cache.get("k")
        fake_redis.fail = False
        fake_redis.commands.clear()

        clock.return_value = 103.0
        assert await cache.set("k", 1) is False
        assert fake_redis.commands == []

        clock.return_value = 106.0
        assert await cache.set("k", 1) is True
        assert fake_redis.commands == ["PING", "SET"]

    @pytest.mark.asyncio
    async def test_failed_startup_connect_is_retried(self, mocker):
        clock = mocker.patch(
            "callkit.adapters.outbound.cache.redis_cache_adapter.monotonic", return_value=0.0
        )
        fake = FakeRedis(fail=True)
        cache = RedisCacheAdapter(client=fake)
        assert await cache.connect() is False

        # Still down at the next attempt: the retry is pushed back again
        clock.return_value = 10.0
        assert await cache.get("k") is None
        fake.fail = False
        fake.commands.clear()
        clock.return_value = 12.0
        assert await cache.get("k") is None
        assert fake.commands == []

        clock.return_value = 16.0
        assert await cache.rate_limit_increment("rl:ip", 10) == 1

    @pytest.mark.asyncio
    async def test_closed_adapter_does_not_reconnect(self, fake_redis):
        cache = RedisCacheAdapter(client=fake_redis, reconnect_interval=0)
        await cache.connect()
        await cache.close()
        fake_redis.commands.clear()

        assert await cache.get("k") is None
        assert fake_redis.commands == []

    @pytest.mark.asyncio
    async def test_close_never_raises(self):
        client = MagicMock()
        client.aclose = AsyncMock(side_effect=RedisConnectionError("gone"))
        cache = RedisCacheAdapter(client=client)

        await cache.close()

        assert cache.is_connected is False
