import time
import pytest
from unittest.mock import AsyncMock
from redis.exceptions import ConnectionError as RedisConnectionError

from app.core.cache import CacheManager, MemoryCacheBackend, RedisCacheBackend, create_cache_backend
from app.core.config import settings
from app.core.exceptions import CacheUnavailableError


@pytest.mark.asyncio
async def test_memory_backend_has_no_default_expiry(memory_backend, monkeypatch):
    await memory_backend.set("categories", '["books"]')

    future = time.time() + 10 * settings.CACHE_TTL
    monkeypatch.setattr("app.core.cache.time.time", lambda: future)

    assert await memory_backend.get("categories") == '["books"]'


@pytest.mark.asyncio
async def test_memory_backend_honours_explicit_ttl(memory_backend, monkeypatch):
    await memory_backend.set("latest-products", "[]", ttl=5)
    assert await memory_backend.exists("latest-products")

    future = time.time() + 6
    monkeypatch.setattr("app.core.cache.time.time", lambda: future)

    assert await memory_backend.get("latest-products") is None


@pytest.mark.asyncio
async def test_memory_backend_delete_counts_removed_keys(memory_backend):
    await memory_backend.set("a", "1")
    await memory_backend.set("b", "2")

    assert await memory_backend.delete(["a", "b", "missing"]) == 2
    assert await memory_backend.delete("a") == 0
    assert memory_backend.keys() == []


@pytest.mark.asyncio
async def test_cache_manager_round_trips_json(cache):
    value = {"id": 1, "photos": [{"public_id": "p", "url": "u"}], "price": 12.5}
    await cache.set("product-1", value)

    assert await cache.get("product-1") == value
    assert await cache.get("product-2") is None


def test_create_cache_backend_without_redis_url_is_local():
    assert isinstance(create_cache_backend(""), MemoryCacheBackend)


def test_redis_backend_defaults_to_configured_ttl():
    backend = RedisCacheBackend("redis://localhost:6379/0")
    assert backend.default_ttl == settings.CACHE_TTL


@pytest.fixture
def redis_backend():
    backend = RedisCacheBackend("redis://localhost:6379/0")
    backend.redis = AsyncMock()
    return backend


@pytest.mark.asyncio
async def test_redis_set_uses_ttl(redis_backend):
    await redis_backend.set("admin-stats", "{}")
    redis_backend.redis.setex.assert_awaited_once_with("admin-stats", settings.CACHE_TTL, "{}")


@pytest.mark.asyncio
async def test_redis_delete_sends_all_keys_at_once(redis_backend):
    redis_backend.redis.delete.return_value = 2

    assert await redis_backend.delete(["product-1", "product-2"]) == 2
    redis_backend.redis.delete.assert_awaited_once_with("product-1", "product-2")


@pytest.mark.asyncio
async def test_redis_delete_of_nothing_skips_the_call(redis_backend):
    assert await redis_backend.delete([]) == 0
    redis_backend.redis.delete.assert_not_awaited()


@pytest.mark.asyncio
@pytest.mark.parametrize("operation, args", [
    ("get", ("product-1",)),
    ("set", ("product-1", "{}")),
    ("delete", (["product-1"],)),
    ("exists", ("product-1",)),
])
async def test_redis_failures_raise_cache_unavailable(redis_backend, operation, args):
    failing = AsyncMock(side_effect=RedisConnectionError("connection refused"))
    redis_backend.redis.get = failing
    redis_backend.redis.setex = failing
    redis_backend.redis.delete = failing
    redis_backend.redis.exists = failing

    with pytest.raises(CacheUnavailableError):
        await getattr(redis_backend, operation)(*args)


@pytest.mark.asyncio
async def test_cache_manager_closes_redis_client(redis_backend):
    await CacheManager(redis_backend).close()
    redis_backend.redis.aclose.assert_awaited_once()
