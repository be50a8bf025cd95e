import pytest
from unittest.mock import AsyncMock

from app.core.exceptions import CacheUnavailableError, NotFoundError
from app.services.cache_service import read_through


class CallCounter:
    def __init__(self, result=None):
        self.count = 0
        self.result = result if result is not None else [{"id": 1}]

    def __call__(self):
        self.count += 1
        return self.result


@pytest.mark.asyncio
async def test_miss_populates_then_hit_skips_store(cache):
    loader = CallCounter()

    first = await read_through(cache, "latest-products", loader)
    second = await read_through(cache, "latest-products", loader)

    assert first == second == [{"id": 1}]
    assert loader.count == 1
    assert await cache.get("latest-products") == [{"id": 1}]


@pytest.mark.asyncio
async def test_empty_result_is_cached(cache):
    loader = CallCounter(result=[])

    await read_through(cache, "categories", loader)
    await read_through(cache, "categories", loader)

    assert loader.count == 1


@pytest.mark.asyncio
async def test_invalidation_forces_store_requery(cache):
    loader = CallCounter()

    await read_through(cache, "all-orders", loader)
    await cache.delete("all-orders")
    await read_through(cache, "all-orders", loader)

    assert loader.count == 2


@pytest.mark.asyncio
async def test_not_found_is_never_cached(cache):
    def missing():
        raise NotFoundError("Product not found")

    with pytest.raises(NotFoundError):
        await read_through(cache, "product-99", missing)

    assert not await cache.exists("product-99")


@pytest.mark.asyncio
async def test_read_failure_queries_store_once_without_populating():
    cache = AsyncMock()
    cache.get.side_effect = CacheUnavailableError("Cache read failed")
    loader = CallCounter()

    result = await read_through(cache, "admin-stats", loader)

    assert result == [{"id": 1}]
    assert loader.count == 1
    cache.set.assert_not_awaited()


@pytest.mark.asyncio
async def test_population_failure_still_returns_fresh_result():
    cache = AsyncMock()
    cache.get.return_value = None
    cache.set.side_effect = CacheUnavailableError("Cache write failed")
    loader = CallCounter()

    result = await read_through(cache, "reviews-1", loader)

    assert result == [{"id": 1}]
    assert loader.count == 1
    cache.set.assert_awaited_once()
