import pytest
from unittest.mock import AsyncMock

from app.core.cache_config import ADMIN_GROUP_KEYS, CACHE_KEYS, PRODUCT_GROUP_KEYS
from app.core.exceptions import CacheUnavailableError
from app.utils.cache_invalidation import (
    AdminMutation,
    CacheInvalidator,
    OrderMutation,
    ProductMutation,
    ReviewMutation,
    collect_keys,
    keys_for,
)


def test_cache_keys_are_stable():
    assert CACHE_KEYS["latest_products"] == "latest-products"
    assert CACHE_KEYS["categories"] == "categories"
    assert CACHE_KEYS["all_products"] == "all-products"
    assert CACHE_KEYS["product"].format(7) == "product-7"
    assert CACHE_KEYS["all_orders"] == "all-orders"
    assert CACHE_KEYS["my_orders"].format("u1") == "my-orders-u1"
    assert CACHE_KEYS["order"].format(3) == "orders-3"
    assert CACHE_KEYS["reviews"].format(7) == "reviews-7"
    assert ADMIN_GROUP_KEYS == ["admin-stats", "admin-pie-charts", "admin-bar-charts", "admin-line-charts"]


def test_product_mutation_without_id_only_touches_group_keys():
    assert keys_for(ProductMutation()) == PRODUCT_GROUP_KEYS


def test_product_mutation_is_targeted_to_given_ids():
    keys = keys_for(ProductMutation(["a", "b"]))
    assert set(keys) == {"latest-products", "categories", "all-products", "product-a", "product-b"}


def test_product_mutation_accepts_single_id():
    assert "product-42" in keys_for(ProductMutation(42))


def test_order_mutation_keys():
    keys = keys_for(OrderMutation(user_id="u1", order_id=9))
    assert keys == ["all-orders", "my-orders-u1", "orders-9"]


def test_order_mutation_with_missing_ids_still_yields_keys():
    assert keys_for(OrderMutation()) == ["all-orders", "my-orders-", "orders-"]


def test_review_and_admin_mutation_keys():
    assert keys_for(ReviewMutation(5)) == ["reviews-5"]
    assert keys_for(AdminMutation()) == ADMIN_GROUP_KEYS


def test_unknown_event_is_rejected():
    with pytest.raises(TypeError):
        keys_for(object())


def test_collect_keys_deduplicates_in_order():
    keys = collect_keys(ProductMutation(1), ProductMutation([1, 2]), AdminMutation(), AdminMutation())
    assert keys == PRODUCT_GROUP_KEYS + ["product-1", "product-2"] + ADMIN_GROUP_KEYS
    assert len(keys) == len(set(keys))


def test_collect_keys_with_no_events():
    assert collect_keys() == []


@pytest.mark.asyncio
async def test_invalidate_evicts_only_targeted_keys(cache, memory_backend):
    for key in ["latest-products", "product-1", "product-2", "reviews-1", "my-orders-u1", "admin-stats"]:
        await cache.set(key, {"cached": key})

    evicted = await CacheInvalidator(cache).invalidate(ProductMutation(1))

    assert "product-1" in evicted
    remaining = set(memory_backend.keys())
    assert remaining == {"product-2", "reviews-1", "my-orders-u1", "admin-stats"}


@pytest.mark.asyncio
async def test_invalidate_co_occurring_events(cache, memory_backend):
    for key in ["product-1", "reviews-1", "admin-pie-charts", "all-orders"]:
        await cache.set(key, [])

    await CacheInvalidator(cache).invalidate(ProductMutation(1), ReviewMutation(1), AdminMutation())

    assert memory_backend.keys() == ["all-orders"]


@pytest.mark.asyncio
async def test_invalidate_missing_keys_is_noop(cache):
    keys = await CacheInvalidator(cache).invalidate(OrderMutation(user_id="nobody", order_id=1))
    assert keys == ["all-orders", "my-orders-nobody", "orders-1"]


@pytest.mark.asyncio
async def test_invalidate_issues_single_delete():
    cache = AsyncMock()
    cache.delete.return_value = 0

    await CacheInvalidator(cache).invalidate(ProductMutation([1, 2]), AdminMutation())

    cache.delete.assert_awaited_once()
    (keys,), _ = cache.delete.call_args
    assert len(keys) == len(PRODUCT_GROUP_KEYS) + 2 + len(ADMIN_GROUP_KEYS)


@pytest.mark.asyncio
async def test_invalidate_surfaces_cache_failure():
    cache = AsyncMock()
    cache.delete.side_effect = CacheUnavailableError("Cache invalidation failed")

    with pytest.raises(CacheUnavailableError):
        await CacheInvalidator(cache).invalidate(AdminMutation())
