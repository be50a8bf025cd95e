from unittest.mock import AsyncMock, patch

import pytest

from app.core.constants import OrderStatusEnum
from app.core.exceptions import CacheUnavailableError, NotFoundError, ValidationFailureError
from app.crud.product import product as crud_product
from app.schemas.order import OrderCreate, StockLine
from app.services.inventory import reduce_stock
from app.services.order import order_service


def _item(product, quantity):
    return {
        "product_id": product.id,
        "name": product.name,
        "photo": product.photos[0].url,
        "price": product.price,
        "quantity": quantity,
    }


@pytest.mark.asyncio
async def test_create_order_reduces_stock_and_evicts_keys(
    db_session, cache, memory_backend, user_factory, product_factory, order_payload
):
    user = user_factory()
    laptop = product_factory(name="Laptop", stock=10)
    mouse = product_factory(name="Mouse", price=100, stock=3)
    untouched = product_factory(name="Desk", stock=1)

    stale = [
        "latest-products", "categories", "all-products",
        f"product-{laptop.id}", f"product-{mouse.id}", f"product-{untouched.id}",
        "all-orders", f"my-orders-{user.id}", "admin-stats", "admin-line-charts",
    ]
    for key in stale:
        await cache.set(key, {"stale": True})

    order_in = OrderCreate(**order_payload(user.id, [_item(laptop, 2), _item(mouse, 3)]))
    order = await order_service.create_order(db_session, cache, order_in=order_in)

    assert order["status"] == OrderStatusEnum.PROCESSING.value
    assert len(order["order_items"]) == 2
    assert crud_product.get(db_session, id=laptop.id).stock == 8
    assert crud_product.get(db_session, id=mouse.id).stock == 0
    assert memory_backend.keys() == [f"product-{untouched.id}"]


@pytest.mark.asyncio
async def test_create_order_rejects_empty_items_before_writing(db_session, cache, user_factory, order_payload):
    user = user_factory()
    await cache.set("all-orders", [])

    with pytest.raises(ValidationFailureError):
        await order_service.create_order(db_session, cache, order_in=OrderCreate(**order_payload(user.id, [])))

    assert await cache.get("all-orders") == []


@pytest.mark.asyncio
async def test_create_order_for_unknown_user(db_session, cache, product_factory, order_payload):
    laptop = product_factory()
    with pytest.raises(NotFoundError):
        await order_service.create_order(
            db_session, cache, order_in=OrderCreate(**order_payload("ghost", [_item(laptop, 1)]))
        )


@pytest.mark.asyncio
async def test_partial_stock_failure_keeps_earlier_lines_and_still_invalidates(
    db_session, cache, memory_backend, user_factory, product_factory, order_payload
):
    user = user_factory()
    laptop = product_factory(stock=5)
    await cache.set(f"product-{laptop.id}", {"stock": 5})

    items = [_item(laptop, 2), {**_item(laptop, 1), "product_id": 9999}]
    with pytest.raises(NotFoundError):
        await order_service.create_order(db_session, cache, order_in=OrderCreate(**order_payload(user.id, items)))

    assert crud_product.get(db_session, id=laptop.id).stock == 3
    assert f"product-{laptop.id}" not in memory_backend.keys()


@pytest.mark.asyncio
async def test_missing_product_is_reported_when_invalidation_also_fails(
    db_session, cache, user_factory, product_factory, order_payload
):
    user = user_factory()
    laptop = product_factory(stock=5)
    items = [_item(laptop, 1), {**_item(laptop, 1), "product_id": 9999}]

    failing_delete = AsyncMock(side_effect=CacheUnavailableError("Cache invalidation failed"))
    with patch.object(cache, "delete", failing_delete):
        with pytest.raises(NotFoundError):
            await order_service.create_order(db_session, cache, order_in=OrderCreate(**order_payload(user.id, items)))

    failing_delete.assert_awaited_once()
    assert crud_product.get(db_session, id=laptop.id).stock == 4


@pytest.mark.asyncio
async def test_invalidation_failure_surfaces_after_successful_order(
    db_session, cache, user_factory, product_factory, order_payload
):
    user = user_factory()
    laptop = product_factory(stock=5)

    with patch.object(cache, "delete", AsyncMock(side_effect=CacheUnavailableError("Cache invalidation failed"))):
        with pytest.raises(CacheUnavailableError):
            await order_service.create_order(
                db_session, cache, order_in=OrderCreate(**order_payload(user.id, [_item(laptop, 2)]))
            )

    assert crud_product.get(db_session, id=laptop.id).stock == 3


def test_reduce_stock_unknown_product(db_session):
    with pytest.raises(NotFoundError):
        reduce_stock(db_session, [StockLine(product_id=12345, quantity=1)])


@pytest.mark.asyncio
async def test_order_reads_are_cached_until_processed(db_session, cache, user_factory, product_factory, order_factory):
    user = user_factory()
    order = order_factory(user, products=[product_factory()])

    first = await order_service.get_order(db_session, cache, order_id=order.id)
    assert first["status"] == "Processing"
    assert await cache.exists(f"orders-{order.id}")

    processed = await order_service.process_order(db_session, cache, order_id=order.id)
    assert processed["status"] == "Shipped"
    assert not await cache.exists(f"orders-{order.id}")

    again = await order_service.get_order(db_session, cache, order_id=order.id)
    assert again["status"] == "Shipped"


@pytest.mark.asyncio
async def test_process_order_status_flow_is_terminal_at_delivered(db_session, cache, user_factory, order_factory):
    order = order_factory(user_factory(), status=OrderStatusEnum.SHIPPED)

    delivered = await order_service.process_order(db_session, cache, order_id=order.id)
    again = await order_service.process_order(db_session, cache, order_id=order.id)

    assert delivered["status"] == again["status"] == "Delivered"


@pytest.mark.asyncio
async def test_my_orders_are_scoped_to_user(db_session, cache, user_factory, order_factory):
    alice = user_factory(name="Alice")
    bob = user_factory(name="Bob")
    order_factory(alice)
    order_factory(alice)
    order_factory(bob)

    orders = await order_service.get_my_orders(db_session, cache, user_id=alice.id)

    assert len(orders) == 2
    assert {o["user_id"] for o in orders} == {alice.id}
    assert await cache.get(f"my-orders-{alice.id}") == orders


@pytest.mark.asyncio
async def test_orders_survive_user_deletion(db_session, cache, user_factory, order_factory):
    from app.services.user import user_service

    user = user_factory()
    order = order_factory(user)
    await user_service.delete_user(db_session, cache, user_id=user.id)

    found = await order_service.get_order(db_session, cache, order_id=order.id)
    assert found["user_id"] == user.id
    assert found["user"] is None
