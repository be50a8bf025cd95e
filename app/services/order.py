from typing import List
import logging

from sqlalchemy.orm import Session

from app.core.cache import CacheManager
from app.core.cache_config import CACHE_KEYS
from app.core.constants import ORDER_STATUS_FLOW
from app.core.exceptions import CacheUnavailableError, NotFoundError, ValidationFailureError
from app.crud.order import order as crud_order
from app.crud.user import user as crud_user
from app.schemas.order import Order, OrderCreate, StockLine
from app.services.cache_service import read_through
from app.services.inventory import reduce_stock
from app.utils.cache_invalidation import CacheInvalidator, ProductMutation, OrderMutation, AdminMutation

logger = logging.getLogger(__name__)


def serialize_order(order) -> dict:
    return Order.model_validate(order).model_dump(mode="json")


class OrderService:

    async def get_my_orders(self, db: Session, cache: CacheManager, user_id: str) -> List[dict]:
        def load():
            return [serialize_order(o) for o in crud_order.get_by_user(db, user_id=user_id)]

        return await read_through(cache, CACHE_KEYS["my_orders"].format(user_id), load)

    async def get_all_orders(self, db: Session, cache: CacheManager) -> List[dict]:
        def load():
            return [serialize_order(o) for o in crud_order.get_all(db)]

        return await read_through(cache, CACHE_KEYS["all_orders"], load)

    async def get_order(self, db: Session, cache: CacheManager, order_id: int) -> dict:
        def load():
            order = crud_order.get(db, id=order_id)
            if not order:
                raise NotFoundError("Order not found")
            return serialize_order(order)

        return await read_through(cache, CACHE_KEYS["order"].format(order_id), load)

    async def create_order(self, db: Session, cache: CacheManager, order_in: OrderCreate) -> dict:
        if not order_in.order_items or not order_in.user.strip() or not order_in.total:
            raise ValidationFailureError("Please enter all fields")

        if not crud_user.get(db, id=order_in.user):
            raise NotFoundError("User not found")

        order = crud_order.create_with_items(db, obj_in=order_in)
        logger.info(f"Order {order.id} placed by user {order.user_id}")

        # Not atomic with the order insert: a missing product leaves earlier lines reduced
        try:
            reduce_stock(db, [
                StockLine(product_id=item.product_id, quantity=item.quantity)
                for item in order_in.order_items
            ])
        except Exception:
            logger.warning(f"Stock reduction for order {order.id} stopped partway")
            try:
                await self._invalidate_placed(cache, order, order_in)
            except CacheUnavailableError:
                # The stock failure is what the caller needs to see
                logger.exception(f"Cache invalidation also failed for order {order.id}")
            raise

        await self._invalidate_placed(cache, order, order_in)
        return serialize_order(order)

    async def _invalidate_placed(self, cache: CacheManager, order, order_in: OrderCreate) -> None:
        await CacheInvalidator(cache).invalidate(
            ProductMutation([item.product_id for item in order_in.order_items]),
            OrderMutation(user_id=order.user_id, order_id=order.id),
            AdminMutation(),
        )

    async def process_order(self, db: Session, cache: CacheManager, order_id: int) -> dict:
        order = crud_order.get(db, id=order_id)
        if not order:
            raise NotFoundError("Order not found")

        previous = order.status
        order = crud_order.update(db, db_obj=order, obj_in={"status": ORDER_STATUS_FLOW[order.status]})
        logger.info(f"Order {order.id} moved from {previous.value} to {order.status.value}")

        await CacheInvalidator(cache).invalidate(
            OrderMutation(user_id=order.user_id, order_id=order.id),
            AdminMutation(),
        )
        return serialize_order(order)

    async def delete_order(self, db: Session, cache: CacheManager, order_id: int) -> None:
        order = crud_order.get(db, id=order_id)
        if not order:
            raise NotFoundError("Order not found")

        user_id = order.user_id
        crud_order.delete(db, db_obj=order)
        logger.info(f"Deleted order {order_id}")

        await CacheInvalidator(cache).invalidate(
            OrderMutation(user_id=user_id, order_id=order_id),
            AdminMutation(),
        )


order_service = OrderService()
