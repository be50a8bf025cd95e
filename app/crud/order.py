from typing import List, Optional
from sqlalchemy.orm import Session, selectinload

from app.crud.base import CRUDBase
from app.models.order import Order, OrderItem
from app.schemas.order import OrderCreate


class CRUDOrder(CRUDBase[Order, OrderCreate, OrderCreate]):

    def _query_with_relationships(self, db: Session):
        return db.query(Order).options(
            selectinload(Order.order_items),
            selectinload(Order.user),
        )

    def get(self, db: Session, id: int) -> Optional[Order]:
        return self._query_with_relationships(db).filter(Order.id == id).first()

    def get_all(self, db: Session) -> List[Order]:
        return self._query_with_relationships(db).order_by(Order.id).all()

    def get_by_user(self, db: Session, user_id: str) -> List[Order]:
        return (
            self._query_with_relationships(db)
            .filter(Order.user_id == user_id)
            .order_by(Order.id)
            .all()
        )

    def create_with_items(self, db: Session, *, obj_in: OrderCreate) -> Order:
        db_obj = Order(
            user_id=obj_in.user,
            shipping_info=obj_in.shipping_info.model_dump(),
            subtotal=obj_in.subtotal,
            tax=obj_in.tax,
            shipping_charges=obj_in.shipping_charges,
            discount=obj_in.discount,
            total=obj_in.total,
        )
        db_obj.order_items = [OrderItem(**item.model_dump()) for item in obj_in.order_items]
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj


order = CRUDOrder(Order)
