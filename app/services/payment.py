from typing import List
import logging

from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError, ValidationFailureError
from app.crud.coupon import coupon as crud_coupon
from app.models.coupon import Coupon
from app.schemas.coupon import CouponCreate, CouponUpdate, PaymentIntent
from app.services.stripe import stripe_service

logger = logging.getLogger(__name__)


class PaymentService:

    async def create_payment_intent(self, amount: float) -> PaymentIntent:
        return await stripe_service.create_payment_intent(amount)

    def create_coupon(self, db: Session, coupon_in: CouponCreate) -> Coupon:
        if crud_coupon.get_by_code(db, code=coupon_in.code):
            raise ValidationFailureError("Coupon code already exists")
        new_coupon = crud_coupon.create(db, obj_in=coupon_in)
        logger.info(f"Coupon {new_coupon.code} created")
        return new_coupon

    def apply_discount(self, db: Session, code: str) -> float:
        found = crud_coupon.get_by_code(db, code=code) if code else None
        if not found:
            raise ValidationFailureError("Invalid coupon code")
        return found.amount

    def get_all_coupons(self, db: Session) -> List[Coupon]:
        return crud_coupon.find(db)

    def get_coupon(self, db: Session, coupon_id: int) -> Coupon:
        found = crud_coupon.get(db, id=coupon_id)
        if not found:
            raise NotFoundError("Invalid coupon ID")
        return found

    def update_coupon(self, db: Session, coupon_id: int, coupon_in: CouponUpdate) -> Coupon:
        found = self.get_coupon(db, coupon_id)
        if coupon_in.code and coupon_in.code != found.code and crud_coupon.get_by_code(db, code=coupon_in.code):
            raise ValidationFailureError("Coupon code already exists")
        return crud_coupon.update(db, db_obj=found, obj_in=coupon_in.model_dump(exclude_none=True))

    def delete_coupon(self, db: Session, coupon_id: int) -> None:
        found = self.get_coupon(db, coupon_id)
        crud_coupon.delete(db, db_obj=found)
        logger.info(f"Coupon {found.code} deleted")


payment_service = PaymentService()
