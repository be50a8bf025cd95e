from typing import Optional
from sqlalchemy.orm import Session

from app.crud.base import CRUDBase
from app.models.coupon import Coupon
from app.schemas.coupon import CouponCreate, CouponUpdate


class CRUDCoupon(CRUDBase[Coupon, CouponCreate, CouponUpdate]):
    def get_by_code(self, db: Session, *, code: str) -> Optional[Coupon]:
        return db.query(Coupon).filter(Coupon.code == code).first()


coupon = CRUDCoupon(Coupon)
