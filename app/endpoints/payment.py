from typing import List
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.schemas.coupon import Coupon, CouponCreate, CouponUpdate, Discount, PaymentIntent, PaymentIntentCreate
from app.schemas.response import APIResponse
from app.services.payment import payment_service
from app.utils import deps

router = APIRouter()


@router.post("/create", response_model=APIResponse[PaymentIntent], status_code=status.HTTP_201_CREATED)
async def create_payment_intent(intent_in: PaymentIntentCreate):
    intent = await payment_service.create_payment_intent(intent_in.amount)
    return APIResponse(message="Payment intent created successfully", data=intent)


@router.get("/discount", response_model=APIResponse[Discount])
def apply_discount(
    coupon: str = Query("", description="Coupon code"),
    db: Session = Depends(deps.get_db),
):
    amount = payment_service.apply_discount(db, code=coupon)
    return APIResponse(message="Coupon applied", data=Discount(discount=amount))


@router.post(
    "/coupon/new",
    response_model=APIResponse[Coupon],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(deps.require_admin)],
)
def create_coupon(*, db: Session = Depends(deps.get_db), coupon_in: CouponCreate):
    coupon = payment_service.create_coupon(db, coupon_in=coupon_in)
    return APIResponse(message=f"Coupon {coupon.code} created successfully", data=Coupon.model_validate(coupon))


@router.get("/coupon/all", response_model=APIResponse[List[Coupon]], dependencies=[Depends(deps.require_admin)])
def get_all_coupons(db: Session = Depends(deps.get_db)):
    coupons = payment_service.get_all_coupons(db)
    return APIResponse(message="Coupons retrieved successfully", data=[Coupon.model_validate(c) for c in coupons])


@router.get("/coupon/{coupon_id}", response_model=APIResponse[Coupon], dependencies=[Depends(deps.require_admin)])
def get_coupon(coupon_id: int, db: Session = Depends(deps.get_db)):
    coupon = payment_service.get_coupon(db, coupon_id=coupon_id)
    return APIResponse(message="Coupon retrieved successfully", data=Coupon.model_validate(coupon))


@router.put("/coupon/{coupon_id}", response_model=APIResponse[Coupon], dependencies=[Depends(deps.require_admin)])
def update_coupon(coupon_id: int, coupon_in: CouponUpdate, db: Session = Depends(deps.get_db)):
    coupon = payment_service.update_coupon(db, coupon_id=coupon_id, coupon_in=coupon_in)
    return APIResponse(message="Coupon updated successfully", data=Coupon.model_validate(coupon))


@router.delete("/coupon/{coupon_id}", response_model=APIResponse[None], dependencies=[Depends(deps.require_admin)])
def delete_coupon(coupon_id: int, db: Session = Depends(deps.get_db)):
    payment_service.delete_coupon(db, coupon_id=coupon_id)
    return APIResponse(message="Coupon deleted successfully")
