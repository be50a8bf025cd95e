from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Any, Optional
from datetime import datetime


class CouponCreate(BaseModel):
    code: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0)


class CouponUpdate(BaseModel):
    code: Optional[str] = Field(None, min_length=1)
    amount: Optional[float] = Field(None, gt=0)

    @model_validator(mode='before')
    @classmethod
    def at_least_one_value(cls, data: Any):
        if isinstance(data, dict) and not any(v is not None for v in data.values()):
            raise ValueError("At least one field must be provided for update")
        return data


class Coupon(CouponCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: Optional[datetime] = None


class Discount(BaseModel):
    discount: float


class PaymentIntentCreate(BaseModel):
    amount: float = Field(..., gt=0)


class PaymentIntent(BaseModel):
    client_secret: str
