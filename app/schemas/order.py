from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime

from app.core.constants import OrderStatusEnum
from app.schemas.user import UserSummary


class ShippingInfo(BaseModel):
    address: str
    city: str
    state: str
    country: str
    pin_code: str


class OrderItemBase(BaseModel):
    product_id: int
    name: str
    photo: str
    price: float = Field(..., ge=0)
    quantity: int = Field(..., ge=1)


class OrderItem(OrderItemBase):
    model_config = ConfigDict(from_attributes=True)

    id: int


class OrderCreate(BaseModel):
    shipping_info: ShippingInfo
    order_items: List[OrderItemBase]
    user: str
    subtotal: float = Field(..., ge=0)
    tax: float = Field(..., ge=0)
    shipping_charges: float = Field(0, ge=0)
    discount: float = Field(0, ge=0)
    total: float = Field(..., ge=0)


class Order(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    user: Optional[UserSummary] = None
    shipping_info: ShippingInfo
    order_items: List[OrderItem]
    subtotal: float
    tax: float
    shipping_charges: float
    discount: float
    total: float
    status: OrderStatusEnum
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class StockLine(BaseModel):
    product_id: int
    quantity: int
