from typing import List
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.cache import CacheManager
from app.schemas.order import Order, OrderCreate
from app.schemas.response import APIResponse
from app.services.order import order_service
from app.utils import deps

router = APIRouter()


@router.post("/new", response_model=APIResponse[Order], status_code=status.HTTP_201_CREATED)
async def create_order(
    *,
    db: Session = Depends(deps.get_db),
    cache: CacheManager = Depends(deps.get_cache),
    order_in: OrderCreate,
):
    order = await order_service.create_order(db, cache, order_in=order_in)
    return APIResponse(message="Order placed successfully", data=order)


@router.get("/my", response_model=APIResponse[List[Order]])
async def get_my_orders(
    id: str = Query(..., min_length=1, description="ID of the ordering user"),
    db: Session = Depends(deps.get_db),
    cache: CacheManager = Depends(deps.get_cache),
):
    orders = await order_service.get_my_orders(db, cache, user_id=id)
    return APIResponse(message="Orders retrieved successfully", data=orders)


@router.get("/all", response_model=APIResponse[List[Order]], dependencies=[Depends(deps.require_admin)])
async def get_all_orders(
    db: Session = Depends(deps.get_db),
    cache: CacheManager = Depends(deps.get_cache),
):
    orders = await order_service.get_all_orders(db, cache)
    return APIResponse(message="Orders retrieved successfully", data=orders)


@router.get("/{order_id}", response_model=APIResponse[Order])
async def get_order(
    order_id: int,
    db: Session = Depends(deps.get_db),
    cache: CacheManager = Depends(deps.get_cache),
):
    order = await order_service.get_order(db, cache, order_id=order_id)
    return APIResponse(message="Order retrieved successfully", data=order)


@router.put("/{order_id}", response_model=APIResponse[Order], dependencies=[Depends(deps.require_admin)])
async def process_order(
    order_id: int,
    db: Session = Depends(deps.get_db),
    cache: CacheManager = Depends(deps.get_cache),
):
    """Advance the order to its next status."""
    order = await order_service.process_order(db, cache, order_id=order_id)
    return APIResponse(message="Order processed successfully", data=order)


@router.delete("/{order_id}", response_model=APIResponse[None], dependencies=[Depends(deps.require_admin)])
async def delete_order(
    order_id: int,
    db: Session = Depends(deps.get_db),
    cache: CacheManager = Depends(deps.get_cache),
):
    await order_service.delete_order(db, cache, order_id=order_id)
    return APIResponse(message="Order deleted successfully")
