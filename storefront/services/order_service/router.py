from fastapi import APIRouter, Depends, HTTPException, Query, status

from storefront.storage import Storage, get_storage

from .models import OrderStatus
from .schemas import OrderCreate, OrderResponse
from .service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def create_order(order: OrderCreate, storage: Storage = Depends(get_storage)):
    return await OrderService.create_order(storage, order)


@router.get("", response_model=list[OrderResponse])
async def list_orders(
    order_status: OrderStatus | None = Query(default=None, alias="status"),
    storage: Storage = Depends(get_storage),
):
    return await OrderService.list_orders(storage, order_status)


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, storage: Storage = Depends(get_storage)):
    order = await OrderService.get_order(storage, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order
