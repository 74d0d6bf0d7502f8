from datetime import datetime
from decimal import Decimal
from typing import List

from pydantic import Field

from storefront.shared.schemas import ApiModel

from .models import OrderStatus


class OrderItemCreate(ApiModel):
    product_id: str
    quantity: int = Field(gt=0)


class OrderCreate(ApiModel):
    client_name: str = Field(min_length=1)
    client_phone: str = Field(min_length=1)
    client_address: str = Field(min_length=1)
    items: List[OrderItemCreate] = Field(min_length=1)


class OrderItemResponse(ApiModel):
    id: str
    order_id: str
    product_id: str
    quantity: int
    price_at_time: Decimal


class OrderResponse(ApiModel):
    id: str
    client_name: str
    client_phone: str
    client_address: str
    total_amount: Decimal
    status: OrderStatus
    created_at: datetime
    updated_at: datetime
    order_items: List[OrderItemResponse] = []
