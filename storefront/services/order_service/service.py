import structlog
from fastapi import HTTPException, status

from storefront.shared.observability import storefront_order_amount, storefront_orders_created_total
from storefront.storage import EntityKind, Storage

from .models import OrderStatus
from .repository import OrderRepository
from .schemas import OrderCreate
from .totals import order_total

logger = structlog.get_logger(__name__)


class OrderService:
    @staticmethod
    async def create_order(storage: Storage, data: OrderCreate):
        product_ids = list(dict.fromkeys(item.product_id for item in data.items))
        products = await storage.find_many(EntityKind.PRODUCT, {"id": {"in": product_ids}})
        prices = {product.id: product.price for product in products}

        missing = [pid for pid in product_ids if pid not in prices]
        if missing:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Product {missing[0]} not found",
            )

        # Snapshot current prices; the order never looks at Product.price again
        order_items = [
            {
                "product_id": item.product_id,
                "quantity": item.quantity,
                "price_at_time": prices[item.product_id],
            }
            for item in data.items
        ]
        total = order_total((line["price_at_time"], line["quantity"]) for line in order_items)

        order = await OrderRepository.create_order(storage, {
            "client_name": data.client_name,
            "client_phone": data.client_phone,
            "client_address": data.client_address,
            "total_amount": total,
            "status": OrderStatus.PENDING.value,
            "order_items": order_items,
        })

        storefront_orders_created_total.inc()
        storefront_order_amount.observe(float(total))
        logger.info("order_created", order_id=order.id, total_amount=str(total), items=len(order_items))
        return order

    @staticmethod
    async def get_order(storage: Storage, order_id: str):
        return await OrderRepository.get_order(storage, order_id)

    @staticmethod
    async def list_orders(storage: Storage, order_status: OrderStatus | None = None):
        where = {"status": order_status.value} if order_status else None
        return await OrderRepository.get_orders(storage, where)
